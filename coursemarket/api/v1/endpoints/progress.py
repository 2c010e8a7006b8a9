from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user
from coursemarket.database import get_db
from coursemarket.models.user import User
from coursemarket.schemas.progress import (
    CourseProgressResponse,
    LessonProgressResponse,
    LessonProgressUpdate,
)
from coursemarket.services.progress_service import ProgressService

router = APIRouter()

@router.get("/course/{course_id}", response_model=CourseProgressResponse)
async def read_course_progress(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Прогресс по всем опубликованным урокам курса"""
    return ProgressService(db).get_course_progress(current_user.id, course_id)

@router.get("/course/{course_id}/lesson/{lesson_id}", response_model=LessonProgressResponse)
async def read_lesson_progress(
    course_id: int,
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return ProgressService(db).get_by_lesson(current_user.id, course_id, lesson_id)

@router.patch("/course/{course_id}/lesson/{lesson_id}", response_model=LessonProgressResponse)
async def update_lesson_progress(
    course_id: int,
    lesson_id: int,
    request: LessonProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Сохранить позицию плеера"""
    return ProgressService(db).update_progress(current_user.id, course_id, lesson_id, request)

@router.post("/course/{course_id}/lesson/{lesson_id}/complete", response_model=LessonProgressResponse)
async def complete_lesson(
    course_id: int,
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Отметить урок пройденным и пересчитать процент по курсу"""
    return ProgressService(db).mark_lesson_complete(current_user.id, course_id, lesson_id)
