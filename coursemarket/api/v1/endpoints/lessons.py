from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user, get_optional_user
from coursemarket.database import get_db
from coursemarket.models.user import User
from coursemarket.schemas.common import MessageResponse, ReorderRequest
from coursemarket.schemas.lesson import (
    ContentPreviewRequest,
    ContentPreviewResponse,
    LessonCreate,
    LessonDetailResponse,
    LessonResponse,
    LessonUpdate,
)
from coursemarket.services.lesson_service import LessonService

router = APIRouter()

@router.get("/course/{course_id}", response_model=List[LessonResponse])
async def read_course_lessons(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Получить уроки курса"""
    user_id = current_user.id if current_user else None
    role = current_user.role if current_user else None
    return LessonService(db).find_by_course(course_id, user_id, role)

@router.get("/course/{course_id}/slug/{slug}", response_model=LessonDetailResponse)
async def read_lesson_by_slug(
    course_id: int,
    slug: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    user_id = current_user.id if current_user else None
    role = current_user.role if current_user else None
    return LessonService(db).find_by_slug(course_id, slug, user_id, role)

@router.get("/{lesson_id}", response_model=LessonDetailResponse)
async def read_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Получить урок по ID"""
    user_id = current_user.id if current_user else None
    role = current_user.role if current_user else None
    return LessonService(db).find_by_id(lesson_id, user_id, role)

@router.post("/course/{course_id}", response_model=LessonResponse, status_code=201)
async def create_lesson(
    course_id: int,
    lesson: LessonCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Создать урок в курсе"""
    return LessonService(db).create(course_id, lesson, current_user.id, current_user.role)

@router.put("/course/{course_id}/reorder", response_model=List[LessonResponse])
async def reorder_lessons(
    course_id: int,
    request: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Изменить порядок уроков"""
    return LessonService(db).reorder(course_id, request.ids, current_user.id, current_user.role)

@router.patch("/{lesson_id}", response_model=LessonResponse)
async def update_lesson(
    lesson_id: int,
    lesson_update: LessonUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Обновить урок"""
    return LessonService(db).update(lesson_id, lesson_update, current_user.id, current_user.role)

@router.delete("/{lesson_id}", response_model=MessageResponse)
async def delete_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    LessonService(db).delete(lesson_id, current_user.id, current_user.role)
    return {"message": "Lesson deleted successfully"}

@router.post("/{lesson_id}/preview", response_model=ContentPreviewResponse)
async def preview_lesson_content(
    lesson_id: int,
    request: ContentPreviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Предпросмотр Markdown-контента"""
    html_content = LessonService(db).preview_content(lesson_id, request.markdown, current_user.id, current_user.role)
    return {"html_content": html_content}
