from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user, get_optional_user, require_role
from coursemarket.database import get_db
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.common import MessageResponse
from coursemarket.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
    CourseStatusUpdate,
    CourseUpdate,
)
from coursemarket.services.course_service import CourseService

router = APIRouter()

@router.get("/", response_model=CourseListResponse)
async def read_courses(
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    level: Optional[str] = None,
    sort: str = "newest",
    db: Session = Depends(get_db)
):
    """Каталог опубликованных курсов"""
    return CourseService(db).find_all(
        page=page,
        limit=limit,
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        level=level,
        sort=sort
    )

@router.get("/my-courses", response_model=List[CourseResponse])
async def read_my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.INSTRUCTOR, UserRole.ADMIN))
):
    """Курсы текущего преподавателя во всех статусах"""
    return CourseService(db).find_by_instructor(current_user.id)

@router.get("/{slug}", response_model=CourseDetailResponse)
async def read_course(
    slug: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Получить курс по slug"""
    user_id = current_user.id if current_user else None
    role = current_user.role if current_user else None
    return CourseService(db).find_by_slug(slug, user_id, role)

@router.post("/", response_model=CourseResponse, status_code=201)
async def create_course(
    course: CourseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.INSTRUCTOR, UserRole.ADMIN))
):
    """Создать новый курс (только для преподавателей)"""
    service = CourseService(db)
    return service.to_response(service.create(course, instructor_id=current_user.id))

@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: int,
    course_update: CourseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Обновить курс"""
    service = CourseService(db)
    return service.to_response(service.update(course_id, course_update, current_user.id, current_user.role))

@router.post("/{course_id}/submit", response_model=CourseResponse)
async def submit_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Отправить курс на модерацию"""
    service = CourseService(db)
    return service.to_response(service.submit_for_review(course_id, current_user.id, current_user.role))

@router.patch("/{course_id}/status", response_model=CourseResponse)
async def update_course_status(
    course_id: int,
    status_update: CourseStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    service = CourseService(db)
    return service.to_response(service.update_status(course_id, status_update.status))

@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Удалить курс"""
    CourseService(db).delete(course_id, current_user.id, current_user.role)
    return {"message": "Course deleted successfully"}
