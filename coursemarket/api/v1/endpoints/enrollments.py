from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user, require_role
from coursemarket.database import get_db
from coursemarket.models.enrollment import EnrollmentStatus
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.common import MessageResponse
from coursemarket.schemas.enrollment import (
    EnrollmentAdminUpdate,
    EnrollmentCheckResponse,
    EnrollmentCreate,
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollmentWithCourseResponse,
    ProgressUpdate,
)
from coursemarket.services.enrollment_service import EnrollmentService

router = APIRouter()

@router.get("/my", response_model=List[EnrollmentWithCourseResponse])
async def read_my_enrollments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Записи текущего пользователя"""
    return EnrollmentService(db).find_by_user(current_user.id)

@router.get("/check/{course_id}", response_model=EnrollmentCheckResponse)
async def check_enrollment(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Проверить запись на курс"""
    return EnrollmentService(db).check_enrollment(current_user.id, course_id)

@router.post("/", response_model=EnrollmentResponse, status_code=201)
async def enroll_in_course(
    request: EnrollmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Записаться на курс"""
    return EnrollmentService(db).create(current_user.id, request.course_id)

@router.patch("/{enrollment_id}/progress", response_model=EnrollmentResponse)
async def update_progress(
    enrollment_id: int,
    progress: ProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Обновить прогресс прохождения"""
    return EnrollmentService(db).update_progress(enrollment_id, current_user.id, progress.progress_percent)

@router.post("/{enrollment_id}/complete", response_model=EnrollmentResponse)
async def complete_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Отметить курс пройденным"""
    return EnrollmentService(db).mark_complete(enrollment_id, current_user.id)

# Админ
@router.get("/", response_model=EnrollmentListResponse)
async def read_enrollments(
    page: int = 1,
    limit: int = 10,
    status: Optional[EnrollmentStatus] = None,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    return EnrollmentService(db).find_all(
        page=page, limit=limit, status=status, user_id=user_id, course_id=course_id
    )

@router.get("/{enrollment_id}", response_model=EnrollmentWithCourseResponse)
async def read_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    return EnrollmentService(db).find_by_id(enrollment_id)

@router.patch("/{enrollment_id}", response_model=EnrollmentResponse)
async def admin_update_enrollment(
    enrollment_id: int,
    update: EnrollmentAdminUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    """Изменить статус или срок записи"""
    return EnrollmentService(db).admin_update(enrollment_id, update)

@router.delete("/{enrollment_id}", response_model=MessageResponse)
async def delete_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    EnrollmentService(db).delete(enrollment_id)
    return {"message": "Enrollment deleted successfully"}
