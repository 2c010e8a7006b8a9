import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from coursemarket.core.exceptions import (
    BadRequestException,
    ConflictException,
    CourseNotFoundException,
    EnrollmentNotFoundException,
    ForbiddenException,
)
from coursemarket.crud import course as crud_course
from coursemarket.crud import enrollment as crud_enrollment
from coursemarket.models.course import CourseStatus
from coursemarket.models.enrollment import Enrollment, EnrollmentStatus
from coursemarket.schemas.enrollment import EnrollmentAdminUpdate
from coursemarket.services.pagination import paginate

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (EnrollmentStatus.COMPLETED, EnrollmentStatus.EXPIRED)


class EnrollmentService:
    def __init__(self, db: Session):
        self.db = db

    # === Чтение ===
    def find_by_user(self, user_id: int):
        return crud_enrollment.get_user_enrollments(self.db, user_id)

    def check_enrollment(self, user_id: int, course_id: int) -> Dict:
        enrollment = crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id)
        return {"enrolled": enrollment is not None, "enrollment": enrollment}

    def is_enrolled(self, user_id: int, course_id: int) -> bool:
        enrollment = crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id)
        return enrollment is not None and enrollment.status == EnrollmentStatus.ACTIVE

    def find_by_id(self, enrollment_id: int) -> Enrollment:
        enrollment = crud_enrollment.get_enrollment(self.db, enrollment_id)
        if not enrollment:
            raise EnrollmentNotFoundException(enrollment_id)
        return enrollment

    def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[EnrollmentStatus] = None,
        user_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> Dict:
        query = crud_enrollment.query_enrollments(self.db, status=status, user_id=user_id, course_id=course_id)
        enrollments, meta = paginate(query, page, limit, default_limit=10)
        return {"enrollments": enrollments, **meta}

    # === Жизненный цикл ===
    def create(self, user_id: int, course_id: int) -> Enrollment:
        """Запись на опубликованный курс, одна на пару (пользователь, курс)"""
        course = crud_course.get_course(self.db, course_id)
        if not course:
            raise CourseNotFoundException(course_id)

        if course.status != CourseStatus.PUBLISHED:
            raise ForbiddenException("Cannot enroll in an unpublished course")

        existing = crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id)
        if existing:
            raise ConflictException("Already enrolled in this course")

        enrollment = crud_enrollment.create_enrollment(self.db, user_id=user_id, course_id=course_id)
        logger.info("Enrollment %s created: user=%s, course=%s", enrollment.id, user_id, course_id)
        return enrollment

    def _get_own_enrollment(self, enrollment_id: int, user_id: int) -> Enrollment:
        enrollment = self.find_by_id(enrollment_id)
        if enrollment.user_id != user_id:
            raise ForbiddenException("This enrollment does not belong to you")
        return enrollment

    def update_progress(self, enrollment_id: int, user_id: int, progress_percent: int) -> Enrollment:
        # Админского обхода нет: прогресс сообщает только сам студент
        enrollment = self._get_own_enrollment(enrollment_id, user_id)

        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise ForbiddenException("Enrollment is not active")

        return crud_enrollment.update_enrollment(self.db, enrollment, progress_percent=progress_percent)

    def mark_complete(self, enrollment_id: int, user_id: int) -> Enrollment:
        """Завершение курса: прогресс принудительно 100 вне зависимости от текущего"""
        enrollment = self._get_own_enrollment(enrollment_id, user_id)

        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise ForbiddenException("Enrollment is not active")

        enrollment = crud_enrollment.update_enrollment(
            self.db,
            enrollment,
            status=EnrollmentStatus.COMPLETED,
            progress_percent=100,
            completed_at=datetime.utcnow(),
        )
        logger.info("Enrollment %s completed by user %s", enrollment_id, user_id)
        return enrollment

    def admin_update(self, enrollment_id: int, update: EnrollmentAdminUpdate) -> Enrollment:
        enrollment = self.find_by_id(enrollment_id)

        fields = update.dict(exclude_unset=True)
        new_status = fields.get("status")
        if new_status and new_status != enrollment.status and enrollment.status in TERMINAL_STATUSES:
            raise BadRequestException(f"Enrollment is already {enrollment.status.value}")

        if new_status == EnrollmentStatus.COMPLETED:
            fields["progress_percent"] = 100
            fields["completed_at"] = datetime.utcnow()

        enrollment = crud_enrollment.update_enrollment(self.db, enrollment, **fields)
        logger.info("Enrollment %s updated by admin: %s", enrollment_id, sorted(fields))
        return enrollment

    def delete(self, enrollment_id: int) -> None:
        self.find_by_id(enrollment_id)
        crud_enrollment.delete_enrollment(self.db, enrollment_id)
        logger.info("Enrollment %s deleted", enrollment_id)
