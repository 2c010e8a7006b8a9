import logging
from sqlalchemy.orm import Session

from coursemarket.core.exceptions import ForbiddenException, LessonNotFoundException
from coursemarket.crud import enrollment as crud_enrollment
from coursemarket.models.enrollment import EnrollmentStatus
from coursemarket.models.lesson import Lesson
from coursemarket.services.ownership import OwnershipResolver

logger = logging.getLogger(__name__)


class AccessGate:
    """Видимость урока и его контента.
    
    Порядок проверок:
    1. админ или владелец курса видит всё;
    2. неопубликованный урок для остальных не существует (404);
    3. бесплатный урок доступен всем, включая анонимов;
    4. платный контент требует ACTIVE-записи на курс, иначе 403.
    """
    
    def __init__(self, db: Session, ownership: OwnershipResolver = None):
        self.db = db
        self.ownership = ownership or OwnershipResolver(db)
    
    def can_view_unpublished(self, lesson: Lesson, user_id: int = None, role=None) -> bool:
        return self.ownership.is_course_owner(lesson.course_id, user_id, role)
    
    def has_active_enrollment(self, user_id: int, course_id: int) -> bool:
        if user_id is None:
            return False
        enrollment = crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id)
        return enrollment is not None and enrollment.status == EnrollmentStatus.ACTIVE
    
    def ensure_visible(self, lesson: Lesson, user_id: int = None, role=None) -> bool:
        """Возвращает True, если вызывающий является владельцем или админ"""
        if self.can_view_unpublished(lesson, user_id, role):
            return True
        if not lesson.is_published:
            raise LessonNotFoundException(lesson.id)
        return False
    
    def ensure_content_access(self, lesson: Lesson, user_id: int = None, role=None) -> None:
        if self.ensure_visible(lesson, user_id, role):
            return
        if lesson.is_free:
            return
        if not self.has_active_enrollment(user_id, lesson.course_id):
            logger.warning("User %s denied content of lesson %s", user_id, lesson.id)
            raise ForbiddenException("You must be enrolled in this course to access this content")
    
    def can_view_content(self, lesson: Lesson, user_id: int = None, role=None) -> bool:
        try:
            self.ensure_content_access(lesson, user_id, role)
        except (LessonNotFoundException, ForbiddenException):
            return False
        return True
