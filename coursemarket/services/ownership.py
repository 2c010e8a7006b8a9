import logging
from sqlalchemy.orm import Session

from coursemarket.core.exceptions import (
    CourseNotFoundException,
    ForbiddenException,
    LessonNotFoundException,
    MediaNotFoundException,
)
from coursemarket.crud import course as crud_course
from coursemarket.crud import lesson as crud_lesson
from coursemarket.crud import media as crud_media
from coursemarket.models.lesson import Lesson, Media
from coursemarket.models.user import UserRole

logger = logging.getLogger(__name__)


def is_admin(role) -> bool:
    return role == UserRole.ADMIN


class OwnershipResolver:
    """Проверка владения по цепочке Media -> Lesson -> Course.instructor_id.
    
    Каждый вызов заново читает цепочку из базы: владелец курса
    может смениться между запросами.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def is_course_owner(self, course_id: int, user_id: int = None, role=None) -> bool:
        if is_admin(role):
            return True
        if user_id is None:
            return False
        return crud_course.get_course_instructor_id(self.db, course_id) == user_id
    
    def verify_ownership(self, course_id: int, user_id: int, role) -> None:
        if is_admin(role):
            return
        
        instructor_id = crud_course.get_course_instructor_id(self.db, course_id)
        if instructor_id is None:
            raise CourseNotFoundException(course_id)
        
        if instructor_id != user_id:
            logger.warning("User %s is not the owner of course %s", user_id, course_id)
            raise ForbiddenException("You are not the owner of this course")
    
    def verify_lesson_ownership(self, lesson_id: int, user_id: int, role) -> Lesson:
        lesson = crud_lesson.get_lesson(self.db, lesson_id)
        if not lesson:
            raise LessonNotFoundException(lesson_id)
        
        self.verify_ownership(lesson.course_id, user_id, role)
        return lesson
    
    def verify_media_ownership(self, media_id: int, user_id: int, role) -> Media:
        media = crud_media.get_media(self.db, media_id)
        if not media:
            raise MediaNotFoundException(media_id)
        
        self.verify_lesson_ownership(media.lesson_id, user_id, role)
        return media
