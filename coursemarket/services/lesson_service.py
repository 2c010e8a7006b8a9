import logging
from typing import List

from sqlalchemy.orm import Session

from coursemarket.core.exceptions import (
    BadRequestException,
    ConflictException,
    CourseNotFoundException,
    LessonNotFoundException,
)
from coursemarket.crud import course as crud_course
from coursemarket.crud import lesson as crud_lesson
from coursemarket.models.lesson import Lesson
from coursemarket.schemas.lesson import LessonCreate, LessonUpdate
from coursemarket.services.access import AccessGate
from coursemarket.services.durations import DurationMaintainer
from coursemarket.services.markdown_service import MarkdownService
from coursemarket.services.ownership import OwnershipResolver

logger = logging.getLogger(__name__)


class LessonService:
    def __init__(self, db: Session):
        self.db = db
        self.ownership = OwnershipResolver(db)
        self.access = AccessGate(db, self.ownership)
        self.durations = DurationMaintainer(db)

    # === Чтение ===
    def find_by_course(self, course_id: int, user_id: int = None, role=None) -> List[Lesson]:
        """Владелец и админ видят все уроки, остальные только опубликованные"""
        course = crud_course.get_course(self.db, course_id)
        if not course:
            raise CourseNotFoundException(course_id)

        is_owner = self.ownership.is_course_owner(course_id, user_id, role)
        return crud_lesson.get_lessons_by_course(self.db, course_id, published_only=not is_owner)

    def find_by_slug(self, course_id: int, slug: str, user_id: int = None, role=None) -> Lesson:
        lesson = crud_lesson.get_lesson_by_slug(self.db, course_id, slug)
        if not lesson:
            raise LessonNotFoundException()

        self.access.ensure_content_access(lesson, user_id, role)
        return lesson

    def find_by_id(self, lesson_id: int, user_id: int = None, role=None) -> Lesson:
        lesson = crud_lesson.get_lesson_with_media(self.db, lesson_id)
        if not lesson:
            raise LessonNotFoundException(lesson_id)

        self.access.ensure_content_access(lesson, user_id, role)
        return lesson

    # === Изменение ===
    def _ensure_slug_free(self, course_id: int, slug: str, exclude_id: int = None) -> None:
        existing = crud_lesson.get_lesson_by_slug(self.db, course_id, slug)
        if existing and existing.id != exclude_id:
            raise ConflictException(f"Lesson with slug '{slug}' already exists in this course")

    def create(self, course_id: int, data: LessonCreate, user_id: int, role) -> Lesson:
        self.ownership.verify_ownership(course_id, user_id, role)
        if not crud_course.get_course(self.db, course_id):
            raise CourseNotFoundException(course_id)

        self._ensure_slug_free(course_id, data.slug)

        order = data.order
        if order is None:
            last_order = crud_lesson.get_last_order(self.db, course_id)
            order = 0 if last_order is None else last_order + 1

        lesson = crud_lesson.create_lesson(self.db, course_id, data, order=order)
        self.durations.recompute_course_duration(course_id)
        logger.info("Lesson %s created in course %s", lesson.id, course_id)
        return lesson

    def update(self, lesson_id: int, data: LessonUpdate, user_id: int, role) -> Lesson:
        lesson = self.ownership.verify_lesson_ownership(lesson_id, user_id, role)
        course_id = lesson.course_id
        old_duration, old_published = lesson.duration, lesson.is_published

        if data.slug is not None and data.slug != lesson.slug:
            self._ensure_slug_free(course_id, data.slug, exclude_id=lesson_id)

        lesson = crud_lesson.update_lesson(self.db, lesson_id, data)

        # Публикация меняет сумму курса, даже если длительность та же
        if lesson.duration != old_duration or lesson.is_published != old_published:
            self.durations.recompute_course_duration(course_id)
            self.db.refresh(lesson)

        return lesson

    def delete(self, lesson_id: int, user_id: int, role) -> None:
        lesson = self.ownership.verify_lesson_ownership(lesson_id, user_id, role)
        course_id = lesson.course_id

        crud_lesson.delete_lesson(self.db, lesson_id)
        self.durations.recompute_course_duration(course_id)
        logger.info("Lesson %s deleted from course %s", lesson_id, course_id)

    def reorder(self, course_id: int, lesson_ids: List[int], user_id: int, role) -> List[Lesson]:
        """Новый порядок = индекс в списке; чужие ID отклоняются до записи"""
        self.ownership.verify_ownership(course_id, user_id, role)
        if not crud_course.get_course(self.db, course_id):
            raise CourseNotFoundException(course_id)

        known_ids = set(crud_lesson.get_lesson_ids(self.db, course_id))
        for lesson_id in lesson_ids:
            if lesson_id not in known_ids:
                raise BadRequestException(f"Lesson {lesson_id} does not belong to course {course_id}")

        if len(set(lesson_ids)) != len(lesson_ids):
            raise BadRequestException("Duplicate lesson ids in reorder request")

        lessons = crud_lesson.reorder_lessons(self.db, course_id, lesson_ids)
        logger.info("Lessons of course %s reordered: %s", course_id, lesson_ids)
        return lessons

    def preview_content(self, lesson_id: int, markdown_text: str, user_id: int, role) -> str:
        """Предпросмотр Markdown-контента урока для автора"""
        self.ownership.verify_lesson_ownership(lesson_id, user_id, role)
        return MarkdownService().convert_to_html(markdown_text)
