import logging
from datetime import datetime
from typing import Dict

from sqlalchemy.orm import Session

from coursemarket.core.exceptions import ForbiddenException, LessonNotFoundException
from coursemarket.crud import enrollment as crud_enrollment
from coursemarket.crud import lesson as crud_lesson
from coursemarket.crud import progress as crud_progress
from coursemarket.models.enrollment import Enrollment, EnrollmentStatus
from coursemarket.models.lesson import Lesson
from coursemarket.models.progress import LessonProgress
from coursemarket.schemas.progress import LessonProgressUpdate

logger = logging.getLogger(__name__)

# Прогресс ведётся и после завершения курса
TRACKABLE_STATUSES = (EnrollmentStatus.ACTIVE, EnrollmentStatus.COMPLETED)


class ProgressService:
    """Прогресс по отдельным урокам и пересчёт процента записи на курс"""

    def __init__(self, db: Session):
        self.db = db

    def _verify_enrollment(self, user_id: int, course_id: int) -> Enrollment:
        enrollment = crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id)
        if not enrollment or enrollment.status not in TRACKABLE_STATUSES:
            raise ForbiddenException("You are not enrolled in this course")
        return enrollment

    def _get_course_lesson(self, course_id: int, lesson_id: int, published_only: bool = False) -> Lesson:
        lesson = crud_lesson.get_lesson(self.db, lesson_id)
        if not lesson or lesson.course_id != course_id:
            raise LessonNotFoundException(lesson_id)
        if published_only and not lesson.is_published:
            raise LessonNotFoundException(lesson_id)
        return lesson

    def get_by_lesson(self, user_id: int, course_id: int, lesson_id: int):
        self._verify_enrollment(user_id, course_id)
        self._get_course_lesson(course_id, lesson_id)

        progress = crud_progress.get_progress(self.db, user_id, lesson_id)
        if progress is None:
            return {
                "id": 0,
                "lesson_id": lesson_id,
                "is_completed": False,
                "watched_seconds": 0,
                "last_position": 0,
                "completed_at": None,
            }
        return progress

    def update_progress(self, user_id: int, course_id: int, lesson_id: int, data: LessonProgressUpdate) -> LessonProgress:
        """Позиция плеера и просмотренное время; завершение урока отдельно"""
        self._verify_enrollment(user_id, course_id)
        self._get_course_lesson(course_id, lesson_id)

        fields = {key: value for key, value in data.dict(exclude_unset=True).items() if value is not None}
        return crud_progress.upsert_progress(self.db, user_id, lesson_id, **fields)

    def mark_lesson_complete(self, user_id: int, course_id: int, lesson_id: int) -> LessonProgress:
        self._verify_enrollment(user_id, course_id)
        self._get_course_lesson(course_id, lesson_id, published_only=True)

        progress = crud_progress.get_progress(self.db, user_id, lesson_id)
        if progress is None or not progress.is_completed:
            progress = crud_progress.upsert_progress(
                self.db, user_id, lesson_id, is_completed=True, completed_at=datetime.utcnow()
            )

        self.recalculate_enrollment_progress(user_id, course_id)
        return progress

    def get_course_progress(self, user_id: int, course_id: int) -> Dict:
        enrollment = self._verify_enrollment(user_id, course_id)

        lessons = crud_lesson.get_lessons_by_course(self.db, course_id, published_only=True)
        completed_ids = set(crud_progress.get_completed_lesson_ids(self.db, user_id, course_id))

        return {
            "course_id": course_id,
            "total_lessons": len(lessons),
            "completed_lessons": len(completed_ids),
            "progress_percent": enrollment.progress_percent or 0,
            "lessons": [
                {
                    "id": lesson.id,
                    "title": lesson.title,
                    "order": lesson.order,
                    "is_completed": lesson.id in completed_ids,
                }
                for lesson in lessons
            ],
        }

    def recalculate_enrollment_progress(self, user_id: int, course_id: int) -> None:
        """Процент = завершённые / опубликованные уроки; 100 завершает запись"""
        enrollment = crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id)
        if not enrollment:
            return

        total = len(crud_lesson.get_lessons_by_course(self.db, course_id, published_only=True))
        if total == 0:
            return

        completed = len(crud_progress.get_completed_lesson_ids(self.db, user_id, course_id))
        # Округление половины вверх
        percent = int(completed * 100 / total + 0.5)

        fields = {"progress_percent": percent}
        if percent >= 100 and enrollment.status == EnrollmentStatus.ACTIVE:
            fields.update(status=EnrollmentStatus.COMPLETED, completed_at=datetime.utcnow())
            logger.info("Enrollment %s completed through lesson progress", enrollment.id)

        crud_enrollment.update_enrollment(self.db, enrollment, **fields)
