import logging
from sqlalchemy.orm import Session

from coursemarket.crud import course as crud_course
from coursemarket.crud import lesson as crud_lesson
from coursemarket.crud import media as crud_media

logger = logging.getLogger(__name__)


class DurationMaintainer:
    """Пересчёт хранимых длительностей после изменения дочерних строк.
    
    Значение всегда считается заново из исходных строк (SUM), поэтому
    при гонке двух записей выигрывает последняя, а следующий пересчёт
    восстанавливает точную сумму.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def recompute_lesson_duration(self, lesson_id: int) -> int:
        duration = crud_media.sum_video_duration(self.db, lesson_id)
        crud_lesson.set_lesson_duration(self.db, lesson_id, duration)
        logger.info("Lesson %s duration recomputed: %ss", lesson_id, duration)
        return duration
    
    def recompute_course_duration(self, course_id: int) -> int:
        duration = crud_lesson.sum_published_duration(self.db, course_id)
        crud_course.set_course_duration(self.db, course_id, duration)
        logger.info("Course %s duration recomputed: %ss", course_id, duration)
        return duration
    
    def recompute_lesson_and_course(self, lesson_id: int, course_id: int) -> None:
        self.recompute_lesson_duration(lesson_id)
        self.recompute_course_duration(course_id)
