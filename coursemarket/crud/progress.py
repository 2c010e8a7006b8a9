from sqlalchemy.orm import Session
from coursemarket.models.lesson import Lesson
from coursemarket.models.progress import LessonProgress
from typing import List

def get_progress(db: Session, user_id: int, lesson_id: int):
    return db.query(LessonProgress).filter(
        LessonProgress.user_id == user_id,
        LessonProgress.lesson_id == lesson_id
    ).first()

def upsert_progress(db: Session, user_id: int, lesson_id: int, **fields):
    progress = get_progress(db, user_id, lesson_id)
    if progress is None:
        progress = LessonProgress(user_id=user_id, lesson_id=lesson_id)
        db.add(progress)
    
    for field, value in fields.items():
        setattr(progress, field, value)
    
    db.commit()
    db.refresh(progress)
    return progress

def get_completed_lesson_ids(db: Session, user_id: int, course_id: int) -> List[int]:
    """Завершённые пользователем опубликованные уроки курса"""
    rows = db.query(LessonProgress.lesson_id).join(Lesson, Lesson.id == LessonProgress.lesson_id).filter(
        LessonProgress.user_id == user_id,
        LessonProgress.is_completed == True,
        Lesson.course_id == course_id,
        Lesson.is_published == True
    ).all()
    return [row[0] for row in rows]
