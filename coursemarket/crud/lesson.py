from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from coursemarket.models.lesson import Lesson
from coursemarket.schemas.lesson import LessonCreate, LessonUpdate
from typing import List, Optional

def get_lesson(db: Session, lesson_id: int):
    return db.query(Lesson).filter(Lesson.id == lesson_id).first()

def get_lesson_with_media(db: Session, lesson_id: int):
    return db.query(Lesson).options(
        joinedload(Lesson.media)
    ).filter(Lesson.id == lesson_id).first()

def get_lesson_by_slug(db: Session, course_id: int, slug: str):
    return db.query(Lesson).options(
        joinedload(Lesson.media)
    ).filter(
        Lesson.course_id == course_id,
        Lesson.slug == slug
    ).first()

def get_lessons_by_course(db: Session, course_id: int, published_only: bool = False):
    query = db.query(Lesson).filter(Lesson.course_id == course_id)
    
    if published_only:
        query = query.filter(Lesson.is_published == True)
    
    return query.order_by(Lesson.order, Lesson.id).all()

def get_lesson_ids(db: Session, course_id: int) -> List[int]:
    return [row[0] for row in db.query(Lesson.id).filter(Lesson.course_id == course_id).all()]

def get_last_order(db: Session, course_id: int) -> Optional[int]:
    return db.query(func.max(Lesson.order)).filter(Lesson.course_id == course_id).scalar()

def sum_published_duration(db: Session, course_id: int) -> int:
    total = db.query(func.sum(Lesson.duration)).filter(
        Lesson.course_id == course_id,
        Lesson.is_published == True
    ).scalar()
    return int(total or 0)

def create_lesson(db: Session, course_id: int, lesson: LessonCreate, order: int):
    db_lesson = Lesson(**lesson.dict(exclude={"order"}), course_id=course_id, order=order)
    db.add(db_lesson)
    db.commit()
    db.refresh(db_lesson)
    return db_lesson

def update_lesson(db: Session, lesson_id: int, lesson_update: LessonUpdate):
    db_lesson = get_lesson(db, lesson_id)
    if not db_lesson:
        return None
    
    update_data = lesson_update.dict(exclude_unset=True)
    
    for field, value in update_data.items():
        setattr(db_lesson, field, value)
    
    db.commit()
    db.refresh(db_lesson)
    return db_lesson

def set_lesson_duration(db: Session, lesson_id: int, duration: int):
    db.query(Lesson).filter(Lesson.id == lesson_id).update(
        {Lesson.duration: duration}, synchronize_session="fetch"
    )
    db.commit()

def reorder_lessons(db: Session, course_id: int, lesson_ids: List[int]):
    """Проставляет order = индекс в списке, одной транзакцией"""
    lessons = {
        lesson.id: lesson
        for lesson in db.query(Lesson).filter(Lesson.course_id == course_id).all()
    }
    
    try:
        for index, lesson_id in enumerate(lesson_ids):
            lessons[lesson_id].order = index
        db.commit()
    except Exception:
        db.rollback()
        raise
    
    return get_lessons_by_course(db, course_id)

def delete_lesson(db: Session, lesson_id: int):
    db_lesson = get_lesson(db, lesson_id)
    if db_lesson:
        db.delete(db_lesson)
        db.commit()
    return db_lesson
