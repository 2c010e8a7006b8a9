from sqlalchemy import func
from sqlalchemy.orm import Session
from coursemarket.models.lesson import Media, MediaType
from typing import List, Optional

def get_media(db: Session, media_id: int):
    return db.query(Media).filter(Media.id == media_id).first()

def get_media_by_lesson(db: Session, lesson_id: int):
    return db.query(Media).filter(
        Media.lesson_id == lesson_id
    ).order_by(Media.order, Media.id).all()

def get_media_ids(db: Session, lesson_id: int) -> List[int]:
    return [row[0] for row in db.query(Media.id).filter(Media.lesson_id == lesson_id).all()]

def get_last_order(db: Session, lesson_id: int) -> Optional[int]:
    return db.query(func.max(Media.order)).filter(Media.lesson_id == lesson_id).scalar()

def sum_video_duration(db: Session, lesson_id: int) -> int:
    # YOUTUBE_EMBED не учитывается: длительность на момент создания неизвестна
    total = db.query(func.sum(Media.duration)).filter(
        Media.lesson_id == lesson_id,
        Media.type == MediaType.VIDEO
    ).scalar()
    return int(total or 0)

def create_media(db: Session, lesson_id: int, order: int, **fields):
    db_media = Media(lesson_id=lesson_id, order=order, **fields)
    db.add(db_media)
    db.commit()
    db.refresh(db_media)
    return db_media

def update_media(db: Session, media_id: int, **fields):
    db_media = get_media(db, media_id)
    if not db_media:
        return None
    
    for field, value in fields.items():
        setattr(db_media, field, value)
    
    db.commit()
    db.refresh(db_media)
    return db_media

def reorder_media(db: Session, lesson_id: int, media_ids: List[int]):
    """Проставляет order = индекс в списке, одной транзакцией"""
    items = {
        media.id: media
        for media in db.query(Media).filter(Media.lesson_id == lesson_id).all()
    }
    
    try:
        for index, media_id in enumerate(media_ids):
            items[media_id].order = index
        db.commit()
    except Exception:
        db.rollback()
        raise
    
    return get_media_by_lesson(db, lesson_id)

def delete_media(db: Session, media_id: int):
    db_media = get_media(db, media_id)
    if db_media:
        db.delete(db_media)
        db.commit()
    return db_media
