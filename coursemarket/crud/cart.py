from sqlalchemy.orm import Session, joinedload
from coursemarket.models.cart import CartItem
from coursemarket.models.course import Course
from typing import List

def get_cart_items(db: Session, user_id: int):
    return db.query(CartItem).filter(
        CartItem.user_id == user_id
    ).options(
        joinedload(CartItem.course).joinedload(Course.instructor)
    ).order_by(CartItem.added_at.desc(), CartItem.id.desc()).all()

def get_cart_course_ids(db: Session, user_id: int) -> List[int]:
    return [row[0] for row in db.query(CartItem.course_id).filter(CartItem.user_id == user_id).all()]

def get_cart_item(db: Session, user_id: int, course_id: int):
    return db.query(CartItem).filter(
        CartItem.user_id == user_id,
        CartItem.course_id == course_id
    ).first()

def add_cart_items(db: Session, user_id: int, course_ids: List[int]):
    for course_id in course_ids:
        db.add(CartItem(user_id=user_id, course_id=course_id))
    db.commit()

def remove_cart_items(db: Session, user_id: int, course_ids: List[int]) -> int:
    removed = db.query(CartItem).filter(
        CartItem.user_id == user_id,
        CartItem.course_id.in_(course_ids)
    ).delete(synchronize_session=False)
    db.commit()
    return removed

def clear_cart(db: Session, user_id: int) -> int:
    removed = db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return removed
