from sqlalchemy.orm import Session
from coursemarket.models.payment import Payment, PaymentItem, PaymentStatus
from typing import List, Optional

def get_payment(db: Session, payment_id: int):
    return db.query(Payment).filter(Payment.id == payment_id).first()

def get_payment_by_transaction(db: Session, transaction_id: str):
    return db.query(Payment).filter(Payment.transaction_id == transaction_id).first()

def get_user_payments(db: Session, user_id: int):
    return db.query(Payment).filter(
        Payment.user_id == user_id
    ).order_by(Payment.created_at.desc(), Payment.id.desc()).all()

def query_payments(
    db: Session,
    status: Optional[PaymentStatus] = None,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None
):
    query = db.query(Payment)
    
    if status:
        query = query.filter(Payment.status == status)
    if user_id:
        query = query.filter(Payment.user_id == user_id)
    if course_id:
        query = query.filter(Payment.course_id == course_id)
    
    return query.order_by(Payment.created_at.desc(), Payment.id.desc())

def create_payment(db: Session, items: Optional[List[dict]] = None, **fields):
    payment = Payment(status=PaymentStatus.PENDING, **fields)
    for item in items or []:
        payment.items.append(PaymentItem(**item))
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment

def update_payment(db: Session, payment: Payment, **fields):
    for field, value in fields.items():
        setattr(payment, field, value)
    
    db.commit()
    db.refresh(payment)
    return payment
