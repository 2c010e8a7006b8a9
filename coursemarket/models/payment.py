from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from coursemarket.database import Base
from datetime import datetime
import enum

class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

class Payment(Base):
    __tablename__ = "payments"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String, default="VND")
    method = Column(String, default="GATEWAY")
    transaction_id = Column(String, unique=True, index=True, nullable=False)
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    user = relationship("User", back_populates="payments")
    course = relationship("Course")
    enrollment = relationship("Enrollment", back_populates="payment")
    items = relationship("PaymentItem", back_populates="payment", cascade="all, delete-orphan")

class PaymentItem(Base):
    """Курс в составе платежа; у пакетной оплаты их несколько"""
    __tablename__ = "payment_items"
    __table_args__ = (UniqueConstraint("payment_id", "course_id", name="uq_payment_item_course"),)
    
    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    
    payment = relationship("Payment", back_populates="items")
    course = relationship("Course")
