from pydantic import BaseModel, validator
from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from coursemarket.models.payment import PaymentStatus
from coursemarket.schemas.common import PageMeta
from coursemarket.schemas.course import CourseRef

class PaymentCreate(BaseModel):
    course_id: int

class BatchPaymentCreate(BaseModel):
    course_ids: List[int]
    
    @validator('course_ids')
    def not_empty(cls, v):
        if not v:
            raise ValueError('At least one course is required')
        return v

class PaymentWebhook(BaseModel):
    order_code: str
    success: bool

class PaymentItemResponse(BaseModel):
    course_id: int
    amount: Decimal

    class Config:
        from_attributes = True

class PaymentResponse(BaseModel):
    id: int
    user_id: int
    course_id: int
    enrollment_id: Optional[int] = None
    amount: Decimal
    currency: str
    method: str
    transaction_id: str
    status: PaymentStatus
    paid_at: Optional[datetime] = None
    created_at: datetime
    items: List[PaymentItemResponse] = []

    class Config:
        from_attributes = True

class CreatePaymentResponse(BaseModel):
    payment_url: str
    order_code: str
    payment_id: int

class PaymentListResponse(PageMeta):
    payments: List[PaymentResponse]

class PaymentVerifyResponse(BaseModel):
    success: bool
    status: PaymentStatus
    payment_id: int
    enrollment_id: Optional[int] = None
    course_ids: List[int] = []
    course: Optional[CourseRef] = None
