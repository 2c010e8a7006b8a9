from typing import List, Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user, require_role
from coursemarket.database import get_db
from coursemarket.models.payment import PaymentStatus
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.payment import (
    BatchPaymentCreate,
    CreatePaymentResponse,
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    PaymentVerifyResponse,
    PaymentWebhook,
)
from coursemarket.services.payment_service import PaymentService

router = APIRouter()

@router.post("/", response_model=CreatePaymentResponse, status_code=201)
async def create_payment(
    request: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Начать оплату курса"""
    return PaymentService(db).create_payment(current_user.id, request.course_id)

@router.post("/batch", response_model=CreatePaymentResponse, status_code=201)
async def create_batch_payment(
    request: BatchPaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Одна оплата за несколько курсов"""
    return PaymentService(db).create_batch_payment(current_user.id, request.course_ids)

@router.post("/webhook", response_model=PaymentResponse)
async def payment_webhook(
    request: PaymentWebhook,
    x_payment_signature: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Уведомление платёжного шлюза о результате оплаты, подписанное HMAC"""
    return PaymentService(db).handle_webhook(request.order_code, request.success, x_payment_signature)

@router.get("/verify/{order_code}", response_model=PaymentVerifyResponse)
async def verify_payment(
    order_code: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return PaymentService(db).verify_payment(order_code, current_user.id)

@router.get("/my", response_model=List[PaymentResponse])
async def read_my_payments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return PaymentService(db).find_by_user(current_user.id)

# Админ
@router.get("/", response_model=PaymentListResponse)
async def read_payments(
    page: int = 1,
    limit: int = 10,
    status: Optional[PaymentStatus] = None,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    return PaymentService(db).find_all(
        page=page, limit=limit, status=status, user_id=user_id, course_id=course_id
    )

@router.get("/{payment_id}", response_model=PaymentResponse)
async def read_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    return PaymentService(db).find_by_id(payment_id)

@router.post("/{payment_id}/refund", response_model=PaymentResponse)
async def refund_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    """Возврат оплаты: запись на курс удаляется"""
    return PaymentService(db).process_refund(payment_id)
