import logging
import secrets
import time
from datetime import datetime
from typing import Dict, List, Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from coursemarket.config import settings
from coursemarket.core.exceptions import (
    BadRequestException,
    ConflictException,
    CourseNotFoundException,
    ForbiddenException,
    NotFoundException,
    PaymentNotFoundException,
)
from coursemarket.core.security import verify_webhook_signature
from coursemarket.crud import cart as crud_cart
from coursemarket.crud import course as crud_course
from coursemarket.crud import enrollment as crud_enrollment
from coursemarket.crud import payment as crud_payment
from coursemarket.models.course import Course, CourseStatus
from coursemarket.models.payment import Payment, PaymentStatus
from coursemarket.services.cart_service import effective_price
from coursemarket.services.enrollment_service import EnrollmentService
from coursemarket.services.pagination import paginate

logger = logging.getLogger(__name__)

# Статусы шлюза, которые закрывают платёж без оплаты
GATEWAY_FAILED_STATUSES = ("CANCELLED", "EXPIRED")


class PaymentGateway:
    """Заглушка платёжного шлюза: ссылка на оплату и запрос статуса"""

    def __init__(self, checkout_url: str = None):
        self.checkout_url = checkout_url or settings.PAYMENT_CHECKOUT_URL

    def create_payment_link(self, order_code: str, amount, description: str) -> str:
        query = urlencode({"orderCode": order_code, "amount": str(amount), "description": description})
        return f"{self.checkout_url}?{query}"

    def get_payment_status(self, order_code: str) -> Optional[str]:
        """Статус заказа у шлюза (PAID, PENDING, CANCELLED, EXPIRED).

        Заглушка статуса не знает: результат приходит только вебхуком.
        """
        return None


def generate_order_code() -> str:
    return f"{int(time.time() * 1000)}{secrets.randbelow(10**6):06d}"


class PaymentService:
    def __init__(self, db: Session, gateway: PaymentGateway = None):
        self.db = db
        self.gateway = gateway or PaymentGateway()
        self.enrollments = EnrollmentService(db)

    # === Пользователь ===
    def create_payment(self, user_id: int, course_id: int) -> Dict:
        course = crud_course.get_course(self.db, course_id)
        if not course:
            raise CourseNotFoundException(course_id)

        if course.status != CourseStatus.PUBLISHED:
            raise ForbiddenException("Cannot purchase an unpublished course")

        if crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id):
            raise ConflictException("Already enrolled in this course")

        return self._checkout(user_id, [course], f"Course #{course_id}")

    def create_batch_payment(self, user_id: int, course_ids: List[int]) -> Dict:
        """Одна оплата за несколько курсов, обычно всю корзину"""
        course_ids = list(dict.fromkeys(course_ids))
        if not course_ids:
            raise BadRequestException("No courses to purchase")

        courses = [crud_course.get_course(self.db, course_id) for course_id in course_ids]
        missing = [course_id for course_id, course in zip(course_ids, courses) if course is None]
        if missing:
            raise NotFoundException(f"Courses not found: {', '.join(str(course_id) for course_id in missing)}")

        if any(course.status != CourseStatus.PUBLISHED for course in courses):
            raise ForbiddenException("Cannot purchase an unpublished course")

        enrolled = [
            course.id for course in courses
            if crud_enrollment.get_user_course_enrollment(self.db, user_id, course.id)
        ]
        if enrolled:
            raise ConflictException(f"Already enrolled in courses: {', '.join(str(course_id) for course_id in enrolled)}")

        return self._checkout(user_id, courses, f"{len(courses)} courses")

    def _checkout(self, user_id: int, courses: List[Course], description: str) -> Dict:
        items = [{"course_id": course.id, "amount": effective_price(course)} for course in courses]
        amount = sum(item["amount"] for item in items)
        order_code = generate_order_code()

        payment = crud_payment.create_payment(
            self.db,
            items=items,
            user_id=user_id,
            course_id=courses[0].id,
            amount=amount,
            currency=settings.PAYMENT_CURRENCY,
            method="GATEWAY",
            transaction_id=order_code,
        )
        payment_url = self.gateway.create_payment_link(order_code, amount, description)
        logger.info(
            "Payment %s created: user=%s, courses=%s, amount=%s",
            payment.id, user_id, [item["course_id"] for item in items], amount,
        )

        return {"payment_url": payment_url, "order_code": order_code, "payment_id": payment.id}

    def find_by_user(self, user_id: int) -> List[Payment]:
        return crud_payment.get_user_payments(self.db, user_id)

    def handle_webhook(self, order_code: str, success: bool, signature: Optional[str]) -> Payment:
        """Результат оплаты от шлюза; повторная доставка не меняет состояние"""
        if not verify_webhook_signature({"order_code": order_code, "success": success}, signature):
            logger.error("Invalid webhook signature for order code %s", order_code)
            raise ForbiddenException("Invalid signature")

        payment = crud_payment.get_payment_by_transaction(self.db, order_code)
        if not payment:
            logger.error("Payment not found for order code %s", order_code)
            raise PaymentNotFoundException()

        if payment.status != PaymentStatus.PENDING:
            logger.info("Payment %s already processed (%s)", payment.id, payment.status.value)
            return payment

        if not success:
            payment = crud_payment.update_payment(self.db, payment, status=PaymentStatus.FAILED)
            logger.info("Payment %s failed", payment.id)
            return payment

        return self._complete(payment)

    def verify_payment(self, order_code: str, user_id: int) -> Dict:
        """Проверка после возврата со страницы оплаты; PENDING сверяется со шлюзом"""
        payment = crud_payment.get_payment_by_transaction(self.db, order_code)
        if not payment:
            raise PaymentNotFoundException()
        if payment.user_id != user_id:
            raise ForbiddenException("This payment belongs to another user")

        if payment.status == PaymentStatus.PENDING:
            gateway_status = self.gateway.get_payment_status(order_code)
            if gateway_status == "PAID":
                payment = self._complete(payment)
            elif gateway_status in GATEWAY_FAILED_STATUSES:
                payment = crud_payment.update_payment(self.db, payment, status=PaymentStatus.FAILED)
                logger.info("Payment %s closed by gateway (%s)", payment.id, gateway_status)

        return {
            "success": payment.status == PaymentStatus.COMPLETED,
            "status": payment.status,
            "payment_id": payment.id,
            "enrollment_id": payment.enrollment_id,
            "course_ids": [item.course_id for item in payment.items],
            "course": payment.course,
        }

    def _complete(self, payment: Payment) -> Payment:
        """Запись на каждый оплаченный курс; курсы уходят из корзины"""
        course_ids = [item.course_id for item in payment.items] or [payment.course_id]

        enrollment_ids = []
        for course_id in course_ids:
            enrollment = crud_enrollment.get_user_course_enrollment(self.db, payment.user_id, course_id)
            if enrollment is None:
                # Деньги уже списаны, поэтому статус курса здесь не проверяется
                enrollment = crud_enrollment.create_enrollment(self.db, payment.user_id, course_id)
            enrollment_ids.append(enrollment.id)

        crud_cart.remove_cart_items(self.db, payment.user_id, course_ids)

        payment = crud_payment.update_payment(
            self.db,
            payment,
            status=PaymentStatus.COMPLETED,
            enrollment_id=enrollment_ids[0],
            paid_at=datetime.utcnow(),
        )
        logger.info("Payment %s completed, enrollments %s", payment.id, enrollment_ids)
        return payment

    # === Админ ===
    def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[PaymentStatus] = None,
        user_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> Dict:
        query = crud_payment.query_payments(self.db, status=status, user_id=user_id, course_id=course_id)
        payments, meta = paginate(query, page, limit, default_limit=10)
        return {"payments": payments, **meta}

    def find_by_id(self, payment_id: int) -> Payment:
        payment = crud_payment.get_payment(self.db, payment_id)
        if not payment:
            raise PaymentNotFoundException(payment_id)
        return payment

    def process_refund(self, payment_id: int) -> Payment:
        """Возврат: записи на все курсы платежа удаляются"""
        payment = self.find_by_id(payment_id)

        if payment.status != PaymentStatus.COMPLETED:
            raise BadRequestException("Can only refund completed payments")

        course_ids = [item.course_id for item in payment.items] or [payment.course_id]
        payment = crud_payment.update_payment(self.db, payment, status=PaymentStatus.REFUNDED)

        for course_id in course_ids:
            enrollment = crud_enrollment.get_user_course_enrollment(self.db, payment.user_id, course_id)
            if enrollment is not None:
                self.enrollments.delete(enrollment.id)

        self.db.refresh(payment)
        logger.info("Payment %s refunded", payment_id)
        return payment
