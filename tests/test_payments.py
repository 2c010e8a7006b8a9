from decimal import Decimal

import pytest

from coursemarket.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    PaymentNotFoundException,
)
from coursemarket.models.course import CourseStatus
from coursemarket.models.enrollment import Enrollment, EnrollmentStatus
from coursemarket.models.payment import PaymentStatus
from coursemarket.services.cart_service import CartService
from coursemarket.services.payment_service import PaymentGateway, PaymentService

from conftest import make_course, make_enrollment, make_user, sign_webhook


def deliver(service, order_code, success):
    return service.handle_webhook(order_code, success, sign_webhook(order_code, success))


def test_create_payment_uses_discount_price(db, student, instructor):
    course = make_course(db, instructor, slug="sale", price=Decimal("200"), discount_price=Decimal("150"))
    service = PaymentService(db)

    result = service.create_payment(student.id, course.id)
    payment = service.find_by_id(result["payment_id"])

    assert payment.amount == Decimal("150")
    assert payment.status == PaymentStatus.PENDING
    assert payment.transaction_id == result["order_code"]
    assert result["order_code"] in result["payment_url"]


def test_create_payment_checks_course(db, student, instructor, course):
    draft = make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)
    service = PaymentService(db)

    with pytest.raises(ForbiddenException):
        service.create_payment(student.id, draft.id)

    make_enrollment(db, student, course)
    with pytest.raises(ConflictException):
        service.create_payment(student.id, course.id)


def test_successful_webhook_enrolls(db, student, course):
    service = PaymentService(db)
    order_code = service.create_payment(student.id, course.id)["order_code"]

    payment = deliver(service, order_code, True)

    assert payment.status == PaymentStatus.COMPLETED
    assert payment.paid_at is not None
    enrollment = db.query(Enrollment).filter(Enrollment.id == payment.enrollment_id).one()
    assert enrollment.user_id == student.id
    assert enrollment.status == EnrollmentStatus.ACTIVE


def test_webhook_is_idempotent(db, student, course):
    service = PaymentService(db)
    order_code = service.create_payment(student.id, course.id)["order_code"]

    first = deliver(service, order_code, True)
    second = deliver(service, order_code, False)

    assert second.status == PaymentStatus.COMPLETED
    assert second.paid_at == first.paid_at
    assert db.query(Enrollment).count() == 1


def test_failed_webhook(db, student, course):
    service = PaymentService(db)
    order_code = service.create_payment(student.id, course.id)["order_code"]

    assert deliver(service, order_code, False).status == PaymentStatus.FAILED
    assert db.query(Enrollment).count() == 0


def test_webhook_for_unknown_order(db):
    with pytest.raises(PaymentNotFoundException):
        deliver(PaymentService(db), "missing", True)


def test_refund_removes_enrollment(db, student, course):
    service = PaymentService(db)
    order_code = service.create_payment(student.id, course.id)["order_code"]
    payment = deliver(service, order_code, True)

    refunded = service.process_refund(payment.id)

    assert refunded.status == PaymentStatus.REFUNDED
    assert refunded.enrollment_id is None
    assert db.query(Enrollment).count() == 0


def test_refund_requires_completed_payment(db, student, course):
    service = PaymentService(db)
    payment_id = service.create_payment(student.id, course.id)["payment_id"]

    with pytest.raises(BadRequestException):
        service.process_refund(payment_id)


def test_admin_listing(db, student, instructor, course):
    service = PaymentService(db)
    other = make_course(db, instructor, slug="other")
    service.create_payment(student.id, course.id)
    order_code = service.create_payment(student.id, other.id)["order_code"]
    deliver(service, order_code, True)

    result = service.find_all(status=PaymentStatus.COMPLETED)

    assert result["total"] == 1
    assert result["payments"][0].course_id == other.id
    assert len(service.find_by_user(student.id)) == 2


@pytest.mark.parametrize("signature", [None, "", "deadbeef"])
def test_webhook_rejects_bad_signature(db, student, course, signature):
    service = PaymentService(db)
    created = service.create_payment(student.id, course.id)
    order_code = created["order_code"]

    with pytest.raises(ForbiddenException):
        service.handle_webhook(order_code, True, signature)

    # Подпись неуспешной оплаты не подходит к успешной
    with pytest.raises(ForbiddenException):
        service.handle_webhook(order_code, True, sign_webhook(order_code, False))

    assert service.find_by_id(created["payment_id"]).status == PaymentStatus.PENDING
    assert db.query(Enrollment).count() == 0


def test_batch_payment_sums_effective_prices(db, student, instructor, course):
    sale = make_course(db, instructor, slug="sale", price=Decimal("200"), discount_price=Decimal("150"))
    service = PaymentService(db)

    result = service.create_batch_payment(student.id, [course.id, sale.id, course.id])
    payment = service.find_by_id(result["payment_id"])

    assert payment.amount == Decimal("250")
    assert sorted(item.course_id for item in payment.items) == sorted([course.id, sale.id])
    assert payment.status == PaymentStatus.PENDING


def test_batch_payment_validation(db, student, instructor, course):
    draft = make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)
    service = PaymentService(db)

    with pytest.raises(NotFoundException) as error:
        service.create_batch_payment(student.id, [course.id, 9998, 9999])
    assert "9998, 9999" in error.value.detail
    with pytest.raises(ForbiddenException):
        service.create_batch_payment(student.id, [course.id, draft.id])
    with pytest.raises(BadRequestException):
        service.create_batch_payment(student.id, [])

    make_enrollment(db, student, course)
    with pytest.raises(ConflictException):
        service.create_batch_payment(student.id, [course.id])


def test_batch_webhook_enrolls_every_course_and_refund_removes_them(db, student, instructor, course):
    other = make_course(db, instructor, slug="other")
    CartService(db).merge_cart(student.id, [course.id, other.id])
    service = PaymentService(db)
    order_code = service.create_batch_payment(student.id, [course.id, other.id])["order_code"]

    payment = deliver(service, order_code, True)

    enrolled = {enrollment.course_id for enrollment in db.query(Enrollment).filter(Enrollment.user_id == student.id)}
    assert enrolled == {course.id, other.id}
    assert payment.enrollment_id is not None
    assert CartService(db).get_cart(student.id)["total_items"] == 0

    service.process_refund(payment.id)
    assert db.query(Enrollment).count() == 0


class StatusGateway(PaymentGateway):
    def __init__(self, status):
        super().__init__()
        self.status = status

    def get_payment_status(self, order_code):
        return self.status


def test_verify_payment_reports_state(db, student, course):
    service = PaymentService(db)
    order_code = service.create_payment(student.id, course.id)["order_code"]

    result = service.verify_payment(order_code, student.id)

    assert result["success"] is False
    assert result["status"] == PaymentStatus.PENDING
    assert result["course"].id == course.id
    assert result["course_ids"] == [course.id]


def test_verify_payment_syncs_with_gateway(db, student, instructor, course):
    order_code = PaymentService(db).create_payment(student.id, course.id)["order_code"]

    result = PaymentService(db, gateway=StatusGateway("PAID")).verify_payment(order_code, student.id)

    assert result["success"] is True
    assert result["enrollment_id"] is not None

    other = make_course(db, instructor, slug="other")
    cancelled = PaymentService(db).create_payment(student.id, other.id)["order_code"]
    result = PaymentService(db, gateway=StatusGateway("CANCELLED")).verify_payment(cancelled, student.id)
    assert result["status"] == PaymentStatus.FAILED


def test_verify_payment_checks_owner(db, student, course):
    service = PaymentService(db)
    order_code = service.create_payment(student.id, course.id)["order_code"]
    stranger = make_user(db, "stranger")

    with pytest.raises(ForbiddenException):
        service.verify_payment(order_code, stranger.id)
    with pytest.raises(PaymentNotFoundException):
        service.verify_payment("missing", student.id)
