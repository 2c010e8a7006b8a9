from decimal import Decimal

import pytest

from coursemarket.core.exceptions import ConflictException, CourseNotFoundException, ForbiddenException
from coursemarket.models.cart import CartItem
from coursemarket.models.course import CourseStatus
from coursemarket.services.cart_service import CartService

from conftest import make_course, make_enrollment


def test_add_item_is_idempotent_and_totals_use_discount(db, student, instructor, course):
    sale = make_course(db, instructor, slug="sale", price=Decimal("200"), discount_price=Decimal("150"))
    service = CartService(db)

    service.add_item(student.id, course.id)
    service.add_item(student.id, sale.id)
    cart = service.add_item(student.id, sale.id)

    assert cart["total_items"] == 2
    assert cart["total_price"] == Decimal("250")
    assert db.query(CartItem).count() == 2


def test_add_item_checks_course(db, student, instructor, course):
    draft = make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)
    service = CartService(db)

    with pytest.raises(CourseNotFoundException):
        service.add_item(student.id, 9999)
    with pytest.raises(ForbiddenException):
        service.add_item(student.id, draft.id)

    make_enrollment(db, student, course)
    with pytest.raises(ConflictException):
        service.add_item(student.id, course.id)


def test_remove_and_clear(db, student, instructor, course):
    other = make_course(db, instructor, slug="other")
    service = CartService(db)
    service.add_item(student.id, course.id)
    service.add_item(student.id, other.id)

    cart = service.remove_item(student.id, course.id)
    assert [item.course.id for item in cart["items"]] == [other.id]

    service.clear_cart(student.id)
    assert service.get_cart(student.id) == {"items": [], "total_items": 0, "total_price": Decimal("0")}


def test_merge_skips_duplicates_enrolled_and_missing(db, student, instructor, course):
    owned = make_course(db, instructor, slug="owned")
    fresh = make_course(db, instructor, slug="fresh")
    make_enrollment(db, student, owned)
    service = CartService(db)
    service.add_item(student.id, course.id)

    cart = service.merge_cart(student.id, [course.id, owned.id, fresh.id, fresh.id, 9999])

    assert sorted(item.course.id for item in cart["items"]) == sorted([course.id, fresh.id])
