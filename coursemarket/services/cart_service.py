import logging
from decimal import Decimal
from typing import Dict, List

from sqlalchemy.orm import Session

from coursemarket.core.exceptions import ConflictException, CourseNotFoundException, ForbiddenException
from coursemarket.crud import cart as crud_cart
from coursemarket.crud import course as crud_course
from coursemarket.crud import enrollment as crud_enrollment
from coursemarket.models.course import CourseStatus

logger = logging.getLogger(__name__)


def effective_price(course) -> Decimal:
    """Цена со скидкой, если она задана"""
    return course.discount_price if course.discount_price is not None else course.price


class CartService:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, user_id: int) -> Dict:
        items = crud_cart.get_cart_items(self.db, user_id)
        total = sum((Decimal(effective_price(item.course)) for item in items), Decimal("0"))
        return {"items": items, "total_items": len(items), "total_price": total}

    def add_item(self, user_id: int, course_id: int) -> Dict:
        course = crud_course.get_course(self.db, course_id)
        if not course:
            raise CourseNotFoundException(course_id)
        if course.status != CourseStatus.PUBLISHED:
            raise ForbiddenException("Cannot add an unpublished course to the cart")
        if crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id):
            raise ConflictException("Already enrolled in this course")

        if not crud_cart.get_cart_item(self.db, user_id, course_id):
            crud_cart.add_cart_items(self.db, user_id, [course_id])
            logger.info("Course %s added to cart of user %s", course_id, user_id)

        return self.get_cart(user_id)

    def remove_item(self, user_id: int, course_id: int) -> Dict:
        crud_cart.remove_cart_items(self.db, user_id, [course_id])
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> None:
        crud_cart.clear_cart(self.db, user_id)

    def merge_cart(self, user_id: int, course_ids: List[int]) -> Dict:
        """Перенос гостевой корзины: уже добавленные, купленные и недоступные курсы пропускаются"""
        in_cart = set(crud_cart.get_cart_course_ids(self.db, user_id))
        to_add = []
        for course_id in dict.fromkeys(course_ids):
            if course_id in in_cart:
                continue
            course = crud_course.get_course(self.db, course_id)
            if not course or course.status != CourseStatus.PUBLISHED:
                continue
            if crud_enrollment.get_user_course_enrollment(self.db, user_id, course_id):
                continue
            to_add.append(course_id)

        if to_add:
            crud_cart.add_cart_items(self.db, user_id, to_add)
            logger.info("Merged %s courses into cart of user %s", len(to_add), user_id)

        return self.get_cart(user_id)
