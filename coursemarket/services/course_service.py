import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from coursemarket.core.exceptions import (
    BadRequestException,
    CategoryNotFoundException,
    ConflictException,
    CourseNotFoundException,
)
from coursemarket.crud import category as crud_category
from coursemarket.crud import course as crud_course
from coursemarket.crud import lesson as crud_lesson
from coursemarket.models.course import Course, CourseStatus
from coursemarket.models.user import UserRole
from coursemarket.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseResponse,
    CourseUpdate,
    LessonOutline,
)
from coursemarket.services.ownership import OwnershipResolver
from coursemarket.services.pagination import paginate

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, db: Session):
        self.db = db
        self.ownership = OwnershipResolver(db)

    def to_response(self, course: Course, response_class=CourseResponse):
        """ORM -> DTO с производными счётчиками"""
        response = response_class.from_orm(course)
        response.lesson_count = crud_course.count_lessons(self.db, course.id, published_only=True)
        response.enrollment_count = crud_course.count_enrollments(self.db, course.id)
        return response

    # === Каталог ===
    def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        level: Optional[str] = None,
        sort: str = "newest",
    ) -> Dict:
        query = crud_course.query_published_courses(
            self.db,
            category=category,
            search=search,
            min_price=min_price,
            max_price=max_price,
            level=level,
            sort=sort,
        )
        courses, meta = paginate(query, page, limit, default_limit=10)
        return {"data": [self.to_response(course) for course in courses], **meta}

    def find_by_slug(self, slug: str, user_id: int = None, role=None) -> CourseDetailResponse:
        course = crud_course.get_course_by_slug(self.db, slug)
        if not course:
            raise CourseNotFoundException()

        is_owner = self.ownership.is_course_owner(course.id, user_id, role)
        if course.status != CourseStatus.PUBLISHED and not is_owner:
            raise CourseNotFoundException()

        response = self.to_response(course, CourseDetailResponse)
        lessons = crud_lesson.get_lessons_by_course(self.db, course.id, published_only=not is_owner)
        response.lessons = [LessonOutline.from_orm(lesson) for lesson in lessons]
        return response

    def find_by_instructor(self, instructor_id: int) -> List[CourseResponse]:
        courses = crud_course.get_courses_by_instructor(self.db, instructor_id)
        return [self.to_response(course) for course in courses]

    def find_by_id(self, course_id: int) -> Course:
        course = crud_course.get_course(self.db, course_id)
        if not course:
            raise CourseNotFoundException(course_id)
        return course

    # === Изменение ===
    def _ensure_slug_free(self, slug: str, exclude_id: int = None) -> None:
        existing = crud_course.get_course_by_slug(self.db, slug)
        if existing and existing.id != exclude_id:
            raise ConflictException(f"Course with slug '{slug}' already exists")

    def _ensure_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and not crud_category.get_category(self.db, category_id):
            raise CategoryNotFoundException(category_id)

    def create(self, data: CourseCreate, instructor_id: int) -> Course:
        self._ensure_slug_free(data.slug)
        self._ensure_category(data.category_id)

        course = crud_course.create_course(self.db, data, instructor_id=instructor_id)
        logger.info("Course %s created by instructor %s", course.id, instructor_id)
        return course

    def update(self, course_id: int, data: CourseUpdate, user_id: int, role) -> Course:
        course = self.find_by_id(course_id)
        self.ownership.verify_ownership(course_id, user_id, role)

        update_data = data.dict(exclude_unset=True)
        if data.slug is not None and data.slug != course.slug:
            self._ensure_slug_free(data.slug, exclude_id=course_id)
        if "category_id" in update_data:
            self._ensure_category(data.category_id)

        price = data.price if data.price is not None else course.price
        discount = data.discount_price if "discount_price" in update_data else course.discount_price
        if discount is not None and Decimal(discount) >= Decimal(price):
            raise BadRequestException("Discount price must be lower than price")

        return crud_course.update_course(self.db, course_id, data)

    def submit_for_review(self, course_id: int, user_id: int, role) -> Course:
        """DRAFT -> PENDING; админ публикует сразу"""
        course = self.find_by_id(course_id)
        self.ownership.verify_ownership(course_id, user_id, role)

        if course.status != CourseStatus.DRAFT:
            raise ConflictException("Only draft courses can be submitted for review")

        if role == UserRole.ADMIN:
            return self.update_status(course_id, CourseStatus.PUBLISHED)

        course = crud_course.update_course_fields(self.db, course, status=CourseStatus.PENDING)
        logger.info("Course %s submitted for review", course_id)
        return course

    def update_status(self, course_id: int, status: CourseStatus) -> Course:
        course = self.find_by_id(course_id)

        fields = {"status": status}
        if status == CourseStatus.PUBLISHED and course.published_at is None:
            fields["published_at"] = datetime.utcnow()

        course = crud_course.update_course_fields(self.db, course, **fields)
        logger.info("Course %s status set to %s", course_id, status.value)
        return course

    def delete(self, course_id: int, user_id: int, role) -> None:
        self.find_by_id(course_id)
        self.ownership.verify_ownership(course_id, user_id, role)

        if crud_course.count_enrollments(self.db, course_id) > 0:
            raise ConflictException("Cannot delete a course that has enrollments")

        crud_course.delete_course(self.db, course_id)
        logger.info("Course %s deleted", course_id)
