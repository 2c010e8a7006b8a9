from decimal import Decimal

import pytest

from coursemarket.core.exceptions import (
    BadRequestException,
    ConflictException,
    CourseNotFoundException,
    ForbiddenException,
)
from coursemarket.models.course import CourseStatus
from coursemarket.models.user import UserRole
from coursemarket.schemas.course import CourseCreate, CourseUpdate
from coursemarket.services.course_service import CourseService

from conftest import make_course, make_enrollment, make_lesson


def test_create_course_starts_as_draft(db, instructor):
    course = CourseService(db).create(
        CourseCreate(title="FastAPI", slug="fastapi", price=Decimal("50")), instructor.id
    )
    assert course.status == CourseStatus.DRAFT
    assert course.instructor_id == instructor.id


def test_create_course_rejects_duplicate_slug(db, instructor, course):
    with pytest.raises(ConflictException):
        CourseService(db).create(CourseCreate(title="Again", slug=course.slug), instructor.id)


def test_discount_must_be_lower_than_price():
    with pytest.raises(ValueError):
        CourseCreate(title="Bad", slug="bad", price=Decimal("10"), discount_price=Decimal("10"))


def test_update_discount_checked_against_stored_price(db, instructor, course):
    with pytest.raises(BadRequestException):
        CourseService(db).update(course.id, CourseUpdate(discount_price=Decimal("150")), instructor.id, instructor.role)


def test_update_by_non_owner_forbidden(db, other_instructor, admin, course):
    service = CourseService(db)
    with pytest.raises(ForbiddenException):
        service.update(course.id, CourseUpdate(title="Mine now"), other_instructor.id, other_instructor.role)

    assert service.update(course.id, CourseUpdate(title="Edited"), admin.id, UserRole.ADMIN).title == "Edited"


def test_catalog_lists_only_published(db, instructor):
    make_course(db, instructor, slug="visible", description="Learn Python quickly")
    make_course(db, instructor, slug="hidden", status=CourseStatus.DRAFT)
    make_course(db, instructor, slug="pricey", price=Decimal("900"))

    result = CourseService(db).find_all(search="PYTHON")
    assert [c.slug for c in result["data"]] == ["visible"]

    result = CourseService(db).find_all(max_price=Decimal("500"))
    assert [c.slug for c in result["data"]] == ["visible"]
    assert result["total"] == 1

    result = CourseService(db).find_all(sort="price_desc")
    assert [c.slug for c in result["data"]] == ["pricey", "visible"]


def test_find_by_slug_hides_drafts_from_visitors(db, instructor, student):
    draft = make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)
    service = CourseService(db)

    with pytest.raises(CourseNotFoundException):
        service.find_by_slug(draft.slug, student.id, student.role)

    assert service.find_by_slug(draft.slug, instructor.id, instructor.role).id == draft.id


def test_find_by_slug_includes_published_lessons(db, course, student):
    make_lesson(db, course, slug="one", order=0)
    make_lesson(db, course, slug="two", order=1, is_published=False)
    make_enrollment(db, student, course)

    detail = CourseService(db).find_by_slug(course.slug)

    assert [lesson.slug for lesson in detail.lessons] == ["one"]
    assert detail.lesson_count == 1
    assert detail.enrollment_count == 1
    assert detail.instructor.name == "instructor"


def test_submit_for_review(db, instructor):
    course = make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)
    service = CourseService(db)

    assert service.submit_for_review(course.id, instructor.id, instructor.role).status == CourseStatus.PENDING

    with pytest.raises(ConflictException):
        service.submit_for_review(course.id, instructor.id, instructor.role)


def test_admin_submit_publishes(db, instructor, admin):
    course = make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)

    course = CourseService(db).submit_for_review(course.id, admin.id, UserRole.ADMIN)

    assert course.status == CourseStatus.PUBLISHED
    assert course.published_at is not None


def test_update_status_stamps_first_publish_only(db, instructor):
    course = make_course(db, instructor, slug="pending", status=CourseStatus.PENDING)
    service = CourseService(db)

    published_at = service.update_status(course.id, CourseStatus.PUBLISHED).published_at
    service.update_status(course.id, CourseStatus.ARCHIVED)

    assert service.update_status(course.id, CourseStatus.PUBLISHED).published_at == published_at


def test_delete_blocked_by_enrollments(db, instructor, student, course):
    make_enrollment(db, student, course)
    with pytest.raises(ConflictException):
        CourseService(db).delete(course.id, instructor.id, instructor.role)


def test_delete_course(db, instructor, course):
    make_lesson(db, course)
    service = CourseService(db)
    service.delete(course.id, instructor.id, instructor.role)

    with pytest.raises(CourseNotFoundException):
        service.find_by_id(course.id)


def test_find_by_instructor_includes_drafts(db, instructor, course):
    make_course(db, instructor, slug="draft", status=CourseStatus.DRAFT)
    courses = CourseService(db).find_by_instructor(instructor.id)
    assert {c.slug for c in courses} == {course.slug, "draft"}
