import pytest

from coursemarket.core.exceptions import (
    CourseNotFoundException,
    ForbiddenException,
    LessonNotFoundException,
    MediaNotFoundException,
)
from coursemarket.models.user import UserRole
from coursemarket.services.ownership import OwnershipResolver

from conftest import make_lesson, make_media


def test_owner_passes(db, instructor, course):
    OwnershipResolver(db).verify_ownership(course.id, instructor.id, instructor.role)


def test_other_instructor_is_forbidden(db, other_instructor, course):
    with pytest.raises(ForbiddenException):
        OwnershipResolver(db).verify_ownership(course.id, other_instructor.id, other_instructor.role)


def test_admin_passes_without_lookup(db, admin):
    # Админ проходит даже для несуществующего курса
    OwnershipResolver(db).verify_ownership(9999, admin.id, UserRole.ADMIN)


def test_missing_course_is_not_found(db, instructor):
    with pytest.raises(CourseNotFoundException):
        OwnershipResolver(db).verify_ownership(9999, instructor.id, instructor.role)


def test_media_ownership_follows_lesson_and_course(db, instructor, other_instructor, course):
    lesson = make_lesson(db, course)
    media = make_media(db, lesson)
    resolver = OwnershipResolver(db)

    assert resolver.verify_media_ownership(media.id, instructor.id, instructor.role).id == media.id
    assert resolver.verify_lesson_ownership(lesson.id, instructor.id, instructor.role).id == lesson.id

    with pytest.raises(ForbiddenException):
        resolver.verify_media_ownership(media.id, other_instructor.id, other_instructor.role)


def test_ownership_reflects_instructor_change(db, instructor, other_instructor, course):
    lesson = make_lesson(db, course)
    resolver = OwnershipResolver(db)

    course.instructor_id = other_instructor.id
    db.commit()

    resolver.verify_lesson_ownership(lesson.id, other_instructor.id, other_instructor.role)
    with pytest.raises(ForbiddenException):
        resolver.verify_lesson_ownership(lesson.id, instructor.id, instructor.role)


def test_missing_lesson_and_media(db, instructor):
    resolver = OwnershipResolver(db)
    with pytest.raises(LessonNotFoundException):
        resolver.verify_lesson_ownership(9999, instructor.id, instructor.role)
    with pytest.raises(MediaNotFoundException):
        resolver.verify_media_ownership(9999, instructor.id, instructor.role)


def test_is_course_owner_for_anonymous(db, course):
    assert OwnershipResolver(db).is_course_owner(course.id) is False
