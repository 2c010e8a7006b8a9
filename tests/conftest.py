import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coursemarket.api.dependencies import get_cache
from coursemarket.core.security import create_access_token, sign_webhook_payload
from coursemarket.database import Base, get_db
from coursemarket.main import app
from coursemarket.models import (
    Course,
    CourseStatus,
    Enrollment,
    EnrollmentStatus,
    Lesson,
    Media,
    MediaType,
    User,
    UserRole,
)
from coursemarket.services.cache import MemoryCache


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def client(db, cache):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, uid, role=UserRole.USER, name=None):
    user = User(firebase_uid=uid, email=f"{uid}@example.com", name=name or uid, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_course(db, instructor, slug="python-basics", status=CourseStatus.PUBLISHED,
                price=Decimal("100.00"), discount_price=None, **fields):
    course = Course(
        title=fields.pop("title", slug.replace("-", " ").title()),
        slug=slug,
        status=status,
        price=price,
        discount_price=discount_price,
        instructor_id=instructor.id,
        **fields
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def make_lesson(db, course, slug="intro", order=0, is_published=True, is_free=False, duration=0):
    lesson = Lesson(
        title=slug.title(),
        slug=slug,
        course_id=course.id,
        order=order,
        is_published=is_published,
        is_free=is_free,
        duration=duration,
    )
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


def make_media(db, lesson, order=0, type=MediaType.VIDEO, duration=None):
    media = Media(
        lesson_id=lesson.id,
        type=type,
        url=f"https://cdn.example.com/lesson-{lesson.id}/clip-{order}.mp4",
        order=order,
        duration=duration,
    )
    db.add(media)
    db.commit()
    db.refresh(media)
    return media


def make_enrollment(db, user, course, status=EnrollmentStatus.ACTIVE, progress_percent=0):
    enrollment = Enrollment(
        user_id=user.id,
        course_id=course.id,
        status=status,
        progress_percent=progress_percent,
    )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


def auth_headers(user):
    token = create_access_token({"sub": user.firebase_uid, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student(db):
    return make_user(db, "student")


@pytest.fixture
def instructor(db):
    return make_user(db, "instructor", role=UserRole.INSTRUCTOR)


@pytest.fixture
def other_instructor(db):
    return make_user(db, "other-instructor", role=UserRole.INSTRUCTOR)


@pytest.fixture
def admin(db):
    return make_user(db, "admin", role=UserRole.ADMIN)


@pytest.fixture
def course(db, instructor):
    return make_course(db, instructor)


def sign_webhook(order_code, success):
    return sign_webhook_payload({"order_code": order_code, "success": success})
