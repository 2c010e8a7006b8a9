import pytest

from coursemarket.core.exceptions import UserNotFoundException
from coursemarket.models.user import UserRole
from coursemarket.schemas.user import TokenData, UserUpdate
from coursemarket.services.user_service import UserService

from conftest import make_user


def test_sync_identity_creates_then_updates(db):
    service = UserService(db)

    user = service.sync_identity(TokenData(firebase_uid="uid-1", email="one@example.com", name="One"))
    assert user.role == UserRole.USER
    assert user.name == "One"

    same = service.sync_identity(TokenData(firebase_uid="uid-1", email="new@example.com", email_verified=True))
    assert same.id == user.id
    assert same.email == "new@example.com"
    assert same.email_verified is True


def test_find_by_firebase_uid(db, student):
    service = UserService(db)
    assert service.find_by_firebase_uid("student").id == student.id
    assert service.find_by_firebase_uid("nobody") is None
    assert service.find_by_id(9999) is None


def test_update_profile_keeps_unset_fields(db, student):
    student.bio = "Hello"
    db.commit()

    user = UserService(db).update_profile(student.id, UserUpdate(photo_url="https://cdn.example.com/me.png"))

    assert user.bio == "Hello"
    assert user.photo_url == "https://cdn.example.com/me.png"


def test_update_profile_of_missing_user(db):
    with pytest.raises(UserNotFoundException):
        UserService(db).update_profile(9999, UserUpdate(name="x"))


def test_list_users_by_role(db, student, instructor, admin):
    result = UserService(db).list_users(role=UserRole.INSTRUCTOR)

    assert [user.id for user in result["users"]] == [instructor.id]
    assert result["limit"] == 20
    assert result["total"] == 1


def test_update_role(db, student):
    service = UserService(db)
    assert service.update_role(student.id, UserRole.INSTRUCTOR).role == UserRole.INSTRUCTOR

    with pytest.raises(UserNotFoundException):
        service.update_role(9999, UserRole.ADMIN)
