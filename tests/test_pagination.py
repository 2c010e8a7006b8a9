from coursemarket.crud import user as crud_user
from coursemarket.models.user import UserRole
from coursemarket.services.pagination import normalize_page, paginate

from conftest import make_user


def test_normalize_page_defaults_and_clamps():
    assert normalize_page(None, None) == (1, 20)
    assert normalize_page(0, -5, default_limit=10) == (1, 10)
    assert normalize_page(2, 500) == (2, 100)


def test_paginate_last_page(db):
    for index in range(25):
        make_user(db, f"user-{index:02d}")

    items, meta = paginate(crud_user.query_users(db), page=3, limit=10)

    assert len(items) == 5
    assert meta == {"total": 25, "page": 3, "limit": 10, "total_pages": 3}


def test_paginate_counts_after_filters(db):
    for index in range(3):
        make_user(db, f"mentor-{index}", role=UserRole.INSTRUCTOR)
    make_user(db, "learner")

    items, meta = paginate(crud_user.query_users(db, role=UserRole.INSTRUCTOR), page=1, limit=2)

    assert meta["total"] == 3
    assert meta["total_pages"] == 2
    assert all(user.role == UserRole.INSTRUCTOR for user in items)


def test_paginate_empty(db):
    items, meta = paginate(crud_user.query_users(db), page=1, limit=10)
    assert items == []
    assert meta["total_pages"] == 0
