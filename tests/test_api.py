from coursemarket.core.security import create_access_token
from coursemarket.models.lesson import MediaType
from coursemarket.models.user import User

from conftest import auth_headers, make_lesson, make_media, sign_webhook


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_login_registers_user(client, db):
    token = create_access_token({"sub": "new-uid", "email": "new@example.com", "name": "Newcomer"})

    response = client.post("/api/v1/auth/login", json={"id_token": token})

    assert response.status_code == 200
    assert response.json()["name"] == "Newcomer"
    assert db.query(User).filter(User.firebase_uid == "new-uid").count() == 1

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "new@example.com"


def test_me_requires_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    bad = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_catalog_is_public(client, course):
    response = client.get("/api/v1/courses/")

    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 1
    assert body["data"][0]["slug"] == course.slug




def test_lesson_access_flow(client, db, student, course):
    lesson = make_lesson(db, course)
    headers = auth_headers(student)

    assert client.get(f"/api/v1/lessons/{lesson.id}", headers=headers).status_code == 403

    enrolled = client.post("/api/v1/enrollments/", json={"course_id": course.id}, headers=headers)
    assert enrolled.status_code == 201

    response = client.get(f"/api/v1/lessons/{lesson.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["slug"] == lesson.slug


def test_unpublished_lesson_is_404(client, db, course):
    lesson = make_lesson(db, course, is_published=False, is_free=True)
    response = client.get(f"/api/v1/lessons/{lesson.id}")
    assert response.status_code == 404
    assert "detail" in response.json()


def test_admin_routes_reject_students(client, student):
    assert client.get("/api/v1/users/", headers=auth_headers(student)).status_code == 403
    assert client.get("/api/v1/payments/", headers=auth_headers(student)).status_code == 403


def test_instructor_creates_course_and_media(client, instructor):
    headers = auth_headers(instructor)

    course = client.post(
        "/api/v1/courses/",
        json={"title": "Docker", "slug": "docker", "price": "30"},
        headers=headers,
    )
    assert course.status_code == 201
    assert course.json()["status"] == "DRAFT"
    course_id = course.json()["id"]

    lesson = client.post(
        f"/api/v1/lessons/course/{course_id}",
        json={"title": "Intro", "slug": "intro"},
        headers=headers,
    )
    assert lesson.status_code == 201
    lesson_id = lesson.json()["id"]

    media = client.post(
        f"/api/v1/media/lesson/{lesson_id}",
        json={"type": "YOUTUBE_EMBED", "youtube_url": "https://youtu.be/dQw4w9WgXcQ"},
        headers=headers,
    )
    assert media.status_code == 201
    assert media.json()["url"] == "https://www.youtube.com/embed/dQw4w9WgXcQ"


def test_reorder_with_foreign_id_returns_400(client, db, instructor, course):
    lesson = make_lesson(db, course)
    media = make_media(db, lesson, type=MediaType.VIDEO)

    response = client.put(
        f"/api/v1/media/lesson/{lesson.id}/reorder",
        json={"ids": [media.id, 999]},
        headers=auth_headers(instructor),
    )
    assert response.status_code == 400


def test_public_profile(client, student):
    response = client.get(f"/api/v1/users/{student.id}/public")
    assert response.status_code == 200
    assert set(response.json()) == {"id", "name", "photo_url", "bio", "role"}


def test_patch_rejects_null_for_required_fields(client, db, instructor, course):
    lesson = make_lesson(db, course)
    media = make_media(db, lesson)
    headers = auth_headers(instructor)

    assert client.patch(f"/api/v1/media/{media.id}", json={"url": None}, headers=headers).status_code == 422
    assert client.patch(f"/api/v1/lessons/{lesson.id}", json={"title": None}, headers=headers).status_code == 422
    assert client.patch(f"/api/v1/courses/{course.id}", json={"price": None}, headers=headers).status_code == 422

    db.refresh(media)
    assert media.url.startswith("https://cdn.example.com/")

    renamed = client.patch(f"/api/v1/media/{media.id}", json={"title": None}, headers=headers)
    assert renamed.status_code == 200


def test_webhook_requires_valid_signature(client, student, course):
    created = client.post("/api/v1/payments/", json={"course_id": course.id}, headers=auth_headers(student))
    order_code = created.json()["order_code"]
    body = {"order_code": order_code, "success": True}

    assert client.post("/api/v1/payments/webhook", json=body).status_code == 403
    forged = client.post("/api/v1/payments/webhook", json=body, headers={"X-Payment-Signature": "0" * 64})
    assert forged.status_code == 403

    response = client.post(
        "/api/v1/payments/webhook",
        json=body,
        headers={"X-Payment-Signature": sign_webhook(order_code, True)},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"

    verified = client.get(f"/api/v1/payments/verify/{order_code}", headers=auth_headers(student))
    assert verified.json()["success"] is True


def test_cart_and_lesson_progress_flow(client, db, student, course):
    headers = auth_headers(student)
    lesson = make_lesson(db, course)

    cart = client.post("/api/v1/cart/", json={"course_id": course.id}, headers=headers).json()
    assert cart["total_items"] == 1

    # Прогресс доступен только после записи
    assert client.get(f"/api/v1/progress/course/{course.id}", headers=headers).status_code == 403

    order_code = client.post(
        "/api/v1/payments/batch", json={"course_ids": [course.id]}, headers=headers
    ).json()["order_code"]
    client.post(
        "/api/v1/payments/webhook",
        json={"order_code": order_code, "success": True},
        headers={"X-Payment-Signature": sign_webhook(order_code, True)},
    )
    assert client.get("/api/v1/cart/", headers=headers).json()["total_items"] == 0

    completed = client.post(f"/api/v1/progress/course/{course.id}/lesson/{lesson.id}/complete", headers=headers)
    assert completed.status_code == 200
    assert completed.json()["is_completed"] is True

    summary = client.get(f"/api/v1/progress/course/{course.id}", headers=headers).json()
    assert summary["progress_percent"] == 100
    assert summary["lessons"] == [{"id": lesson.id, "title": lesson.title, "order": 0, "is_completed": True}]
