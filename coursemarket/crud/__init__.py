from .user import (
    get_user,
    get_user_by_email,
    get_user_by_firebase_uid,
    query_users,
    upsert_firebase_user,
    update_user,
    update_user_role
)

from .category import (
    get_category,
    get_category_by_slug,
    get_root_categories,
    create_category,
    update_category,
    delete_category
)

from .course import (
    get_course,
    get_course_by_slug,
    query_published_courses,
    get_courses_by_instructor,
    create_course,
    update_course,
    delete_course
)

from .lesson import (
    get_lesson,
    get_lesson_with_media,
    get_lessons_by_course,
    create_lesson,
    update_lesson,
    reorder_lessons,
    delete_lesson
)

from .media import (
    get_media,
    get_media_by_lesson,
    create_media,
    update_media,
    reorder_media,
    delete_media
)

from .enrollment import (
    get_enrollment,
    get_user_course_enrollment,
    get_user_enrollments,
    query_enrollments,
    create_enrollment,
    update_enrollment,
    delete_enrollment
)

from .payment import (
    get_payment,
    get_payment_by_transaction,
    get_user_payments,
    query_payments,
    create_payment,
    update_payment
)

from .progress import (
    get_progress,
    upsert_progress,
    get_completed_lesson_ids
)

from .cart import (
    get_cart_items,
    get_cart_item,
    add_cart_items,
    remove_cart_items,
    clear_cart
)
