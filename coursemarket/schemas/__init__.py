from .common import (
    PageMeta,
    MessageResponse,
    ReorderRequest
)

from .user import (
    UserBase,
    UserUpdate,
    UserRoleUpdate,
    UserResponse,
    PublicUserResponse,
    UserListResponse,
    LoginRequest,
    TokenData
)

from .category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryDetailResponse
)

from .course import (
    CourseCreate,
    CourseUpdate,
    CourseStatusUpdate,
    CourseResponse,
    CourseDetailResponse,
    CourseListResponse
)

from .media import (
    MediaCreate,
    MediaUpdate,
    MediaResponse,
    PresignedUrlRequest,
    PresignedUrlResponse,
    SignedUrlResponse
)

from .lesson import (
    LessonCreate,
    LessonUpdate,
    LessonResponse,
    LessonDetailResponse
)

from .enrollment import (
    EnrollmentCreate,
    ProgressUpdate,
    EnrollmentAdminUpdate,
    EnrollmentResponse,
    EnrollmentCheckResponse,
    EnrollmentListResponse
)

from .payment import (
    PaymentCreate,
    BatchPaymentCreate,
    PaymentWebhook,
    PaymentResponse,
    CreatePaymentResponse,
    PaymentListResponse,
    PaymentVerifyResponse
)

from .progress import (
    LessonProgressUpdate,
    LessonProgressResponse,
    CourseProgressResponse
)

from .cart import (
    CartAdd,
    CartMerge,
    CartResponse
)
