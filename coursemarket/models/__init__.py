from .user import User, UserRole
from .category import Category
from .course import Course, CourseStatus
from .lesson import Lesson, LessonType, Media, MediaType
from .enrollment import Enrollment, EnrollmentStatus
from .payment import Payment, PaymentItem, PaymentStatus
from .progress import LessonProgress
from .cart import CartItem
