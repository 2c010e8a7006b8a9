from fastapi import HTTPException, status

class CustomHTTPException(HTTPException):
    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(status_code=status_code, detail=detail)

class BadRequestException(CustomHTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)

class UnauthorizedException(CustomHTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)
        self.headers = {"WWW-Authenticate": "Bearer"}

class ForbiddenException(CustomHTTPException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(detail=detail, status_code=status.HTTP_403_FORBIDDEN)

class NotFoundException(CustomHTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)

class ConflictException(CustomHTTPException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT)

class UserNotFoundException(NotFoundException):
    def __init__(self, user_id: int = None):
        detail = f"User with id {user_id} not found" if user_id else "User not found"
        super().__init__(detail=detail)

class CategoryNotFoundException(NotFoundException):
    def __init__(self, category_id: int = None):
        detail = f"Category with id {category_id} not found" if category_id else "Category not found"
        super().__init__(detail=detail)

class CourseNotFoundException(NotFoundException):
    def __init__(self, course_id: int = None):
        detail = f"Course with id {course_id} not found" if course_id else "Course not found"
        super().__init__(detail=detail)

class LessonNotFoundException(NotFoundException):
    def __init__(self, lesson_id: int = None):
        detail = f"Lesson with id {lesson_id} not found" if lesson_id else "Lesson not found"
        super().__init__(detail=detail)

class MediaNotFoundException(NotFoundException):
    def __init__(self, media_id: int = None):
        detail = f"Media with id {media_id} not found" if media_id else "Media not found"
        super().__init__(detail=detail)

class EnrollmentNotFoundException(NotFoundException):
    def __init__(self, enrollment_id: int = None):
        detail = f"Enrollment with id {enrollment_id} not found" if enrollment_id else "Enrollment not found"
        super().__init__(detail=detail)

class PaymentNotFoundException(NotFoundException):
    def __init__(self, payment_id: int = None):
        detail = f"Payment with id {payment_id} not found" if payment_id else "Payment not found"
        super().__init__(detail=detail)
