from fastapi import APIRouter
from coursemarket.api.v1.endpoints import auth, users, categories, courses, lessons, media, enrollments, payments, progress, cart

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(courses.router, prefix="/courses", tags=["Courses"])
api_router.include_router(lessons.router, prefix="/lessons", tags=["Lessons"])
api_router.include_router(media.router, prefix="/media", tags=["Media"])
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(progress.router, prefix="/progress", tags=["Progress"])
api_router.include_router(cart.router, prefix="/cart", tags=["Cart"])
