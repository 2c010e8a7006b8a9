from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from coursemarket.models.enrollment import EnrollmentStatus
from coursemarket.schemas.course import CourseRef
from coursemarket.schemas.common import PageMeta

class EnrollmentCreate(BaseModel):
    course_id: int

class ProgressUpdate(BaseModel):
    progress_percent: int = Field(ge=0, le=100)

class EnrollmentAdminUpdate(BaseModel):
    status: Optional[EnrollmentStatus] = None
    expires_at: Optional[datetime] = None

class EnrollmentResponse(BaseModel):
    id: int
    user_id: int
    course_id: int
    status: EnrollmentStatus
    progress_percent: int
    enrolled_at: datetime
    expires_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class EnrollmentWithCourseResponse(EnrollmentResponse):
    course: Optional[CourseRef] = None

class EnrollmentCheckResponse(BaseModel):
    enrolled: bool
    enrollment: Optional[EnrollmentResponse] = None

class EnrollmentListResponse(PageMeta):
    enrollments: List[EnrollmentWithCourseResponse]
