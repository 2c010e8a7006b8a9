from pydantic import BaseModel, validator
from typing import Optional, List
from datetime import datetime
from coursemarket.models.lesson import LessonType
from coursemarket.schemas.media import MediaResponse

class LessonBase(BaseModel):
    title: str
    slug: str
    description: Optional[str] = None
    type: LessonType = LessonType.VIDEO
    content: Optional[str] = None
    duration: int = 0
    is_free: bool = False
    is_published: bool = False

class LessonCreate(LessonBase):
    order: Optional[int] = None

class LessonUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    type: Optional[LessonType] = None
    content: Optional[str] = None
    duration: Optional[int] = None
    is_free: Optional[bool] = None
    is_published: Optional[bool] = None

    @validator('title', 'slug', 'type', 'duration', 'is_free', 'is_published')
    def not_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v

class LessonResponse(LessonBase):
    id: int
    order: int
    course_id: int
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True

class LessonDetailResponse(LessonResponse):
    media: List[MediaResponse] = []

class ContentPreviewRequest(BaseModel):
    markdown: str

class ContentPreviewResponse(BaseModel):
    html_content: str
