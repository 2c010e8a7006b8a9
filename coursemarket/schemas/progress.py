from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class LessonProgressUpdate(BaseModel):
    watched_seconds: Optional[int] = Field(None, ge=0)
    last_position: Optional[int] = Field(None, ge=0)

class LessonProgressResponse(BaseModel):
    id: int  # 0, если урок ещё не открывался
    lesson_id: int
    is_completed: bool = False
    watched_seconds: int = 0
    last_position: int = 0
    completed_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class LessonProgressItem(BaseModel):
    id: int
    title: str
    order: int
    is_completed: bool

class CourseProgressResponse(BaseModel):
    course_id: int
    total_lessons: int
    completed_lessons: int
    progress_percent: int
    lessons: List[LessonProgressItem] = []
