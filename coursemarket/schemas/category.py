from pydantic import BaseModel, validator
from typing import Optional, List
from datetime import datetime

class CategoryBase(BaseModel):
    name: str
    slug: str
    description: Optional[str] = None
    order: int = 0

class CategoryCreate(CategoryBase):
    parent_id: Optional[int] = None

class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    parent_id: Optional[int] = None  # null переносит категорию в корень

    @validator('name', 'slug', 'order', 'is_active')
    def not_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v

class CategoryRef(BaseModel):
    id: int
    name: str
    slug: str
    
    class Config:
        from_attributes = True

class CategoryResponse(CategoryBase):
    id: int
    is_active: bool = True
    parent_id: Optional[int] = None
    course_count: int = 0
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class CategoryTreeResponse(CategoryResponse):
    children: List[CategoryResponse] = []

class CategoryDetailResponse(CategoryResponse):
    parent: Optional[CategoryRef] = None
    children: List[CategoryResponse] = []
