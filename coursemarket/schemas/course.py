from pydantic import BaseModel, validator
from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from coursemarket.models.course import CourseStatus
from coursemarket.schemas.category import CategoryRef
from coursemarket.schemas.common import PageMeta

class CourseBase(BaseModel):
    title: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    thumbnail: Optional[str] = None
    level: Optional[str] = None
    price: Decimal = Decimal("0")
    discount_price: Optional[Decimal] = None
    category_id: Optional[int] = None

class CourseCreate(CourseBase):
    @validator('price')
    def price_not_negative(cls, v):
        if v < 0:
            raise ValueError('Price must not be negative')
        return v
    
    @validator('discount_price')
    def discount_below_price(cls, v, values):
        if v is not None and 'price' in values and v >= values['price']:
            raise ValueError('Discount price must be lower than price')
        return v

class CourseUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    thumbnail: Optional[str] = None
    level: Optional[str] = None
    price: Optional[Decimal] = None
    discount_price: Optional[Decimal] = None
    category_id: Optional[int] = None

    # Поле можно не передавать, но нельзя обнулить
    @validator('title', 'slug', 'price')
    def not_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v

    @validator('price')
    def price_not_negative(cls, v):
        if v < 0:
            raise ValueError('Price must not be negative')
        return v

class CourseStatusUpdate(BaseModel):
    status: CourseStatus

class InstructorRef(BaseModel):
    id: int
    name: Optional[str] = None
    bio: Optional[str] = None
    
    class Config:
        from_attributes = True

class CourseRef(BaseModel):
    id: int
    title: str
    slug: str
    thumbnail: Optional[str] = None
    
    class Config:
        from_attributes = True

class CourseResponse(CourseBase):
    id: int
    status: CourseStatus
    duration: int = 0
    instructor_id: int
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    instructor: Optional[InstructorRef] = None
    category: Optional[CategoryRef] = None
    lesson_count: int = 0
    enrollment_count: int = 0
    
    class Config:
        from_attributes = True

class LessonOutline(BaseModel):
    id: int
    title: str
    slug: str
    order: int
    duration: int = 0
    is_free: bool = False
    
    class Config:
        from_attributes = True

class CourseDetailResponse(CourseResponse):
    lessons: List[LessonOutline] = []

class CourseListResponse(PageMeta):
    data: List[CourseResponse]
