from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from coursemarket.schemas.course import InstructorRef

class CartAdd(BaseModel):
    course_id: int

class CartMerge(BaseModel):
    course_ids: List[int]

class CartCourse(BaseModel):
    id: int
    title: str
    slug: str
    thumbnail: Optional[str] = None
    price: Decimal
    discount_price: Optional[Decimal] = None
    instructor: Optional[InstructorRef] = None
    
    class Config:
        from_attributes = True

class CartItemResponse(BaseModel):
    id: int
    added_at: datetime
    course: CartCourse
    
    class Config:
        from_attributes = True

class CartResponse(BaseModel):
    items: List[CartItemResponse] = []
    total_items: int = 0
    total_price: Decimal = Decimal("0")
