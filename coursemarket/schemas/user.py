from pydantic import BaseModel, EmailStr
from typing import Optional, List
from datetime import datetime
from coursemarket.models.user import UserRole
from coursemarket.schemas.common import PageMeta

class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None

class UserUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None

class UserRoleUpdate(BaseModel):
    role: UserRole

class UserResponse(UserBase):
    id: int
    firebase_uid: str
    role: UserRole
    email_verified: bool = False
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class PublicUserResponse(BaseModel):
    id: int
    name: Optional[str] = None
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    role: UserRole
    
    class Config:
        from_attributes = True

class UserListResponse(PageMeta):
    users: List[UserResponse]

class LoginRequest(BaseModel):
    id_token: str

class TokenData(BaseModel):
    firebase_uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    email_verified: bool = False
    picture: Optional[str] = None
