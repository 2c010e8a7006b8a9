from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime
from coursemarket.models.lesson import MediaType

class MediaCreate(BaseModel):
    type: MediaType
    key: Optional[str] = None  # Ключ объекта в хранилище после загрузки
    youtube_url: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    duration: Optional[int] = None

class MediaUpdate(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    youtube_url: Optional[str] = None
    duration: Optional[int] = None

    @validator('url')
    def url_not_null(cls, v):
        if v is None:
            raise ValueError('Media url cannot be null')
        return v

class MediaResponse(BaseModel):
    id: int
    type: MediaType
    url: str
    title: Optional[str] = None
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    duration: Optional[int] = None
    order: int
    lesson_id: int
    created_at: datetime
    
    class Config:
        from_attributes = True

class PresignedUrlRequest(BaseModel):
    filename: str
    type: MediaType

class PresignedUrlResponse(BaseModel):
    upload_url: str
    key: str
    public_url: str

class SignedUrlResponse(BaseModel):
    signed_url: str
    expires_in: int
