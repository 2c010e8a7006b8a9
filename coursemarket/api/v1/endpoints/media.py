from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user, get_optional_user
from coursemarket.database import get_db
from coursemarket.models.user import User
from coursemarket.schemas.common import MessageResponse, ReorderRequest
from coursemarket.schemas.media import (
    MediaCreate,
    MediaResponse,
    MediaUpdate,
    PresignedUrlRequest,
    PresignedUrlResponse,
    SignedUrlResponse,
)
from coursemarket.services.media_service import MediaService

router = APIRouter()

@router.get("/lesson/{lesson_id}", response_model=List[MediaResponse])
async def read_lesson_media(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Медиа урока"""
    user_id = current_user.id if current_user else None
    role = current_user.role if current_user else None
    return MediaService(db).find_by_lesson(lesson_id, user_id, role)

@router.post("/lesson/{lesson_id}/presigned-url", response_model=PresignedUrlResponse)
async def create_presigned_url(
    lesson_id: int,
    request: PresignedUrlRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Ссылка для прямой загрузки файла в хранилище"""
    return MediaService(db).generate_presigned_url(
        lesson_id, request.filename, request.type, current_user.id, current_user.role
    )

@router.post("/lesson/{lesson_id}", response_model=MediaResponse, status_code=201)
async def create_media(
    lesson_id: int,
    media: MediaCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Прикрепить медиа к уроку"""
    return MediaService(db).create(lesson_id, media, current_user.id, current_user.role)

@router.put("/lesson/{lesson_id}/reorder", response_model=List[MediaResponse])
async def reorder_media(
    lesson_id: int,
    request: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return MediaService(db).reorder(lesson_id, request.ids, current_user.id, current_user.role)

@router.get("/{media_id}/signed-url", response_model=SignedUrlResponse)
async def read_signed_url(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Временная ссылка на просмотр медиа"""
    user_id = current_user.id if current_user else None
    role = current_user.role if current_user else None
    return MediaService(db).generate_signed_url(media_id, user_id, role)

@router.patch("/{media_id}", response_model=MediaResponse)
async def update_media(
    media_id: int,
    media_update: MediaUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return MediaService(db).update(media_id, media_update, current_user.id, current_user.role)

@router.delete("/{media_id}", response_model=MessageResponse)
async def delete_media(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Удалить медиа"""
    MediaService(db).delete(media_id, current_user.id, current_user.role)
    return {"message": "Media deleted successfully"}
