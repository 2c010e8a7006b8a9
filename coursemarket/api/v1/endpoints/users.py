from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_cache, get_current_user, require_role
from coursemarket.database import get_db
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.user import (
    PublicUserResponse,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
    UserUpdate,
)
from coursemarket.services.cache import Cache
from coursemarket.services.user_service import UserService

router = APIRouter()

@router.get("/me", response_model=UserResponse)
async def read_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Профиль текущего пользователя"""
    return UserService(db).get_profile(current_user.id)

@router.patch("/me", response_model=UserResponse)
async def update_profile(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Обновить профиль текущего пользователя"""
    return UserService(db, cache).update_profile(current_user.id, user_update)

@router.get("/", response_model=UserListResponse)
async def read_users(
    page: int = 1,
    limit: int = 20,
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    """Список пользователей (только для админов)"""
    return UserService(db).list_users(page=page, limit=limit, role=role)

@router.get("/{user_id}/public", response_model=PublicUserResponse)
async def read_public_profile(
    user_id: int,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache)
):
    """Публичный профиль пользователя"""
    return UserService(db, cache).get_public_profile(user_id)

@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    role_update: UserRoleUpdate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    """Изменить роль пользователя"""
    return UserService(db, cache).update_role(user_id, role_update.role)
