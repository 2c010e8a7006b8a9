from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_cache, get_current_user
from coursemarket.core.security import decode_access_token
from coursemarket.database import get_db
from coursemarket.models.user import User
from coursemarket.schemas.user import LoginRequest, UserResponse
from coursemarket.services.cache import Cache
from coursemarket.services.user_service import UserService

router = APIRouter()

@router.post("/login", response_model=UserResponse)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache)
):
    """Вход по токену провайдера: пользователь создаётся или обновляется"""
    identity = decode_access_token(request.id_token)
    return UserService(db, cache).sync_identity(identity)

@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
