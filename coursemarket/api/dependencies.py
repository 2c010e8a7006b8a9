from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from coursemarket.core.exceptions import ForbiddenException, UnauthorizedException
from coursemarket.core.security import decode_access_token
from coursemarket.crud import user as crud_user
from coursemarket.database import get_db
from coursemarket.models.user import User, UserRole
from coursemarket.services.cache import Cache, MemoryCache

bearer_scheme = HTTPBearer(auto_error=False)

_cache = MemoryCache()


def get_cache() -> Cache:
    return _cache


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    token_data = decode_access_token(credentials.credentials)
    user = crud_user.get_user_by_firebase_uid(db, token_data.firebase_uid)
    if user is None:
        raise UnauthorizedException("User is not registered")
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Анонимный доступ: без токена вернёт None, с неверным токеном 401"""
    if credentials is None:
        return None
    return get_current_user(credentials, db)


def require_role(*roles: UserRole):
    def role_checker(current_user: User = Depends(get_current_user)):
        if current_user.role not in roles:
            raise ForbiddenException("Not enough permissions")
        return current_user
    return role_checker
