import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from coursemarket.config import settings
from coursemarket.core.exceptions import UserNotFoundException
from coursemarket.crud import user as crud_user
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.user import PublicUserResponse, TokenData, UserUpdate
from coursemarket.services.cache import Cache, NullCache, public_profile_key
from coursemarket.services.pagination import paginate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, cache: Cache = None):
        self.db = db
        self.cache = cache or NullCache()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return crud_user.get_user(self.db, user_id)

    def find_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        return crud_user.get_user_by_firebase_uid(self.db, firebase_uid)

    def sync_identity(self, identity: TokenData) -> User:
        """Создаёт или обновляет пользователя по данным провайдера идентификации"""
        user = crud_user.upsert_firebase_user(self.db, identity)
        self.cache.delete(public_profile_key(user.id))
        return user

    def get_profile(self, user_id: int) -> User:
        user = crud_user.get_user(self.db, user_id)
        if not user:
            raise UserNotFoundException(user_id)
        return user

    def update_profile(self, user_id: int, data: UserUpdate) -> User:
        if not crud_user.get_user(self.db, user_id):
            raise UserNotFoundException(user_id)

        user = crud_user.update_user(self.db, user_id, data)
        self.cache.delete(public_profile_key(user_id))
        return user

    def get_public_profile(self, user_id: int) -> Dict:
        key = public_profile_key(user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        user = crud_user.get_user(self.db, user_id)
        if not user:
            raise UserNotFoundException(user_id)

        profile = PublicUserResponse.from_orm(user).dict()
        self.cache.set(key, profile, settings.PUBLIC_PROFILE_CACHE_TTL)
        return profile

    def list_users(self, page: int = 1, limit: int = 20, role: Optional[UserRole] = None) -> Dict:
        users, meta = paginate(crud_user.query_users(self.db, role=role), page, limit)
        return {"users": users, **meta}

    def update_role(self, user_id: int, role: UserRole) -> User:
        user = crud_user.update_user_role(self.db, user_id, role)
        if not user:
            raise UserNotFoundException(user_id)

        self.cache.delete(public_profile_key(user_id))
        logger.info("User %s role changed to %s", user_id, role.value)
        return user
