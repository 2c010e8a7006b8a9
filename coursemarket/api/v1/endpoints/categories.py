from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_cache, require_role
from coursemarket.database import get_db
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
)
from coursemarket.schemas.common import MessageResponse
from coursemarket.services.cache import Cache
from coursemarket.services.category_service import CategoryService

router = APIRouter()

@router.get("/", response_model=List[CategoryTreeResponse])
async def read_categories(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache)
):
    """Дерево активных категорий"""
    return CategoryService(db, cache).find_all()

@router.get("/{slug}", response_model=CategoryDetailResponse)
async def read_category(slug: str, db: Session = Depends(get_db)):
    return CategoryService(db).find_by_slug(slug)

@router.post("/", response_model=CategoryResponse, status_code=201)
async def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    """Создать категорию (только для админов)"""
    return CategoryService(db, cache).create(category)

@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_update: CategoryUpdate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    return CategoryService(db, cache).update(category_id, category_update)

@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    CategoryService(db, cache).delete(category_id)
    return {"message": "Category deleted successfully"}
