import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from coursemarket.config import settings
from coursemarket.core.exceptions import CategoryNotFoundException, ConflictException, NotFoundException
from coursemarket.crud import category as crud_category
from coursemarket.models.category import Category
from coursemarket.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
)
from coursemarket.services.cache import CATEGORIES_KEY, Cache, NullCache

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: Session, cache: Cache = None):
        self.db = db
        self.cache = cache or NullCache()

    def _to_response(self, category: Category, response_class=CategoryResponse):
        response = response_class.from_orm(category)
        response.course_count = crud_category.count_courses(self.db, category.id)
        return response

    def find_all(self) -> List[Dict]:
        """Активные корневые категории с дочерними, через кэш"""
        cached = self.cache.get(CATEGORIES_KEY)
        if cached is not None:
            return cached

        categories = []
        for category in crud_category.get_root_categories(self.db):
            response = self._to_response(category, CategoryTreeResponse)
            response.children = [
                self._to_response(child) for child in category.children if child.is_active
            ]
            categories.append(response.dict())

        self.cache.set(CATEGORIES_KEY, categories, settings.CATEGORIES_CACHE_TTL)
        return categories

    def find_by_slug(self, slug: str) -> CategoryDetailResponse:
        category = crud_category.get_category_by_slug(self.db, slug)
        if not category:
            raise NotFoundException(f"Category '{slug}' not found")

        response = self._to_response(category, CategoryDetailResponse)
        response.children = [self._to_response(child) for child in category.children]
        return response

    def _ensure_slug_free(self, slug: str, exclude_id: int = None) -> None:
        existing = crud_category.get_category_by_slug(self.db, slug)
        if existing and existing.id != exclude_id:
            raise ConflictException(f"Category with slug '{slug}' already exists")

    def _ensure_not_descendant(self, category_id: int, parent: Category) -> None:
        """Новый родитель не может лежать внутри переносимой категории"""
        seen = set()
        node = parent
        while node is not None and node.id not in seen:
            if node.id == category_id:
                raise ConflictException("Category cannot be moved under its own descendant")
            seen.add(node.id)
            node = crud_category.get_category(self.db, node.parent_id) if node.parent_id else None

    def create(self, data: CategoryCreate) -> Category:
        self._ensure_slug_free(data.slug)

        if data.parent_id is not None and not crud_category.get_category(self.db, data.parent_id):
            raise CategoryNotFoundException(data.parent_id)

        category = crud_category.create_category(self.db, data)
        self.cache.delete(CATEGORIES_KEY)
        logger.info("Category %s created", category.slug)
        return category

    def update(self, category_id: int, data: CategoryUpdate) -> Category:
        category = crud_category.get_category(self.db, category_id)
        if not category:
            raise CategoryNotFoundException(category_id)

        if data.slug is not None and data.slug != category.slug:
            self._ensure_slug_free(data.slug, exclude_id=category_id)

        if data.parent_id is not None:
            if data.parent_id == category_id:
                raise ConflictException("Category cannot be its own parent")
            parent = crud_category.get_category(self.db, data.parent_id)
            if not parent:
                raise CategoryNotFoundException(data.parent_id)
            self._ensure_not_descendant(category_id, parent)

        category = crud_category.update_category(self.db, category_id, data)
        self.cache.delete(CATEGORIES_KEY)
        return category

    def delete(self, category_id: int) -> None:
        category = crud_category.get_category(self.db, category_id)
        if not category:
            raise CategoryNotFoundException(category_id)

        if crud_category.count_courses(self.db, category_id) > 0:
            raise ConflictException("Cannot delete a category that has courses")
        if crud_category.count_children(self.db, category_id) > 0:
            raise ConflictException("Cannot delete a category that has subcategories")

        crud_category.delete_category(self.db, category_id)
        self.cache.delete(CATEGORIES_KEY)
        logger.info("Category %s deleted", category_id)
