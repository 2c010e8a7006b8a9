from sqlalchemy.orm import Session, joinedload
from coursemarket.models.category import Category
from coursemarket.models.course import Course
from coursemarket.schemas.category import CategoryCreate, CategoryUpdate

def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()

def get_category_by_slug(db: Session, slug: str):
    return db.query(Category).options(
        joinedload(Category.parent),
        joinedload(Category.children)
    ).filter(Category.slug == slug).first()

def get_root_categories(db: Session):
    return db.query(Category).options(
        joinedload(Category.children)
    ).filter(
        Category.is_active == True,
        Category.parent_id.is_(None)
    ).order_by(Category.order).all()

def count_courses(db: Session, category_id: int) -> int:
    return db.query(Course).filter(Course.category_id == category_id).count()

def count_children(db: Session, category_id: int) -> int:
    return db.query(Category).filter(Category.parent_id == category_id).count()

def create_category(db: Session, category: CategoryCreate):
    db_category = Category(**category.dict())
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category

def update_category(db: Session, category_id: int, category_update: CategoryUpdate):
    db_category = get_category(db, category_id)
    if not db_category:
        return None
    
    update_data = category_update.dict(exclude_unset=True)
    
    for field, value in update_data.items():
        setattr(db_category, field, value)
    
    db.commit()
    db.refresh(db_category)
    return db_category

def delete_category(db: Session, category_id: int):
    db_category = get_category(db, category_id)
    if db_category:
        db.delete(db_category)
        db.commit()
    return db_category
