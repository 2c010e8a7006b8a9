from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from coursemarket.models.course import Course, CourseStatus
from coursemarket.models.category import Category
from coursemarket.models.lesson import Lesson
from coursemarket.models.enrollment import Enrollment
from coursemarket.schemas.course import CourseCreate, CourseUpdate
from typing import Optional
from decimal import Decimal

SORT_FIELDS = {
    "newest": Course.created_at.desc(),
    "oldest": Course.created_at.asc(),
    "price_asc": Course.price.asc(),
    "price_desc": Course.price.desc(),
    "title": Course.title.asc(),
}

def get_course(db: Session, course_id: int):
    return db.query(Course).filter(Course.id == course_id).first()

def get_course_by_slug(db: Session, slug: str):
    return db.query(Course).options(
        joinedload(Course.instructor),
        joinedload(Course.category)
    ).filter(Course.slug == slug).first()

def get_course_instructor_id(db: Session, course_id: int) -> Optional[int]:
    row = db.query(Course.instructor_id).filter(Course.id == course_id).first()
    return row[0] if row else None

def query_published_courses(
    db: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    level: Optional[str] = None,
    sort: str = "newest"
):
    query = db.query(Course).options(
        joinedload(Course.instructor),
        joinedload(Course.category)
    ).filter(Course.status == CourseStatus.PUBLISHED)
    
    if category:
        query = query.join(Course.category).filter(Category.slug == category)
    
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Course.title.ilike(pattern),
            Course.description.ilike(pattern)
        ))
    
    if min_price is not None:
        query = query.filter(Course.price >= min_price)
    
    if max_price is not None:
        query = query.filter(Course.price <= max_price)
    
    if level:
        query = query.filter(Course.level == level)
    
    return query.order_by(SORT_FIELDS.get(sort, SORT_FIELDS["newest"]), Course.id.desc())

def get_courses_by_instructor(db: Session, instructor_id: int):
    return db.query(Course).options(
        joinedload(Course.category)
    ).filter(
        Course.instructor_id == instructor_id
    ).order_by(Course.created_at.desc()).all()

def count_lessons(db: Session, course_id: int, published_only: bool = False) -> int:
    query = db.query(Lesson).filter(Lesson.course_id == course_id)
    
    if published_only:
        query = query.filter(Lesson.is_published == True)
    
    return query.count()

def count_enrollments(db: Session, course_id: int) -> int:
    return db.query(Enrollment).filter(Enrollment.course_id == course_id).count()

def create_course(db: Session, course: CourseCreate, instructor_id: int):
    db_course = Course(**course.dict(), instructor_id=instructor_id, status=CourseStatus.DRAFT)
    db.add(db_course)
    db.commit()
    db.refresh(db_course)
    return db_course

def update_course(db: Session, course_id: int, course_update: CourseUpdate):
    db_course = get_course(db, course_id)
    if not db_course:
        return None
    
    update_data = course_update.dict(exclude_unset=True)
    
    for field, value in update_data.items():
        setattr(db_course, field, value)
    
    db.commit()
    db.refresh(db_course)
    return db_course

def update_course_fields(db: Session, db_course: Course, **fields):
    for field, value in fields.items():
        setattr(db_course, field, value)
    
    db.commit()
    db.refresh(db_course)
    return db_course

def set_course_duration(db: Session, course_id: int, duration: int):
    db.query(Course).filter(Course.id == course_id).update(
        {Course.duration: duration}, synchronize_session="fetch"
    )
    db.commit()

def delete_course(db: Session, course_id: int):
    db_course = get_course(db, course_id)
    if db_course:
        db.delete(db_course)
        db.commit()
    return db_course
