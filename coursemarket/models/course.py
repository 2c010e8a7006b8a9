from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Numeric, Enum
from sqlalchemy.orm import relationship
from coursemarket.database import Base
from datetime import datetime
import enum

class CourseStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

class Course(Base):
    __tablename__ = "courses"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text)
    short_description = Column(String(500))
    thumbnail = Column(String)
    level = Column(String)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    discount_price = Column(Numeric(12, 2), nullable=True)
    status = Column(Enum(CourseStatus), default=CourseStatus.DRAFT, nullable=False, index=True)
    duration = Column(Integer, default=0)  # Сумма длительностей опубликованных уроков, в секундах
    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    instructor = relationship("User", back_populates="courses_taught", foreign_keys=[instructor_id])
    category = relationship("Category", back_populates="courses")
    lessons = relationship("Lesson", back_populates="course", cascade="all, delete-orphan", order_by="Lesson.order")
    enrollments = relationship("Enrollment", back_populates="course")
    cart_items = relationship("CartItem", back_populates="course", cascade="all, delete-orphan")
