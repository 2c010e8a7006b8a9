from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from coursemarket.database import Base
from datetime import datetime
import enum

class LessonType(str, enum.Enum):
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"

class MediaType(str, enum.Enum):
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    IMAGE = "IMAGE"
    YOUTUBE_EMBED = "YOUTUBE_EMBED"

class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (UniqueConstraint("course_id", "slug", name="uq_lesson_course_slug"),)
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False)  # Уникален в пределах курса
    description = Column(Text)
    type = Column(Enum(LessonType), default=LessonType.VIDEO, nullable=False)
    content = Column(Text)
    order = Column(Integer, default=0)  # Порядок в курсе, с нуля
    duration = Column(Integer, default=0)  # Секунды
    is_free = Column(Boolean, default=False)
    is_published = Column(Boolean, default=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    course = relationship("Course", back_populates="lessons")
    media = relationship("Media", back_populates="lesson", cascade="all, delete-orphan", order_by="Media.order")
    progress = relationship("LessonProgress", back_populates="lesson", cascade="all, delete-orphan")

class Media(Base):
    __tablename__ = "media"
    
    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(MediaType), nullable=False)
    url = Column(String, nullable=False)
    title = Column(String)
    filename = Column(String)
    mime_type = Column(String)
    size = Column(Integer)  # В байтах
    duration = Column(Integer)  # Секунды
    order = Column(Integer, default=0)  # Порядок в уроке, с нуля
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    lesson = relationship("Lesson", back_populates="media")
