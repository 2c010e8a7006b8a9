from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, Enum
from sqlalchemy.orm import relationship
from coursemarket.database import Base
from datetime import datetime
import enum

class UserRole(str, enum.Enum):
    USER = "USER"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"

class User(Base):
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    bio = Column(Text)
    photo_url = Column(String)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    email_verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    courses_taught = relationship("Course", back_populates="instructor", foreign_keys="Course.instructor_id")
    enrollments = relationship("Enrollment", back_populates="user")
    payments = relationship("Payment", back_populates="user")
