from sqlalchemy.orm import Session
from coursemarket.models.user import User, UserRole
from coursemarket.schemas.user import UserUpdate, TokenData
from typing import Optional

def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()

def get_user_by_firebase_uid(db: Session, firebase_uid: str):
    return db.query(User).filter(User.firebase_uid == firebase_uid).first()

def query_users(db: Session, role: Optional[UserRole] = None):
    query = db.query(User)
    
    if role:
        query = query.filter(User.role == role)
    
    return query.order_by(User.created_at.desc(), User.id.desc())

def upsert_firebase_user(db: Session, identity: TokenData):
    db_user = get_user_by_firebase_uid(db, identity.firebase_uid)
    
    if db_user is None:
        db_user = User(firebase_uid=identity.firebase_uid, email=identity.email)
        db.add(db_user)
    
    # Данные провайдера идентификации считаются источником истины
    if identity.email:
        db_user.email = identity.email
    if identity.name and not db_user.name:
        db_user.name = identity.name
    if identity.picture and not db_user.photo_url:
        db_user.photo_url = identity.picture
    db_user.email_verified = identity.email_verified
    
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user(db: Session, user_id: int, user_update: UserUpdate):
    db_user = get_user(db, user_id)
    if not db_user:
        return None
    
    update_data = user_update.dict(exclude_unset=True)
    
    for field, value in update_data.items():
        setattr(db_user, field, value)
    
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user_role(db: Session, user_id: int, role: UserRole):
    db_user = get_user(db, user_id)
    if not db_user:
        return None
    
    db_user.role = role
    db.commit()
    db.refresh(db_user)
    return db_user
