from sqlalchemy.orm import Session, joinedload
from coursemarket.models.enrollment import Enrollment, EnrollmentStatus
from typing import Optional

def get_enrollment(db: Session, enrollment_id: int):
    return db.query(Enrollment).filter(Enrollment.id == enrollment_id).first()

def get_user_course_enrollment(db: Session, user_id: int, course_id: int):
    return db.query(Enrollment).filter(
        Enrollment.user_id == user_id,
        Enrollment.course_id == course_id
    ).first()

def get_user_enrollments(db: Session, user_id: int):
    return db.query(Enrollment).filter(
        Enrollment.user_id == user_id
    ).options(joinedload(Enrollment.course)).order_by(Enrollment.enrolled_at.desc()).all()

def query_enrollments(
    db: Session,
    status: Optional[EnrollmentStatus] = None,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None
):
    query = db.query(Enrollment).options(joinedload(Enrollment.course))
    
    if status:
        query = query.filter(Enrollment.status == status)
    if user_id:
        query = query.filter(Enrollment.user_id == user_id)
    if course_id:
        query = query.filter(Enrollment.course_id == course_id)
    
    return query.order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())

def create_enrollment(db: Session, user_id: int, course_id: int):
    enrollment = Enrollment(
        user_id=user_id,
        course_id=course_id,
        status=EnrollmentStatus.ACTIVE,
        progress_percent=0
    )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment

def update_enrollment(db: Session, enrollment: Enrollment, **fields):
    for field, value in fields.items():
        setattr(enrollment, field, value)
    
    db.commit()
    db.refresh(enrollment)
    return enrollment

def delete_enrollment(db: Session, enrollment_id: int):
    enrollment = get_enrollment(db, enrollment_id)
    if enrollment:
        if enrollment.payment is not None:
            enrollment.payment.enrollment_id = None
        db.delete(enrollment)
        db.commit()
    return enrollment
