"""User and doctor repositories - database access for accounts and profiles"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..core.security import UserRole
from ..models.doctor import Doctor
from ..models.user import User


class UserRepository:
    """Repository for user accounts"""

    @staticmethod
    def get(db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_by_username_or_email(db: Session, username: str, email: str) -> Optional[User]:
        return (
            db.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )

    @staticmethod
    def list(db: Session, role: Optional[UserRole] = None,
             skip: int = 0, limit: int = 100) -> List[User]:
        query = db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        return query.order_by(User.id).offset(skip).limit(limit).all()

    @staticmethod
    def list_by_ids(db: Session, user_ids) -> List[User]:
        if not user_ids:
            return []
        return db.query(User).filter(User.id.in_(user_ids)).order_by(User.id).all()

    @staticmethod
    def add(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.flush()
        return user


class DoctorRepository:
    """Repository for doctor profiles"""

    @staticmethod
    def get(db: Session, doctor_id: int) -> Optional[Doctor]:
        return (
            db.query(Doctor)
            .options(joinedload(Doctor.user))
            .filter(Doctor.id == doctor_id)
            .first()
        )

    @staticmethod
    def list(db: Session, specialty: Optional[str] = None) -> List[Doctor]:
        query = db.query(Doctor).options(joinedload(Doctor.user))
        if specialty:
            query = query.filter(Doctor.specialty == specialty)
        return query.order_by(Doctor.id).all()

    @staticmethod
    def add(db: Session, doctor_id: int, **profile) -> Doctor:
        doctor = Doctor(id=doctor_id, **profile)
        db.add(doctor)
        db.flush()
        return doctor

    @staticmethod
    def update(db: Session, doctor: Doctor, **updates) -> Doctor:
        for key, value in updates.items():
            if hasattr(doctor, key):
                setattr(doctor, key, value)
        db.flush()
        return doctor
