"""User repository - Database operations for donors and admins"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...constants import ROLE_DONOR
from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_donors(
        db: Session,
        blood_group: Optional[str] = None,
        district: Optional[str] = None,
        is_available: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> list[User]:
        """Get donors with optional filters"""
        query = db.query(User).filter(User.role == ROLE_DONOR)

        if blood_group:
            query = query.filter(User.blood_group == blood_group)
        if district:
            query = query.filter(User.district == district)
        if is_available is not None:
            query = query.filter(User.is_available == is_available)

        query = query.order_by(User.id)
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def count_donors(db: Session) -> int:
        return db.query(func.count(User.id)).filter(User.role == ROLE_DONOR).scalar()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def add_points(db: Session, user: User, points: int) -> User:
        user.points = (user.points or 0) + points
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def record_donation(db: Session, user: User, donated_at: datetime, points: int) -> User:
        """Start the donor's cooldown at donated_at and credit reward points"""
        user.last_donation_date = donated_at
        user.points = (user.points or 0) + points
        db.commit()
        db.refresh(user)
        return user
