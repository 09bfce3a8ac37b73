"""User service - Signup, login and donor profile management"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...constants import POINTS_PER_DONATION, ROLE_DONOR
from ...exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ...models import User
from ...security_utils import create_access_token, hash_password, verify_password
from .repository import UserRepository
from .schemas import LoginRequest, RegisterRequest, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for users"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        """Create a donor account and return it with an access token"""
        if self.repo.get_by_email(self.db, data.email):
            logger.warning(f"⚠️ Signup attempted with existing email {data.email}")
            raise ConflictError("User already exists")

        user_data = {
            "name": data.name,
            "email": data.email,
            "password": hash_password(data.password),
            "phone": data.phone,
            "blood_group": data.bloodGroup,
            "dob": datetime.combine(data.dob, datetime.min.time()),
            "district": data.district,
            "gender": data.gender,
            "weight": data.weight,
            "last_donation_date": data.lastDonationDate,
            "emergency_contact_name": data.emergencyContactName or "",
            "emergency_contact_phone": data.emergencyContactPhone or "",
            "preferred_center": data.preferredCenter or "",
            "role": ROLE_DONOR,
        }
        if data.location:
            user_data["location_lat"] = data.location.lat
            user_data["location_lng"] = data.location.lng

        user = self.repo.create_user(self.db, **user_data)
        logger.info(f"🆕 New donor registered: {user.id} ({user.blood_group}, {user.district})")
        return user, create_access_token(user.id)

    def login(self, data: LoginRequest) -> tuple[User, str]:
        user = self.repo.get_by_email(self.db, data.email.strip())
        if not user or not verify_password(data.password, user.password):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise AuthenticationError("Invalid email or password")

        logger.debug(f"✅ User authenticated: {user.id}")
        return user, create_access_token(user.id)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_donors(
        self,
        blood_group: Optional[str] = None,
        district: Optional[str] = None,
        is_available: Optional[bool] = None,
    ) -> list[User]:
        return self.repo.get_donors(self.db, blood_group, district, is_available)

    def update_profile(self, user_id: int, data: UserUpdate, current_user: User) -> User:
        """Owners edit their own profile"""
        if user_id != current_user.id:
            raise AuthorizationError("Not authorized")
        user = self.get_user(user_id)

        updates = {
            "name": data.name.strip() if data.name else None,
            "phone": data.phone,
            "blood_group": data.bloodGroup,
            "dob": datetime.combine(data.dob, datetime.min.time()) if data.dob else None,
            "district": data.district,
            "gender": data.gender,
            "weight": data.weight,
            "emergency_contact_name": data.emergencyContactName,
            "emergency_contact_phone": data.emergencyContactPhone,
            "preferred_center": data.preferredCenter,
            "is_available": data.isAvailable,
        }
        if data.location:
            updates["location_lat"] = data.location.lat
            updates["location_lng"] = data.location.lng

        return self.repo.update_user(self.db, user, **updates)

    def add_points(self, user_id: int, points: int) -> User:
        user = self.get_user(user_id)
        if (user.points or 0) + points < 0:
            raise ValidationError("Points cannot go below zero")
        user = self.repo.add_points(self.db, user, points)
        logger.info(f"🏅 User {user.id} points adjusted by {points} -> {user.points}")
        return user

    def record_donation(self, user: User, donation_date: Optional[datetime] = None) -> User:
        """
        Record a donation made outside the appointment flow.

        Sets the same fields as completing an appointment: the cooldown starts
        at donation_date (default now) and the donor earns reward points.
        """
        now = datetime.utcnow()
        donated_at = donation_date or now
        if donated_at > now:
            raise ValidationError("Donation date cannot be in the future")

        user = self.repo.record_donation(self.db, user, donated_at, POINTS_PER_DONATION)
        logger.info(f"🩸 Donation recorded for user {user.id} on {donated_at.date()}")
        return user
