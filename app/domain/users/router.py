"""User router - Signup, login and donor profile endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...constants import POINTS_PER_DONATION
from ...database import get_db
from ...models import User
from .schemas import (
    AuthResponse,
    DonationRecordedResponse,
    Location,
    LoginRequest,
    PointsUpdate,
    RecordDonationRequest,
    RegisterRequest,
    UserResponse,
    UserUpdate,
)
from .service import UserService

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def user_response(user: User) -> UserResponse:
    """Public view of a user; the password hash is never included"""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        bloodGroup=user.blood_group,
        dob=user.dob,
        district=user.district,
        gender=user.gender,
        weight=user.weight,
        lastDonationDate=user.last_donation_date,
        emergencyContactName=user.emergency_contact_name or "",
        emergencyContactPhone=user.emergency_contact_phone or "",
        preferredCenter=user.preferred_center or "",
        points=user.points or 0,
        isAvailable=user.is_available,
        role=user.role,
        location=Location(lat=user.location_lat, lng=user.location_lng),
        createdAt=user.created_at,
    )


# ============================================================================
# Auth
# ============================================================================


@auth_router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, service: UserService = Depends(get_user_service)):
    """Create a donor account"""
    user, token = service.register(data)
    return AuthResponse(token=token, user=user_response(user))


@auth_router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, service: UserService = Depends(get_user_service)):
    user, token = service.login(data)
    return AuthResponse(token=token, user=user_response(user))


@auth_router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user_response(user)


# ============================================================================
# Users
# ============================================================================


@router.get("", response_model=list[UserResponse])
async def get_donors(
    bloodGroup: Optional[str] = Query(None),
    district: Optional[str] = Query(None),
    isAvailable: Optional[bool] = Query(None),
    service: UserService = Depends(get_user_service),
):
    """Public donor directory"""
    return [user_response(u) for u in service.get_donors(bloodGroup, district, isAvailable)]


@router.post("/me/record-donation", response_model=DonationRecordedResponse)
async def record_donation(
    data: RecordDonationRequest,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Record a donation made without an appointment"""
    user = service.record_donation(user, data.donationDate)
    return DonationRecordedResponse(
        message="Donation recorded successfully",
        pointsEarned=POINTS_PER_DONATION,
        user=user_response(user),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return user_response(service.get_user(user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Edit your own profile"""
    return user_response(service.update_profile(user_id, data, current_user))


@router.put("/{user_id}/points", response_model=UserResponse)
async def add_points(
    user_id: int,
    data: PointsUpdate,
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Adjust a user's points (admin only)"""
    logger.info(f"👮 Admin {admin.id} adjusting points of user {user_id}")
    return user_response(service.add_points(user_id, data.points))
