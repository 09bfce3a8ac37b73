"""User domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...constants import DEFAULT_LAT, DEFAULT_LNG
from ...shared.validators import to_naive_utc, validate_bd_phone, validate_email
from ..inventory.schemas import BloodGroup

Gender = Literal["Male", "Female", "Other"]


class Location(BaseModel):
    lat: float = DEFAULT_LAT
    lng: float = DEFAULT_LNG


class RegisterRequest(BaseModel):
    """Schema for donor signup"""

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=6)
    phone: str = Field(min_length=1)
    bloodGroup: BloodGroup
    dob: date
    district: str = Field(min_length=1)
    gender: Gender
    weight: float = Field(ge=50)
    lastDonationDate: Optional[datetime] = None
    emergencyContactName: Optional[str] = None
    emergencyContactPhone: Optional[str] = None
    preferredCenter: Optional[str] = None
    location: Optional[Location] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_bd_phone(v)

    @field_validator("name", "district")
    @classmethod
    def strip_text(cls, v):
        return v.strip()

    @field_validator("lastDonationDate")
    @classmethod
    def normalize_date(cls, v):
        v = to_naive_utc(v)
        if v is not None and v > datetime.utcnow():
            raise ValueError("Last donation date cannot be in the future")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    """Profile edit. Email, password, role and points are not editable here."""

    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    bloodGroup: Optional[BloodGroup] = None
    dob: Optional[date] = None
    district: Optional[str] = Field(default=None, min_length=1)
    gender: Optional[Gender] = None
    weight: Optional[float] = Field(default=None, ge=50)
    emergencyContactName: Optional[str] = None
    emergencyContactPhone: Optional[str] = None
    preferredCenter: Optional[str] = None
    isAvailable: Optional[bool] = None
    location: Optional[Location] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v is not None:
            return validate_bd_phone(v)
        return v


class PointsUpdate(BaseModel):
    points: int


class RecordDonationRequest(BaseModel):
    donationDate: Optional[datetime] = None

    @field_validator("donationDate")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    bloodGroup: str
    dob: datetime
    district: str
    gender: str
    weight: float
    lastDonationDate: Optional[datetime] = None
    emergencyContactName: str
    emergencyContactPhone: str
    preferredCenter: str
    points: int
    isAvailable: bool
    role: str
    location: Location
    createdAt: Optional[datetime] = None


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class DonationRecordedResponse(BaseModel):
    message: str
    pointsEarned: int
    user: UserResponse
