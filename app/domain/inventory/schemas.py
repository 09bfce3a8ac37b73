"""Inventory domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import to_naive_utc, validate_email

BloodGroup = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
HospitalType = Literal["GOVERNMENT", "PRIVATE", "THALASSEMIA_CENTER"]
StockStatus = Literal["CRITICAL", "LOW", "OPTIMAL"]


class InventoryCreate(BaseModel):
    """Schema for adding a hospital stock row. Status is derived from quantity."""

    hospitalName: str = Field(min_length=1)
    hospitalType: HospitalType
    city: str = Field(min_length=1)
    division: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: str
    is247: bool = False
    bloodType: BloodGroup
    quantity: int = Field(ge=0)
    expiryDate: datetime

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("expiryDate")
    @classmethod
    def normalize_expiry(cls, v):
        return to_naive_utc(v)


class InventoryUpdate(BaseModel):
    """Schema for updating a stock row"""

    hospitalName: Optional[str] = Field(default=None, min_length=1)
    hospitalType: Optional[HospitalType] = None
    city: Optional[str] = None
    division: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is247: Optional[bool] = None
    bloodType: Optional[BloodGroup] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    expiryDate: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v) if v else v

    @field_validator("expiryDate")
    @classmethod
    def normalize_expiry(cls, v):
        return to_naive_utc(v)


class InventoryResponse(BaseModel):
    id: int
    hospitalName: str
    hospitalType: str
    city: str
    division: str
    phone: str
    email: str
    is247: bool
    bloodType: str
    quantity: int
    expiryDate: datetime
    status: str
    lastUpdated: Optional[datetime] = None


class HospitalStockItem(BaseModel):
    id: int
    bloodType: str
    quantity: int
    status: str
    expiryDate: datetime


class HospitalStockResponse(BaseModel):
    """One hospital with every blood type row recorded under its name"""

    hospitalName: str
    hospitalType: str
    city: str
    division: str
    phone: str
    email: str
    is247: bool
    totalUnits: int
    criticalCount: int
    inventory: list[HospitalStockItem]


class CriticalCountResponse(BaseModel):
    count: int
