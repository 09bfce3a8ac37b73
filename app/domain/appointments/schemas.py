"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import to_naive_utc
from ..inventory.schemas import BloodGroup, InventoryResponse


class AppointmentCreate(BaseModel):
    """
    Schema for booking a donation.

    Required fields are checked by the service so that a missing field is
    reported as a single "Missing required fields" error.
    """

    hospitalId: Optional[str] = None
    hospitalName: Optional[str] = None
    hospitalAddress: Optional[str] = None
    hospitalPhone: Optional[str] = None
    bloodGroup: Optional[BloodGroup] = None
    appointmentDate: Optional[datetime] = None
    appointmentTime: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointmentDate")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class AppointmentUpdate(BaseModel):
    """Only the slot and the notes of a scheduled appointment can change"""

    appointmentDate: Optional[datetime] = None
    appointmentTime: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointmentDate")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class AppointmentResponse(BaseModel):
    id: int
    donor: int
    donorName: str
    donorPhone: str
    donorBloodGroup: str
    hospitalId: str
    hospitalName: str
    hospitalAddress: str
    hospitalPhone: str
    bloodGroup: str
    appointmentDate: datetime
    appointmentTime: str
    status: Literal["SCHEDULED", "COMPLETED", "CANCELLED", "NO_SHOW"]
    notes: str
    completedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None


class AppointmentMessageResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class AppointmentCompletionResponse(BaseModel):
    message: str
    appointment: AppointmentResponse
    pointsEarned: int
    inventory: InventoryResponse
    inventoryCreated: bool
