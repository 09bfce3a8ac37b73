"""Blood request schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..inventory.schemas import BloodGroup

Urgency = Literal["EMERGENCY", "URGENT", "NORMAL"]
RequestStatus = Literal["OPEN", "FULFILLED", "CANCELLED"]


class RequestLocation(BaseModel):
    lat: float
    lng: float
    address: str = Field(min_length=1)


class BloodRequestCreate(BaseModel):
    """
    Schema for posting a blood request.

    Any status sent by the client is ignored: new requests always start OPEN.
    """

    hospitalName: str = Field(min_length=1)
    bloodGroup: BloodGroup
    unitsNeeded: int = Field(ge=1)
    urgency: Urgency = "NORMAL"
    location: RequestLocation
    contactPhone: str = Field(min_length=1)
    patientName: Optional[str] = None
    relationship: Optional[str] = None
    additionalNotes: Optional[str] = None
    isThalassemiaPatient: bool = False


class BloodRequestUpdate(BaseModel):
    hospitalName: Optional[str] = Field(default=None, min_length=1)
    bloodGroup: Optional[BloodGroup] = None
    unitsNeeded: Optional[int] = Field(default=None, ge=1)
    urgency: Optional[Urgency] = None
    location: Optional[RequestLocation] = None
    contactPhone: Optional[str] = Field(default=None, min_length=1)
    patientName: Optional[str] = None
    relationship: Optional[str] = None
    additionalNotes: Optional[str] = None
    isThalassemiaPatient: Optional[bool] = None


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: str


class BloodRequestResponse(BaseModel):
    id: int
    hospitalName: str
    bloodGroup: str
    unitsNeeded: int
    urgency: str
    location: RequestLocation
    contactPhone: str
    status: str
    patientName: str
    relationship: str
    additionalNotes: str
    isThalassemiaPatient: bool
    requestedBy: Optional[UserSummary] = None
    fulfilledBy: Optional[UserSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class BloodRequestMessageResponse(BaseModel):
    message: str
    request: BloodRequestResponse
