"""Notification schemas - Pydantic models for donor alerts"""

from typing import Optional

from pydantic import BaseModel

from ..blood_requests.schemas import Urgency
from ..inventory.schemas import BloodGroup


class NotifyDonorsRequest(BaseModel):
    """
    Alert payload. The three request fields are optional here so that a
    missing one is reported as a single "Missing required fields" error.
    """

    bloodGroup: Optional[BloodGroup] = None
    hospitalName: Optional[str] = None
    unitsNeeded: Optional[int] = None
    urgency: Urgency = "NORMAL"
    contactPhone: Optional[str] = None
    district: Optional[str] = None


class NotifiedDonor(BaseModel):
    name: str
    bloodGroup: str
    district: str


class NotifyDonorsResponse(BaseModel):
    message: str
    totalDonors: int
    successCount: int
    failCount: int
    donors: list[NotifiedDonor]
