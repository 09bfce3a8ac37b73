"""Notification service - Email alerts to donors matching a blood request"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ... import email_service
from ...constants import MAX_NOTIFIED_DONORS
from ...exceptions import NotFoundError, ValidationError
from ...models import User
from ..users.repository import UserRepository
from .schemas import NotifyDonorsRequest

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    donors: list[User]
    success_count: int
    fail_count: int


class NotificationService:
    """Best-effort donor alerts: failed sends are counted, never raised"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository()

    def find_matching_donors(self, data: NotifyDonorsRequest) -> list[User]:
        """Available donors with the requested blood group, in the district when one is given"""
        return self.users.get_donors(
            self.db,
            blood_group=data.bloodGroup,
            district=data.district or None,
            is_available=True,
            limit=MAX_NOTIFIED_DONORS,
        )

    async def notify_donors(self, data: NotifyDonorsRequest) -> NotificationResult:
        if not data.bloodGroup or not data.hospitalName or not data.unitsNeeded:
            raise ValidationError("Missing required fields")

        donors = self.find_matching_donors(data)
        if not donors:
            raise NotFoundError("No matching donors found", extra={"count": 0})

        sends = [
            email_service.send_donor_request_alert(
                to=donor.email,
                donor_name=donor.name,
                blood_group=data.bloodGroup,
                hospital_name=data.hospitalName,
                units_needed=data.unitsNeeded,
                urgency=data.urgency,
                contact_phone=data.contactPhone or "",
                district=data.district,
            )
            for donor in donors
        ]
        results = await asyncio.gather(*sends, return_exceptions=True)

        fail_count = 0
        for donor, result in zip(donors, results):
            if isinstance(result, Exception):
                fail_count += 1
                logger.error(f"❌ Failed to alert donor {donor.id}: {result}")

        success_count = len(donors) - fail_count
        logger.info(
            f"📣 {data.bloodGroup} alert for {data.hospitalName}: {success_count}/{len(donors)} donors notified"
        )
        return NotificationResult(donors=donors, success_count=success_count, fail_count=fail_count)
