"""Blood request service - Posting, accepting and managing blood requests"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...constants import REQUEST_CANCELLED, REQUEST_FULFILLED, REQUEST_OPEN
from ...exceptions import AuthorizationError, NotFoundError, StateError
from ...models import BloodRequest
from .repository import BloodRequestRepository
from .schemas import BloodRequestCreate, BloodRequestUpdate

logger = logging.getLogger(__name__)


def can_modify(blood_request: BloodRequest, user_id: int) -> bool:
    """Owners may modify their requests. Anonymous requests are open to any caller."""
    return blood_request.requested_by_id is None or blood_request.requested_by_id == user_id


class BloodRequestService:
    """Service layer for blood requests"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BloodRequestRepository()

    def get_requests(
        self,
        status: Optional[str] = None,
        blood_group: Optional[str] = None,
        urgency: Optional[str] = None,
    ) -> list[BloodRequest]:
        return self.repo.get_requests(self.db, status, blood_group, urgency)

    def get_my_requests(self, user_id: int) -> list[BloodRequest]:
        return self.repo.get_for_requester(self.db, user_id)

    def get_request(self, request_id: int) -> BloodRequest:
        blood_request = self.repo.get_by_id(self.db, request_id)
        if not blood_request:
            raise NotFoundError("Request not found")
        return blood_request

    def _get_modifiable(self, request_id: int, user_id: int) -> BloodRequest:
        blood_request = self.get_request(request_id)
        if not can_modify(blood_request, user_id):
            logger.warning(f"⚠️ User {user_id} tried to modify request {request_id}")
            raise AuthorizationError("Not authorized")
        return blood_request

    def create_request(self, data: BloodRequestCreate, user_id: Optional[int] = None) -> BloodRequest:
        """Post a request; user_id is None for anonymous callers"""
        blood_request = self.repo.create(
            self.db,
            hospital_name=data.hospitalName,
            blood_group=data.bloodGroup,
            units_needed=data.unitsNeeded,
            urgency=data.urgency,
            location_lat=data.location.lat,
            location_lng=data.location.lng,
            location_address=data.location.address,
            contact_phone=data.contactPhone,
            patient_name=data.patientName or "",
            relationship_to_patient=data.relationship or "",
            additional_notes=data.additionalNotes or "",
            is_thalassemia_patient=data.isThalassemiaPatient,
            status=REQUEST_OPEN,
            requested_by_id=user_id,
        )
        logger.info(
            f"🆘 Blood request {blood_request.id} posted: {blood_request.blood_group} x{blood_request.units_needed} "
            f"at {blood_request.hospital_name} ({blood_request.urgency}) by {user_id or 'anonymous'}"
        )
        return self.get_request(blood_request.id)

    def accept_request(self, request_id: int, user_id: int) -> BloodRequest:
        """A donor takes on an open request"""
        blood_request = self.get_request(request_id)
        if blood_request.status != REQUEST_OPEN:
            raise StateError("Request is no longer open")

        self.repo.update(self.db, blood_request, status=REQUEST_FULFILLED, fulfilled_by_id=user_id)
        logger.info(f"🤝 Request {request_id} accepted by donor {user_id}")
        return self.get_request(request_id)

    def cancel_request(self, request_id: int, user_id: int) -> BloodRequest:
        blood_request = self._get_modifiable(request_id, user_id)
        if blood_request.status != REQUEST_OPEN:
            raise StateError("Can only cancel open requests")

        self.repo.update(self.db, blood_request, status=REQUEST_CANCELLED)
        logger.info(f"🚫 Request {request_id} cancelled by user {user_id}")
        return self.get_request(request_id)

    def update_request(self, request_id: int, data: BloodRequestUpdate, user_id: int) -> BloodRequest:
        blood_request = self._get_modifiable(request_id, user_id)

        updates = {
            "hospital_name": data.hospitalName,
            "blood_group": data.bloodGroup,
            "units_needed": data.unitsNeeded,
            "urgency": data.urgency,
            "contact_phone": data.contactPhone,
            "patient_name": data.patientName,
            "relationship_to_patient": data.relationship,
            "additional_notes": data.additionalNotes,
            "is_thalassemia_patient": data.isThalassemiaPatient,
        }
        if data.location:
            updates["location_lat"] = data.location.lat
            updates["location_lng"] = data.location.lng
            updates["location_address"] = data.location.address

        self.repo.update(self.db, blood_request, **updates)
        return self.get_request(request_id)

    def delete_request(self, request_id: int, user_id: int) -> dict:
        blood_request = self._get_modifiable(request_id, user_id)
        self.repo.delete(self.db, blood_request)
        logger.info(f"🗑️ Request {request_id} deleted by user {user_id}")
        return {"message": "Request deleted successfully"}
