"""Blood request router - FastAPI endpoints for emergency blood requests"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user_id, get_optional_user_id
from ...database import get_db
from ...models import BloodRequest, User
from .schemas import (
    BloodRequestCreate,
    BloodRequestMessageResponse,
    BloodRequestResponse,
    BloodRequestUpdate,
    RequestLocation,
    UserSummary,
)
from .service import BloodRequestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requests", tags=["Blood Requests"])


def get_blood_request_service(db: Session = Depends(get_db)) -> BloodRequestService:
    """Dependency injection for BloodRequestService"""
    return BloodRequestService(db)


def _user_summary(user: Optional[User]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=user.email, phone=user.phone)


def blood_request_response(blood_request: BloodRequest) -> BloodRequestResponse:
    return BloodRequestResponse(
        id=blood_request.id,
        hospitalName=blood_request.hospital_name,
        bloodGroup=blood_request.blood_group,
        unitsNeeded=blood_request.units_needed,
        urgency=blood_request.urgency,
        location=RequestLocation(
            lat=blood_request.location_lat,
            lng=blood_request.location_lng,
            address=blood_request.location_address,
        ),
        contactPhone=blood_request.contact_phone,
        status=blood_request.status,
        patientName=blood_request.patient_name or "",
        relationship=blood_request.relationship_to_patient or "",
        additionalNotes=blood_request.additional_notes or "",
        isThalassemiaPatient=blood_request.is_thalassemia_patient,
        requestedBy=_user_summary(blood_request.requested_by),
        fulfilledBy=_user_summary(blood_request.fulfilled_by),
        createdAt=blood_request.created_at,
        updatedAt=blood_request.updated_at,
    )


@router.get("", response_model=list[BloodRequestResponse])
async def get_requests(
    status: Optional[str] = Query(None),
    bloodGroup: Optional[str] = Query(None),
    urgency: Optional[str] = Query(None),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    """List requests, most urgent first"""
    return [blood_request_response(r) for r in service.get_requests(status, bloodGroup, urgency)]


@router.post("", response_model=BloodRequestResponse, status_code=201)
async def create_request(
    data: BloodRequestCreate,
    user_id: Optional[int] = Depends(get_optional_user_id),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    """Post a blood request. Signing in is optional."""
    return blood_request_response(service.create_request(data, user_id))


@router.get("/my-requests", response_model=list[BloodRequestResponse])
async def get_my_requests(
    user_id: int = Depends(get_current_user_id),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    return [blood_request_response(r) for r in service.get_my_requests(user_id)]


@router.get("/{request_id}", response_model=BloodRequestResponse)
async def get_request(
    request_id: int,
    service: BloodRequestService = Depends(get_blood_request_service),
):
    return blood_request_response(service.get_request(request_id))


@router.post("/{request_id}/accept", response_model=BloodRequestMessageResponse)
async def accept_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    """Accept an open request as the donor"""
    blood_request = service.accept_request(request_id, user_id)
    return BloodRequestMessageResponse(
        message="Request accepted successfully",
        request=blood_request_response(blood_request),
    )


@router.put("/{request_id}/cancel", response_model=BloodRequestMessageResponse)
async def cancel_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    blood_request = service.cancel_request(request_id, user_id)
    return BloodRequestMessageResponse(
        message="Request cancelled successfully",
        request=blood_request_response(blood_request),
    )


@router.put("/{request_id}", response_model=BloodRequestResponse)
async def update_request(
    request_id: int,
    data: BloodRequestUpdate,
    user_id: int = Depends(get_current_user_id),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    return blood_request_response(service.update_request(request_id, data, user_id))


@router.delete("/{request_id}")
async def delete_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BloodRequestService = Depends(get_blood_request_service),
):
    return service.delete_request(request_id, user_id)
