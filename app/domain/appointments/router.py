"""Appointment router - FastAPI endpoints for donation appointments"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user_id
from ...database import get_db
from ...models import Appointment
from ..inventory.router import inventory_response
from .schemas import (
    AppointmentCompletionResponse,
    AppointmentCreate,
    AppointmentMessageResponse,
    AppointmentResponse,
    AppointmentUpdate,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

# Every appointment route requires an authenticated donor
router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
    dependencies=[Depends(get_current_user_id)],
)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        donor=appointment.donor_id,
        donorName=appointment.donor_name,
        donorPhone=appointment.donor_phone,
        donorBloodGroup=appointment.donor_blood_group,
        hospitalId=appointment.hospital_id,
        hospitalName=appointment.hospital_name,
        hospitalAddress=appointment.hospital_address,
        hospitalPhone=appointment.hospital_phone,
        bloodGroup=appointment.blood_group,
        appointmentDate=appointment.appointment_date,
        appointmentTime=appointment.appointment_time,
        status=appointment.status,
        notes=appointment.notes,
        completedAt=appointment.completed_at,
        createdAt=appointment.created_at,
    )


@router.post("", response_model=AppointmentMessageResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    user_id: int = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book a donation appointment"""
    appointment = service.create_appointment(data, user_id)
    return AppointmentMessageResponse(
        message="Appointment created successfully",
        appointment=appointment_response(appointment),
    )


@router.get("/my-appointments", response_model=list[AppointmentResponse])
async def get_my_appointments(
    user_id: int = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get the current donor's appointments, latest first"""
    return [appointment_response(a) for a in service.get_my_appointments(user_id)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return appointment_response(service.get_appointment(appointment_id, user_id))


@router.put("/{appointment_id}/complete", response_model=AppointmentCompletionResponse)
async def complete_appointment(
    appointment_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Mark the donation as done: updates hospital stock and awards points"""
    result = service.complete_appointment(appointment_id, user_id)
    return AppointmentCompletionResponse(
        message="Donation completed successfully",
        appointment=appointment_response(result.appointment),
        pointsEarned=result.points_earned,
        inventory=inventory_response(result.inventory),
        inventoryCreated=result.inventory_created,
    )


@router.put("/{appointment_id}/cancel", response_model=AppointmentMessageResponse)
async def cancel_appointment(
    appointment_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.cancel_appointment(appointment_id, user_id)
    return AppointmentMessageResponse(
        message="Appointment cancelled successfully",
        appointment=appointment_response(appointment),
    )


@router.put("/{appointment_id}", response_model=AppointmentMessageResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    user_id: int = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Change the date, time slot or notes of a scheduled appointment"""
    appointment = service.update_appointment(appointment_id, data, user_id)
    return AppointmentMessageResponse(
        message="Appointment updated successfully",
        appointment=appointment_response(appointment),
    )
