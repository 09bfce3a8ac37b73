"""Appointment service - Booking, completion and cancellation of donations"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...constants import (
    APPOINTMENT_CANCELLED,
    APPOINTMENT_COMPLETED,
    APPOINTMENT_SCHEDULED,
    DONATION_COOLDOWN_DAYS,
    POINTS_PER_DONATION,
)
from ...exceptions import (
    AuthorizationError,
    CooldownError,
    NotFoundError,
    StateError,
    ValidationError,
)
from ...models import Appointment, BloodInventory, User
from ...utils.sanitization import validate_and_sanitize_input
from ..inventory.service import InventoryService
from ..users.repository import UserRepository
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    appointment: Appointment
    points_earned: int
    inventory: BloodInventory
    inventory_created: bool


def days_since(moment: datetime, now: datetime) -> int:
    """Whole days elapsed between moment and now, rounded down"""
    return int((now - moment).total_seconds() // 86400)


def check_donation_cooldown(user: User, now: datetime) -> None:
    """Raise CooldownError while fewer than 120 days have passed since the last donation"""
    if not user.last_donation_date:
        return

    elapsed = days_since(user.last_donation_date, now)
    if elapsed < DONATION_COOLDOWN_DAYS:
        raise CooldownError(DONATION_COOLDOWN_DAYS - elapsed)


def check_not_in_past(appointment_date: datetime, now: datetime) -> None:
    """Dates are compared without their time: any time today is accepted"""
    if appointment_date.date() < now.date():
        raise ValidationError("Appointment date must be in the future")


def clean_notes(notes: Optional[str]) -> str:
    try:
        return validate_and_sanitize_input(notes, max_length=1000)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def derive_hospital_id(hospital_name: str, now: datetime) -> str:
    """'City Hospital' -> 'city-hospital-<epoch millis>'"""
    slug = re.sub(r"\s+", "-", hospital_name.strip().lower())
    return f"{slug}-{int(now.timestamp() * 1000)}"


class AppointmentService:
    """Service layer for donation appointments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.users = UserRepository()

    def get_my_appointments(self, user_id: int) -> list[Appointment]:
        return self.repo.get_for_donor(self.db, user_id)

    def get_appointment(self, appointment_id: int, user_id: int) -> Appointment:
        """Fetch an appointment owned by user_id"""
        appointment = self.repo.get_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        if appointment.donor_id != user_id:
            logger.warning(f"⚠️ User {user_id} tried to access appointment {appointment_id}")
            raise AuthorizationError("Not authorized")
        return appointment

    def _get_scheduled(self, appointment_id: int, user_id: int, error_message: str) -> Appointment:
        appointment = self.get_appointment(appointment_id, user_id)
        if appointment.status != APPOINTMENT_SCHEDULED:
            raise StateError(error_message)
        return appointment

    def create_appointment(self, data: AppointmentCreate, user_id: int) -> Appointment:
        """Book a donation after checking the date and the donor's cooldown"""
        if not data.hospitalName or not data.bloodGroup or not data.appointmentDate or not data.appointmentTime:
            raise ValidationError("Missing required fields")

        donor = self.users.get_by_id(self.db, user_id)
        if not donor:
            raise NotFoundError("Donor not found")

        now = datetime.utcnow()
        check_not_in_past(data.appointmentDate, now)

        try:
            check_donation_cooldown(donor, now)
        except CooldownError as e:
            logger.warning(f"⚠️ Donor {donor.id} blocked by cooldown: {e.days_remaining} days remaining")
            raise

        appointment_data = {
            "donor_name": donor.name,
            "donor_phone": donor.phone,
            "donor_blood_group": donor.blood_group,
            "hospital_id": data.hospitalId or derive_hospital_id(data.hospitalName, now),
            "hospital_name": data.hospitalName,
            "hospital_address": data.hospitalAddress or "",
            "hospital_phone": data.hospitalPhone or "",
            "blood_group": data.bloodGroup,
            "appointment_date": data.appointmentDate,
            "appointment_time": data.appointmentTime,
            "notes": clean_notes(data.notes),
            "status": APPOINTMENT_SCHEDULED,
        }

        appointment = self.repo.create_appointment(self.db, donor.id, **appointment_data)
        logger.info(
            f"📅 Appointment {appointment.id} booked by donor {donor.id} at {appointment.hospital_name} "
            f"on {appointment.appointment_date.date()} {appointment.appointment_time}"
        )
        return appointment

    def complete_appointment(self, appointment_id: int, user_id: int) -> CompletionResult:
        """
        Mark a scheduled appointment as donated.

        Three separate writes follow: the appointment status, one unit of stock
        at the appointment's hospital, and the donor's cooldown and points.
        Nothing is rolled back if a later write fails.
        """
        appointment = self._get_scheduled(appointment_id, user_id, "Appointment already processed")

        now = datetime.utcnow()
        appointment = self.repo.update_appointment(
            self.db, appointment, status=APPOINTMENT_COMPLETED, completed_at=now
        )
        logger.info(f"✅ Appointment {appointment.id} completed by donor {user_id}")

        reconciliation = InventoryService(self.db).reconcile_donation(
            hospital_name=appointment.hospital_name,
            blood_type=appointment.blood_group,
            hospital_address=appointment.hospital_address,
            hospital_phone=appointment.hospital_phone,
        )

        donor = self.users.get_by_id(self.db, appointment.donor_id)
        if donor:
            self.users.record_donation(self.db, donor, now, POINTS_PER_DONATION)
            logger.info(f"🏅 Donor {donor.id} earned {POINTS_PER_DONATION} points (total {donor.points})")
        else:
            logger.warning(f"⚠️ Donor {appointment.donor_id} of appointment {appointment.id} no longer exists")

        return CompletionResult(
            appointment=appointment,
            points_earned=POINTS_PER_DONATION,
            inventory=reconciliation.inventory,
            inventory_created=reconciliation.created,
        )

    def cancel_appointment(self, appointment_id: int, user_id: int) -> Appointment:
        appointment = self._get_scheduled(
            appointment_id, user_id, "Can only cancel scheduled appointments"
        )
        appointment = self.repo.update_appointment(self.db, appointment, status=APPOINTMENT_CANCELLED)
        logger.info(f"🚫 Appointment {appointment.id} cancelled by donor {user_id}")
        return appointment

    def update_appointment(
        self, appointment_id: int, data: AppointmentUpdate, user_id: int
    ) -> Appointment:
        """Reschedule or annotate a scheduled appointment"""
        appointment = self._get_scheduled(
            appointment_id, user_id, "Can only update scheduled appointments"
        )

        updates = {}
        if data.appointmentDate is not None:
            check_not_in_past(data.appointmentDate, datetime.utcnow())
            updates["appointment_date"] = data.appointmentDate
        if data.appointmentTime:
            updates["appointment_time"] = data.appointmentTime
        if data.notes is not None:
            updates["notes"] = clean_notes(data.notes)

        return self.repo.update_appointment(self.db, appointment, **updates)
