"""Appointment repository - Database operations for donation appointments"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_for_donor(db: Session, donor_id: int) -> list[Appointment]:
        """All appointments of a donor, latest appointment date first"""
        return (
            db.query(Appointment)
            .filter(Appointment.donor_id == donor_id)
            .order_by(Appointment.appointment_date.desc(), Appointment.id.desc())
            .all()
        )

    @staticmethod
    def create_appointment(db: Session, donor_id: int, **appointment_data) -> Appointment:
        appointment = Appointment(donor_id=donor_id, **appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Update an appointment with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment
