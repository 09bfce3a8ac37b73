from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .constants import (
    APPOINTMENT_SCHEDULED,
    CRITICAL_THRESHOLD,
    DEFAULT_LAT,
    DEFAULT_LNG,
    LOW_THRESHOLD,
    REQUEST_OPEN,
    ROLE_DONOR,
    STOCK_CRITICAL,
    STOCK_LOW,
    STOCK_OPTIMAL,
)
from .database import Base


def inventory_status_for(quantity: int) -> str:
    """Stock tier for a quantity: <10 CRITICAL, <30 LOW, otherwise OPTIMAL"""
    if quantity < CRITICAL_THRESHOLD:
        return STOCK_CRITICAL
    if quantity < LOW_THRESHOLD:
        return STOCK_LOW
    return STOCK_OPTIMAL


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    phone = Column(String(20), nullable=False)  # +8801XXXXXXXXX
    blood_group = Column(String(3), nullable=False)
    dob = Column(DateTime, nullable=False)
    district = Column(String(100), nullable=False)
    gender = Column(String(10), nullable=False)
    weight = Column(Float, nullable=False)
    last_donation_date = Column(DateTime, nullable=True)
    emergency_contact_name = Column(String(255), default="", nullable=False)
    emergency_contact_phone = Column(String(20), default="", nullable=False)
    preferred_center = Column(String(255), default="", nullable=False)
    points = Column(Integer, default=0, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    role = Column(String(10), default=ROLE_DONOR, nullable=False)
    location_lat = Column(Float, default=DEFAULT_LAT, nullable=False)
    location_lng = Column(Float, default=DEFAULT_LNG, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointments = relationship("Appointment", back_populates="donor")

    __table_args__ = (Index("ix_users_blood_group_district", "blood_group", "district"),)


class BloodInventory(Base):
    """Stock of one blood type at one hospital, keyed by hospital name"""

    __tablename__ = "blood_inventory"

    id = Column(Integer, primary_key=True, index=True)
    hospital_name = Column(String(255), nullable=False)
    hospital_type = Column(String(30), nullable=False)  # GOVERNMENT, PRIVATE, THALASSEMIA_CENTER
    city = Column(String(100), nullable=False)
    division = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    is_247 = Column(Boolean, default=False, nullable=False)
    blood_type = Column(String(3), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    expiry_date = Column(DateTime, nullable=False)
    # Derived from quantity on every insert/update, see _derive_inventory_status
    status = Column(String(10), default=STOCK_OPTIMAL, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Not unique: the same pair can appear twice
    __table_args__ = (Index("ix_inventory_hospital_blood_type", "hospital_name", "blood_type"),)


@event.listens_for(BloodInventory, "before_insert")
@event.listens_for(BloodInventory, "before_update")
def _derive_inventory_status(_mapper, _connection, target):
    target.status = inventory_status_for(target.quantity or 0)


class BloodRequest(Base):
    __tablename__ = "blood_requests"

    id = Column(Integer, primary_key=True, index=True)
    hospital_name = Column(String(255), nullable=False)
    blood_group = Column(String(3), nullable=False)
    units_needed = Column(Integer, nullable=False)
    urgency = Column(String(10), nullable=False, default="NORMAL")
    location_lat = Column(Float, nullable=False)
    location_lng = Column(Float, nullable=False)
    location_address = Column(String(500), nullable=False)
    contact_phone = Column(String(50), nullable=False)
    # Status workflow: OPEN → FULFILLED (accepted by a donor) or CANCELLED (by the owner)
    status = Column(String(10), default=REQUEST_OPEN, nullable=False, index=True)
    patient_name = Column(String(255), default="", nullable=False)
    relationship_to_patient = Column("relationship", String(100), default="", nullable=False)
    additional_notes = Column(Text, default="", nullable=False)
    is_thalassemia_patient = Column(Boolean, default=False, nullable=False)
    requested_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    fulfilled_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    requested_by = relationship("User", foreign_keys=[requested_by_id])
    fulfilled_by = relationship("User", foreign_keys=[fulfilled_by_id])


class Appointment(Base):
    """A scheduled donation. Donor and hospital fields are snapshots taken at booking time."""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    donor_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Donor snapshot, not kept in sync with later profile edits
    donor_name = Column(String(255), nullable=False)
    donor_phone = Column(String(20), nullable=False)
    donor_blood_group = Column(String(3), nullable=False)

    hospital_id = Column(String(255), nullable=False, index=True)
    hospital_name = Column(String(255), nullable=False)
    hospital_address = Column(String(500), default="", nullable=False)
    hospital_phone = Column(String(50), default="", nullable=False)

    blood_group = Column(String(3), nullable=False)
    appointment_date = Column(DateTime, nullable=False)
    appointment_time = Column(String(50), nullable=False)  # free-text slot label

    # Status workflow: SCHEDULED → COMPLETED | CANCELLED (NO_SHOW is never assigned)
    status = Column(String(10), default=APPOINTMENT_SCHEDULED, nullable=False, index=True)
    notes = Column(Text, default="", nullable=False)
    reminder_sent = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    donor = relationship("User", back_populates="appointments")

    __table_args__ = (Index("ix_appointments_donor_date", "donor_id", "appointment_date"),)
