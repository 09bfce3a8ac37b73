"""Demo data for a fresh database"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from .constants import REQUEST_OPEN
from .models import BloodInventory, BloodRequest

logger = logging.getLogger(__name__)

DEMO_INVENTORY = [
    {
        "hospital_name": "Dhaka Medical College Hospital",
        "hospital_type": "GOVERNMENT",
        "city": "Dhaka",
        "division": "Dhaka",
        "phone": "+880-2-55165088",
        "email": "info@dmch.gov.bd",
        "is_247": True,
        "blood_type": "A+",
        "quantity": 120,
        "expiry_days": 30,
    },
    {
        "hospital_name": "Square Hospital Ltd",
        "hospital_type": "PRIVATE",
        "city": "Dhaka",
        "division": "Dhaka",
        "phone": "+880-2-8159457",
        "email": "info@squarehospital.com",
        "is_247": True,
        "blood_type": "O-",
        "quantity": 8,
        "expiry_days": 15,
    },
]

DEMO_REQUEST = {
    "hospital_name": "Dhaka Medical College Hospital",
    "blood_group": "B+",
    "units_needed": 2,
    "urgency": "EMERGENCY",
    "location_lat": 23.7259,
    "location_lng": 90.3973,
    "location_address": "Bakshibazar, Dhaka",
    "contact_phone": "01712345678",
    "patient_name": "Emergency Patient",
    "status": REQUEST_OPEN,
}


def seed_demo_data(db: Session) -> None:
    """Insert sample hospitals and one emergency request into empty tables"""
    now = datetime.utcnow()

    if db.query(BloodInventory.id).first() is None:
        for row in DEMO_INVENTORY:
            data = dict(row)
            expiry_days = data.pop("expiry_days")
            db.add(BloodInventory(expiry_date=now + timedelta(days=expiry_days), **data))
        db.commit()
        logger.info(f"🌱 Seeded {len(DEMO_INVENTORY)} inventory rows")

    if db.query(BloodRequest.id).first() is None:
        db.add(BloodRequest(**DEMO_REQUEST))
        db.commit()
        logger.info("🌱 Seeded demo emergency request")
