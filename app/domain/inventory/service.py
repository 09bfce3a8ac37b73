"""Inventory service - Stock management and donation reconciliation"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...constants import (
    DEFAULT_HOSPITAL_TYPE,
    FABRICATED_EXPIRY_DAYS,
    STOCK_CRITICAL,
    UNITS_PER_DONATION,
)
from ...exceptions import NotFoundError
from ...models import BloodInventory
from ...utils.sanitization import slugify
from .repository import InventoryRepository
from .schemas import InventoryCreate, InventoryUpdate

logger = logging.getLogger(__name__)

# Metadata a hospital shares across all of its blood type rows
HOSPITAL_FIELDS = ("hospital_type", "city", "division", "phone", "email", "is_247")


@dataclass
class ReconciliationResult:
    inventory: BloodInventory
    created: bool


def parse_city_and_division(address: Optional[str]) -> tuple[str, str]:
    """
    Best-effort location from a free-text address.

    "Bakshibazar, Dhaka" -> ("Bakshibazar", "Dhaka"); a single segment is used
    for both. Empty addresses yield "Unknown".
    """
    parts = [part.strip() for part in (address or "").split(",") if part.strip()]
    if not parts:
        return "Unknown", "Unknown"
    city = parts[0]
    division = parts[1] if len(parts) > 1 else parts[0]
    return city, division


def synthesize_hospital_email(hospital_name: str) -> str:
    return f"contact@{slugify(hospital_name) or 'hospital'}.com"


class InventoryService:
    """Service layer for hospital blood stock"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InventoryRepository()

    def get_inventory(
        self,
        city: Optional[str] = None,
        blood_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[BloodInventory]:
        return self.repo.get_inventory(self.db, city, blood_type, status)

    def get_item(self, inventory_id: int) -> BloodInventory:
        item = self.repo.get_by_id(self.db, inventory_id)
        if not item:
            raise NotFoundError("Inventory not found")
        return item

    def get_critical_count(self) -> int:
        return self.repo.count_by_status(self.db, STOCK_CRITICAL)

    def create_item(self, data: InventoryCreate) -> BloodInventory:
        item = self.repo.create(
            self.db,
            hospital_name=data.hospitalName,
            hospital_type=data.hospitalType,
            city=data.city,
            division=data.division,
            phone=data.phone,
            email=data.email,
            is_247=data.is247,
            blood_type=data.bloodType,
            quantity=data.quantity,
            expiry_date=data.expiryDate,
        )
        logger.info(
            f"📦 Inventory row {item.id} added: {item.hospital_name} {item.blood_type} x{item.quantity}"
        )
        return item

    def update_item(self, inventory_id: int, data: InventoryUpdate) -> BloodInventory:
        item = self.get_item(inventory_id)

        updates = {
            "hospital_name": data.hospitalName,
            "hospital_type": data.hospitalType,
            "city": data.city,
            "division": data.division,
            "phone": data.phone,
            "email": data.email,
            "is_247": data.is247,
            "blood_type": data.bloodType,
            "quantity": data.quantity,
            "expiry_date": data.expiryDate,
        }
        return self.repo.update(self.db, item, **updates)

    def delete_item(self, inventory_id: int) -> dict:
        item = self.get_item(inventory_id)
        self.repo.delete(self.db, item)
        logger.info(f"🗑️ Inventory row {inventory_id} deleted")
        return {"message": "Inventory deleted successfully"}

    def get_hospitals(self) -> list[dict]:
        """Group stock rows by hospital name; metadata comes from the hospital's first row"""
        hospitals: dict[str, dict] = {}

        for item in self.repo.get_all_by_hospital(self.db):
            entry = hospitals.get(item.hospital_name)
            if entry is None:
                entry = {
                    "hospitalName": item.hospital_name,
                    "hospitalType": item.hospital_type,
                    "city": item.city,
                    "division": item.division,
                    "phone": item.phone,
                    "email": item.email,
                    "is247": item.is_247,
                    "totalUnits": 0,
                    "criticalCount": 0,
                    "inventory": [],
                }
                hospitals[item.hospital_name] = entry

            entry["inventory"].append(
                {
                    "id": item.id,
                    "bloodType": item.blood_type,
                    "quantity": item.quantity,
                    "status": item.status,
                    "expiryDate": item.expiry_date,
                }
            )
            entry["totalUnits"] += item.quantity
            if item.status == STOCK_CRITICAL:
                entry["criticalCount"] += 1

        return [hospitals[name] for name in sorted(hospitals)]

    def reconcile_donation(
        self,
        hospital_name: str,
        blood_type: str,
        hospital_address: Optional[str] = None,
        hospital_phone: Optional[str] = None,
        delta: int = UNITS_PER_DONATION,
    ) -> ReconciliationResult:
        """
        Credit donated units to the stock row for (hospital_name, blood_type).

        Lookup is by exact hospital name. When the hospital has no row for this
        blood type, a new row is created: metadata is copied from another row
        of the same hospital when one exists, otherwise it is made up from the
        appointment's address and phone. New rows start at one unit.
        """
        item = self.repo.find_for_hospital_and_type(self.db, hospital_name, blood_type)
        if item:
            item = self.repo.increment_quantity(self.db, item, delta)
            logger.info(
                f"📦 Inventory {hospital_name} {blood_type} incremented by {delta} -> {item.quantity} ({item.status})"
            )
            return ReconciliationResult(inventory=item, created=False)

        sibling = self.repo.find_any_for_hospital(self.db, hospital_name)
        if sibling:
            metadata = {field: getattr(sibling, field) for field in HOSPITAL_FIELDS}
            logger.info(
                f"📦 No {blood_type} row for {hospital_name}; copying hospital details from row {sibling.id}"
            )
        else:
            city, division = parse_city_and_division(hospital_address)
            metadata = {
                "hospital_type": DEFAULT_HOSPITAL_TYPE,
                "city": city,
                "division": division,
                "phone": hospital_phone or "",
                "email": synthesize_hospital_email(hospital_name),
                "is_247": False,
            }
            logger.warning(f"⚠️ Unknown hospital {hospital_name!r}; creating inventory from appointment details")

        item = self.repo.create(
            self.db,
            hospital_name=hospital_name,
            blood_type=blood_type,
            quantity=UNITS_PER_DONATION,
            expiry_date=datetime.utcnow() + timedelta(days=FABRICATED_EXPIRY_DAYS),
            status=STOCK_CRITICAL,
            **metadata,
        )
        logger.info(f"📦 Inventory row {item.id} created for {hospital_name} {blood_type}")
        return ReconciliationResult(inventory=item, created=True)
