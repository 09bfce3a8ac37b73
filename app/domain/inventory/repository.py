"""Inventory repository - Database operations for hospital blood stock"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import BloodInventory


class InventoryRepository:
    """Repository for blood inventory database operations"""

    @staticmethod
    def get_inventory(
        db: Session,
        city: Optional[str] = None,
        blood_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[BloodInventory]:
        """Get stock rows with optional filters, most recently updated first"""
        query = db.query(BloodInventory)

        if city:
            query = query.filter(BloodInventory.city == city)
        if blood_type:
            query = query.filter(BloodInventory.blood_type == blood_type)
        if status:
            query = query.filter(BloodInventory.status == status)

        return query.order_by(BloodInventory.updated_at.desc(), BloodInventory.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, inventory_id: int) -> Optional[BloodInventory]:
        return db.query(BloodInventory).filter(BloodInventory.id == inventory_id).first()

    @staticmethod
    def find_for_hospital_and_type(
        db: Session, hospital_name: str, blood_type: str
    ) -> Optional[BloodInventory]:
        """Exact match on (hospital name, blood type); oldest row wins if duplicates exist"""
        return (
            db.query(BloodInventory)
            .filter(
                BloodInventory.hospital_name == hospital_name,
                BloodInventory.blood_type == blood_type,
            )
            .order_by(BloodInventory.id)
            .first()
        )

    @staticmethod
    def find_any_for_hospital(db: Session, hospital_name: str) -> Optional[BloodInventory]:
        """Any row recorded under this hospital name, regardless of blood type"""
        return (
            db.query(BloodInventory)
            .filter(BloodInventory.hospital_name == hospital_name)
            .order_by(BloodInventory.id)
            .first()
        )

    @staticmethod
    def get_all_by_hospital(db: Session) -> list[BloodInventory]:
        return (
            db.query(BloodInventory)
            .order_by(BloodInventory.hospital_name, BloodInventory.blood_type)
            .all()
        )

    @staticmethod
    def create(db: Session, **data) -> BloodInventory:
        item = BloodInventory(**data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update(db: Session, item: BloodInventory, **updates) -> BloodInventory:
        """Update a stock row with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(item, key):
                setattr(item, key, value)

        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def increment_quantity(db: Session, item: BloodInventory, delta: int) -> BloodInventory:
        item.quantity = (item.quantity or 0) + delta
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete(db: Session, item: BloodInventory) -> None:
        db.delete(item)
        db.commit()

    @staticmethod
    def count_by_status(db: Session, status: str) -> int:
        return (
            db.query(func.count(BloodInventory.id))
            .filter(BloodInventory.status == status)
            .scalar()
        )

    @staticmethod
    def total_quantity_by_blood_type(db: Session) -> list[tuple[str, int]]:
        """Sum of quantity per blood type across all hospitals, ordered by blood type label"""
        return (
            db.query(BloodInventory.blood_type, func.sum(BloodInventory.quantity))
            .group_by(BloodInventory.blood_type)
            .order_by(BloodInventory.blood_type)
            .all()
        )
