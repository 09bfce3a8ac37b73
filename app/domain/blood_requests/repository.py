"""Blood request repository - Database operations for blood requests"""

from datetime import datetime
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from ...models import BloodRequest

# EMERGENCY first, NORMAL last
URGENCY_RANK = case(
    (BloodRequest.urgency == "EMERGENCY", 0),
    (BloodRequest.urgency == "URGENT", 1),
    else_=2,
)


class BloodRequestRepository:
    """Repository for blood request database operations"""

    @staticmethod
    def _with_users(db: Session):
        return db.query(BloodRequest).options(
            joinedload(BloodRequest.requested_by),
            joinedload(BloodRequest.fulfilled_by),
        )

    @classmethod
    def get_requests(
        cls,
        db: Session,
        status: Optional[str] = None,
        blood_group: Optional[str] = None,
        urgency: Optional[str] = None,
    ) -> list[BloodRequest]:
        """Get requests with optional filters, most urgent then newest first"""
        query = cls._with_users(db)

        if status:
            query = query.filter(BloodRequest.status == status)
        if blood_group:
            query = query.filter(BloodRequest.blood_group == blood_group)
        if urgency:
            query = query.filter(BloodRequest.urgency == urgency)

        return query.order_by(
            URGENCY_RANK, BloodRequest.created_at.desc(), BloodRequest.id.desc()
        ).all()

    @classmethod
    def get_for_requester(cls, db: Session, user_id: int) -> list[BloodRequest]:
        return (
            cls._with_users(db)
            .filter(BloodRequest.requested_by_id == user_id)
            .order_by(BloodRequest.created_at.desc(), BloodRequest.id.desc())
            .all()
        )

    @classmethod
    def get_by_id(cls, db: Session, request_id: int) -> Optional[BloodRequest]:
        return cls._with_users(db).filter(BloodRequest.id == request_id).first()

    @staticmethod
    def create(db: Session, **request_data) -> BloodRequest:
        blood_request = BloodRequest(**request_data)
        db.add(blood_request)
        db.commit()
        db.refresh(blood_request)
        return blood_request

    @staticmethod
    def update(db: Session, blood_request: BloodRequest, **updates) -> BloodRequest:
        """Update a request with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(blood_request, key):
                setattr(blood_request, key, value)

        db.commit()
        db.refresh(blood_request)
        return blood_request

    @staticmethod
    def delete(db: Session, blood_request: BloodRequest) -> None:
        db.delete(blood_request)
        db.commit()

    @staticmethod
    def count_by_status(db: Session, status: str, since: Optional[datetime] = None) -> int:
        query = db.query(func.count(BloodRequest.id)).filter(BloodRequest.status == status)
        if since is not None:
            query = query.filter(BloodRequest.created_at >= since)
        return query.scalar()

    @staticmethod
    def created_dates(db: Session, status: str, since: datetime) -> list[datetime]:
        """Creation timestamps of requests in a status, oldest first"""
        rows = (
            db.query(BloodRequest.created_at)
            .filter(BloodRequest.status == status, BloodRequest.created_at >= since)
            .order_by(BloodRequest.created_at)
            .all()
        )
        return [row[0] for row in rows]
