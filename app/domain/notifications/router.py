"""Notification router - Donor alert endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user_id
from ...database import get_db
from .schemas import NotifiedDonor, NotifyDonorsRequest, NotifyDonorsResponse
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.post("/notify-donors", response_model=NotifyDonorsResponse)
async def notify_donors(
    data: NotifyDonorsRequest,
    _user_id: int = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
):
    """Email every available donor whose blood group matches the request"""
    result = await service.notify_donors(data)
    return NotifyDonorsResponse(
        message=f"Notification sent to {result.success_count} matching donors",
        totalDonors=len(result.donors),
        successCount=result.success_count,
        failCount=result.fail_count,
        donors=[
            NotifiedDonor(name=d.name, bloodGroup=d.blood_group, district=d.district)
            for d in result.donors
        ],
    )
