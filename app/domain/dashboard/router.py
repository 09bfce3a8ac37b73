"""Dashboard router - Public aggregate statistics"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...database import get_db
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


class StatsResponse(BaseModel):
    totalDonors: int
    livesSaved: int
    recentRequestsCount: int
    points: int


class TrendPoint(BaseModel):
    month: str
    count: int


class InventorySummaryItem(BaseModel):
    group: str
    value: int


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_stats()


@router.get("/trends", response_model=list[TrendPoint])
async def get_trends(service: DashboardService = Depends(get_dashboard_service)):
    """Monthly fulfilled requests over the last six months"""
    return service.get_trends()


@router.get("/inventory", response_model=list[InventorySummaryItem])
async def get_inventory_summary(service: DashboardService = Depends(get_dashboard_service)):
    """Units in stock per blood type across all hospitals"""
    return service.get_inventory_summary()
