"""Inventory router - FastAPI endpoints for hospital blood stock"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import BloodInventory, User
from .schemas import (
    CriticalCountResponse,
    HospitalStockResponse,
    InventoryCreate,
    InventoryResponse,
    InventoryUpdate,
)
from .service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db)


def inventory_response(item: BloodInventory) -> InventoryResponse:
    return InventoryResponse(
        id=item.id,
        hospitalName=item.hospital_name,
        hospitalType=item.hospital_type,
        city=item.city,
        division=item.division,
        phone=item.phone,
        email=item.email,
        is247=item.is_247,
        bloodType=item.blood_type,
        quantity=item.quantity,
        expiryDate=item.expiry_date,
        status=item.status,
        lastUpdated=item.updated_at,
    )


# ============================================================================
# PUBLIC READS
# ============================================================================


@router.get("", response_model=list[InventoryResponse])
async def get_inventory(
    city: Optional[str] = Query(None),
    bloodType: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    service: InventoryService = Depends(get_inventory_service),
):
    """Get all stock rows, filterable by city, blood type and status"""
    return [inventory_response(item) for item in service.get_inventory(city, bloodType, status)]


@router.get("/critical", response_model=CriticalCountResponse)
async def get_critical_count(service: InventoryService = Depends(get_inventory_service)):
    """Number of stock rows in CRITICAL status"""
    return CriticalCountResponse(count=service.get_critical_count())


@router.get("/hospitals", response_model=list[HospitalStockResponse])
async def get_hospitals(service: InventoryService = Depends(get_inventory_service)):
    """Stock grouped by hospital"""
    return service.get_hospitals()


@router.get("/{inventory_id}", response_model=InventoryResponse)
async def get_inventory_item(
    inventory_id: int,
    service: InventoryService = Depends(get_inventory_service),
):
    return inventory_response(service.get_item(inventory_id))


# ============================================================================
# ADMIN WRITES
# ============================================================================


@router.post("", response_model=InventoryResponse, status_code=201)
async def create_inventory_item(
    data: InventoryCreate,
    _admin: User = Depends(require_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    """Add a stock row"""
    return inventory_response(service.create_item(data))


@router.put("/{inventory_id}", response_model=InventoryResponse)
async def update_inventory_item(
    inventory_id: int,
    data: InventoryUpdate,
    _admin: User = Depends(require_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    """Update a stock row; status follows the new quantity"""
    return inventory_response(service.update_item(inventory_id, data))


@router.delete("/{inventory_id}")
async def delete_inventory_item(
    inventory_id: int,
    _admin: User = Depends(require_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.delete_item(inventory_id)
