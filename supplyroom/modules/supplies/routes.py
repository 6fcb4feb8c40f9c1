from fastapi import APIRouter, Depends
from supplyroom.modules.supplies.schemas import SupplyCreate, SupplyUpdate, SupplyResponse
from supplyroom.modules.inventory.service import InventoryService
from supplyroom.core.dependencies import get_current_user_id, get_inventory_service
from typing import List, Optional, Dict

router = APIRouter(prefix="/supplies", tags=["supplies"])


@router.post("", response_model=SupplyResponse, status_code=201)
async def create_supply(
    supply_data: SupplyCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Create a supply in one of the user's groups"""
    return service.create_supply(supply_data, user_data["id"])


@router.get("", response_model=List[SupplyResponse])
async def list_supplies(
    group_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """List supplies newest first, for one group or all the user's groups"""
    group_ids = [group_id] if group_id else None
    return service.list_supplies(user_data["id"], group_ids=group_ids)


@router.get("/{supply_id}", response_model=SupplyResponse)
async def get_supply(
    supply_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    return service.get_supply(supply_id, user_data["id"])


@router.put("/{supply_id}", response_model=SupplyResponse)
async def update_supply(
    supply_id: str,
    supply_data: SupplyUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Update the fields sent in the body; tag_id=null clears the tag"""
    return service.update_supply(supply_id, supply_data, user_data["id"])


@router.delete("/{supply_id}", response_model=SupplyResponse)
async def delete_supply(
    supply_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    return service.delete_supply(supply_id, user_data["id"])
