from fastapi import APIRouter, Depends
from supplyroom.core.dependencies import get_current_user_id, get_inventory_service
from supplyroom.modules.inventory.service import InventoryService
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Get current authenticated user and the groups they belong to (for frontend UI)."""
    group_ids = service.group_ids_for(current_user["id"])
    return {**current_user, "group_ids": group_ids}
