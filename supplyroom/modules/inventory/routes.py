from fastapi import APIRouter, Depends
from supplyroom.modules.inventory.schemas import DashboardStats
from supplyroom.modules.inventory.service import InventoryService
from supplyroom.core.dependencies import get_current_user_id, get_inventory_service
from typing import Dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Supply, group and tag counts plus total profit over the user's groups"""
    return service.dashboard_stats(user_data["id"])
