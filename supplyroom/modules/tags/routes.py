from fastapi import APIRouter, Depends
from supplyroom.modules.tags.schemas import TagCreate, TagResponse, TagColorOption, TAG_COLOR_PALETTE
from supplyroom.modules.inventory.service import InventoryService
from supplyroom.core.dependencies import get_current_user_id, get_inventory_service
from typing import List, Optional, Dict

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/colors", response_model=List[TagColorOption])
async def list_tag_colors():
    """Palette offered by the tag form"""
    return [TagColorOption(value=value, label=label) for value, label in TAG_COLOR_PALETTE.items()]


@router.post("", response_model=TagResponse, status_code=201)
async def create_tag(
    tag_data: TagCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Create a tag in one of the user's groups"""
    return service.create_tag(tag_data, user_data["id"])


@router.get("", response_model=List[TagResponse])
async def list_tags(
    group_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """List tags of one group, or of all the user's groups"""
    return service.list_tags(user_data["id"], group_id=group_id)


@router.delete("/{tag_id}", response_model=TagResponse)
async def delete_tag(
    tag_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Delete a tag (members of the tag's group only)"""
    return service.delete_tag(tag_id, user_data["id"])
