from fastapi import APIRouter, Depends
from supplyroom.modules.groups.schemas import (
    GroupCreate, GroupResponse, GroupWithRoleResponse,
    GroupMemberAdd, GroupMemberResponse
)
from supplyroom.modules.inventory.service import InventoryService
from supplyroom.core.dependencies import get_current_user_id, get_inventory_service
from typing import List, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Create a new group; the caller becomes its admin"""
    return service.create_group(group_data, user_data["id"])


@router.get("", response_model=List[GroupWithRoleResponse])
async def list_groups(
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """List groups the user is a member of, with their role"""
    return service.list_groups(user_data["id"])


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Get group by ID (only if user is a member)"""
    return service.get_group(group_id, user_data["id"])


@router.delete("/{group_id}", response_model=GroupResponse)
async def delete_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Delete group with its tags, supplies and memberships (creator only)"""
    return service.delete_group(group_id, user_data["id"])


@router.post("/{group_id}/members", response_model=GroupMemberResponse, status_code=201)
async def add_member(
    group_id: str,
    member_data: GroupMemberAdd,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """Add a member to the group (group admins only)"""
    return service.add_member(group_id, member_data, user_data["id"])


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InventoryService = Depends(get_inventory_service)
):
    """List all members of a group (only if user is a member)"""
    return service.list_members(group_id, user_data["id"])
