"""
Inventory facade: the only entry point routes use.

Every call takes the acting user's id explicitly. Reads and writes against a
group require membership in it; deleting a group requires being its creator.
"""

import logging
from typing import Iterable, List, Optional

from supplyroom.core.exceptions import Forbidden, NotFound, ValidationError
from supplyroom.database.store import InventoryStore
from supplyroom.modules.groups.schemas import (
    GroupCreate, GroupResponse, GroupWithRoleResponse,
    GroupMemberAdd, GroupMemberResponse, GroupRole
)
from supplyroom.modules.groups.service import MembershipStore
from supplyroom.modules.inventory.schemas import DashboardStats
from supplyroom.modules.supplies.profit import total_profit
from supplyroom.modules.supplies.schemas import SupplyCreate, SupplyUpdate, SupplyResponse
from supplyroom.modules.supplies.service import SupplyLedger
from supplyroom.modules.tags.schemas import TagCreate, TagResponse
from supplyroom.modules.tags.service import TagRegistry

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, store: InventoryStore):
        self.store = store
        self.memberships = MembershipStore(store)
        self.tags = TagRegistry(store, self.memberships)
        self.supplies = SupplyLedger(store, self.memberships)

    # Groups

    def create_group(self, group_data: GroupCreate, owner: str) -> GroupResponse:
        """Create a group and make its creator an admin, as one unit"""
        name = (group_data.name or "").strip()
        if not name:
            raise ValidationError("name", "must not be empty", group_data.name)

        with self.store.transaction():
            row = self.store.insert("groups", {
                "name": name,
                "description": group_data.description,
                "created_by": owner
            })
            self.memberships.add_member(row["id"], owner, GroupRole.ADMIN)

        logger.info("Created group %s for user %s", row["id"], owner)
        return GroupResponse(**row)

    def get_group(self, group_id: str, user_id: str) -> GroupResponse:
        group = self._get_group(group_id)
        self._require_member(group_id, user_id, "read group")
        return group

    def list_groups(self, user_id: str) -> List[GroupWithRoleResponse]:
        """Groups the user belongs to with their role, newest first"""
        memberships = self.store.select("user_groups", filters={"user_id": user_id})
        if not memberships:
            return []
        roles = {m["group_id"]: m["role"] for m in memberships}
        rows = self.store.select(
            "groups",
            in_={"id": list(roles)},
            order_by="created_at",
            desc=True
        )
        return [GroupWithRoleResponse(**row, role=roles[row["id"]]) for row in rows]

    def delete_group(self, group_id: str, requester: str) -> GroupResponse:
        """Delete a group with all of its supplies, tags and memberships. Creator only."""
        group = self._get_group(group_id)
        if group.created_by != requester:
            logger.warning("User %s denied deletion of group %s", requester, group_id)
            raise Forbidden(requester, "delete group", group_id)

        with self.store.transaction():
            supplies = self.supplies.on_group_deleted(group_id)
            tags = self.tags.on_group_deleted(group_id)
            members = self.memberships.on_group_deleted(group_id)
            self.store.delete("groups", id=group_id)

        logger.info(
            "Deleted group %s (%d supplies, %d tags, %d memberships)",
            group_id, supplies, tags, members
        )
        return group

    def add_member(self, group_id: str, member_data: GroupMemberAdd, requester: str) -> GroupMemberResponse:
        """Add a user to a group. Only group admins may do this."""
        self._get_group(group_id)
        self._require_member(group_id, requester, "add members")
        if self.memberships.role(group_id, requester) != GroupRole.ADMIN:
            logger.warning("Non-admin %s denied adding members to group %s", requester, group_id)
            raise Forbidden(requester, "add members", group_id)
        return self.memberships.add_member(group_id, member_data.user_id, member_data.role)

    def group_ids_for(self, user_id: str) -> List[str]:
        """Ids of every group the user belongs to, sorted"""
        return sorted(self.memberships.groups_for(user_id))

    def list_members(self, group_id: str, user_id: str) -> List[GroupMemberResponse]:
        self._get_group(group_id)
        self._require_member(group_id, user_id, "list members")
        return self.memberships.list_members(group_id)

    # Tags

    def create_tag(self, tag_data: TagCreate, user_id: str) -> TagResponse:
        return self.tags.create_tag(tag_data, user_id)

    def list_tags(self, user_id: str, group_id: Optional[str] = None) -> List[TagResponse]:
        """Tags of one group, or of every group the user belongs to"""
        if group_id is not None:
            self._get_group(group_id)
            self._require_member(group_id, user_id, "list tags")
            return self.tags.list_tags(group_id)
        tags = []
        for gid in self._ordered_groups_for(user_id):
            tags.extend(self.tags.list_tags(gid))
        return sorted(tags, key=lambda t: t.created_at)

    def delete_tag(self, tag_id: str, user_id: str) -> TagResponse:
        return self.tags.delete_tag(tag_id, user_id)

    # Supplies

    def create_supply(self, supply_data: SupplyCreate, user_id: str) -> SupplyResponse:
        return self.supplies.create_supply(supply_data, user_id)

    def get_supply(self, supply_id: str, user_id: str) -> SupplyResponse:
        supply = self.supplies.get_supply(supply_id)
        self._require_member(supply.group_id, user_id, "read supplies")
        return supply

    def update_supply(self, supply_id: str, supply_data: SupplyUpdate, user_id: str) -> SupplyResponse:
        return self.supplies.update_supply(supply_id, supply_data, user_id)

    def delete_supply(self, supply_id: str, user_id: str) -> SupplyResponse:
        return self.supplies.delete_supply(supply_id, user_id)

    def list_supplies(self, user_id: str, group_ids: Optional[Iterable[str]] = None) -> List[SupplyResponse]:
        """Supplies across the requested groups (default: all of the user's groups), newest first"""
        if group_ids is None:
            return self.supplies.list_supplies(self.memberships.groups_for(user_id))
        group_ids = list(group_ids)
        for gid in group_ids:
            self._require_member(gid, user_id, "list supplies")
        return self.supplies.list_supplies(group_ids)

    # Dashboard

    def dashboard_stats(self, user_id: str) -> DashboardStats:
        group_ids = self.memberships.groups_for(user_id)
        if not group_ids:
            return DashboardStats()

        groups = self.store.select("groups", in_={"id": group_ids})
        tags = self.store.select("tags", in_={"group_id": group_ids})
        supplies = self.supplies.list_supplies(group_ids)
        return DashboardStats(
            total_supplies=len(supplies),
            total_groups=len(groups),
            total_tags=len(tags),
            total_profit=total_profit(supplies)
        )

    def _get_group(self, group_id: str) -> GroupResponse:
        row = self.store.get("groups", group_id)
        if row is None:
            raise NotFound("Group", group_id)
        return GroupResponse(**row)

    def _require_member(self, group_id: str, user_id: str, action: str) -> None:
        if not self.memberships.is_member(group_id, user_id):
            logger.warning("User %s denied '%s' in group %s", user_id, action, group_id)
            raise Forbidden(user_id, action, group_id)

    def _ordered_groups_for(self, user_id: str) -> List[str]:
        rows = self.store.select("user_groups", filters={"user_id": user_id}, order_by="created_at")
        return [r["group_id"] for r in rows]
