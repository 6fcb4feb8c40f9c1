import logging
from typing import List, Set

from supplyroom.core.exceptions import DuplicateMembership, NotFound
from supplyroom.database.store import InventoryStore, UniqueViolation
from supplyroom.modules.groups.schemas import GroupMemberResponse, GroupRole

logger = logging.getLogger(__name__)


class MembershipStore:
    """Which users belong to which groups, and with what role."""

    def __init__(self, store: InventoryStore):
        self.store = store

    def add_member(self, group_id: str, user_id: str, role: GroupRole = GroupRole.MEMBER) -> GroupMemberResponse:
        """Grant membership; raises DuplicateMembership if the pair already exists"""
        if self.is_member(group_id, user_id):
            raise DuplicateMembership(group_id, user_id)
        try:
            row = self.store.insert("user_groups", {
                "group_id": group_id,
                "user_id": user_id,
                "role": GroupRole(role).value
            })
        except UniqueViolation as e:
            raise DuplicateMembership(group_id, user_id) from e
        logger.info("Added user %s to group %s as %s", user_id, group_id, row["role"])
        return GroupMemberResponse(**row)

    def is_member(self, group_id: str, user_id: str) -> bool:
        rows = self.store.select("user_groups", filters={"group_id": group_id, "user_id": user_id})
        return bool(rows)

    def role(self, group_id: str, user_id: str) -> GroupRole:
        rows = self.store.select("user_groups", filters={"group_id": group_id, "user_id": user_id})
        if not rows:
            raise NotFound("Membership", f"{user_id}@{group_id}")
        return GroupRole(rows[0]["role"])

    def groups_for(self, user_id: str) -> Set[str]:
        rows = self.store.select("user_groups", filters={"user_id": user_id})
        return {r["group_id"] for r in rows}

    def list_members(self, group_id: str) -> List[GroupMemberResponse]:
        """Members of a group in the order they joined"""
        rows = self.store.select("user_groups", filters={"group_id": group_id}, order_by="created_at")
        return [GroupMemberResponse(**r) for r in rows]

    def on_group_deleted(self, group_id: str) -> int:
        removed = self.store.delete("user_groups", group_id=group_id)
        return len(removed)
