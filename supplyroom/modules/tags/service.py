import logging
import re
from typing import Any, Dict, List

from supplyroom.core.exceptions import Forbidden, NotFound, ValidationError
from supplyroom.database.store import InventoryStore
from supplyroom.modules.groups.service import MembershipStore
from supplyroom.modules.tags.schemas import TagCreate, TagResponse

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
TAG_EMBED = {"groups": ("name",)}


def normalize_color(color: str) -> str:
    """Return color as upper-case '#RRGGBB' or '#RGB'.

    Only hex notation is accepted. Named CSS colours ('red') and functional
    notation ('rgb(1, 2, 3)') are rejected on purpose so every stored colour
    is hex and the frontend can compare it against the palette.
    Raises ValidationError otherwise.
    """
    value = (color or "").strip()
    if not _HEX_COLOR.match(value):
        raise ValidationError("color", "must be a hex colour such as #3B82F6", color)
    if not value.startswith("#"):
        value = f"#{value}"
    return value.upper()


class TagRegistry:
    """Group-scoped tags. A tag cannot outlive its group."""

    def __init__(self, store: InventoryStore, memberships: MembershipStore):
        self.store = store
        self.memberships = memberships

    def create_tag(self, tag_data: TagCreate, creator: str) -> TagResponse:
        """Create a tag in a group the creator belongs to"""
        name = (tag_data.name or "").strip()
        if not name:
            raise ValidationError("name", "must not be empty", tag_data.name)
        if not tag_data.group_id or self.store.get("groups", tag_data.group_id) is None:
            raise ValidationError("group_id", "group does not exist", tag_data.group_id)
        if not self.memberships.is_member(tag_data.group_id, creator):
            logger.warning("User %s denied tag creation in group %s", creator, tag_data.group_id)
            raise Forbidden(creator, "create tags", tag_data.group_id)

        row = self.store.insert("tags", {
            "name": name,
            "color": normalize_color(tag_data.color),
            "group_id": tag_data.group_id,
            "created_by": creator
        })
        logger.info("Created tag %s in group %s", row["id"], row["group_id"])
        return self.get_tag(row["id"])

    def get_tag(self, tag_id: str) -> TagResponse:
        row = self.store.get("tags", tag_id, embed=TAG_EMBED)
        if row is None:
            raise NotFound("Tag", tag_id)
        return _to_response(row)

    def list_tags(self, group_id: str) -> List[TagResponse]:
        """Tags of one group, oldest first"""
        rows = self.store.select(
            "tags",
            filters={"group_id": group_id},
            order_by="created_at",
            embed=TAG_EMBED
        )
        return [_to_response(r) for r in rows]

    def delete_tag(self, tag_id: str, requester: str) -> TagResponse:
        """Delete a tag; supplies using it lose their tag rather than disappearing"""
        tag = self.get_tag(tag_id)
        if not self.memberships.is_member(tag.group_id, requester):
            logger.warning("User %s denied deletion of tag %s", requester, tag_id)
            raise Forbidden(requester, "delete tags", tag.group_id)

        with self.store.transaction():
            for supply in self.store.select("supplies", filters={"tag_id": tag_id}):
                self.store.update("supplies", supply["id"], {"tag_id": None})
            self.store.delete("tags", id=tag_id)
        logger.info("Deleted tag %s from group %s", tag_id, tag.group_id)
        return tag

    def on_group_deleted(self, group_id: str) -> int:
        removed = self.store.delete("tags", group_id=group_id)
        return len(removed)


def _to_response(row: Dict[str, Any]) -> TagResponse:
    group = row.get("groups") or {}
    return TagResponse(**row, group_name=group.get("name"))
