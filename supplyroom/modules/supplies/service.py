import logging
import math
from typing import Any, Dict, Iterable, List

from supplyroom.core.exceptions import Forbidden, NotFound, ValidationError
from supplyroom.database.store import InventoryStore, utcnow
from supplyroom.modules.groups.service import MembershipStore
from supplyroom.modules.supplies.profit import calculate_profit
from supplyroom.modules.supplies.schemas import SupplyCreate, SupplyResponse, SupplyUpdate

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("quantity", "cost", "sale_price", "market_price")
WRITABLE_FIELDS = ("name",) + NUMERIC_FIELDS + ("tag_id", "group_id")
# Related rows shown alongside each supply
SUPPLY_EMBED = {"tags": ("name", "color"), "groups": ("name",)}


class SupplyLedger:
    """CRUD over supply records plus the derived profit figures."""

    def __init__(self, store: InventoryStore, memberships: MembershipStore):
        self.store = store
        self.memberships = memberships

    @staticmethod
    def profit(supply: SupplyResponse) -> float:
        return calculate_profit(supply)

    def create_supply(self, supply_data: SupplyCreate, creator: str) -> SupplyResponse:
        """Create a supply in a group the creator belongs to"""
        fields = self._validate(supply_data.model_dump(), creator)
        row = self.store.insert("supplies", {**fields, "created_by": creator})
        logger.info("Created supply %s in group %s", row["id"], row["group_id"])
        return self.get_supply(row["id"])

    def get_supply(self, supply_id: str) -> SupplyResponse:
        row = self.store.get("supplies", supply_id, embed=SUPPLY_EMBED)
        if row is None:
            raise NotFound("Supply", supply_id)
        return _to_response(row)

    def update_supply(self, supply_id: str, supply_data: SupplyUpdate, requester: str) -> SupplyResponse:
        """Apply the fields present in supply_data, then validate the result as a whole"""
        current = self.get_supply(supply_id)
        if not self.memberships.is_member(current.group_id, requester):
            logger.warning("User %s denied update of supply %s", requester, supply_id)
            raise Forbidden(requester, "update supplies", current.group_id)

        changes = supply_data.model_dump(exclude_unset=True)
        merged = {k: getattr(current, k) for k in WRITABLE_FIELDS}
        merged.update(changes)
        fields = self._validate(merged, requester)

        update_data = {k: fields[k] for k in changes if k in fields}
        if not update_data:
            return current
        update_data["updated_at"] = utcnow().isoformat()

        row = self.store.update("supplies", supply_id, update_data)
        if row is None:
            raise NotFound("Supply", supply_id)
        logger.info("Updated supply %s (%s)", supply_id, ", ".join(sorted(changes)))
        return self.get_supply(supply_id)

    def delete_supply(self, supply_id: str, requester: str) -> SupplyResponse:
        supply = self.get_supply(supply_id)
        if not self.memberships.is_member(supply.group_id, requester):
            logger.warning("User %s denied deletion of supply %s", requester, supply_id)
            raise Forbidden(requester, "delete supplies", supply.group_id)
        self.store.delete("supplies", id=supply_id)
        logger.info("Deleted supply %s from group %s", supply_id, supply.group_id)
        return supply

    def list_supplies(self, group_ids: Iterable[str]) -> List[SupplyResponse]:
        """Supplies across the given groups, newest first"""
        group_ids = list(group_ids)
        if not group_ids:
            return []
        rows = self.store.select(
            "supplies",
            in_={"group_id": group_ids},
            order_by="created_at",
            desc=True,
            embed=SUPPLY_EMBED
        )
        return [_to_response(r) for r in rows]

    def on_group_deleted(self, group_id: str) -> int:
        removed = self.store.delete("supplies", group_id=group_id)
        return len(removed)

    def _validate(self, fields: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        name = (fields.get("name") or "").strip()
        if not name:
            raise ValidationError("name", "must not be empty", fields.get("name"))

        clean = {"name": name}
        for field in NUMERIC_FIELDS:
            value = fields.get(field)
            if value is None:
                raise ValidationError(field, "is required", value)
            if not math.isfinite(value) or value < 0:
                raise ValidationError(field, "must be a number >= 0", value)
            clean[field] = value

        group_id = fields.get("group_id")
        if not group_id or self.store.get("groups", group_id) is None:
            raise ValidationError("group_id", "group does not exist", group_id)
        if not self.memberships.is_member(group_id, user_id):
            logger.warning("User %s denied supply write in group %s", user_id, group_id)
            raise Forbidden(user_id, "write supplies", group_id)
        clean["group_id"] = group_id

        tag_id = fields.get("tag_id") or None
        if tag_id is not None:
            tag = self.store.get("tags", tag_id)
            if tag is None or tag["group_id"] != group_id:
                raise ValidationError("tag_id", "tag does not belong to the supply's group", tag_id)
        clean["tag_id"] = tag_id
        return clean


def _to_response(row: Dict[str, Any]) -> SupplyResponse:
    group = row.get("groups") or {}
    return SupplyResponse(**row, tag=row.get("tags"), group_name=group.get("name"))
