"""
Tests for the supply ledger and profit calculation.
"""

from types import SimpleNamespace

import pytest

from supplyroom.core.exceptions import Forbidden, NotFound, ValidationError
from supplyroom.modules.groups.schemas import GroupCreate
from supplyroom.modules.supplies.profit import calculate_profit, total_profit
from supplyroom.modules.supplies.schemas import SupplyCreate, SupplyUpdate
from supplyroom.modules.supplies.service import SupplyLedger

from conftest import MEMBER, OUTSIDER, OWNER


class TestProfit:
    @pytest.mark.parametrize("cost,sale_price,quantity,expected", [
        (10, 15, 2, 10),
        (5, 3, 4, -8),
        (7, 7, 100, 0),
        (1.5, 2.0, 0, 0),
    ])
    def test_calculate_profit(self, cost, sale_price, quantity, expected):
        supply = SimpleNamespace(cost=cost, sale_price=sale_price, quantity=quantity)
        assert calculate_profit(supply) == expected
        assert SupplyLedger.profit(supply) == expected

    def test_total_profit_empty(self):
        assert total_profit([]) == 0

    def test_response_carries_profit(self, group, make_supply):
        supply = make_supply(group.id, cost=5, sale_price=3, quantity=4)
        assert supply.profit == -8
        assert supply.model_dump()["profit"] == -8


class TestSupplyLedger:
    def test_create_supply(self, group, make_supply, make_tag):
        tag = make_tag(group.id)
        supply = make_supply(group.id, user_id=MEMBER, name=" Glue ", tag_id=tag.id, market_price=9)
        assert supply.name == "Glue"
        assert supply.tag_id == tag.id
        assert supply.created_by == MEMBER
        assert supply.market_price == 9

    @pytest.mark.parametrize("field", ["quantity", "cost", "sale_price", "market_price"])
    def test_negative_numbers_rejected(self, group, make_supply, field):
        with pytest.raises(ValidationError):
            make_supply(group.id, **{field: -1})

    def test_nan_rejected(self, group, make_supply):
        with pytest.raises(ValidationError):
            make_supply(group.id, cost=float("nan"))

    def test_empty_name_rejected(self, group, make_supply):
        with pytest.raises(ValidationError):
            make_supply(group.id, name="")

    def test_unknown_group_rejected(self, make_supply):
        with pytest.raises(ValidationError):
            make_supply("missing")

    def test_non_member_cannot_create(self, group, make_supply):
        with pytest.raises(Forbidden):
            make_supply(group.id, user_id=OUTSIDER)

    def test_tag_from_other_group_rejected(self, service, group, make_tag, make_supply):
        other = service.create_group(GroupCreate(name="Other"), OWNER)
        foreign_tag = make_tag(other.id)
        with pytest.raises(ValidationError):
            make_supply(group.id, tag_id=foreign_tag.id)

    def test_unknown_tag_rejected(self, group, make_supply):
        with pytest.raises(ValidationError):
            make_supply(group.id, tag_id="missing")

    def test_empty_tag_id_means_no_tag(self, group, make_supply):
        assert make_supply(group.id, tag_id="").tag_id is None

    def test_partial_update(self, service, group, make_supply):
        supply = make_supply(group.id, quantity=3, cost=2, sale_price=5)
        updated = service.update_supply(supply.id, SupplyUpdate(quantity=10), MEMBER)
        assert updated.quantity == 10
        assert updated.cost == 2
        assert updated.profit == 30
        assert updated.updated_at is not None

    def test_update_clears_tag_with_explicit_null(self, service, group, make_tag, make_supply):
        tag = make_tag(group.id)
        supply = make_supply(group.id, tag_id=tag.id)
        updated = service.update_supply(supply.id, SupplyUpdate(tag_id=None), OWNER)
        assert updated.tag_id is None

    def test_update_without_changes_returns_current(self, service, group, make_supply):
        supply = make_supply(group.id)
        assert service.update_supply(supply.id, SupplyUpdate(), OWNER) == supply

    def test_update_validates_merged_record(self, service, group, make_supply):
        supply = make_supply(group.id)
        with pytest.raises(ValidationError):
            service.update_supply(supply.id, SupplyUpdate(cost=-5), OWNER)
        with pytest.raises(ValidationError):
            service.update_supply(supply.id, SupplyUpdate(name=""), OWNER)
        assert service.get_supply(supply.id, OWNER).cost == 1

    def test_update_moving_group_checks_tag(self, service, group, make_tag, make_supply):
        other = service.create_group(GroupCreate(name="Other"), OWNER)
        tag = make_tag(group.id)
        supply = make_supply(group.id, tag_id=tag.id)
        with pytest.raises(ValidationError):
            service.update_supply(supply.id, SupplyUpdate(group_id=other.id), OWNER)
        moved = service.update_supply(supply.id, SupplyUpdate(group_id=other.id, tag_id=None), OWNER)
        assert moved.group_id == other.id

    def test_update_moving_group_requires_membership_in_target(self, service, group, make_supply):
        foreign = service.create_group(GroupCreate(name="Foreign"), OUTSIDER)
        supply = make_supply(group.id)
        with pytest.raises(Forbidden):
            service.update_supply(supply.id, SupplyUpdate(group_id=foreign.id), OWNER)

    def test_update_missing(self, service):
        with pytest.raises(NotFound):
            service.update_supply("missing", SupplyUpdate(name="x"), OWNER)

    def test_update_by_non_member(self, service, group, make_supply):
        supply = make_supply(group.id)
        with pytest.raises(Forbidden):
            service.update_supply(supply.id, SupplyUpdate(name="x"), OUTSIDER)

    def test_delete_supply(self, service, group, make_supply):
        supply = make_supply(group.id)
        assert service.delete_supply(supply.id, MEMBER).id == supply.id
        with pytest.raises(NotFound):
            service.get_supply(supply.id, OWNER)

    def test_delete_missing(self, service):
        with pytest.raises(NotFound):
            service.delete_supply("missing", OWNER)

    def test_delete_by_non_member(self, service, group, make_supply):
        supply = make_supply(group.id)
        with pytest.raises(Forbidden):
            service.delete_supply(supply.id, OUTSIDER)

    def test_list_newest_first_across_groups(self, service, group, make_supply):
        other = service.create_group(GroupCreate(name="Other"), OWNER)
        make_supply(group.id, name="old")
        make_supply(other.id, name="mid")
        make_supply(group.id, name="new")
        assert [s.name for s in service.list_supplies(OWNER)] == ["new", "mid", "old"]
        assert [s.name for s in service.list_supplies(OWNER, group_ids=[group.id])] == ["new", "old"]

    def test_list_other_users_groups_forbidden(self, service, group):
        foreign = service.create_group(GroupCreate(name="Foreign"), OUTSIDER)
        with pytest.raises(Forbidden):
            service.list_supplies(OWNER, group_ids=[group.id, foreign.id])

    def test_list_for_user_without_groups(self, service):
        assert service.list_supplies(OUTSIDER) == []

    def test_listed_supply_carries_tag_and_group_name(self, service, group, make_tag, make_supply):
        tag = make_tag(group.id, name="Paint", color="#10B981")
        make_supply(group.id, name="Brush", tag_id=tag.id)
        make_supply(group.id, name="Glue")
        glue, brush = service.list_supplies(OWNER)
        assert brush.tag.name == "Paint"
        assert brush.tag.color == "#10B981"
        assert brush.group_name == "Workshop"
        assert glue.tag is None
        assert glue.group_name == "Workshop"

    def test_update_refreshes_embedded_tag(self, service, group, make_tag, make_supply):
        tag = make_tag(group.id, name="Wood")
        supply = make_supply(group.id)
        assert supply.tag is None
        updated = service.update_supply(supply.id, SupplyUpdate(tag_id=tag.id), OWNER)
        assert updated.tag.name == "Wood"

    def test_deleted_tag_leaves_no_embedded_tag(self, service, group, make_tag, make_supply):
        tag = make_tag(group.id)
        supply = make_supply(group.id, tag_id=tag.id)
        service.delete_tag(tag.id, OWNER)
        assert service.get_supply(supply.id, OWNER).tag is None

    def test_get_supply_requires_membership(self, service, group, make_supply):
        supply = make_supply(group.id)
        with pytest.raises(Forbidden):
            service.get_supply(supply.id, OUTSIDER)
