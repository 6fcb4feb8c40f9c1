"""
Tests for the tag registry.
"""

import pytest

from supplyroom.core.exceptions import Forbidden, NotFound, ValidationError
from supplyroom.modules.groups.schemas import GroupCreate
from supplyroom.modules.tags.schemas import DEFAULT_TAG_COLOR, TagCreate
from supplyroom.modules.tags.service import normalize_color

from conftest import MEMBER, OUTSIDER, OWNER


class TestNormalizeColor:
    @pytest.mark.parametrize("raw,expected", [
        ("#3b82f6", "#3B82F6"),
        ("10B981", "#10B981"),
        ("#abc", "#ABC"),
        (" #EC4899 ", "#EC4899"),
    ])
    def test_valid(self, raw, expected):
        assert normalize_color(raw) == expected

    @pytest.mark.parametrize("raw", ["", "blue", "red", "rgb(1, 2, 3)", "#12345", "#GGGGGG"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            normalize_color(raw)


class TestTagRegistry:
    def test_create_tag(self, service, group):
        tag = service.create_tag(TagCreate(name=" Paint ", group_id=group.id), MEMBER)
        assert tag.name == "Paint"
        assert tag.color == DEFAULT_TAG_COLOR
        assert tag.group_id == group.id
        assert tag.created_by == MEMBER

    def test_empty_name(self, service, group):
        with pytest.raises(ValidationError):
            service.create_tag(TagCreate(name="  ", group_id=group.id), OWNER)

    def test_unknown_group(self, service):
        with pytest.raises(ValidationError):
            service.create_tag(TagCreate(name="Paint", group_id="missing"), OWNER)

    def test_non_member_cannot_create(self, service, group):
        with pytest.raises(Forbidden):
            service.create_tag(TagCreate(name="Paint", group_id=group.id), OUTSIDER)

    def test_invalid_color(self, service, group):
        with pytest.raises(ValidationError):
            service.create_tag(TagCreate(name="Paint", color="not-a-colour", group_id=group.id), OWNER)

    def test_list_tags_in_creation_order(self, service, group, make_tag):
        for name in ("a", "b", "c"):
            make_tag(group.id, name=name)
        assert [t.name for t in service.list_tags(OWNER, group_id=group.id)] == ["a", "b", "c"]

    def test_listed_tag_carries_group_name(self, service, group, make_tag):
        created = make_tag(group.id)
        assert created.group_name == "Workshop"
        listed = service.list_tags(OWNER, group_id=group.id)
        assert [t.group_name for t in listed] == ["Workshop"]

    def test_list_tags_is_idempotent(self, service, group, make_tag):
        make_tag(group.id, name="a")
        make_tag(group.id, name="b")
        first = service.list_tags(OWNER, group_id=group.id)
        second = service.list_tags(OWNER, group_id=group.id)
        assert first == second

    def test_list_tags_requires_membership(self, service, group):
        with pytest.raises(Forbidden):
            service.list_tags(OUTSIDER, group_id=group.id)

    def test_list_tags_across_groups(self, service, group, make_tag):
        other = service.create_group(GroupCreate(name="Other"), OWNER)
        foreign = service.create_group(GroupCreate(name="Foreign"), OUTSIDER)
        make_tag(group.id, name="mine")
        make_tag(other.id, name="also mine")
        make_tag(foreign.id, name="theirs", user_id=OUTSIDER)
        assert [t.name for t in service.list_tags(OWNER)] == ["mine", "also mine"]

    def test_delete_tag(self, service, group, make_tag):
        tag = make_tag(group.id)
        deleted = service.delete_tag(tag.id, MEMBER)
        assert deleted.id == tag.id
        assert service.list_tags(OWNER, group_id=group.id) == []

    def test_delete_missing_tag(self, service):
        with pytest.raises(NotFound):
            service.delete_tag("missing", OWNER)

    def test_delete_tag_requires_membership(self, service, group, make_tag):
        tag = make_tag(group.id)
        with pytest.raises(Forbidden):
            service.delete_tag(tag.id, OUTSIDER)
        assert len(service.list_tags(OWNER, group_id=group.id)) == 1

    def test_delete_tag_clears_supply_references(self, service, group, make_tag, make_supply):
        tag = make_tag(group.id)
        supply = make_supply(group.id, tag_id=tag.id)
        service.delete_tag(tag.id, OWNER)
        assert service.get_supply(supply.id, OWNER).tag_id is None
