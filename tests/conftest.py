"""
Test configuration and fixtures
"""

import pytest
from fastapi.testclient import TestClient

from supplyroom.core.dependencies import get_current_user_id, get_store
from supplyroom.database.store import MemoryStore
from supplyroom.main import app
from supplyroom.modules.groups.schemas import GroupCreate
from supplyroom.modules.inventory.service import InventoryService
from supplyroom.modules.supplies.schemas import SupplyCreate
from supplyroom.modules.tags.schemas import TagCreate

OWNER = "user-owner"
MEMBER = "user-member"
OUTSIDER = "user-outsider"


@pytest.fixture(scope="function")
def store():
    """Fresh in-memory store for each test"""
    return MemoryStore()


@pytest.fixture(scope="function")
def service(store):
    return InventoryService(store)


@pytest.fixture
def group(service):
    """A group owned by OWNER, with MEMBER added as a plain member"""
    created = service.create_group(GroupCreate(name="Workshop", description="Main bench"), OWNER)
    service.memberships.add_member(created.id, MEMBER)
    return created


@pytest.fixture
def make_tag(service):
    def _make(group_id, name="Paint", color="#10B981", user_id=OWNER):
        return service.create_tag(TagCreate(name=name, color=color, group_id=group_id), user_id)
    return _make


@pytest.fixture
def make_supply(service):
    def _make(group_id, user_id=OWNER, **fields):
        data = {"name": "Brush", "quantity": 1, "cost": 1, "sale_price": 2, "market_price": 2}
        data.update(fields)
        return service.create_supply(SupplyCreate(group_id=group_id, **data), user_id)
    return _make


@pytest.fixture
def current_user():
    """Mutable identity returned by the auth dependency; tests switch users by editing 'id'"""
    return {"id": OWNER, "email": "owner@example.com"}


@pytest.fixture(scope="function")
def client(store, current_user):
    """Test client with the store and identity dependencies overridden"""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_current_user_id] = lambda: current_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
