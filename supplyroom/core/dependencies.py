"""
Core dependencies: identity, persistence and the inventory service.

Nothing here is read from ambient state inside the domain layer: routes pull
the acting user and the store from these dependencies and pass them in.
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client
from typing import Optional
import logging

from supplyroom.config.settings import settings
from supplyroom.database.store import InventoryStore, MemoryStore
from supplyroom.database.supabase_client import SupabaseStore, get_supabase
from supplyroom.modules.auth.service import AuthService
from supplyroom.modules.inventory.service import InventoryService

logger = logging.getLogger(__name__)

security = HTTPBearer()

_memory_store: Optional[MemoryStore] = None


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_store() -> InventoryStore:
    """Store for this request, chosen by STORAGE_BACKEND"""
    global _memory_store
    if settings.uses_memory_store:
        if _memory_store is None:
            logger.warning("Using in-memory store; data is lost on restart")
            _memory_store = MemoryStore()
        return _memory_store
    return SupabaseStore(get_supabase())


def get_inventory_service(store: InventoryStore = Depends(get_store)) -> InventoryService:
    return InventoryService(store)
