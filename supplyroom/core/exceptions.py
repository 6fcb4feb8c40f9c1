"""
Domain errors for the inventory service.

These are raised by the membership store, tag registry, supply ledger and
the inventory facade. They know nothing about HTTP; main.py maps them to
status codes.
"""

from typing import Any, Dict, Optional


class InventoryError(Exception):
    """Base class for all inventory domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(InventoryError):
    """A required field is missing or malformed, or a reference is invalid."""

    def __init__(self, field: str, reason: str, value: Any = None):
        super().__init__(
            message=f"Invalid {field}: {reason}",
            details={"field": field, "reason": reason, "value": value},
        )


class Forbidden(InventoryError):
    """The acting user lacks the membership or ownership the operation needs."""

    def __init__(self, user_id: str, action: str, group_id: Optional[str] = None):
        message = f"User {user_id} may not {action}"
        if group_id:
            message += f" in group {group_id}"
        super().__init__(
            message=message,
            details={"user_id": user_id, "action": action, "group_id": group_id},
        )


class NotFound(InventoryError):
    """A referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} not found: {entity_id}",
            details={"entity": entity, "id": entity_id},
        )


class DuplicateMembership(InventoryError):
    """The user already belongs to the group."""

    def __init__(self, group_id: str, user_id: str):
        super().__init__(
            message=f"User {user_id} is already a member of group {group_id}",
            details={"group_id": group_id, "user_id": user_id},
        )
