from __future__ import annotations

from ..core.enums import MANAGER_ROLES, SCHEDULING_ROLES, Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def require_manager(current_role: Role) -> None:
    if current_role not in MANAGER_ROLES:
        raise AuthorizationError("You do not have permission to manage schedules")


def require_scheduler(current_role: Role) -> None:
    if current_role not in SCHEDULING_ROLES:
        raise AuthorizationError("You do not have permission to assign shifts")
