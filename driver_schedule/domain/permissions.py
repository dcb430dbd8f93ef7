from __future__ import annotations

from typing import Any

from driver_schedule.domain.models import Caller, UserRole

PERM_WILDCARD = "*"
PERM_TASK_READ_ANY = "driver_task.read_any"
PERM_TASK_WRITE_ANY = "driver_task.write_any"
PERM_TASK_READ_OWN = "driver_task.read_own"
PERM_TASK_WRITE_OWN = "driver_task.write_own"
PERM_DIRECTORY_READ = "directory.read"

ROLE_PERMISSIONS: dict[UserRole, list[str]] = {
    UserRole.DISPATCHER: [
        PERM_TASK_READ_ANY,
        PERM_TASK_WRITE_ANY,
        PERM_DIRECTORY_READ,
    ],
    UserRole.DRIVER: [
        PERM_TASK_READ_OWN,
        PERM_TASK_WRITE_OWN,
        PERM_DIRECTORY_READ,
    ],
}


def permissions_for_role(role: UserRole) -> list[str]:
    return list(ROLE_PERMISSIONS.get(role, []))


def has_permission(claims: dict[str, Any], permission: str) -> bool:
    permissions = claims.get("permissions", [])
    if not isinstance(permissions, list):
        return False
    return permission in permissions or PERM_WILDCARD in permissions


def _allowed(caller: Caller, driver_id: int, *, any_perm: str, own_perm: str) -> bool:
    permissions = permissions_for_role(caller.role)
    if any_perm in permissions or PERM_WILDCARD in permissions:
        return True
    return own_perm in permissions and caller.id == driver_id


def can_read_driver_tasks(caller: Caller, driver_id: int) -> bool:
    return _allowed(caller, driver_id, any_perm=PERM_TASK_READ_ANY, own_perm=PERM_TASK_READ_OWN)


def can_write_driver_tasks(caller: Caller, driver_id: int) -> bool:
    return _allowed(caller, driver_id, any_perm=PERM_TASK_WRITE_ANY, own_perm=PERM_TASK_WRITE_OWN)
