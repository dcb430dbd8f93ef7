from __future__ import annotations

from collections.abc import Iterable

from driver_schedule.domain.models import Caller, User, UserRole
from driver_schedule.domain.permissions import permissions_for_role


class AuthError(Exception):
    pass


def default_users() -> list[User]:
    return [
        User(1, UserRole.DISPATCHER, "Dispatcher"),
        User(2, UserRole.DRIVER, "John Smith"),
        User(3, UserRole.DRIVER, "Fierce Bob"),
        User(4, UserRole.DRIVER, "Jane Doe"),
    ]


class UserDirectory:
    def __init__(self, users: Iterable[User]) -> None:
        self._users = {user.id: user for user in users}

    def get(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def list_by_role(self, role: UserRole) -> list[User]:
        return [user for user in self._users.values() if user.role == role]


class IdentityService:
    def __init__(self, directory: UserDirectory) -> None:
        self._directory = directory

    def dev_login(self, user_id: int) -> tuple[User, list[str]]:
        user = self._directory.get(user_id)
        if user is None:
            raise AuthError("unknown user")
        return user, permissions_for_role(user.role)

    def caller_for(self, user_id: int, role: UserRole) -> Caller:
        user = self._directory.get(user_id)
        if user is None or user.role != role:
            raise AuthError("token does not match a known user")
        return Caller(id=user.id, role=user.role)

    def get_user(self, user_id: int) -> User:
        user = self._directory.get(user_id)
        if user is None:
            raise AuthError("unknown user")
        return user

    def list_drivers(self) -> list[User]:
        return self._directory.list_by_role(UserRole.DRIVER)
