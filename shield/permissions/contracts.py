"""
Shield Permissions - Capability Contracts
=========================================
Resources, relation managers, pages and widgets do not inherit
authorization behaviour; they hold a resolver and satisfy these
protocols by composition.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from shield.permissions.models import User


@runtime_checkable
class Authorizable(Protocol):
    def can(self, action: str, record: Any = None) -> bool:
        ...


@runtime_checkable
class PermissionCataloged(Protocol):
    def permission_prefixes(self) -> tuple[str, ...]:
        ...


class AuthContext(Protocol):
    def current_user(self) -> Optional[User]:
        ...


class StaticAuthContext:
    """Fixed user, or no user at all. Used for tests and scripts."""

    def __init__(self, user: Optional[User] = None):
        self._user = user

    def current_user(self) -> Optional[User]:
        return self._user


class DjangoRequestAuthContext:
    """Authenticated Django request user mapped onto a shield User."""

    def __init__(self, request):
        self._request = request

    def current_user(self) -> Optional[User]:
        user = getattr(self._request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        return user_from_django(user)


def user_from_django(user) -> User:
    return User(user_id=str(user.pk))
