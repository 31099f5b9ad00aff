"""Verified caller identity.

Authentication happens outside the core; whatever verified the token
hands us a Principal and we trust it as-is.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.exceptions import ForbiddenError, UnauthorizedError


@dataclass(frozen=True)
class Principal:

    user_id: str
    email: str
    name: str = ""
    is_admin: bool = False

    def can_access(self, owner_id: str) -> bool:
        return self.is_admin or self.user_id == owner_id


def require_principal(principal: Principal | None) -> Principal:
    """Fail with UnauthorizedError when no identity was supplied."""
    if principal is None or not principal.user_id:
        raise UnauthorizedError("Unauthorized")
    return principal


def require_owner(principal: Principal | None, owner_id: str) -> Principal:
    principal = require_principal(principal)
    if not principal.can_access(owner_id):
        raise ForbiddenError("Unauthorized to view this order")
    return principal


def require_admin(principal: Principal | None) -> Principal:
    principal = require_principal(principal)
    if not principal.is_admin:
        raise ForbiddenError("Only administrators may change order status")
    return principal
