"""Per-endpoint access rules and their evaluation.

Rules are plain values attached to routes through
`app.services.dependencies.require`. `evaluate` is a pure function of the
rule, the resolved principal (or None) and the request's target id.
"""

import enum
from dataclasses import dataclass
from typing import Optional, Union

from app.models.user_models import UserRole
from app.services.principal_resolver import Principal


class Decision(str, enum.Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Public:
    pass


@dataclass(frozen=True)
class AuthenticatedAny:
    pass


@dataclass(frozen=True)
class RequiresRole:
    role: UserRole


@dataclass(frozen=True)
class RequiresRoleOrSelf:
    """Role `role`, or the principal is the target of the request."""

    role: UserRole
    target_param: str = "user_id"


AccessRule = Union[Public, AuthenticatedAny, RequiresRole, RequiresRoleOrSelf]


def evaluate(
    rule: AccessRule,
    principal: Optional[Principal],
    target_id: Optional[int] = None,
) -> Decision:
    if isinstance(rule, Public):
        return Decision.ALLOW

    if principal is None:
        return Decision.UNAUTHENTICATED

    if isinstance(rule, AuthenticatedAny):
        return Decision.ALLOW

    if isinstance(rule, RequiresRole):
        return Decision.ALLOW if principal.role == rule.role else Decision.FORBIDDEN

    if isinstance(rule, RequiresRoleOrSelf):
        if principal.role == rule.role:
            return Decision.ALLOW
        if target_id is not None and principal.id == target_id:
            return Decision.ALLOW
        return Decision.FORBIDDEN

    raise TypeError(f"Unknown access rule: {rule!r}")


def is_owner_or_admin(principal: Principal, owner_id: int) -> bool:
    """Ownership check used by services for organizer / owner edits."""
    return evaluate(RequiresRoleOrSelf(UserRole.ADMIN), principal, owner_id) == Decision.ALLOW


PUBLIC = Public()
AUTHENTICATED = AuthenticatedAny()
ADMIN_ONLY = RequiresRole(UserRole.ADMIN)
ADMIN_OR_SELF = RequiresRoleOrSelf(UserRole.ADMIN)
