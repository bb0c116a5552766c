from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet

if TYPE_CHECKING:
    from tenant_notes.models.note import Note
    from tenant_notes.models.tenant import Tenant

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"

ROLES: FrozenSet[str] = frozenset({ROLE_ADMIN, ROLE_MEMBER})


@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller, decoded from a verified access token.
    Lives only for the duration of one request.
    """

    user_id: int
    email: str
    role: str
    tenant_id: int


def _normalize_role(role: str | None) -> str:
    return (role or "").strip().lower()


# ---------------------------------------------------------
# Capability predicates
# Pure functions of (principal, resource): no I/O, no exceptions.
# ---------------------------------------------------------
def has_role(principal: Principal, *allowed: str) -> bool:
    return _normalize_role(principal.role) in {_normalize_role(r) for r in allowed}


def is_admin(principal: Principal) -> bool:
    return has_role(principal, ROLE_ADMIN)


def can_access_tenant(principal: Principal, tenant: "Tenant") -> bool:
    return tenant.id == principal.tenant_id


def can_access_note(principal: Principal, note: "Note") -> bool:
    """
    Notes are tenant-scoped: any role in the owning tenant may read,
    update or delete any of its notes.
    """
    return note.tenant_id == principal.tenant_id


def can_manage_tenant_plan(principal: Principal, tenant: "Tenant") -> bool:
    return is_admin(principal) and can_access_tenant(principal, tenant)
