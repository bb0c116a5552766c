from __future__ import annotations

from typing import Callable

from fastapi import Depends

from tenant_notes.api.deps.auth import get_current_principal
from tenant_notes.auth.permissions import ROLES, Principal, has_role
from tenant_notes.core.exceptions import Forbidden


def require_roles(*allowed_roles: str, detail: str = "Insufficient permissions") -> Callable:
    """
    Dependency factory: principal.role must be one of allowed_roles.

        _admin: Principal = Depends(require_roles(ROLE_ADMIN))
    """
    allowed = {r.strip().lower() for r in allowed_roles}
    unknown = allowed - ROLES
    if unknown:
        raise ValueError(f"Unknown role(s): {sorted(unknown)}. Allowed: {sorted(ROLES)}")

    async def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_role(principal, *allowed):
            raise Forbidden(detail)
        return principal

    return _checker
