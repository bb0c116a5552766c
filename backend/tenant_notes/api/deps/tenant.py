from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.api.deps.auth import get_current_principal
from tenant_notes.auth.permissions import Principal
from tenant_notes.core.exceptions import AuthenticationRequired
from tenant_notes.db.session import get_db
from tenant_notes.models.tenant import Tenant


async def get_current_tenant(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Tenant:
    """
    Tenant of the authenticated principal, read from the store (never
    reconstructed from token claims).
    """
    tenant = await db.get(Tenant, principal.tenant_id)
    if tenant is None:
        # Token outlived its tenant.
        raise AuthenticationRequired()
    return tenant
