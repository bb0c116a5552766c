# tenant_notes/api/v1/tenants.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.api.deps.permissions import require_roles
from tenant_notes.api.deps.tenant import get_current_tenant
from tenant_notes.auth.permissions import ROLE_ADMIN, Principal, can_manage_tenant_plan
from tenant_notes.core.exceptions import BadRequest, Forbidden, TenantNotFound
from tenant_notes.core.plan_limits import PLAN_PRO, can_create_note, get_next_plan, get_note_limit_for_plan
from tenant_notes.core.tenant_locks import tenant_write_lock
from tenant_notes.crud.note import count_tenant_notes
from tenant_notes.crud.tenant import get_tenant_by_slug, get_tenant_for_update
from tenant_notes.db.session import get_db
from tenant_notes.models.tenant import Tenant
from tenant_notes.schemas.tenant import TenantOut, TenantUpgradeResponse, TenantUsageOut
from tenant_notes.utils.logging import get_logger, log_security_event

router = APIRouter(prefix="/tenants", tags=["tenants"])

logger = get_logger(__name__)


# ---------------------------------------------------------
# Current tenant (metadata + quota usage)
# ---------------------------------------------------------
@router.get("/current", response_model=TenantUsageOut)
async def get_current_tenant_route(
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    note_count = await count_tenant_notes(db, tenant.id)
    return TenantUsageOut(
        **TenantOut.model_validate(tenant).model_dump(),
        note_count=note_count,
        note_limit=get_note_limit_for_plan(tenant.subscription_plan),
        can_create_notes=can_create_note(tenant.subscription_plan, note_count),
    )


# ---------------------------------------------------------
# Plan upgrade: free -> pro (one way, no payment step)
# ---------------------------------------------------------
@router.post("/{slug}/upgrade", response_model=TenantUpgradeResponse)
async def upgrade_tenant(
    slug: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(ROLE_ADMIN, detail="Admin access required")),
):
    tenant = await get_tenant_by_slug(db, slug)
    if tenant is None:
        raise TenantNotFound()

    # An admin of tenant A cannot upgrade tenant B even knowing its slug.
    if not can_manage_tenant_plan(principal, tenant):
        log_security_event(
            logger,
            "cross_tenant_upgrade_attempt",
            user_id=principal.user_id,
            tenant_id=principal.tenant_id,
        )
        raise Forbidden("Access denied")

    # Same per-tenant critical section as note creation, so a plan change
    # never interleaves with a quota check.
    async with tenant_write_lock(tenant.id):
        tenant = await get_tenant_for_update(db, tenant.id)
        if tenant is None:
            await db.rollback()
            raise TenantNotFound()

        next_plan = get_next_plan(tenant.subscription_plan)
        if next_plan != PLAN_PRO:
            await db.rollback()
            raise BadRequest("Tenant is already on Pro plan")

        tenant.subscription_plan = next_plan
        await db.commit()

    await db.refresh(tenant)
    logger.info("Tenant upgraded to %s", tenant.subscription_plan, extra={"tenant_id": tenant.id, "user_id": principal.user_id})

    return TenantUpgradeResponse(
        message="Tenant upgraded to Pro plan successfully",
        tenant=TenantOut.model_validate(tenant),
    )

