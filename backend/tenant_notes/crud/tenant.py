# tenant_notes/crud/tenant.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.models.tenant import Tenant


async def get_tenant_by_slug(db: AsyncSession, slug: str) -> Optional[Tenant]:
    stmt = select(Tenant).where(Tenant.slug == slug.strip().lower()).limit(1)
    return (await db.execute(stmt)).scalar_one_or_none()


async def get_tenant_for_update(db: AsyncSession, tenant_id: int) -> Optional[Tenant]:
    """
    Load and row-lock a tenant (SELECT ... FOR UPDATE). Writers that depend
    on the tenant's plan take this lock first so they serialize per tenant.
    SQLite ignores FOR UPDATE.

    populate_existing: the row may already sit in the session identity map
    with a plan read before the lock was taken.
    """
    stmt = (
        select(Tenant)
        .where(Tenant.id == tenant_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return (await db.execute(stmt)).scalar_one_or_none()
