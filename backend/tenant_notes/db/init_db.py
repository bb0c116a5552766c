# backend/tenant_notes/db/init_db.py
"""
One-time store initialization, run from the application lifespan before
any request is served.
"""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import tenant_notes.models  # noqa: F401  # force model registration
from tenant_notes.auth.permissions import ROLE_ADMIN, ROLE_MEMBER
from tenant_notes.core.plan_limits import PLAN_FREE
from tenant_notes.core.security import hash_password
from tenant_notes.db.base import Base
from tenant_notes.models.tenant import Tenant
from tenant_notes.models.user import User
from tenant_notes.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PASSWORD = "password"

# (name, slug) -> [(email, role), ...]
DEMO_TENANTS: dict[tuple[str, str], list[tuple[str, str]]] = {
    ("Acme Corp", "acme"): [
        ("admin@acme.test", ROLE_ADMIN),
        ("user@acme.test", ROLE_MEMBER),
    ],
    ("Globex Corp", "globex"): [
        ("admin@globex.test", ROLE_ADMIN),
        ("user@globex.test", ROLE_MEMBER),
    ],
}


async def create_schema(engine: AsyncEngine) -> None:
    """
    create_all for local/dev runs. Deployments that manage schema with
    alembic set AUTO_CREATE_SCHEMA=false.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_demo_data(db: AsyncSession) -> bool:
    """
    Insert the demo tenants and users if the store has no tenants yet.
    Returns True when rows were written.
    """
    existing = (await db.execute(select(func.count(Tenant.id)))).scalar() or 0
    if existing:
        return False

    # One hash shared by every demo user; bcrypt is slow on purpose.
    password_hash = hash_password(DEMO_PASSWORD)

    for (name, slug), users in DEMO_TENANTS.items():
        tenant = Tenant(name=name, slug=slug, subscription_plan=PLAN_FREE)
        db.add(tenant)
        await db.flush()

        for email, role in users:
            db.add(
                User(
                    email=User.normalize_email(email),
                    password_hash=password_hash,
                    role=role,
                    tenant_id=tenant.id,
                )
            )

    await db.commit()
    logger.info("Seeded %d demo tenants", len(DEMO_TENANTS))
    return True
