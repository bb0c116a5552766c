# tenant_notes/crud/note.py
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.models.note import Note


async def count_tenant_notes(db: AsyncSession, tenant_id: int) -> int:
    stmt = select(func.count(Note.id)).where(Note.tenant_id == tenant_id)
    res = await db.execute(stmt)
    return int(res.scalar() or 0)


async def list_tenant_notes(db: AsyncSession, tenant_id: int) -> Sequence[Note]:
    """
    All notes of one tenant, newest first. Id breaks ties between rows
    created within the same clock tick.
    """
    stmt = (
        select(Note)
        .where(Note.tenant_id == tenant_id)
        .order_by(Note.created_at.desc(), Note.id.desc())
    )
    res = await db.execute(stmt)
    return res.scalars().all()


async def get_tenant_note(db: AsyncSession, tenant_id: int, note_id: int) -> Optional[Note]:
    """
    Note by id, scoped to tenant_id. Returns None for unknown ids AND for
    ids that belong to another tenant.
    """
    stmt = select(Note).where(
        Note.id == note_id,
        Note.tenant_id == tenant_id,
    )
    res = await db.execute(stmt)
    return res.scalar_one_or_none()
