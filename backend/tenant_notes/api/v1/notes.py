from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.api.deps.auth import get_current_principal
from tenant_notes.auth.permissions import Principal, can_access_note
from tenant_notes.core.exceptions import (
    AuthenticationRequired,
    BadRequest,
    NoteNotFound,
    PlanLimitExceeded,
)
from tenant_notes.core.plan_limits import can_create_note, get_note_limit_for_plan
from tenant_notes.core.tenant_locks import tenant_write_lock
from tenant_notes.crud.note import count_tenant_notes, get_tenant_note, list_tenant_notes
from tenant_notes.crud.tenant import get_tenant_for_update
from tenant_notes.db.base import utcnow
from tenant_notes.db.session import get_db
from tenant_notes.models.note import Note
from tenant_notes.schemas.note import MessageResponse, NoteOut, NoteWrite
from tenant_notes.utils.logging import get_logger

router = APIRouter(prefix="/notes", tags=["notes"])

logger = get_logger(__name__)

# Postgres INTEGER upper bound; larger ids cannot exist.
_MAX_NOTE_ID = 2**31 - 1


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _parse_note_id(raw: str) -> int:
    """
    Path ids that are not positive integers cannot name a note, so they
    get the same 404 as an unknown id.
    """
    try:
        note_id = int(raw)
    except (TypeError, ValueError):
        raise NoteNotFound()
    if note_id <= 0 or note_id > _MAX_NOTE_ID:
        raise NoteNotFound()
    return note_id


def _require_title_and_content(payload: NoteWrite) -> None:
    if not payload.is_complete:
        raise BadRequest("Title and content are required")


async def _load_note(db: AsyncSession, principal: Principal, raw_id: str) -> Note:
    note = await get_tenant_note(db, principal.tenant_id, _parse_note_id(raw_id))
    # The query is already tenant-scoped; the predicate keeps the rule explicit.
    if note is None or not can_access_note(principal, note):
        raise NoteNotFound()
    return note


# ---------------------------------------------------------
# Read
# ---------------------------------------------------------
@router.get("", response_model=List[NoteOut])
async def list_notes(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return list(await list_tenant_notes(db, principal.tenant_id))


@router.get("/{note_id}", response_model=NoteOut)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return await _load_note(db, principal, note_id)


# ---------------------------------------------------------
# Write
# ---------------------------------------------------------
@router.post("", response_model=NoteOut, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteWrite,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    _require_title_and_content(payload)

    # Quota check + insert + commit form one critical section per tenant:
    # process-local lock plus the tenant row lock for other workers.
    async with tenant_write_lock(principal.tenant_id):
        tenant = await get_tenant_for_update(db, principal.tenant_id)
        if tenant is None:
            # Signed claims name a tenant that is gone: the token is stale.
            await db.rollback()
            raise AuthenticationRequired()

        # Read before any rollback: rollback expires the instance and a lazy
        # reload is not allowed outside an await.
        tenant_id = tenant.id
        plan = tenant.subscription_plan

        note_count = await count_tenant_notes(db, tenant_id)
        if not can_create_note(plan, note_count):
            await db.rollback()
            logger.info(
                "Note quota reached (plan=%s, limit=%s)",
                plan,
                get_note_limit_for_plan(plan),
                extra={"tenant_id": tenant_id, "user_id": principal.user_id},
            )
            raise PlanLimitExceeded()

        note = Note(
            title=payload.title,
            content=payload.content,
            tenant_id=tenant_id,
            user_id=principal.user_id,
        )
        db.add(note)
        await db.commit()

    await db.refresh(note)
    return note


@router.put("/{note_id}", response_model=NoteOut)
async def update_note(
    note_id: str,
    payload: NoteWrite,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    # Full replacement only: both fields every time.
    _require_title_and_content(payload)

    note = await _load_note(db, principal, note_id)

    note.title = payload.title
    note.content = payload.content
    # Set explicitly: onupdate only fires when SQLAlchemy sees a changed
    # column, and an identical title/content is still an update.
    note.updated_at = utcnow()

    await db.commit()
    await db.refresh(note)
    return note


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    note = await _load_note(db, principal, note_id)

    await db.delete(note)
    await db.commit()
    return MessageResponse(message="Note deleted successfully")
