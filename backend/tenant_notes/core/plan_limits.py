# ============================
# FILE: tenant_notes/core/plan_limits.py
# Canonical subscription plans and their note quotas
# ============================
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tenant_notes.core.config import settings

PLAN_FREE = "free"
PLAN_PRO = "pro"

PLANS = (PLAN_FREE, PLAN_PRO)


@dataclass(frozen=True)
class PlanNoteLimit:
    # None => unlimited
    max_notes: Optional[int]


PLAN_NOTE_LIMITS: dict[str, PlanNoteLimit] = {
    PLAN_FREE: PlanNoteLimit(max_notes=settings.FREE_PLAN_NOTE_LIMIT),
    PLAN_PRO: PlanNoteLimit(max_notes=None),
}


def normalize_plan(value: str | None) -> str:
    return (value or "").strip().lower()


def get_note_limit_for_plan(plan: str | None) -> Optional[int]:
    """
    Max notes a tenant on `plan` may hold. Unknown plans are treated as free.
    """
    p = normalize_plan(plan)
    if p in PLAN_NOTE_LIMITS:
        return PLAN_NOTE_LIMITS[p].max_notes
    return PLAN_NOTE_LIMITS[PLAN_FREE].max_notes


def can_create_note(plan: str | None, current_count: int) -> bool:
    limit = get_note_limit_for_plan(plan)
    return limit is None or current_count < limit


def get_next_plan(plan: str | None) -> str | None:
    """
    Next plan in the upgrade path, or None if already highest.
    There is no downgrade path.
    """
    return {PLAN_FREE: PLAN_PRO}.get(normalize_plan(plan))
