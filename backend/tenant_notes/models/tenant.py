# backend/tenant_notes/models/tenant.py

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tenant_notes.core.plan_limits import PLAN_FREE, PLAN_PRO
from tenant_notes.db.base import Base, utcnow


class Tenant(Base):
    __tablename__ = "tenants"
    __table_args__ = (
        CheckConstraint(
            f"subscription_plan IN ('{PLAN_FREE}', '{PLAN_PRO}')",
            name="subscription_plan",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # free -> pro is the only transition (see api/v1/tenants.py)
    subscription_plan: Mapped[str] = mapped_column(String(20), nullable=False, default=PLAN_FREE)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
