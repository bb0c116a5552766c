# backend/tenant_notes/models/user.py

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_notes.auth.permissions import ROLE_ADMIN, ROLE_MEMBER
from tenant_notes.db.base import Base, utcnow
from tenant_notes.models.tenant import Tenant


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(f"role IN ('{ROLE_ADMIN}', '{ROLE_MEMBER}')", name="role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)

    # bcrypt hash; column keeps the historical name "password"
    password_hash: Mapped[str] = mapped_column("password", String(255), nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_MEMBER)

    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    tenant: Mapped[Tenant] = relationship(lazy="joined")

    @staticmethod
    def normalize_email(value: str) -> str:
        return (value or "").strip().lower()
