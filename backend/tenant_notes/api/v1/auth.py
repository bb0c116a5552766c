# backend/tenant_notes/api/v1/auth.py
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.api.deps.auth import get_current_user
from tenant_notes.core.exceptions import InvalidCredentials
from tenant_notes.core.security import create_access_token, dummy_verify, verify_password
from tenant_notes.crud.user import get_user_by_email
from tenant_notes.db.session import get_db
from tenant_notes.models.user import User
from tenant_notes.schemas.auth import LoginRequest, LoginResponse, UserOut
from tenant_notes.utils.logging import get_logger, log_security_event

router = APIRouter(prefix="/auth", tags=["auth"])

logger = get_logger(__name__)


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)) -> LoginResponse:
    """
    Body: {"email": "admin@acme.test", "password": "password"}
    Returns: {"token": "...", "user": {...}}

    Unknown email and wrong password get the same 401.
    """
    user = await get_user_by_email(db, payload.email)

    if user is None:
        # bcrypt is CPU-bound; keep it off the event loop.
        await asyncio.to_thread(dummy_verify)
        log_security_event(logger, "failed_login", reason="unknown_email")
        raise InvalidCredentials()

    if not await asyncio.to_thread(verify_password, payload.password, user.password_hash):
        log_security_event(logger, "failed_login", reason="bad_password", user_id=user.id, tenant_id=user.tenant_id)
        raise InvalidCredentials()

    token = create_access_token(user)
    logger.info("User logged in", extra={"user_id": user.id, "tenant_id": user.tenant_id})
    return LoginResponse(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)) -> UserOut:
    """
    Current user with their tenant (name, slug, plan) read from the store.
    """
    return UserOut.model_validate(user)
