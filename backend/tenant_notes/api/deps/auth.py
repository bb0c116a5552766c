from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.permissions import Principal
from tenant_notes.core.exceptions import AuthenticationRequired
from tenant_notes.core.security import decode_access_token
from tenant_notes.crud.user import get_user
from tenant_notes.db.session import get_db
from tenant_notes.models.user import User

# auto_error=False: we raise our own 401 with the {"error": ...} body.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    Authorization guard for every protected route.

    Needs "Authorization: Bearer <token>" with a valid, unexpired token.
    Role checks are left to the route (see deps/permissions.py).
    """
    if credentials is None:
        raise AuthenticationRequired()

    principal = decode_access_token(credentials.credentials)
    if principal is None:
        raise AuthenticationRequired()

    return principal


async def get_current_user(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Full user row for the principal. A token for a user that no longer
    exists, or whose tenant changed, is treated as unauthenticated.
    """
    user = await get_user(db, principal.user_id)
    if user is None or user.tenant_id != principal.tenant_id:
        raise AuthenticationRequired()
    return user
