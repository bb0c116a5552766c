# backend/tenant_notes/core/exceptions.py
"""
Categorical API errors.

Each one is an HTTPException so handlers can simply raise; main.py renders
every HTTPException as {"error": detail}.
"""
from fastapi import HTTPException, status


class AuthenticationRequired(HTTPException):
    """Missing, malformed, invalid or expired bearer token."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentials(AuthenticationRequired):
    def __init__(self):
        super().__init__(detail="Invalid credentials")


class Forbidden(HTTPException):
    """Role or tenant-ownership mismatch."""

    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class PlanLimitExceeded(Forbidden):
    def __init__(self, detail: str = "Free plan limit reached. Upgrade to Pro for unlimited notes."):
        super().__init__(detail=detail)


class BadRequest(HTTPException):
    """Missing required fields or an invalid state transition."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    """
    Entity absent OR outside the caller's tenant. Both cases share one
    message so callers cannot probe other tenants' ids.
    """

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class NoteNotFound(NotFound):
    def __init__(self):
        super().__init__(detail="Note not found")


class TenantNotFound(NotFound):
    def __init__(self):
        super().__init__(detail="Tenant not found")
