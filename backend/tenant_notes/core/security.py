from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from tenant_notes.auth.permissions import ROLES, Principal
from tenant_notes.core.config import settings

if TYPE_CHECKING:
    from tenant_notes.models.user import User

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


# ---------------------------------------------------------
# Passwords
# ---------------------------------------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognized / corrupt hash in the store
        return False


def dummy_verify() -> None:
    """
    Burn roughly one verify() worth of time for unknown emails so login
    latency does not reveal which addresses exist.
    """
    pwd_context.dummy_verify()


# ---------------------------------------------------------
# Access tokens
# ---------------------------------------------------------
def _normalize_token(token: str | None) -> str:
    # Exactly the credential after "Bearer "; surrounding whitespace only.
    if token is None:
        return ""
    return token.strip()


def create_access_token(user: "User", expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    expire_dt = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # Numeric timestamps for maximum compatibility
    to_encode: dict[str, Any] = {
        "sub": str(user.id),
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "tenantId": user.tenant_id,
        "exp": int(expire_dt.timestamp()),
        "iat": int(now.timestamp()),
    }

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def _principal_from_claims(payload: dict[str, Any]) -> Optional[Principal]:
    user_id = payload.get("userId")
    tenant_id = payload.get("tenantId")
    email = payload.get("email")
    role = payload.get("role")

    # bool is an int subclass; reject it explicitly
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if not isinstance(tenant_id, int) or isinstance(tenant_id, bool):
        return None
    if not isinstance(email, str) or not email:
        return None
    if role not in ROLES:
        return None
    if payload.get("sub") != str(user_id):
        return None

    return Principal(user_id=user_id, email=email, role=role, tenant_id=tenant_id)


def decode_access_token(token: str | None) -> Optional[Principal]:
    """
    Verify signature + expiry and return the Principal.
    Fails closed: any problem yields None, never an exception.
    """
    token = _normalize_token(token)
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require_sub": True, "require_exp": True},
        )
    except JWTError:
        # Includes expired signature, bad format, bad signature, wrong algorithm, etc.
        return None

    if not isinstance(payload, dict):
        return None
    return _principal_from_claims(payload)
