# backend/tenant_notes/schemas/auth.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenant_notes.schemas.tenant import TenantOut


# Plain str rather than EmailStr: seeded accounts live under the reserved
# .test TLD, which email-validator refuses.
class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email is invalid")
        return v


class UserOut(BaseModel):
    id: int
    email: str
    role: str
    tenant_id: int
    tenant: TenantOut

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
