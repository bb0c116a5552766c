from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TenantOut(BaseModel):
    id: int
    name: str
    slug: str
    subscription_plan: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TenantUsageOut(TenantOut):
    """
    Tenant plus quota usage, for GET /tenants/current.
    note_limit is None on unlimited plans.
    """

    note_count: int
    note_limit: Optional[int] = None
    can_create_notes: bool


class TenantUpgradeResponse(BaseModel):
    message: str
    tenant: TenantOut
