# Import models here so Alembic can discover metadata.
from tenant_notes.models.tenant import Tenant  # noqa: F401
from tenant_notes.models.user import User  # noqa: F401
from tenant_notes.models.note import Note  # noqa: F401
