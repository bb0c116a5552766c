from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class NoteWrite(BaseModel):
    """
    Body for POST /notes and PUT /notes/{id}.

    Both fields are optional at the schema level so a missing field reaches
    the handler and is reported as 400 "Title and content are required"
    instead of a generic validation error. Empty strings normalize to None;
    whitespace is kept as written.
    """

    title: Optional[str] = None
    content: Optional[str] = None

    @field_validator("title", "content")
    @classmethod
    def empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def is_complete(self) -> bool:
        return self.title is not None and self.content is not None


class NoteOut(BaseModel):
    id: int
    title: str
    content: str
    tenant_id: int
    user_id: int

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
