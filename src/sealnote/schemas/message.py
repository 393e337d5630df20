"""Pydantic schemas for messages.

Learn: "from"/"to" are Python keywords, so the fields are named
sender/recipient and aliased on the wire.

Update bodies rely on pydantic's fields-set tracking: a field the client
left out is absent from model_dump(exclude_unset=True) and the stored
value is kept, while an explicit null is passed through and replaces it.
Empty-string passwords mean "no password" and are dropped here, before
the service ever sees them.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

MESSAGE_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"

# Rich-text document (e.g. a TipTap/ProseMirror JSON tree); stored as-is.
ContentDocument = dict[str, Any]


def _blank_to_none(value):
    if isinstance(value, str) and value == "":
        return None
    return value


# ─── Requests ───────────────────────────────────────────


class MessageCreate(BaseModel):
    message_id: Optional[str] = Field(None, pattern=MESSAGE_ID_PATTERN)
    content: Optional[ContentDocument] = None
    initial_password: Optional[str] = None
    hint: Optional[str] = None
    sender: Optional[str] = Field(None, alias="from", max_length=255)
    recipient: Optional[str] = Field(None, alias="to", max_length=255)

    model_config = {"populate_by_name": True}

    @field_validator("initial_password", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return _blank_to_none(value)


class MessageUpdate(BaseModel):
    content: Optional[ContentDocument] = None
    password: Optional[str] = None
    hint: Optional[str] = None
    sender: Optional[str] = Field(None, alias="from", max_length=255)
    recipient: Optional[str] = Field(None, alias="to", max_length=255)

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def drop_blank_password(cls, data):
        if isinstance(data, dict) and data.get("password") in ("", None):
            data = {k: v for k, v in data.items() if k != "password"}
        return data

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class MessageUnlock(BaseModel):
    password: Optional[str] = None

    @field_validator("password", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return _blank_to_none(value)


class PasswordUpdate(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
    new_hint: Optional[str] = None


# ─── Responses ──────────────────────────────────────────


class MessageSummary(BaseModel):
    """Public metadata. Never includes content or password state."""

    id: str
    created_at: datetime
    updated_at: datetime
    hint: Optional[str] = None
    sender: Optional[str] = Field(None, serialization_alias="from")
    recipient: Optional[str] = Field(None, serialization_alias="to")

    model_config = {"from_attributes": True}


class AdminMessageSummary(MessageSummary):
    project_id: uuid.UUID


class MessageDetail(MessageSummary):
    content: Optional[ContentDocument] = None


class Ack(BaseModel):
    message: str


class UploadAck(Ack):
    file_name: Optional[str] = None
