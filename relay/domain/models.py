"""Core domain models for email requests, wire payloads, and stored documents.

- EmailRequest: the record a client writes to the trigger collection
- EmailPayload: the body posted to the notification API
- Document: one record in the document store
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class EmailRequest(BaseModel):
    """Email request decoded from a stored document.

    All six fields are required strings. ``text`` is the seed the client
    wrote; the body actually sent is composed from the fixed template.
    Unknown fields in the stored document are ignored.
    """

    from_: StrictStr = Field(..., alias="from", description="Sender address")
    to: StrictStr = Field(..., description="Recipient address")
    subject: StrictStr = Field(..., description="Subject line")
    text: StrictStr = Field(..., description="Template seed text")
    user_name: StrictStr = Field(..., description="Name of the user sharing files")
    recipient_name: StrictStr = Field(..., description="Name of the recipient")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class EmailPayload(BaseModel):
    """JSON body sent to the notification API.

    Serialize with ``model_dump_json(by_alias=True)`` so the sender field
    goes out as ``from``.
    """

    from_: StrictStr = Field(..., alias="from")
    to: StrictStr
    subject: StrictStr
    text: StrictStr

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Document(BaseModel):
    """A record in the document store.

    ``data`` holds the raw JSON bytes exactly as written; decoding is the
    consumer's job.
    """

    collection: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1, description="Principal that owns the record")
    data: bytes = Field(..., description="Raw document body (JSON bytes)")
    version: int = Field(1, ge=1)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("collection", "key", "owner")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped
