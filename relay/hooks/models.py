"""Event contexts passed by the host store to the mutation hooks, and hook results."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from relay.notifications.models import DeliveryResult


class HookEvent(str, Enum):
    """Store lifecycle events the relay exposes an entry point for."""

    SET_DOC = "on_set_doc"
    SET_MANY_DOCS = "on_set_many_docs"
    DELETE_DOC = "on_delete_doc"
    DELETE_MANY_DOCS = "on_delete_many_docs"
    UPLOAD_ASSET = "on_upload_asset"
    DELETE_ASSET = "on_delete_asset"
    DELETE_MANY_ASSETS = "on_delete_many_assets"


class DocVersion(BaseModel):
    """One version of a stored document as seen by a hook."""

    owner: str
    data: bytes = Field(..., description="Raw document body (JSON bytes)")
    version: Optional[int] = None


class DocUpsert(BaseModel):
    """Before and after versions of a document that was set."""

    before: Optional[DocVersion] = None
    after: Optional[DocVersion] = None


class DocContext(BaseModel):
    """Context of a document-set event."""

    caller: str = Field(..., description="Principal that performed the write")
    collection: str
    key: str
    data: DocUpsert


class DocDeleteContext(BaseModel):
    """Context of a document-delete event; data is the deleted version, if any."""

    caller: str
    collection: str
    key: str
    data: Optional[DocVersion] = None


class AssetContext(BaseModel):
    """Context of an asset upload or delete event."""

    caller: str
    collection: str
    full_path: str


@dataclass
class HookResult:
    """Outcome of one hook invocation, surfaced to the host store.

    Attributes:
        event: Entry point that was invoked
        collection: Collection of the mutated record(s), if a single one applies
        key: Key of the mutated record, if a single one applies
        status: "handled", "ignored" or "failed"
        error: Failure string the host logs or propagates
        delivery: Delivery outcome when the pipeline ran
    """

    event: HookEvent
    status: str  # "handled", "ignored", "failed"
    collection: Optional[str] = None
    key: Optional[str] = None
    error: Optional[str] = None
    delivery: Optional[DeliveryResult] = None

    def is_success(self) -> bool:
        return self.status in ("handled", "ignored")

