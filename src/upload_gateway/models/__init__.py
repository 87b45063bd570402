from upload_gateway.models.enums import CollisionDecision, PipelineState
from upload_gateway.models.outcome import (
    CollisionError,
    NotPostError,
    Success,
    TransportError,
    UnexpectedError,
    UploadOutcome,
    ValidationError,
)
from upload_gateway.models.upload import NamedFile, SyncResult, UploadRequest

__all__ = [
    "CollisionDecision",
    "CollisionError",
    "NamedFile",
    "NotPostError",
    "PipelineState",
    "Success",
    "SyncResult",
    "TransportError",
    "UnexpectedError",
    "UploadOutcome",
    "UploadRequest",
    "ValidationError",
]
