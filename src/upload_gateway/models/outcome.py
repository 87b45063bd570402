"""Terminal outcomes of the upload pipeline.

Every stage either hands its result to the next one or returns one of these
values; nothing is raised across stage boundaries. ``to_payload`` renders the
JSON body sent back to the client, which is the only thing distinguishing a
failure from a success at the HTTP level.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from upload_gateway.api.schemas.uploads import UploadErrorResponse, UploadResponse
from upload_gateway.models.enums import PipelineState

NO_POST_MESSAGE = "NoPost"
FILE_EXISTS_MESSAGE = "Sorry, a file with this name already exists."
TRANSPORT_FAILED_MESSAGE = "Upload failed."


@dataclass(frozen=True)
class UploadOutcome:
    state: ClassVar[PipelineState]

    @property
    def ok(self) -> bool:
        return False

    def to_payload(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class Success(UploadOutcome):
    state: ClassVar[PipelineState] = PipelineState.responded

    id: str
    link: str
    filename: str | None = None

    @property
    def ok(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        return UploadResponse(
            id=self.id, filelink=self.link, filename=self.filename,
        ).model_dump(exclude_none=True)


@dataclass(frozen=True)
class _ErrorOutcome(UploadOutcome):
    message: str

    def to_payload(self) -> dict[str, Any]:
        return UploadErrorResponse(error=self.message).model_dump()


@dataclass(frozen=True)
class NotPostError(_ErrorOutcome):
    state: ClassVar[PipelineState] = PipelineState.rejected_not_post

    message: str = NO_POST_MESSAGE


@dataclass(frozen=True)
class ValidationError(_ErrorOutcome):
    state: ClassVar[PipelineState] = PipelineState.rejected_validation


@dataclass(frozen=True)
class CollisionError(_ErrorOutcome):
    state: ClassVar[PipelineState] = PipelineState.rejected_collision

    message: str = FILE_EXISTS_MESSAGE


@dataclass(frozen=True)
class TransportError(_ErrorOutcome):
    state: ClassVar[PipelineState] = PipelineState.failed_transport

    message: str = TRANSPORT_FAILED_MESSAGE


@dataclass(frozen=True)
class UnexpectedError(_ErrorOutcome):
    state: ClassVar[PipelineState] = PipelineState.failed_unexpected
