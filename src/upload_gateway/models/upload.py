import mimetypes
import posixpath
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadRequest:
    """A single uploaded file, parsed from the request body."""

    file_bytes: bytes
    original_name: str
    declared_size: int
    extension: str
    content_type: str | None = None

    @classmethod
    def from_bytes(
        cls, filename: str, data: bytes, content_type: str | None = None,
    ) -> "UploadRequest":
        # Browsers on Windows may send the full client path
        name = posixpath.basename(filename.replace("\\", "/"))
        _, dot, ext = name.rpartition(".")
        return cls(
            file_bytes=data,
            original_name=name,
            declared_size=len(data),
            extension=ext.lower() if dot else "",
            content_type=content_type or mimetypes.guess_type(name)[0],
        )

    @property
    def base_name(self) -> str:
        if not self.extension:
            return self.original_name
        return self.original_name[: -(len(self.extension) + 1)]


@dataclass(frozen=True)
class NamedFile:
    """An upload after naming, ready to be written and synced."""

    stored_name: str
    size_bytes: int
    extension: str
    content_type: str | None = None
    local_path: Path | None = None


@dataclass(frozen=True)
class SyncResult:
    key: str
    succeeded: bool
