"""File and image validators for uploads.

A validator turns an ``UploadRequest`` (or ``None`` when the request had no
file) plus the endpoint's ``validatorOptions`` into a ``ValidationResult``.
All messages are collected; callers decide how many of them to surface.
"""

import fnmatch
import io
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from upload_gateway.models.upload import UploadRequest

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> str | None:
        return self.errors[0] if self.errors else None


class Validator(Protocol):
    def validate(
        self, upload: UploadRequest | None, options: Mapping[str, Any],
    ) -> ValidationResult: ...


class FileConstraints(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )

    max_size: int | None = None
    min_size: int | None = None
    extensions: list[str] | None = None
    mime_types: list[str] | None = None

    @field_validator("extensions", "mime_types", mode="before")
    @classmethod
    def _split_list(cls, value: Any) -> Any:
        # "png, jpg" and ["png", "jpg"] are both accepted
        if isinstance(value, str):
            value = [v for v in value.replace(",", " ").split() if v]
        if value is not None:
            value = [str(v).strip().lower().lstrip(".") for v in value]
        return value


class ImageConstraints(FileConstraints):
    min_width: int | None = None
    max_width: int | None = None
    min_height: int | None = None
    max_height: int | None = None


def too_big_message(name: str, limit: int) -> str:
    return f'The file "{name}" is too big. Its size cannot exceed {limit} bytes.'


def constraints_for(only_images: bool, options: Mapping[str, Any]) -> FileConstraints:
    """Parse raw validator options; raises pydantic.ValidationError on unknown keys."""
    model = ImageConstraints if only_images else FileConstraints
    return model.model_validate(dict(options))


class FileValidator:
    """Size, extension and MIME type checks."""

    constraints_model: type[FileConstraints] = FileConstraints

    def validate(
        self, upload: UploadRequest | None, options: Mapping[str, Any],
    ) -> ValidationResult:
        constraints = self.constraints_model.model_validate(dict(options))
        result = ValidationResult()
        if upload is None:
            result.errors.append("Please upload a file.")
            return result

        self._check_file(upload, constraints, result)
        return result

    def _check_file(
        self, upload: UploadRequest, c: FileConstraints, result: ValidationResult,
    ) -> None:
        name = upload.original_name
        # "", "." and ".." would resolve to the destination directory itself
        if not name.strip("."):
            result.errors.append(f'The file name "{name}" is not valid.')
        if c.max_size is not None and upload.declared_size > c.max_size:
            result.errors.append(too_big_message(name, c.max_size))
        if c.min_size is not None and upload.declared_size < c.min_size:
            result.errors.append(
                f'The file "{name}" is too small. Its size cannot be smaller than {c.min_size} bytes.'
            )
        if c.extensions and upload.extension not in c.extensions:
            result.errors.append(
                "Only files with these extensions are allowed: "
                f"{', '.join(c.extensions)}."
            )
        if c.mime_types:
            mime = (upload.content_type or "").lower()
            if not any(fnmatch.fnmatchcase(mime, pattern) for pattern in c.mime_types):
                result.errors.append(
                    "Only files with these MIME types are allowed: "
                    f"{', '.join(c.mime_types)}."
                )


class ImageValidator(FileValidator):
    """File checks plus decodability and pixel dimension bounds."""

    constraints_model = ImageConstraints

    def _check_file(
        self, upload: UploadRequest, c: ImageConstraints, result: ValidationResult,
    ) -> None:
        super()._check_file(upload, c, result)

        name = upload.original_name
        try:
            with Image.open(io.BytesIO(upload.file_bytes)) as img:
                width, height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError):
            logger.debug("Could not decode %s as an image", name)
            result.errors.append(f'The file "{name}" is not an image.')
            return

        if c.min_width is not None and width < c.min_width:
            result.errors.append(
                f'The image "{name}" is too small. The width cannot be smaller than {c.min_width} pixels.'
            )
        if c.max_width is not None and width > c.max_width:
            result.errors.append(
                f'The image "{name}" is too large. The width cannot be larger than {c.max_width} pixels.'
            )
        if c.min_height is not None and height < c.min_height:
            result.errors.append(
                f'The image "{name}" is too small. The height cannot be smaller than {c.min_height} pixels.'
            )
        if c.max_height is not None and height > c.max_height:
            result.errors.append(
                f'The image "{name}" is too large. The height cannot be larger than {c.max_height} pixels.'
            )


def default_validator(only_images: bool) -> Validator:
    return ImageValidator() if only_images else FileValidator()
