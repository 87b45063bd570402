"""Upload pipeline: validate → name → collision check → sync → respond."""

import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from upload_gateway.collision import check_and_maybe_reject
from upload_gateway.config import Settings, UploadConfig, get_settings
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
from upload_gateway.models.upload import NamedFile, UploadRequest
from upload_gateway.naming import NamePolicy
from upload_gateway.remote_sync import RemoteSync
from upload_gateway.validation import Validator, constraints_for, default_validator

logger = logging.getLogger(__name__)

WRITE_METHOD = "POST"


class UploadPipeline:
    """Handles one upload request for one configured endpoint.

    Each stage either passes its result on or returns a terminal outcome, so
    a rejection never leaves side effects behind. Anything raised is turned
    into ``UnexpectedError`` once, in ``run``.
    """

    def __init__(
        self,
        config: UploadConfig,
        remote_sync: RemoteSync,
        *,
        validator: Validator | None = None,
        clock: Callable[[], float] = time.time,
        id_generator: Callable[[], str] | None = None,
        sync_max_size: int = 2 * 1024 * 1024,
        sync_extension: str = "png",
    ):
        self.config = config
        self.remote_sync = remote_sync
        self.validator = validator or default_validator(config.only_images)
        self.name_policy = NamePolicy(
            unique=config.unique_names,
            translit=config.translit,
            clock=clock,
            id_generator=id_generator,
        )
        self.sync_max_size = sync_max_size
        self.sync_extension = sync_extension
        self.max_upload_size = constraints_for(
            config.only_images, config.validator_options,
        ).max_size

    def run(self, method: str, upload: UploadRequest | None) -> UploadOutcome:
        try:
            outcome = self._run(method, upload)
        except Exception as e:
            logger.exception("Upload failed unexpectedly")
            outcome = UnexpectedError(message=str(e))

        if outcome.ok:
            logger.info("Upload stored as %s", outcome.id)
        else:
            logger.info("Upload ended in %s: %s", outcome.state.value, outcome.to_payload()["error"])
        return outcome

    def _run(self, method: str, upload: UploadRequest | None) -> UploadOutcome:
        if method.upper() != WRITE_METHOD:
            return NotPostError()
        _log_state(PipelineState.received, upload)

        result = self.validator.validate(upload, self.config.validator_options)
        if not result.valid:
            return ValidationError(message=result.first_error)
        _log_state(PipelineState.validated, upload)

        stored_name = self.name_policy.compute_name(upload.original_name, upload.extension)
        _log_state(PipelineState.named, upload, stored_name)

        decision = check_and_maybe_reject(
            self.config.destination_path, stored_name, self.config.allow_replace,
        )
        if decision is CollisionDecision.reject_existing:
            return CollisionError()
        _log_state(PipelineState.collision_checked, upload, stored_name)

        if not self._store(upload, stored_name):
            return TransportError()
        _log_state(PipelineState.synced, upload, stored_name)

        return Success(
            id=stored_name,
            link=self.config.public_base_url + stored_name,
            filename=None if self.config.only_images else stored_name,
        )

    def _store(self, upload: UploadRequest, stored_name: str) -> bool:
        """Sync a temporary copy, then move it into place only if the sync succeeded.

        If the move fails the remote object is removed again before the error
        propagates to ``run``.
        """
        destination = self.config.destination_path
        sync_name = self.name_policy.compute_sync_name(
            stored_name, upload.declared_size, self.sync_max_size, self.sync_extension,
        )

        tmp = tempfile.NamedTemporaryFile(dir=destination, prefix=".upload-", delete=False)
        tmp_path = Path(tmp.name)
        try:
            with tmp:
                tmp.write(upload.file_bytes)

            pending = NamedFile(
                stored_name=sync_name,
                size_bytes=upload.declared_size,
                extension=self.sync_extension,
                content_type=upload.content_type,
                local_path=tmp_path,
            )
            results = self.remote_sync.sync({self.config.upload_param: pending})
            if not results[self.config.upload_param].succeeded:
                return False

            try:
                os.replace(tmp_path, destination / stored_name)
            except OSError:
                # Nothing local points at the synced object; take it back down
                self.remote_sync.remove(self.remote_sync.object_key(sync_name))
                raise
            return True
        finally:
            tmp_path.unlink(missing_ok=True)


def _log_state(state: PipelineState, upload: UploadRequest | None, name: str | None = None) -> None:
    original = upload.original_name if upload is not None else None
    logger.debug("Upload %s -> %s (stored name: %s)", original, state.value, name)


def build_pipelines(
    remote_sync: RemoteSync, settings: Settings | None = None,
) -> dict[str, UploadPipeline]:
    """One pipeline per configured endpoint; raises ConfigurationError on bad options."""
    settings = settings or get_settings()
    pipelines: dict[str, UploadPipeline] = {}
    for name, options in settings.upload_endpoints.items():
        pipelines[name] = UploadPipeline(
            UploadConfig.from_options(options),
            remote_sync,
            sync_max_size=settings.sync_max_size,
            sync_extension=settings.sync_forced_extension,
        )
        logger.info("Configured upload endpoint %s", name)
    return pipelines
