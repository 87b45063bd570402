"""Push files to, and remove files from, the remote static host."""

import logging
from collections.abc import Mapping

from minio import Minio

from upload_gateway.config import Settings, get_settings
from upload_gateway.minio_client import RemoteHost, get_minio_client, get_remote_host
from upload_gateway.models.upload import NamedFile, SyncResult

logger = logging.getLogger(__name__)


class RemoteSync:
    """Transfers files to the static host under a fixed service prefix.

    ``upload`` and ``remove`` report success as a boolean and never raise for
    transport failures; callers decide whether to retry the whole request.
    """

    def __init__(
        self,
        client: Minio,
        bucket: str,
        host: RemoteHost,
        prefix: str = "service/",
    ):
        self.client = client
        self.bucket = bucket
        self.host = host
        self.prefix = prefix.strip("/") + "/" if prefix.strip("/") else ""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RemoteSync":
        settings = settings or get_settings()
        return cls(
            client=get_minio_client(settings),
            bucket=settings.static_bucket,
            host=get_remote_host(settings),
            prefix=settings.static_service_prefix,
        )

    def ensure_bucket(self) -> None:
        """Create the bucket if it doesn't exist."""
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
            logger.info("Created bucket %s on %s", self.bucket, self.host.label)
        else:
            logger.info("Bucket %s already exists on %s", self.bucket, self.host.label)

    def ping(self) -> bool:
        try:
            self.client.bucket_exists(self.bucket)
        except Exception as e:
            logger.error("Static host %s unreachable: %s", self.host.label, e)
            return False
        return True

    def object_key(self, stored_name: str) -> str:
        return f"{self.prefix}{stored_name}"

    def remote_path(self, url: str) -> str:
        """Object key of a previously returned public URL.

        Handles both the bucket served at the host root and path-style URLs
        (``<host>/<bucket>/<key>``).
        """
        path = url.removeprefix(self.host.base_url)
        return path.removeprefix(f"{self.bucket}/")

    def upload(self, named_file: NamedFile) -> bool:
        if named_file.local_path is None:
            logger.error("No local file to upload for %s", named_file.stored_name)
            return False

        key = self.object_key(named_file.stored_name)
        try:
            self.client.fput_object(
                self.bucket,
                key,
                str(named_file.local_path),
                content_type=named_file.content_type or "application/octet-stream",
            )
        except Exception:
            logger.exception("Failed to upload %s to %s", key, self.host.label)
            return False

        logger.info("Uploaded %s (%d bytes) to %s", key, named_file.size_bytes, self.host.label)
        return True

    def remove(self, remote_path: str) -> bool:
        try:
            self.client.remove_object(self.bucket, remote_path)
        except Exception:
            logger.exception("Failed to remove %s from %s", remote_path, self.host.label)
            return False

        logger.info("Removed %s from %s", remote_path, self.host.label)
        return True

    def sync(self, attributes: Mapping[str, NamedFile | str]) -> dict[str, SyncResult]:
        """Upload pending files and remove cleared ones, one result per key.

        A ``NamedFile`` value is uploaded; a string value is a public URL
        returned earlier and is removed. Failures don't stop sibling items.
        """
        results: dict[str, SyncResult] = {}
        for key, value in attributes.items():
            if isinstance(value, NamedFile):
                ok = self.upload(value)
            else:
                ok = self.remove(self.remote_path(value))
            results[key] = SyncResult(key=key, succeeded=ok)
        return results
