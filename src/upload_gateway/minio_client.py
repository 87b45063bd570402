import logging
from dataclasses import dataclass

from minio import Minio

from upload_gateway.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteHost:
    """The static host files are pushed to.

    Production and non-production differ only in the host label.
    """

    domain: str
    production: bool
    secure: bool = True

    @property
    def label(self) -> str:
        env = "" if self.production else "test."
        return f"static.{env}{self.domain}"

    @property
    def base_url(self) -> str:
        protocol = "https" if self.secure else "http"
        return f"{protocol}://{self.label}/"


def get_remote_host(settings: Settings | None = None) -> RemoteHost:
    settings = settings or get_settings()
    return RemoteHost(
        domain=settings.static_domain,
        production=settings.is_production,
        secure=settings.static_use_ssl,
    )


def get_minio_client(settings: Settings | None = None) -> Minio:
    """Create a MinIO client for the environment's static host."""
    settings = settings or get_settings()
    host = get_remote_host(settings)
    return Minio(
        host.label,
        access_key=settings.static_access_key,
        secret_key=settings.static_secret_key,
        secure=host.secure,
    )
