import io
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from upload_gateway.api.app import create_app
from upload_gateway.config import Settings, UploadConfig
from upload_gateway.minio_client import RemoteHost
from upload_gateway.remote_sync import RemoteSync

BASE_URL = "http://cdn.test/uploads/"


def make_jpeg(total_size: int | None = None, size: tuple[int, int] = (32, 32)) -> bytes:
    """Small valid JPEG, zero-padded after EOI up to ``total_size`` bytes."""
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format="JPEG")
    data = buf.getvalue()
    if total_size is not None:
        data += b"\0" * (total_size - len(data))
    return data


@pytest.fixture
def minio_client():
    client = MagicMock(name="Minio")
    client.bucket_exists.return_value = True
    return client


@pytest.fixture
def remote_sync(minio_client):
    return RemoteSync(
        client=minio_client,
        bucket="static",
        host=RemoteHost(domain="example.com", production=False),
        prefix="service/",
    )


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "statics"
    path.mkdir()
    return path


@pytest.fixture
def make_config(upload_dir):
    def _make(**options):
        options.setdefault("path", str(upload_dir))
        options.setdefault("url", BASE_URL)
        return UploadConfig.from_options(options)

    return _make


@pytest.fixture
def settings(upload_dir, tmp_path):
    return Settings(
        _env_file=None,
        upload_endpoints={
            "image": {
                "path": str(upload_dir),
                "url": BASE_URL,
                "unique": True,
                "validatorOptions": {"maxSize": 100000},
            },
            "file": {
                "path": str(tmp_path / "files"),
                "url": BASE_URL,
                "uploadOnlyImage": False,
                "unique": False,
                "translit": True,
                "uploadParam": "attachment",
                "validatorOptions": {"maxSize": 100000},
            },
        },
    )


@pytest.fixture
def client(settings, remote_sync):
    return TestClient(create_app(settings=settings, remote_sync=remote_sync))
