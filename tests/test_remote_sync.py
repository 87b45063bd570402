from unittest.mock import ANY

from upload_gateway.config import Settings
from upload_gateway.minio_client import RemoteHost, get_remote_host
from upload_gateway.models import NamedFile
from upload_gateway.remote_sync import RemoteSync


def _pending(tmp_path, name="a1700000000.5x10.png"):
    local = tmp_path / "pending"
    local.write_bytes(b"hello")
    return NamedFile(
        stored_name=name, size_bytes=5, extension="png",
        content_type="image/jpeg", local_path=local,
    )


def test_host_label_depends_on_environment():
    assert RemoteHost("example.com", production=True).base_url == "https://static.example.com/"
    assert RemoteHost("example.com", production=False).base_url == "https://static.test.example.com/"
    assert RemoteHost("example.com", production=False, secure=False).label == "static.test.example.com"


def test_remote_host_from_settings():
    prod = get_remote_host(Settings(_env_file=None, app_env="production", static_domain="cdn.io"))
    dev = get_remote_host(Settings(_env_file=None, app_env="staging", static_domain="cdn.io"))
    assert prod.label == "static.cdn.io"
    assert dev.label == "static.test.cdn.io"


def test_upload_puts_file_under_service_prefix(remote_sync, minio_client, tmp_path):
    pending = _pending(tmp_path)

    assert remote_sync.upload(pending) is True
    minio_client.fput_object.assert_called_once_with(
        "static", "service/a1700000000.5x10.png", str(pending.local_path),
        content_type="image/jpeg",
    )


def test_upload_failure_returns_false(remote_sync, minio_client, tmp_path):
    minio_client.fput_object.side_effect = ConnectionError("host down")
    assert remote_sync.upload(_pending(tmp_path)) is False


def test_upload_without_local_file_returns_false(remote_sync, minio_client):
    pending = NamedFile(stored_name="x.png", size_bytes=0, extension="png")
    assert remote_sync.upload(pending) is False
    minio_client.fput_object.assert_not_called()


def test_remove_strips_host_prefix(remote_sync, minio_client):
    results = remote_sync.sync({"avatar": "https://static.test.example.com/service/old.png"})

    minio_client.remove_object.assert_called_once_with("static", "service/old.png")
    assert results["avatar"].succeeded is True


def test_remove_handles_path_style_urls(remote_sync, minio_client):
    assert remote_sync.remote_path("https://static.test.example.com/static/service/old.png") == "service/old.png"

    remote_sync.sync({"avatar": "https://static.test.example.com/static/service/old.png"})

    minio_client.remove_object.assert_called_once_with("static", "service/old.png")


def test_sync_keeps_going_after_a_failure(remote_sync, minio_client, tmp_path):
    minio_client.fput_object.side_effect = ConnectionError("host down")

    results = remote_sync.sync({
        "photo": _pending(tmp_path),
        "old_photo": "https://static.test.example.com/service/old.png",
    })

    assert {k: r.succeeded for k, r in results.items()} == {"photo": False, "old_photo": True}
    minio_client.remove_object.assert_called_once_with("static", ANY)


def test_remove_failure_returns_false(remote_sync, minio_client):
    minio_client.remove_object.side_effect = RuntimeError("denied")
    assert remote_sync.remove("service/old.png") is False


def test_prefix_is_normalized(minio_client):
    host = RemoteHost("example.com", production=False)
    assert RemoteSync(minio_client, "static", host, prefix="/service").object_key("a.png") == "service/a.png"
    assert RemoteSync(minio_client, "static", host, prefix="").object_key("a.png") == "a.png"


def test_ensure_bucket_creates_missing_bucket(remote_sync, minio_client):
    minio_client.bucket_exists.return_value = False
    remote_sync.ensure_bucket()
    minio_client.make_bucket.assert_called_once_with("static")


def test_ping_reports_unreachable_host(remote_sync, minio_client):
    assert remote_sync.ping() is True
    minio_client.bucket_exists.side_effect = OSError("no route to host")
    assert remote_sync.ping() is False
