"""
Tests for civicpulse/services/storage/s3_service.py

The MinIO client is replaced with a stand-in that fails the way an unreachable
server does.
"""

import asyncio

import pytest
from urllib3.exceptions import ProtocolError

from civicpulse.core.exceptions import BackendError, ValidationFailedError
from civicpulse.services.storage import s3_service
from civicpulse.services.storage.s3_service import S3Service, build_image_key, validate_image


class UnreachableMinio:
    def __init__(self, *args, fail_on=("bucket_exists", "put_object"), **kwargs):
        self.fail_on = fail_on
        self.objects = {}

    def _maybe_fail(self, name):
        if name in self.fail_on:
            raise ProtocolError("Connection aborted.", ConnectionRefusedError(111, "Connection refused"))

    def bucket_exists(self, bucket_name):
        self._maybe_fail("bucket_exists")
        return True

    def make_bucket(self, bucket_name):
        self._maybe_fail("make_bucket")

    def put_object(self, bucket_name, key, data, length, content_type=None):
        self._maybe_fail("put_object")
        self.objects[key] = data.read()


def test_unreachable_storage_is_backend_error(monkeypatch):
    monkeypatch.setattr(s3_service, "Minio", UnreachableMinio)
    with pytest.raises(BackendError):
        S3Service()


def test_failed_upload_is_backend_error(monkeypatch):
    monkeypatch.setattr(s3_service, "Minio", lambda *a, **kw: UnreachableMinio(fail_on=("put_object",)))
    service = S3Service()

    with pytest.raises(BackendError):
        asyncio.run(service.upload_file(b"gif89a", "user/1-bench.gif", "image/gif"))


def test_upload_returns_public_url(monkeypatch):
    monkeypatch.setattr(s3_service, "Minio", lambda *a, **kw: UnreachableMinio(fail_on=()))
    service = S3Service()

    url = asyncio.run(service.upload_file(b"gif89a", "user/1-bench.gif", "image/gif"))

    assert url.endswith(f"/{service.bucket_name}/user/1-bench.gif")
    assert service.client.objects == {"user/1-bench.gif": b"gif89a"}


def test_validate_image_rejects_wrong_type():
    with pytest.raises(ValidationFailedError):
        validate_image("application/pdf", 10)


def test_image_key_is_filename_safe():
    key = build_image_key("user", "my photo (1).png")
    assert key.startswith("user/")
    assert key.endswith("-my-photo-1-.png")
