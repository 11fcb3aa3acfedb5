"""
S3ObjectStore tests against a moto-mocked S3.
"""
from __future__ import annotations

from collections.abc import Iterator

import boto3
import pytest
from moto import mock_aws

from app.core.config import Settings
from app.core.exceptions import StorageNotConfiguredException, UpstreamStorageException
from app.services.object_storage import S3ObjectStore

BUCKET = "superheroes-test"
PUBLIC_URL = "https://cdn.example.test"


@pytest.fixture
def s3_client() -> Iterator[object]:
    with mock_aws():
        client = boto3.client(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def store(s3_client) -> S3ObjectStore:
    return S3ObjectStore(s3_client, bucket=BUCKET, public_base_url=PUBLIC_URL)


@pytest.mark.asyncio
async def test_put_stores_bytes_and_content_type(store: S3ObjectStore, s3_client) -> None:
    await store.put("heroes/1/1-cape.png", b"\x89PNG data", "image/png")

    obj = s3_client.get_object(Bucket=BUCKET, Key="heroes/1/1-cape.png")
    assert obj["Body"].read() == b"\x89PNG data"
    assert obj["ContentType"] == "image/png"


@pytest.mark.asyncio
async def test_delete_removes_object(store: S3ObjectStore, s3_client) -> None:
    await store.put("heroes/1/1-cape.png", b"data", "image/png")

    await store.delete("heroes/1/1-cape.png")

    listing = s3_client.list_objects_v2(Bucket=BUCKET)
    assert listing.get("KeyCount", 0) == 0


@pytest.mark.asyncio
async def test_put_into_missing_bucket_raises_storage_error(s3_client) -> None:
    store = S3ObjectStore(s3_client, bucket="no-such-bucket", public_base_url=PUBLIC_URL)

    with pytest.raises(UpstreamStorageException) as exc_info:
        await store.put("heroes/1/1-cape.png", b"data", "image/png")

    assert exc_info.value.status_code == 502
    assert exc_info.value.key == "heroes/1/1-cape.png"


@pytest.mark.asyncio
async def test_delete_from_missing_bucket_raises_storage_error(s3_client) -> None:
    store = S3ObjectStore(s3_client, bucket="no-such-bucket", public_base_url=PUBLIC_URL)

    with pytest.raises(UpstreamStorageException):
        await store.delete("heroes/1/1-cape.png")


def test_from_settings_uses_storage_configuration() -> None:
    settings = Settings(
        STORAGE_BUCKET="hero-images",
        STORAGE_PUBLIC_URL="https://pub.example.r2.dev/",
        STORAGE_REGION="us-east-1",
        STORAGE_ACCESS_KEY="key",
        STORAGE_SECRET_KEY="secret",
    )

    store = S3ObjectStore.from_settings(settings)

    assert store.bucket == "hero-images"
    assert store.public_base_url == "https://pub.example.r2.dev"


def test_from_settings_requires_public_url() -> None:
    with pytest.raises(StorageNotConfiguredException):
        S3ObjectStore.from_settings(Settings(STORAGE_PUBLIC_URL=""))
