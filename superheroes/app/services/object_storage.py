"""
Object storage collaborator.

ObjectStore is the seam between image orchestration and the bucket. The
production implementation talks to any S3-compatible service (AWS S3,
Cloudflare R2, MinIO) through boto3; blocking client calls run in a worker
thread and are awaited one at a time.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings
from app.core.exceptions import StorageNotConfiguredException, UpstreamStorageException

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """put/delete by key; both raise UpstreamStorageException on failure."""

    bucket: str
    public_base_url: str

    async def put(self, key: str, data: bytes, content_type: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class S3ObjectStore:

    def __init__(self, client: Any, *, bucket: str, public_base_url: str) -> None:
        self._client = client
        self.bucket = bucket
        self.public_base_url = public_base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        if not settings.STORAGE_PUBLIC_URL:
            raise StorageNotConfiguredException("STORAGE_PUBLIC_URL")
        client = boto3.client(
            "s3",
            endpoint_url=settings.STORAGE_ENDPOINT_URL,
            region_name=settings.STORAGE_REGION,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY or None,
            aws_secret_access_key=settings.STORAGE_SECRET_KEY or None,
            config=Config(
                connect_timeout=settings.STORAGE_CONNECT_TIMEOUT,
                read_timeout=settings.STORAGE_READ_TIMEOUT,
                # One attempt per call; callers retry whole operations.
                retries={"total_max_attempts": 1},
            ),
        )
        return cls(
            client,
            bucket=settings.STORAGE_BUCKET,
            public_base_url=settings.STORAGE_PUBLIC_URL,
        )

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload failed: bucket=%s key=%s: %s", self.bucket, key, exc)
            raise UpstreamStorageException("put", key, str(exc)) from exc
        logger.info("Uploaded object: bucket=%s key=%s bytes=%d", self.bucket, key, len(data))

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.delete_object,
                Bucket=self.bucket,
                Key=key,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Delete failed: bucket=%s key=%s: %s", self.bucket, key, exc)
            raise UpstreamStorageException("delete", key, str(exc)) from exc
        logger.info("Deleted object: bucket=%s key=%s", self.bucket, key)
