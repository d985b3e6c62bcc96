"""Blob Storage — S3-compatible object storage for project images, plus an in-memory double.

Invariants:
    - Objects are addressed by a flat name inside one bucket
    - public_url(name) is deterministic and ends with "/<name>"
    - Backend failures are raised as BlobStorageError; callers map them to domain errors

Design Decisions:
    - boto3 client is synchronous: calls run in a worker thread so the event loop never blocks
    - InMemoryBlobStore backs local runs (STORAGE_BACKEND=memory) and tests
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError


class BlobStorageError(Exception):
    """Raised when the blob store rejects or fails an operation."""


@dataclass
class InMemoryBlobStore:
    """Test double for storage interactions."""

    base_url: str = "https://storage.example.test/project-images"
    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    async def put(self, name: str, payload: bytes, content_type: str) -> None:
        if name in self.objects:
            raise BlobStorageError(f"Object already exists: {name}")
        self.objects[name] = (payload, content_type)

    async def delete(self, name: str) -> None:
        if name not in self.objects:
            raise BlobStorageError(f"Object not found: {name}")
        del self.objects[name]

    async def list_names(self) -> list[str]:
        return sorted(self.objects)

    def public_url(self, name: str) -> str:
        return f"{self.base_url}/{name}"


@dataclass
class S3BlobStore:
    """S3-compatible storage client (AWS S3, MinIO, R2, Supabase S3 gateway, ...)."""

    bucket: str
    region: str | None = None
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    public_base_url: str | None = None

    def __post_init__(self):
        config = Config(signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    async def put(self, name: str, payload: bytes, content_type: str) -> None:
        await self._call(
            self._client.put_object,
            Bucket=self.bucket, Key=name, Body=payload, ContentType=content_type,
        )

    async def delete(self, name: str) -> None:
        await self._call(self._client.delete_object, Bucket=self.bucket, Key=name)

    async def list_names(self) -> list[str]:
        response = await self._call(self._client.list_objects_v2, Bucket=self.bucket)
        return [item["Key"] for item in response.get("Contents", [])]

    def public_url(self, name: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{name}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{name}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{name}"

    async def _call(self, method, **kwargs):
        try:
            return await asyncio.to_thread(method, **kwargs)
        except (BotoCoreError, ClientError) as e:
            raise BlobStorageError(str(e)) from e
