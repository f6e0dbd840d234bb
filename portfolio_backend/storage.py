"""
Storage abstraction for S3-compatible object storage and in-memory testing.

The managed platform exposes public buckets behind an S3 gateway; objects are
written through boto3 and read back by browsers through their public URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore.config import Config

DEFAULT_CACHE_CONTROL = "max-age=3600"


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload_bytes(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        ...

    def remove(self, bucket: str, paths: list[str]) -> None:
        ...

    def public_url(self, bucket: str, path: str) -> str:
        ...

    def list_objects(self, bucket: str, prefix: str = "") -> list[str]:
        ...

    def presign_get(self, bucket: str, path: str, expires_in: int = 3600) -> str:
        ...


class ObjectExistsError(Exception):
    """Raised when uploading without upsert over an existing object."""


def storage_path_from_url(url: Optional[str], bucket: str) -> Optional[str]:
    """Return the object path of a public URL pointing into ``bucket``."""
    if not url:
        return None
    marker = f"/{bucket}/"
    index = url.find(marker)
    if index < 0:
        return None
    path = url[index + len(marker) :].split("?", 1)[0]
    return path or None


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage/v1/object/public"
    stored_objects: dict = field(default_factory=dict)

    def upload_bytes(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        key = (bucket, path)
        if key in self.stored_objects and not upsert:
            raise ObjectExistsError(f"{bucket}/{path}")
        self.stored_objects[key] = {"data": bytes(data), "content_type": content_type}

    def remove(self, bucket: str, paths: list[str]) -> None:
        for path in paths:
            self.stored_objects.pop((bucket, path), None)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/{bucket}/{path}"

    def list_objects(self, bucket: str, prefix: str = "") -> list[str]:
        return sorted(
            path
            for (stored_bucket, path) in self.stored_objects
            if stored_bucket == bucket and path.startswith(prefix)
        )

    def presign_get(self, bucket: str, path: str, expires_in: int = 3600) -> str:
        return f"{self.base_url}/{bucket}/{path}?op=get&expires={expires_in}"

    def get_bytes(self, bucket: str, path: str) -> bytes:
        stored = self.stored_objects.get((bucket, path))
        if stored is None:
            raise FileNotFoundError(f"{bucket}/{path}")
        return stored["data"]


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client (the BaaS storage gateway, MinIO, AWS S3).
    """

    endpoint: str
    region: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str

    def __post_init__(self):
        # Storage gateways generally only accept path-style addressing.
        config = Config(
            s3={"addressing_style": "path"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def _exists(self, bucket: str, path: str) -> bool:
        response = self._client.list_objects_v2(Bucket=bucket, Prefix=path, MaxKeys=1)
        return any(obj["Key"] == path for obj in response.get("Contents", []))

    def upload_bytes(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        if not upsert and self._exists(bucket, path):
            raise ObjectExistsError(f"{bucket}/{path}")
        self._client.put_object(
            Bucket=bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
            CacheControl=DEFAULT_CACHE_CONTROL,
        )

    def remove(self, bucket: str, paths: list[str]) -> None:
        if not paths:
            return
        self._client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": [{"Key": path} for path in paths], "Quiet": True},
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/{bucket}/{path}"

    def list_objects(self, bucket: str, prefix: str = "") -> list[str]:
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            keys.extend(obj["Key"] for obj in page.get("Contents", []))
        return keys

    def presign_get(self, bucket: str, path: str, expires_in: int = 3600) -> str:
        return self._client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": bucket, "Key": path},
            ExpiresIn=expires_in,
        )
