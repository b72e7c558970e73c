"""S3-compatible object storage (AWS S3, MinIO, etc.) with checksums."""

from __future__ import annotations

import asyncio
import hashlib
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import ClientError

from portal.infrastructure.exceptions import (
    StorageAlreadyExistsError,
    StorageChecksumMismatchError,
    StorageUploadError,
)


class S3StorageService:
    """S3-compatible storage with server-side encryption.

    Uses boto3 (sync) via asyncio.to_thread for the async API. Objects are
    uploaded public-read so the returned URL works without signing.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        public_base_url: str | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            public_base_url: Optional CDN or bucket URL used for public links.
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload with checksum validation. Idempotent if same checksum."""
        def _upload() -> dict[str, Any]:
            try:
                head = self._client.head_object(Bucket=self.bucket, Key=storage_ref)
                existing = (head.get("Metadata") or {}).get("sha256")
                if existing == expected_checksum:
                    return {
                        "storage_ref": storage_ref,
                        "checksum": existing,
                        "size": head["ContentLength"],
                    }
                raise StorageAlreadyExistsError(storage_ref)
            except ClientError as e:
                if e.response["Error"]["Code"] not in ("404", "NoSuchKey"):
                    raise

            file_data.seek(0)
            body = file_data.read()
            computed = hashlib.sha256(body).hexdigest()
            if computed != expected_checksum:
                raise StorageChecksumMismatchError(storage_ref, expected_checksum, computed)
            meta = {"sha256": computed, "original-size": str(len(body))}
            for k, v in (metadata or {}).items():
                meta[k.lower().replace("_", "-")] = v
            self._client.put_object(
                Bucket=self.bucket,
                Key=storage_ref,
                Body=body,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                ACL="public-read",
                Metadata=meta,
            )
            return {"storage_ref": storage_ref, "checksum": computed, "size": len(body)}

        try:
            return await asyncio.to_thread(_upload)
        except (StorageChecksumMismatchError, StorageAlreadyExistsError):
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    def public_url(self, storage_ref: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{storage_ref}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{storage_ref}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{storage_ref}"
