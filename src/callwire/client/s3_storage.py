"""S3 object storage transport.

boto3 calls are blocking, so each one runs in a worker thread.
"""

import asyncio
import logging

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from .config import CallwireConfig
from .exceptions import ObjectTooLargeError, StorageError

logger = logging.getLogger("callwire")


class S3StorageTransport:
    """S3 implementation of the StorageTransport protocol.

    Usage:
        storage = S3StorageTransport(config)
        url = await storage.upload(b"...", "avatars/42.png")
        data = await storage.download("avatars/42.png")
        await storage.delete("avatars/42.png")
    """

    def __init__(
        self,
        config: CallwireConfig | None = None,
        session: "boto3.Session | None" = None,
    ):
        """Initialize S3 storage transport.

        Args:
            config: Callwire configuration. If None, loads from environment.
            session: Optional existing boto3 session (for testing or advanced use).
        """
        self.config = config or CallwireConfig()
        self.bucket = self.config.s3_bucket
        self.prefix = self.config.s3_prefix
        self.max_download_bytes = self.config.max_download_bytes

        self._session = session or boto3.Session(
            profile_name=self.config.aws_profile,
            region_name=self.config.aws_region,
        )
        self._s3 = self._session.client(
            "s3",
            config=BotoConfig(retries={"max_attempts": 0}),
        )

    def _key(self, path: str) -> str:
        return f"{self.prefix}{path.lstrip('/')}"

    def _storage_error(self, action: str, path: str, error: ClientError) -> StorageError:
        code = error.response.get("Error", {}).get("Code", "Unknown")
        message = error.response.get("Error", {}).get("Message", str(error))
        return StorageError(f"S3 {action} failed for '{path}' ({code}): {message}", code)

    async def upload(self, data: bytes, path: str) -> str:
        """Upload ``data`` and return a presigned download URL."""
        key = self._key(path)
        try:
            await asyncio.to_thread(self._s3.put_object, Bucket=self.bucket, Key=key, Body=data)
            url = await asyncio.to_thread(
                self._s3.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.config.s3_url_expiry,
            )
        except ClientError as e:
            raise self._storage_error("upload", path, e) from e
        logger.debug("Uploaded %d bytes to s3://%s/%s", len(data), self.bucket, key)
        return url

    async def download(self, path: str) -> bytes:
        """Download the object at ``path``.

        Raises:
            ObjectTooLargeError: If the object exceeds max_download_bytes
            StorageError: If S3 rejects the request
        """
        key = self._key(path)
        try:
            head = await asyncio.to_thread(self._s3.head_object, Bucket=self.bucket, Key=key)
            size = int(head.get("ContentLength", 0))
            if size > self.max_download_bytes:
                raise ObjectTooLargeError(path, size, self.max_download_bytes)

            obj = await asyncio.to_thread(self._s3.get_object, Bucket=self.bucket, Key=key)
            # Read at most one byte past the limit in case the object grew
            try:
                data = await asyncio.to_thread(obj["Body"].read, self.max_download_bytes + 1)
            finally:
                obj["Body"].close()
        except ClientError as e:
            raise self._storage_error("download", path, e) from e

        if len(data) > self.max_download_bytes:
            raise ObjectTooLargeError(path, len(data), self.max_download_bytes)
        return data

    async def delete(self, path: str) -> None:
        """Delete the object at ``path``."""
        key = self._key(path)
        try:
            await asyncio.to_thread(self._s3.delete_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            raise self._storage_error("delete", path, e) from e
