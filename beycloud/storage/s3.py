import logging
from typing import Any, Dict, List, Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from beycloud.exceptions import ConfigurationError
from beycloud.models.domain import FOLDER_TYPE, FileMetadata
from beycloud.utils.extension import is_folder, normalize_key
from .base import (
    DEFAULT_EXPIRES_IN,
    DEFAULT_MAX_KEYS,
    StorageBackend,
    UploadContent,
    read_content,
    storage_operation,
)

logger = logging.getLogger(__name__)


NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3StorageBackend(StorageBackend):
    """
    S3 storage backend using aioboto3.

    Also serves S3-compatible stores (DigitalOcean Spaces, MinIO) through
    endpoint_url, with optional path-style addressing.
    """

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        force_path_style: bool = False,
        session: Optional[aioboto3.Session] = None,
    ):
        """
        Initialize S3 backend.

        Args:
            bucket: Bucket name
            region: Bucket region
            access_key: AWS access key id
            secret_key: AWS secret access key
            endpoint_url: Custom endpoint for S3-compatible stores
            force_path_style: Use https://endpoint/bucket/key addressing
            session: Pre-configured aioboto3 session for testing.
                     If provided, credentials are not required.
        """
        if not bucket or not bucket.strip():
            raise ConfigurationError("Bucket must be provided")
        if not region or not region.strip():
            raise ConfigurationError("Region must be provided")

        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url or None
        self.force_path_style = force_path_style

        if session:
            self.session = session
        else:
            if not access_key or not secret_key:
                raise ConfigurationError("Credentials must be provided")

            self.session = aioboto3.Session(
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )

        logger.info(
            f"S3 storage backend for bucket {bucket} "
            f"(region={region}, endpoint={self.endpoint_url or 'aws'})"
        )

    def _client(self):
        client_kwargs: Dict[str, Any] = {}
        if self.endpoint_url:
            client_kwargs["endpoint_url"] = self.endpoint_url
        if self.force_path_style:
            client_kwargs["config"] = Config(s3={"addressing_style": "path"})
        return self.session.client("s3", **client_kwargs)

    @staticmethod
    def _is_not_found(error: ClientError) -> bool:
        code = str(error.response.get("Error", {}).get("Code"))
        return code in NOT_FOUND_CODES

    async def _presign(self, s3, key: str, expires_in: int) -> str:
        return await s3.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=max(1, expires_in),
        )

    async def _exists(self, key: str) -> bool:
        async with self._client() as s3:
            try:
                await s3.head_object(Bucket=self.bucket, Key=key)
                return True
            except ClientError as e:
                if self._is_not_found(e):
                    return False
                raise

    async def exists(self, key: str) -> bool:
        """Check if key exists in S3 via HeadObject."""
        with storage_operation("exists", key):
            return await self._exists(key)

    async def upload(
        self,
        key: str,
        content: UploadContent,
        content_type: Optional[str] = None,
    ) -> str:
        """Upload data to S3 and return a presigned GET URL."""
        with storage_operation("upload", key):
            key = normalize_key(key, content_type)
            data = await read_content(content)

            put_kwargs: Dict[str, Any] = {
                "Bucket": self.bucket,
                "Key": key,
                "Body": data,
            }
            if content_type:
                put_kwargs["ContentType"] = content_type

            async with self._client() as s3:
                await s3.put_object(**put_kwargs)
                url = await self._presign(s3, key, DEFAULT_EXPIRES_IN)

            logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket}/{key}")
            return url

    async def download(self, key: str) -> bytes:
        """Download data from S3."""
        with storage_operation("download", key):
            await self._ensure_exists(key)

            async with self._client() as s3:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                data = await response["Body"].read()

            logger.debug(f"Downloaded {len(data)} bytes from s3://{self.bucket}/{key}")
            return data

    async def delete(self, key: str) -> bool:
        """Delete key from S3."""
        with storage_operation("delete", key):
            await self._ensure_exists(key)

            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket, Key=key)

            logger.info(f"Deleted s3://{self.bucket}/{key}")
            return True

    async def get_metadata(self, key: str) -> FileMetadata:
        with storage_operation("get_metadata", key):
            await self._ensure_exists(key)

            async with self._client() as s3:
                head = await s3.head_object(Bucket=self.bucket, Key=key)
                url = await self._presign(s3, key, DEFAULT_EXPIRES_IN)

            return FileMetadata(
                key=key,
                size=head.get("ContentLength"),
                last_modified=head.get("LastModified"),
                type=FOLDER_TYPE if is_folder(key) else head.get("ContentType"),
                url=url,
            )

    async def list_metadata(
        self,
        max_keys: int = DEFAULT_MAX_KEYS,
        prefix: Optional[str] = None,
    ) -> List[FileMetadata]:
        """List objects with ListObjectsV2; each entry carries a presigned URL."""
        with storage_operation("list_metadata", prefix):
            if max_keys is not None and max_keys <= 0:
                return []

            list_kwargs: Dict[str, Any] = {
                "Bucket": self.bucket,
                "MaxKeys": max_keys if max_keys is not None else DEFAULT_MAX_KEYS,
            }
            if prefix:
                list_kwargs["Prefix"] = prefix

            results: List[FileMetadata] = []
            async with self._client() as s3:
                response = await s3.list_objects_v2(**list_kwargs)

                for item in response.get("Contents", []):
                    key = item.get("Key")
                    results.append(FileMetadata(
                        key=key,
                        size=item.get("Size"),
                        last_modified=item.get("LastModified"),
                        type=FOLDER_TYPE if is_folder(key) else None,
                        url=await self._presign(s3, key, DEFAULT_EXPIRES_IN) if key else "",
                    ))

            return results[:list_kwargs["MaxKeys"]]

    async def get_signed_url(self, key: str, expires_in: int = DEFAULT_EXPIRES_IN) -> str:
        with storage_operation("get_signed_url", key):
            await self._ensure_exists(key)

            async with self._client() as s3:
                return await self._presign(s3, key, expires_in)
