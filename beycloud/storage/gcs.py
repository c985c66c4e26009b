import asyncio
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from google.cloud import storage

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


class GCSStorageBackend(StorageBackend):
    """
    Google Cloud Storage backend.

    google-cloud-storage is synchronous; calls run in worker threads via
    asyncio.to_thread.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        project_id: Optional[str] = None,
        key_file_path: Optional[str] = None,
        credentials: Optional[Dict[str, Any]] = None,
        client: Optional[storage.Client] = None,
    ):
        """
        Initialize GCS backend.

        Args:
            bucket: Bucket name
            project_id: Google Cloud project id
            key_file_path: Path to a service account key file
            credentials: Parsed service account key (alternative to key_file_path)
            client: Pre-configured storage.Client for testing.
                    If provided, credential material is not required.
        """
        if not bucket or not bucket.strip():
            raise ConfigurationError("Bucket must be provided")
        if not project_id or not project_id.strip():
            raise ConfigurationError("Project must be provided")

        if client is None:
            if key_file_path and key_file_path.strip():
                client = storage.Client.from_service_account_json(key_file_path, project=project_id)
            elif credentials:
                client = storage.Client.from_service_account_info(credentials, project=project_id)
            else:
                raise ConfigurationError("Key file path or credentials must be provided")

        self.bucket_name = bucket
        self.project_id = project_id
        self.client = client
        self.bucket = client.bucket(bucket)
        logger.info(f"GCS storage backend for bucket {bucket} (project={project_id})")

    async def _sign(self, key: str, expires_in: int) -> str:
        blob = self.bucket.blob(key)
        return await asyncio.to_thread(
            blob.generate_signed_url,
            version="v4",
            expiration=timedelta(seconds=expires_in),
            method="GET",
        )

    async def _exists(self, key: str) -> bool:
        return await asyncio.to_thread(self.bucket.blob(key).exists)

    async def exists(self, key: str) -> bool:
        with storage_operation("exists", key):
            return await self._exists(key)

    async def upload(
        self,
        key: str,
        content: UploadContent,
        content_type: Optional[str] = None,
    ) -> str:
        with storage_operation("upload", key):
            key = normalize_key(key, content_type)
            data = await read_content(content)

            blob = self.bucket.blob(key)
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)

            logger.info(f"Uploaded {len(data)} bytes to gs://{self.bucket_name}/{key}")
            return await self._sign(key, DEFAULT_EXPIRES_IN)

    async def download(self, key: str) -> bytes:
        with storage_operation("download", key):
            await self._ensure_exists(key)

            data = await asyncio.to_thread(self.bucket.blob(key).download_as_bytes)
            logger.debug(f"Downloaded {len(data)} bytes from gs://{self.bucket_name}/{key}")
            return data

    async def delete(self, key: str) -> bool:
        with storage_operation("delete", key):
            await self._ensure_exists(key)

            await asyncio.to_thread(self.bucket.blob(key).delete)
            logger.info(f"Deleted gs://{self.bucket_name}/{key}")
            return True

    def _to_metadata(self, blob, url: str) -> FileMetadata:
        return FileMetadata(
            key=blob.name,
            size=int(blob.size) if blob.size is not None else None,
            last_modified=blob.updated,
            type=FOLDER_TYPE if is_folder(blob.name) else blob.content_type,
            url=url,
        )

    async def get_metadata(self, key: str) -> FileMetadata:
        with storage_operation("get_metadata", key):
            await self._ensure_exists(key)

            blob = await asyncio.to_thread(self.bucket.get_blob, key)
            return self._to_metadata(blob, await self._sign(key, DEFAULT_EXPIRES_IN))

    async def list_metadata(
        self,
        max_keys: int = DEFAULT_MAX_KEYS,
        prefix: Optional[str] = None,
    ) -> List[FileMetadata]:
        with storage_operation("list_metadata", prefix):
            if max_keys is not None and max_keys <= 0:
                return []

            blobs = await asyncio.to_thread(
                lambda: list(self.client.list_blobs(
                    self.bucket_name,
                    prefix=prefix,
                    max_results=max_keys,
                ))
            )

            results: List[FileMetadata] = []
            for blob in blobs[:max_keys]:
                url = await self._sign(blob.name, DEFAULT_EXPIRES_IN) if blob.name else ""
                results.append(self._to_metadata(blob, url))
            return results

    async def get_signed_url(self, key: str, expires_in: int = DEFAULT_EXPIRES_IN) -> str:
        with storage_operation("get_signed_url", key):
            await self._ensure_exists(key)
            return await self._sign(key, expires_in)
