import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from azure.storage.blob import BlobSasPermissions, ContentSettings, generate_blob_sas
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from beycloud.exceptions import ConfigurationError, StorageOperationError
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


class AzureBlobStorageBackend(StorageBackend):
    """
    Azure Blob Storage backend using the async azure-storage-blob client.

    Signed URLs are read-only SAS tokens signed with the storage account
    key, so the connection string must include AccountKey.
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        container: Optional[str] = None,
        container_client: Optional[ContainerClient] = None,
        account_key: Optional[str] = None,
    ):
        """
        Initialize Azure Blob backend.

        Args:
            connection_string: Storage account connection string
            container: Container name
            container_client: Pre-configured ContainerClient for testing.
                              If provided, connection_string is ignored.
            account_key: Account key used to sign SAS URLs. Taken from the
                         connection string when omitted.
        """
        if container_client is None and (not connection_string or not connection_string.strip()):
            raise ConfigurationError("Connection string must be provided")
        if not container or not container.strip():
            raise ConfigurationError("Container parameter must be provided")

        self.container = container
        self.service_client: Optional[BlobServiceClient] = None

        if container_client:
            self.container_client = container_client
        else:
            self.service_client = BlobServiceClient.from_connection_string(connection_string)
            self.container_client = self.service_client.get_container_client(container)
            if account_key is None:
                account_key = getattr(self.service_client.credential, "account_key", None)

        self.account_key = account_key
        logger.info(f"Azure Blob storage backend for container {container}")

    async def _sign(self, key: str, expires_in: int) -> str:
        if not self.account_key:
            raise StorageOperationError("Account key is required to sign URLs")

        blob_client = self.container_client.get_blob_client(key)
        starts_on = datetime.now(timezone.utc)
        sas_token = generate_blob_sas(
            account_name=blob_client.account_name,
            container_name=self.container,
            blob_name=key,
            account_key=self.account_key,
            permission=BlobSasPermissions(read=True),
            start=starts_on,
            expiry=starts_on + timedelta(seconds=expires_in),
            protocol="https,http",
        )
        return f"{blob_client.url}?{sas_token}"

    async def _exists(self, key: str) -> bool:
        return await self.container_client.get_blob_client(key).exists()

    async def exists(self, key: str) -> bool:
        with storage_operation("exists", key):
            return await self._exists(key)

    async def upload(
        self,
        key: str,
        content: UploadContent,
        content_type: Optional[str] = None,
    ) -> str:
        """Upload a block blob, overwriting any existing one, and return a SAS URL."""
        with storage_operation("upload", key):
            key = normalize_key(key, content_type)
            data = await read_content(content)

            await self.container_client.get_blob_client(key).upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type) if content_type else None,
            )

            logger.info(f"Uploaded {len(data)} bytes to {self.container}/{key}")
            return await self._sign(key, DEFAULT_EXPIRES_IN)

    async def download(self, key: str) -> bytes:
        with storage_operation("download", key):
            await self._ensure_exists(key)

            stream = await self.container_client.get_blob_client(key).download_blob()
            data = await stream.readall()
            logger.debug(f"Downloaded {len(data)} bytes from {self.container}/{key}")
            return data

    async def delete(self, key: str) -> bool:
        with storage_operation("delete", key):
            await self._ensure_exists(key)

            await self.container_client.get_blob_client(key).delete_blob()
            logger.info(f"Deleted {self.container}/{key}")
            return True

    async def get_metadata(self, key: str) -> FileMetadata:
        with storage_operation("get_metadata", key):
            await self._ensure_exists(key)

            properties = await self.container_client.get_blob_client(key).get_blob_properties()
            content_type = properties.content_settings.content_type if properties.content_settings else None

            return FileMetadata(
                key=key,
                size=properties.size,
                last_modified=properties.last_modified,
                type=FOLDER_TYPE if is_folder(key) else content_type,
                url=await self._sign(key, DEFAULT_EXPIRES_IN),
            )

    async def list_metadata(
        self,
        max_keys: int = DEFAULT_MAX_KEYS,
        prefix: Optional[str] = None,
    ) -> List[FileMetadata]:
        with storage_operation("list_metadata", prefix):
            results: List[FileMetadata] = []
            if max_keys is not None and max_keys <= 0:
                return results

            async for blob in self.container_client.list_blobs(name_starts_with=prefix):
                content_type = blob.content_settings.content_type if blob.content_settings else None
                results.append(FileMetadata(
                    key=blob.name,
                    size=blob.size,
                    last_modified=blob.last_modified,
                    type=FOLDER_TYPE if is_folder(blob.name) else content_type,
                    url=await self._sign(blob.name, DEFAULT_EXPIRES_IN),
                ))

                if max_keys is not None and len(results) >= max_keys:
                    break

            return results

    async def get_signed_url(self, key: str, expires_in: int = DEFAULT_EXPIRES_IN) -> str:
        with storage_operation("get_signed_url", key):
            await self._ensure_exists(key)
            return await self._sign(key, expires_in)

    async def close(self) -> None:
        if self.service_client is not None:
            await self.service_client.close()
