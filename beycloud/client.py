"""BeyCloud facade: one entry point over every storage provider."""

from typing import Any, List, Optional, Union

from beycloud.config.providers import resolve_provider
from beycloud.config.storage import StorageSettings
from beycloud.models.domain import FileMetadata, Provider
from beycloud.storage.base import (
    DEFAULT_EXPIRES_IN,
    DEFAULT_MAX_KEYS,
    StorageBackend,
    UploadContent,
)
from beycloud.storage.factory import create_storage_backend


class BeyCloud:
    """
    Storage client bound to one provider.

    The backend is chosen once at construction from the declared provider
    and its configuration; every operation is forwarded unchanged.

    Example:
        async with BeyCloud("local", {"basePath": "/tmp/store"}) as cloud:
            url = await cloud.upload("skyline", data, "image/jpeg")
            meta = await cloud.get_metadata("skyline.jpg")
    """

    def __init__(self, provider: Union[str, Provider], config: Any):
        """
        Args:
            provider: "aws", "digitalocean", "azure", "gcloud" or "local"
            config: Config model or mapping matching the provider

        Raises:
            ConfigurationError: If the configuration does not fit the provider
        """
        self.provider = resolve_provider(provider)
        self.backend: StorageBackend = create_storage_backend(self.provider, config)

    @classmethod
    def from_settings(cls, settings: StorageSettings | None = None) -> "BeyCloud":
        """Build the client from STORAGE_* environment settings."""
        if settings is None:
            settings = StorageSettings()
        return cls(settings.STORAGE_PROVIDER, settings.to_provider_config())

    async def exists(self, key: str) -> bool:
        return await self.backend.exists(key)

    async def upload(
        self,
        key: str,
        content: UploadContent,
        content_type: Optional[str] = None,
    ) -> str:
        return await self.backend.upload(key, content, content_type)

    async def download(self, key: str) -> bytes:
        return await self.backend.download(key)

    async def delete(self, key: str) -> bool:
        return await self.backend.delete(key)

    async def get_metadata(self, key: str) -> FileMetadata:
        return await self.backend.get_metadata(key)

    async def list_metadata(
        self,
        max_keys: int = DEFAULT_MAX_KEYS,
        prefix: Optional[str] = None,
    ) -> List[FileMetadata]:
        return await self.backend.list_metadata(max_keys, prefix)

    async def get_signed_url(self, key: str, expires_in: int = DEFAULT_EXPIRES_IN) -> str:
        return await self.backend.get_signed_url(key, expires_in)

    async def close(self) -> None:
        await self.backend.close()

    async def __aenter__(self) -> "BeyCloud":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
