"""Factory for creating storage backends from a provider id and its configuration."""

from typing import Any, Union

from beycloud.config.providers import (
    AwsConfig,
    AzureConfig,
    DigitalOceanConfig,
    GCSConfig,
    LocalConfig,
    parse_provider_config,
)
from beycloud.config.storage import StorageSettings
from beycloud.exceptions import ConfigurationError
from beycloud.models.domain import Provider
from beycloud.storage.base import StorageBackend
from beycloud.storage.local import LocalStorageBackend
from beycloud.storage.s3 import S3StorageBackend


def create_storage_backend(provider: Union[str, Provider], config: Any) -> StorageBackend:
    """
    Create a storage backend for the declared provider.

    Args:
        provider: "aws", "digitalocean", "azure", "gcloud" or "local"
        config: Config model for the provider, or a mapping of its fields
                (snake_case or camelCase)

    Returns:
        Configured storage backend

    Example:
        local = create_storage_backend("local", {"basePath": "/tmp/store"})
        s3 = create_storage_backend("aws", AwsConfig(
            bucket="photos",
            region="eu-west-1",
            credentials={"access_key_id": "...", "secret_access_key": "..."},
        ))

    Raises:
        ConfigurationError: If the provider is unknown, the configuration has
            another provider's shape, or a required field is empty
    """
    parsed = parse_provider_config(provider, config)

    if isinstance(parsed, AwsConfig):
        return _create_s3_backend(parsed)
    elif isinstance(parsed, AzureConfig):
        return _create_azure_backend(parsed)
    elif isinstance(parsed, GCSConfig):
        return _create_gcs_backend(parsed)
    else:
        return _create_local_backend(parsed)


def create_storage_backend_from_settings(settings: StorageSettings | None = None) -> StorageBackend:
    """
    Create the storage backend selected by environment settings.

    Example:
        # In production
        storage = create_storage_backend_from_settings()

        # In tests with dependency injection
        test_settings = StorageSettings(STORAGE_PROVIDER="local", STORAGE_LOCAL_BASE_PATH=tmp)
        storage = create_storage_backend_from_settings(test_settings)
    """
    if settings is None:
        settings = StorageSettings()

    return create_storage_backend(settings.STORAGE_PROVIDER, settings.to_provider_config())


def _create_local_backend(config: LocalConfig) -> LocalStorageBackend:
    return LocalStorageBackend(base_path=config.base_path)


def _create_s3_backend(config: AwsConfig) -> S3StorageBackend:
    """Create S3 backend; DigitalOcean configs add endpoint and path-style addressing."""
    endpoint_url = None
    force_path_style = False
    if isinstance(config, DigitalOceanConfig):
        if not config.endpoint or not config.endpoint.strip():
            raise ConfigurationError("Endpoint must be provided")
        endpoint_url = config.endpoint
        force_path_style = config.force_path_style

    return S3StorageBackend(
        bucket=config.bucket,
        region=config.region,
        access_key=config.credentials.access_key_id,
        secret_key=config.credentials.secret_access_key,
        endpoint_url=endpoint_url,
        force_path_style=force_path_style,
    )


def _create_azure_backend(config: AzureConfig) -> StorageBackend:
    # Import here to avoid requiring azure-storage-blob if not used
    from beycloud.storage.azure_blob import AzureBlobStorageBackend
    return AzureBlobStorageBackend(
        connection_string=config.connection_string,
        container=config.container,
    )


def _create_gcs_backend(config: GCSConfig) -> StorageBackend:
    # Import here to avoid requiring google-cloud-storage if not used
    from beycloud.storage.gcs import GCSStorageBackend
    return GCSStorageBackend(
        bucket=config.bucket,
        project_id=config.project_id,
        key_file_path=config.key_file_path,
        credentials=config.credentials,
    )
