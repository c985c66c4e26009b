"""Unified async object storage over S3, DigitalOcean Spaces, Azure Blob, GCS and the local filesystem."""

from .client import BeyCloud
from .config import (
    AwsConfig,
    AzureConfig,
    DigitalOceanConfig,
    GCSConfig,
    LocalConfig,
    StorageSettings,
)
from .exceptions import (
    ConfigurationError,
    InvalidKeyError,
    KeyNotFoundError,
    StorageError,
    StorageOperationError,
)
from .logging_config import configure_logging
from .models import FileMetadata, Provider
from .storage import StorageBackend

__all__ = [
    "BeyCloud",
    "AwsConfig",
    "AzureConfig",
    "DigitalOceanConfig",
    "GCSConfig",
    "LocalConfig",
    "StorageSettings",
    "ConfigurationError",
    "InvalidKeyError",
    "KeyNotFoundError",
    "StorageError",
    "StorageOperationError",
    "configure_logging",
    "FileMetadata",
    "Provider",
    "StorageBackend",
]
