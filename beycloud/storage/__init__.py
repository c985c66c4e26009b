from .base import StorageBackend
from .s3 import S3StorageBackend
from .local import LocalStorageBackend
from .factory import create_storage_backend, create_storage_backend_from_settings


def get_storage_backend() -> StorageBackend:
    """
    Get the storage backend configured by STORAGE_* environment variables.

    Returns:
        Configured storage backend instance

    Raises:
        ConfigurationError: If STORAGE_PROVIDER's configuration is incomplete
    """
    return create_storage_backend_from_settings()


__all__ = [
    "StorageBackend",
    "S3StorageBackend",
    "LocalStorageBackend",
    "create_storage_backend",
    "create_storage_backend_from_settings",
    "get_storage_backend",
]
