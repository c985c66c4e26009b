"""Exceptions raised by storage backends and the BeyCloud facade."""

from typing import Optional


KEY_NOT_FOUND_MESSAGE = "The specified key does not exist."


class StorageError(Exception):
    """Base exception for storage errors."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class ConfigurationError(StorageError, ValueError):
    """Backend configuration is missing, empty, or of the wrong shape."""
    pass


class KeyNotFoundError(StorageError):
    """Key does not exist in the backend."""

    def __init__(self, message: str = KEY_NOT_FOUND_MESSAGE, operation: Optional[str] = None):
        super().__init__(message, operation)


class InvalidKeyError(StorageError, ValueError):
    """Key cannot be mapped into the backend namespace."""
    pass


class StorageOperationError(StorageError):
    """Transport, permission or I/O failure in the underlying backend."""
    pass
