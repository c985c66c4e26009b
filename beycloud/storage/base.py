import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import AsyncIterable, BinaryIO, Dict, Iterable, Iterator, List, Optional, Union

from beycloud.exceptions import (
    KeyNotFoundError,
    StorageError,
    StorageOperationError,
)
from beycloud.models.domain import FileMetadata

logger = logging.getLogger(__name__)


UploadContent = Union[bytes, bytearray, memoryview, BinaryIO, Iterable[bytes], AsyncIterable[bytes]]

DEFAULT_MAX_KEYS = 1000
DEFAULT_EXPIRES_IN = 3600

OPERATION_MESSAGES: Dict[str, str] = {
    "exists": "Failed to check if file exists",
    "upload": "Failed to upload file",
    "download": "Failed to download file",
    "delete": "Failed to delete file",
    "get_metadata": "Failed to get file",
    "list_metadata": "Failed to list files",
    "get_signed_url": "Failed to generate signed URL",
}


@contextmanager
def storage_operation(operation: str, key: Optional[str] = None) -> Iterator[None]:
    """
    Wrap failures of a public backend operation.

    Every exception leaving the block is re-raised with the message
    "<operation prefix>: <cause>". StorageError subclasses keep their class
    (KeyNotFoundError stays KeyNotFoundError); anything else becomes a
    StorageOperationError. The original exception is chained.
    """
    prefix = OPERATION_MESSAGES[operation]
    try:
        yield
    except StorageError as e:
        logger.error(f"{prefix} (key={key}): {e}")
        raise type(e)(f"{prefix}: {e}", operation=operation) from e
    except Exception as e:
        logger.error(f"{prefix} (key={key}): {e}")
        raise StorageOperationError(f"{prefix}: {e}", operation=operation) from e


async def read_content(content: UploadContent) -> bytes:
    """
    Buffer upload content into a single bytes object.

    Accepts bytes-like objects, binary file-like objects, and sync or async
    iterables of byte chunks. Streams are read to the end; nothing is
    flushed incrementally.
    """
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)

    if hasattr(content, "read"):
        data = content.read()
        return data.encode() if isinstance(data, str) else bytes(data)

    chunks: List[bytes] = []
    if hasattr(content, "__aiter__"):
        async for chunk in content:
            chunks.append(bytes(chunk))
    else:
        for chunk in content:
            chunks.append(bytes(chunk))
    return b"".join(chunks)


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Read, delete, metadata and signed-URL operations check exists() first
    and fail with KeyNotFoundError("The specified key does not exist.")
    before touching the underlying store.
    """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if key exists in storage.

        Returns False for missing keys instead of raising.
        """
        pass

    @abstractmethod
    async def upload(
        self,
        key: str,
        content: UploadContent,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload data to storage.

        Args:
            key: Storage key/path. An extension inferred from content_type is
                 appended when the key has none.
            content: Bytes, binary file object, or iterable of byte chunks
            content_type: Optional MIME type

        Returns:
            Dereferenceable URL of the stored object

        Raises:
            StorageOperationError: If the write fails
        """
        pass

    @abstractmethod
    async def download(self, key: str) -> bytes:
        """
        Download data from storage.

        Args:
            key: Storage key/path

        Returns:
            File bytes

        Raises:
            KeyNotFoundError: If key doesn't exist
            StorageOperationError: If the read fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key from storage.

        Returns:
            True once deleted

        Raises:
            KeyNotFoundError: If key doesn't exist
        """
        pass

    @abstractmethod
    async def get_metadata(self, key: str) -> FileMetadata:
        """
        Get metadata of a stored object.

        Raises:
            KeyNotFoundError: If key doesn't exist
        """
        pass

    @abstractmethod
    async def list_metadata(
        self,
        max_keys: int = DEFAULT_MAX_KEYS,
        prefix: Optional[str] = None,
    ) -> List[FileMetadata]:
        """
        List stored objects.

        Args:
            max_keys: Maximum number of entries returned
            prefix: Optional key prefix filter

        Returns:
            At most max_keys metadata entries; empty list if nothing matches
        """
        pass

    @abstractmethod
    async def get_signed_url(self, key: str, expires_in: int = DEFAULT_EXPIRES_IN) -> str:
        """
        Get a time-limited read URL.

        Args:
            key: Storage key/path
            expires_in: URL lifetime in seconds

        Raises:
            KeyNotFoundError: If key doesn't exist
        """
        pass

    async def close(self) -> None:
        """Release client resources held by the backend."""
        pass

    async def _exists(self, key: str) -> bool:
        """Existence check without the operation wrapper of exists()."""
        return await self.exists(key)

    async def _ensure_exists(self, key: str) -> None:
        if not await self._exists(key):
            raise KeyNotFoundError()
