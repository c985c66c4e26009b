import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os

from beycloud.exceptions import ConfigurationError, InvalidKeyError, KeyNotFoundError
from beycloud.models.domain import FOLDER_TYPE, FileMetadata
from beycloud.utils.extension import extract_extension, is_folder, normalize_key
from .base import (
    DEFAULT_EXPIRES_IN,
    DEFAULT_MAX_KEYS,
    StorageBackend,
    UploadContent,
    read_content,
    storage_operation,
)

logger = logging.getLogger(__name__)


META_SUFFIX = ".meta"


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage backend.

    Objects live at <base_path>/<key>. The content type given at upload is
    kept in a sidecar file <base_path>/<key>.meta as {"contentType": ...},
    since the filesystem has nowhere to store it.

    Signed URLs are plain file:// URLs; expiry is not enforced.
    """

    def __init__(self, base_path: Optional[str] = None):
        if base_path is None or not str(base_path).strip():
            raise ConfigurationError("Base path must be provided")

        self.base_path = Path(base_path).expanduser().absolute()
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local storage backend at {self.base_path}")

    def _get_full_path(self, key: str) -> Path:
        """Convert storage key to full filesystem path."""
        full_path = self.base_path / key
        # Ensure path is within base_path
        try:
            full_path.resolve().relative_to(self.base_path.resolve())
        except ValueError:
            raise InvalidKeyError(f"Key escapes storage root: {key}") from None
        if key and full_path.name.endswith(META_SUFFIX):
            raise InvalidKeyError(f"Key uses reserved suffix {META_SUFFIX}: {key}")
        return full_path

    @staticmethod
    def _meta_path(full_path: Path) -> Path:
        return full_path.with_name(full_path.name + META_SUFFIX)

    @staticmethod
    def _url(full_path: Path) -> str:
        return full_path.as_uri()

    async def exists(self, key: str) -> bool:
        """Check if key exists in local filesystem."""
        try:
            await aiofiles.os.stat(self._get_full_path(key))
            return True
        except Exception:
            return False

    async def upload(
        self,
        key: str,
        content: UploadContent,
        content_type: Optional[str] = None,
    ) -> str:
        """Write content (and the content-type sidecar) to the filesystem."""
        with storage_operation("upload", key):
            key = normalize_key(key, content_type)
            full_path = self._get_full_path(key)
            await aiofiles.os.makedirs(full_path.parent, exist_ok=True)

            data = await read_content(content)
            async with aiofiles.open(full_path, "wb") as f:
                await f.write(data)

            if content_type:
                async with aiofiles.open(self._meta_path(full_path), "w") as f:
                    await f.write(json.dumps({"contentType": content_type}))
            else:
                await self._remove_sidecar(full_path)

            logger.info(f"Uploaded {len(data)} bytes to {key}")
            return self._url(full_path)

    async def download(self, key: str) -> bytes:
        """Read the whole file into memory."""
        with storage_operation("download", key):
            await self._ensure_exists(key)

            async with aiofiles.open(self._get_full_path(key), "rb") as f:
                data = await f.read()
            logger.debug(f"Downloaded {len(data)} bytes from {key}")
            return data

    async def delete(self, key: str) -> bool:
        """Delete the file and its sidecar, if any."""
        with storage_operation("delete", key):
            await self._ensure_exists(key)

            full_path = self._get_full_path(key)
            await aiofiles.os.remove(full_path)
            await self._remove_sidecar(full_path)

            logger.info(f"Deleted {key}")
            return True

    async def _remove_sidecar(self, full_path: Path) -> None:
        try:
            await aiofiles.os.remove(self._meta_path(full_path))
        except FileNotFoundError:
            pass

    async def _read_content_type(self, full_path: Path) -> Optional[str]:
        try:
            async with aiofiles.open(self._meta_path(full_path), "r") as f:
                raw = await f.read()
        except FileNotFoundError:
            return None
        return json.loads(raw).get("contentType")

    async def get_metadata(self, key: str) -> FileMetadata:
        """Stat the file and attach the sidecar content type."""
        with storage_operation("get_metadata", key):
            await self._ensure_exists(key)

            full_path = self._get_full_path(key)
            stat = await aiofiles.os.stat(full_path)
            content_type = await self._read_content_type(full_path)

            if content_type:
                file_type = content_type
            elif is_folder(key) or full_path.is_dir():
                file_type = FOLDER_TYPE
            else:
                file_type = extract_extension(key)

            return FileMetadata(
                key=key,
                size=stat.st_size,
                last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                type=file_type,
                url=self._url(full_path),
            )

    async def list_metadata(
        self,
        max_keys: int = DEFAULT_MAX_KEYS,
        prefix: Optional[str] = None,
    ) -> List[FileMetadata]:
        """
        List entries directly under base_path/prefix (non-recursive).

        Sidecar files are skipped, as are entries that vanish or are dangling
        symlinks by the time they are stat-ed. Entries are sorted by name and
        each one costs an extra stat and sidecar read through get_metadata().
        """
        with storage_operation("list_metadata", prefix):
            directory = self._get_full_path(prefix or "")
            names = sorted(
                name for name in await aiofiles.os.listdir(directory)
                if not name.endswith(META_SUFFIX)
            )

            if max_keys is not None and max_keys <= 0:
                return []

            keys = [f"{prefix.rstrip('/')}/{name}" if prefix else name for name in names]
            entries = await asyncio.gather(*(self._entry_metadata(k) for k in keys))

            results = [entry for entry in entries if entry is not None]
            return results[:max_keys] if max_keys is not None else results

    async def _entry_metadata(self, key: str) -> Optional[FileMetadata]:
        try:
            return await self.get_metadata(key)
        except KeyNotFoundError:
            logger.debug(f"Skipping {key}: gone before it could be listed")
            return None

    async def get_signed_url(self, key: str, expires_in: int = DEFAULT_EXPIRES_IN) -> str:
        """Return the file:// URL; expires_in is accepted but not enforced."""
        with storage_operation("get_signed_url", key):
            await self._ensure_exists(key)
            return self._url(self._get_full_path(key))
