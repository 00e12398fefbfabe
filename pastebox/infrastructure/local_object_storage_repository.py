"""
Local Object Storage Repository Implementation

Concrete implementation of IObjectStorageRepository for a flat directory
on the local filesystem.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List, Optional

from pastebox.domain.errors import StorageIOError, StorageListingError
from pastebox.domain.object_storage.entities import StoredObject
from pastebox.domain.object_storage.repositories import IObjectStorageRepository

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class LocalObjectStorageRepository(IObjectStorageRepository):
    """
    Local filesystem implementation of IObjectStorageRepository.

    Every object is a regular file directly under ``base_path``.
    New files are created with ``O_EXCL`` so a name that is already
    taken is detected by the filesystem itself.

    Attributes:
        base_path: Storage root directory
    """

    def __init__(self, base_path: str):
        """
        Initialize the repository, creating the storage root if needed.

        Raises:
            PermissionError: If the root cannot be created
            OSError: If directory creation fails for other reasons
        """
        self.base_path = Path(base_path)
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(
                f"Failed to create storage directory: {self.base_path}"
            ) from e

    def path_for(self, name: str) -> Path:
        return self.base_path / name

    def create_exclusive(self, name: str, content: BinaryIO) -> int:
        full_path = self.path_for(name)

        # FileExistsError propagates to the caller for a retry.
        try:
            handle = open(full_path, "xb")
        except FileExistsError:
            raise
        except OSError as e:
            raise StorageIOError(f"Failed to create {name}: {e}", e) from e

        written = 0
        try:
            with handle:
                while True:
                    chunk = content.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    handle.write(chunk)
                    written += len(chunk)
        except OSError as e:
            self._discard_partial(full_path)
            raise StorageIOError(f"Failed to write {name}: {e}", e) from e

        return written

    def open(self, name: str) -> Optional[BinaryIO]:
        try:
            return open(self.path_for(name), "rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            return None
        except OSError as e:
            logger.warning(f"Could not open {name}: {e}")
            return None

    def exists(self, name: str) -> bool:
        try:
            return self.path_for(name).is_file()
        except (OSError, ValueError):
            return False

    def stat(self, name: str) -> Optional[StoredObject]:
        try:
            result = self.path_for(name).stat()
        except (OSError, ValueError):
            return None
        return _to_stored_object(name, result)

    def delete(self, name: str) -> bool:
        full_path = self.path_for(name)
        try:
            if full_path.is_dir() and not full_path.is_symlink():
                full_path.rmdir()
            else:
                full_path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            raise StorageIOError(f"Failed to delete {name}: {e}", e) from e
        return True

    def list_entries(self) -> List[StoredObject]:
        entries: List[StoredObject] = []
        try:
            with os.scandir(self.base_path) as iterator:
                for entry in iterator:
                    try:
                        result = entry.stat(follow_symlinks=False)
                    except FileNotFoundError:
                        # Removed while listing.
                        continue
                    entries.append(_to_stored_object(entry.name, result))
        except OSError as e:
            raise StorageListingError(
                f"Could not read storage directory {self.base_path}: {e}", e
            ) from e
        return entries

    def _discard_partial(self, full_path: Path) -> None:
        try:
            full_path.unlink()
        except OSError as e:
            logger.error(f"Could not remove partial file {full_path}: {e}")


def _to_stored_object(name: str, result: os.stat_result) -> StoredObject:
    return StoredObject(
        name=name,
        last_modified=datetime.fromtimestamp(result.st_mtime, tz=timezone.utc),
        size=result.st_size,
    )
