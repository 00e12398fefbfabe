"""
Object Storage Repository Interface

Abstract interface for the flat on-disk object namespace.
The domain layer depends on this contract; the local filesystem
adapter lives in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, List, Optional

from .entities import StoredObject


class IObjectStorageRepository(ABC):
    """
    Interface for the storage root holding every object.

    Contract Guarantees:
    - Names are single path segments relative to the root
    - create_exclusive() never overwrites; an existing name raises
      FileExistsError before any content is consumed
    - open() returns None for missing objects (no exceptions)
    - delete() is idempotent
    - list_entries() raises StorageListingError when the root
      cannot be enumerated
    """

    @abstractmethod
    def create_exclusive(self, name: str, content: BinaryIO) -> int:
        """
        Stream ``content`` into a new object called ``name``.

        Returns:
            Number of bytes written

        Raises:
            FileExistsError: If ``name`` is already present
            StorageIOError: If the write fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def open(self, name: str) -> Optional[BinaryIO]:
        """
        Open an object for reading.

        Returns:
            Binary stream the caller must close, or None if absent
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether an object called ``name`` exists."""
        pass  # pragma: no cover

    @abstractmethod
    def stat(self, name: str) -> Optional[StoredObject]:
        """Describe an object, or None if absent."""
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, name: str) -> bool:
        """
        Delete an object.

        Returns:
            True if the object was deleted or did not exist

        Raises:
            StorageIOError: If the object exists but cannot be removed
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_entries(self) -> List[StoredObject]:
        """
        Enumerate every entry directly under the root.

        Raises:
            StorageListingError: If the root cannot be listed
        """
        pass  # pragma: no cover

    @abstractmethod
    def path_for(self, name: str) -> Path:
        """Absolute filesystem path of ``name`` under the root."""
        pass  # pragma: no cover
