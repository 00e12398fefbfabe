"""
Object Storage Entities

Domain entities for stored objects and batch uploads.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional, Union

from .value_objects import is_multi_name

UploadContent = Union[bytes, BinaryIO]


@dataclass(frozen=True)
class StoredObject:
    """
    Entity describing an object on disk.

    Only the name and modification time are tracked; everything else
    is the file itself.
    """
    name: str
    last_modified: datetime
    size: Optional[int] = None

    @property
    def extension(self) -> str:
        if self.is_multi:
            return ""
        return os.path.splitext(self.name)[1]

    @property
    def is_multi(self) -> bool:
        return is_multi_name(self.name)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "extension": self.extension,
            "last_modified": self.last_modified.isoformat(),
            "size": self.size,
            "is_multi": self.is_multi,
        }

