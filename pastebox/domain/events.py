"""
Domain Events

Immutable records of significant state changes in the object store.
Events decouple side effects (logging) from core storage logic.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: Name of the object that generated the event
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ObjectStoredEvent(DomainEvent):
    """
    Event emitted when a single object has been written.

    Attributes:
        aggregate_id: Stored object name
        original_filename: Filename supplied by the uploader
        size: Bytes written
    """
    original_filename: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "original_filename": self.original_filename,
            "size": self.size,
        })
        return base_dict


@dataclass(frozen=True)
class MultiObjectStoredEvent(DomainEvent):
    """
    Event emitted when a batch upload's multi object has been written.

    Attributes:
        aggregate_id: Multi object name (``m-...``)
        members: Member names in upload order
    """
    members: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict["members"] = list(self.members)
        return base_dict


@dataclass(frozen=True)
class ObjectExpiredEvent(DomainEvent):
    """
    Event emitted when the sweeper deleted an expired object.

    Attributes:
        aggregate_id: Deleted object name
        last_modified: Modification time of the deleted object
    """
    last_modified: datetime

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict["last_modified"] = self.last_modified.isoformat()
        return base_dict


@dataclass(frozen=True)
class ObjectDeletionFailedEvent(DomainEvent):
    """
    Event emitted when the sweeper could not delete an expired object.

    Attributes:
        aggregate_id: Object name
        error_message: Description of the failure
    """
    error_message: str

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict["error_message"] = self.error_message
        return base_dict


@dataclass(frozen=True)
class SweepCompletedEvent(DomainEvent):
    """
    Event emitted at the end of each sweep.

    Attributes:
        aggregate_id: Storage root that was swept
        scanned: Number of entries examined
        deleted: Number of entries removed
        failed: Number of entries that could not be removed
    """
    scanned: int
    deleted: int
    failed: int

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "scanned": self.scanned,
            "deleted": self.deleted,
            "failed": self.failed,
        })
        return base_dict
