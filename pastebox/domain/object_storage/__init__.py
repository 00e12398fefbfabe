"""
Object Storage Domain

Handles object naming, ingestion, retrieval and the retention policy.
"""

from .entities import StoredObject, UploadContent
from .repositories import IObjectStorageRepository
from .services import NameGenerator, ObjectStore, extension_of
from .value_objects import (
    InvalidDurationError,
    InvalidObjectNameError,
    ObjectName,
    RetentionPolicy,
    is_multi_name,
    parse_duration,
)

__all__ = [
    "StoredObject",
    "UploadContent",
    "IObjectStorageRepository",
    "NameGenerator",
    "ObjectStore",
    "extension_of",
    "InvalidDurationError",
    "InvalidObjectNameError",
    "ObjectName",
    "RetentionPolicy",
    "is_multi_name",
    "parse_duration",
]
