"""
Infrastructure Layer

Filesystem storage, content sniffing, syntax highlighting and
event handler adapters.
"""

from .content_classifier import MimeSniffingClassifier
from .local_object_storage_repository import LocalObjectStorageRepository
from .syntax_highlighter import PygmentsHighlighter

__all__ = [
    "LocalObjectStorageRepository",
    "MimeSniffingClassifier",
    "PygmentsHighlighter",
]
