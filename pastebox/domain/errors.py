"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry the user-facing message and HTTP status.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    UNAUTHORIZED = "unauthorized"
    FILE_NOT_FOUND = "file_not_found"
    NO_FILES = "no_files"
    CLASSIFICATION_FAILED = "classification_failed"
    STORAGE_ERROR = "storage_error"
    STORAGE_EXHAUSTED = "storage_exhausted"
    FILE_TOO_LARGE = "file_too_large"
    SYSTEM_ERROR = "system_error"


# User-facing messages. The plain-text endpoints send "message" verbatim.
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, Any]] = {
    ErrorCategory.UNAUTHORIZED: {
        "title": "Not Authenticated",
        "message": "Not authenticated.",
        "status": 401,
    },
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "File not found.",
        "status": 404,
    },
    ErrorCategory.NO_FILES: {
        "title": "No Files",
        "message": "No files uploaded.",
        "status": 400,
    },
    ErrorCategory.CLASSIFICATION_FAILED: {
        "title": "Classification Failed",
        "message": "Could not detect the content type of this file.",
        "status": 500,
    },
    ErrorCategory.STORAGE_ERROR: {
        "title": "Storage Error",
        "message": "The file could not be stored.",
        "status": 500,
    },
    ErrorCategory.STORAGE_EXHAUSTED: {
        "title": "Storage Exhausted",
        "message": "No free name is available right now, please retry later.",
        "status": 503,
    },
    ErrorCategory.FILE_TOO_LARGE: {
        "title": "File Too Large",
        "message": "The upload exceeds the maximum allowed size.",
        "status": 413,
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "status": 500,
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class UnauthorizedError(DomainError):
    """Raised when an upload presents a missing or unknown credential."""
    pass


class ObjectNotFoundError(DomainError):
    """Raised when a name does not resolve to a stored object."""
    pass


class ClassificationError(DomainError):
    """Raised when content type detection fails for a stored object."""
    pass


class StorageIOError(DomainError):
    """Raised when reading or writing the storage root fails."""
    pass


class StorageListingError(StorageIOError):
    """
    Raised when the storage root cannot be enumerated.

    The expiration sweeper treats this as fatal.
    """
    pass


class StorageExhaustedError(StorageIOError):
    """Raised when no unused object name could be found."""
    pass


class ConfigError(DomainError):
    """Raised when the service configuration is missing or invalid."""
    pass


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-facing messaging.

    Bridges domain errors with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.status_code = error_info["status"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API response."""
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
        }


def categorize_domain_error(error: Exception) -> ErrorCategory:
    """Map a domain exception onto its error category."""
    if isinstance(error, UnauthorizedError):
        return ErrorCategory.UNAUTHORIZED
    if isinstance(error, ObjectNotFoundError):
        return ErrorCategory.FILE_NOT_FOUND
    if isinstance(error, ClassificationError):
        return ErrorCategory.CLASSIFICATION_FAILED
    if isinstance(error, StorageExhaustedError):
        return ErrorCategory.STORAGE_EXHAUSTED
    if isinstance(error, StorageIOError):
        return ErrorCategory.STORAGE_ERROR
    return ErrorCategory.SYSTEM_ERROR


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: Optional[int] = None,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code, defaults to the category's status

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code or error.status_code
