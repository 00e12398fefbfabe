"""
Rendering Value Objects

Content classification results and the render plans derived from them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

TEXT_TOP_LEVEL = "text"


def top_level_type(mimetype: Optional[str]) -> str:
    """``"text"`` for ``"text/plain; charset=utf-8"``, ``""`` for None."""
    if not mimetype:
        return ""
    return mimetype.split("/")[0].strip().lower()


@dataclass(frozen=True)
class ContentType:
    """
    Result of classifying an object's bytes.

    Attributes:
        mimetype: Detected MIME type, e.g. ``application/json``
        parent: The broader type it derives from, e.g. ``text/plain``
    """
    mimetype: str
    parent: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return (
            top_level_type(self.mimetype) == TEXT_TOP_LEVEL
            or top_level_type(self.parent) == TEXT_TOP_LEVEL
        )

    def __str__(self) -> str:
        return self.mimetype


@dataclass(frozen=True)
class RenderPlan:
    """Base class for the outcome of a render decision."""
    name: str


@dataclass(frozen=True)
class NotFoundPlan(RenderPlan):
    """Nothing is stored under the requested name."""
    pass


@dataclass(frozen=True)
class MemberEntry:
    """One line of a multi object, with whether it still exists."""
    name: str
    exists: bool


@dataclass(frozen=True)
class MultiIndexPlan(RenderPlan):
    """Render an index page listing the members of a batch upload."""
    members: Tuple[MemberEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HighlightedTextPlan(RenderPlan):
    """Tokenize and format the object as highlighted HTML."""
    path: Path
    content_type: ContentType


@dataclass(frozen=True)
class RawBytesPlan(RenderPlan):
    """Serve the object unmodified, inline where possible."""
    path: Path
    content_type: ContentType


@dataclass(frozen=True)
class ClassificationFailedPlan(RenderPlan):
    """Content detection failed; report the error text instead of content."""
    message: str
