"""
Rendering Domain

Content classification port and the render decision engine.
"""

from .classifier import IContentClassifier
from .services import RenderDecisionEngine
from .value_objects import (
    ClassificationFailedPlan,
    ContentType,
    HighlightedTextPlan,
    MemberEntry,
    MultiIndexPlan,
    NotFoundPlan,
    RawBytesPlan,
    RenderPlan,
)

__all__ = [
    "IContentClassifier",
    "RenderDecisionEngine",
    "ClassificationFailedPlan",
    "ContentType",
    "HighlightedTextPlan",
    "MemberEntry",
    "MultiIndexPlan",
    "NotFoundPlan",
    "RawBytesPlan",
    "RenderPlan",
]
