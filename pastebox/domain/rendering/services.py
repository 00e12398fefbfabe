"""
Rendering Services

Decides how a stored object is sent back to a reader.
"""

import logging

from ..errors import ClassificationError, ObjectNotFoundError
from ..object_storage.services import ObjectStore
from .classifier import IContentClassifier
from .value_objects import (
    ClassificationFailedPlan,
    HighlightedTextPlan,
    MemberEntry,
    MultiIndexPlan,
    NotFoundPlan,
    RawBytesPlan,
    RenderPlan,
)

logger = logging.getLogger(__name__)


class RenderDecisionEngine:
    """
    Domain service choosing between not-found, multi index,
    highlighted text and raw bytes for a requested name.
    """

    def __init__(self, store: ObjectStore, classifier: IContentClassifier):
        self.store = store
        self.classifier = classifier

    def decide(self, name: str) -> RenderPlan:
        """
        Build the render plan for ``name``.

        1. Unknown names give NotFoundPlan without classification.
        2. Multi names give MultiIndexPlan with per-member existence.
        3. Text content (primary or parent type) gives HighlightedTextPlan,
           anything else RawBytesPlan. Detection errors give
           ClassificationFailedPlan carrying the error text.
        """
        if not self.store.exists(name):
            return NotFoundPlan(name=name)

        try:
            if self.store.is_multi(name):
                return self._multi_index(name)
            path = self.store.path_for(name)
        except ObjectNotFoundError:
            # Swept between the existence check and the read.
            return NotFoundPlan(name=name)

        try:
            content_type = self.classifier.classify(path)
        except ClassificationError as e:
            if not path.exists():
                return NotFoundPlan(name=name)
            logger.error(f"Classification failed for {name}: {e}")
            return ClassificationFailedPlan(name=name, message=str(e))

        if content_type.is_text:
            return HighlightedTextPlan(name=name, path=path, content_type=content_type)
        return RawBytesPlan(name=name, path=path, content_type=content_type)

    def _multi_index(self, name: str) -> MultiIndexPlan:
        members = tuple(
            MemberEntry(name=member, exists=self.store.exists(member))
            for member in self.store.list_members(name)
        )
        return MultiIndexPlan(name=name, members=members)
