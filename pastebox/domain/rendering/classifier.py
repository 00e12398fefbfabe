"""
Content Classifier Interface

Port for the external content type detector. Implementations look at
an object's bytes and report its MIME type and parent type.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .value_objects import ContentType


class IContentClassifier(ABC):
    """
    Classifies stored content for the render decision.

    Implementations raise ClassificationError when detection fails.
    """

    @abstractmethod
    def classify(self, path: Path) -> ContentType:
        """
        Detect the content type of the file at ``path``.

        Raises:
            ClassificationError: If the file cannot be read or detected
        """
        pass  # pragma: no cover
