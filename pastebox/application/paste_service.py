"""
Paste Service

Application service behind the HTTP endpoints: authorizes uploads,
ingests files, builds public references and renders stored objects.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Sequence, Tuple

from pastebox.domain.access.services import TokenAuthorizer
from pastebox.domain.errors import (
    ApplicationError,
    ErrorCategory,
    ObjectNotFoundError,
    UnauthorizedError,
)
from pastebox.domain.object_storage.services import ObjectStore
from pastebox.domain.rendering.services import RenderDecisionEngine
from pastebox.domain.rendering.value_objects import (
    ClassificationFailedPlan,
    HighlightedTextPlan,
    MultiIndexPlan,
    NotFoundPlan,
    RawBytesPlan,
    RenderPlan,
)
from pastebox.infrastructure.syntax_highlighter import PygmentsHighlighter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of a successful upload.

    Attributes:
        name: Object name, ``m-...`` for batch uploads
        reference: Public reference ``{domain}/{name}``
        members: Member names for batch uploads, empty otherwise
    """
    name: str
    reference: str
    members: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_multi(self) -> bool:
        return bool(self.members)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "reference": self.reference,
            "members": list(self.members),
        }


class PasteService:
    """
    Orchestrates the upload and read paths.

    Upload: TokenAuthorizer -> ObjectStore ingestion -> reference.
    Read: RenderDecisionEngine -> optional highlighting.
    """

    def __init__(
        self,
        store: ObjectStore,
        authorizer: TokenAuthorizer,
        engine: RenderDecisionEngine,
        highlighter: PygmentsHighlighter,
        domain: str,
    ):
        self.store = store
        self.authorizer = authorizer
        self.engine = engine
        self.highlighter = highlighter
        self.domain = domain.rstrip("/")

    def upload(
        self,
        credential: Optional[str],
        files: Sequence[Tuple[str, BinaryIO]],
    ) -> UploadResult:
        """
        Store one or more files for an authorized caller.

        One file gives a plain object, several give a multi object.

        Raises:
            UnauthorizedError: If the credential is missing or unknown
            ApplicationError: NO_FILES if ``files`` is empty
            StorageIOError: If a write fails
        """
        if not self.authorizer.authorize(credential):
            raise UnauthorizedError("Upload rejected: invalid or missing token")

        if not files:
            raise ApplicationError(ErrorCategory.NO_FILES, "Upload contained no file parts")

        if len(files) == 1:
            filename, content = files[0]
            name = self.store.ingest_single(filename, content)
            return UploadResult(name=name, reference=self.reference_for(name))

        name = self.store.ingest_batch(files)
        members = tuple(self.store.list_members(name))
        return UploadResult(name=name, reference=self.reference_for(name), members=members)

    def reference_for(self, name: str) -> str:
        return f"{self.domain}/{name}"

    def decide(self, name: str) -> RenderPlan:
        return self.engine.decide(name)

    def highlight(self, plan: HighlightedTextPlan) -> bytes:
        """
        Highlighted HTML for a text object.

        Raises:
            StorageIOError: If the object vanished or cannot be read
        """
        return self.highlighter.highlight_file(plan.path)

    def describe(self, name: str) -> dict:
        """
        JSON-friendly description of a stored object.

        Raises:
            ObjectNotFoundError: If nothing is stored under ``name``
            ApplicationError: CLASSIFICATION_FAILED if detection failed
        """
        plan = self.engine.decide(name)
        if isinstance(plan, NotFoundPlan):
            raise ObjectNotFoundError(f"Object not found: {name}")

        description = {
            "name": name,
            "reference": self.reference_for(name),
            "kind": None,
            "mimetype": None,
            "members": [],
        }

        if isinstance(plan, MultiIndexPlan):
            description["kind"] = "multi"
            description["members"] = [
                {
                    "name": member.name,
                    "reference": self.reference_for(member.name),
                    "exists": member.exists,
                }
                for member in plan.members
            ]
        elif isinstance(plan, HighlightedTextPlan):
            description["kind"] = "text"
            description["mimetype"] = plan.content_type.mimetype
        elif isinstance(plan, RawBytesPlan):
            description["kind"] = "binary"
            description["mimetype"] = plan.content_type.mimetype
        elif isinstance(plan, ClassificationFailedPlan):
            raise ApplicationError(ErrorCategory.CLASSIFICATION_FAILED, plan.message)

        return description
