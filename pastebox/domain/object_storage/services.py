"""
Object Storage Services

Domain services for naming, ingesting and reading stored objects.
"""

import logging
import random
import string
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Sequence, Tuple

from ..errors import ObjectNotFoundError, StorageExhaustedError, StorageIOError
from ..events import DomainEvent, MultiObjectStoredEvent, ObjectStoredEvent
from .entities import StoredObject, UploadContent
from .repositories import IObjectStorageRepository
from .value_objects import (
    MULTI_PREFIX,
    NAME_SEPARATOR,
    InvalidObjectNameError,
    ObjectName,
    is_multi_name,
)

logger = logging.getLogger(__name__)


class NameGenerator:
    """
    Produces short random names of lowercase ASCII letters.

    Uniqueness is not guaranteed here; the ObjectStore retries on collision.
    """

    ALPHABET = string.ascii_lowercase

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()

    def generate(self, length: int) -> str:
        if length < 1:
            raise ValueError(f"Name length must be positive, got {length}")
        return "".join(self._rng.choice(self.ALPHABET) for _ in range(length))


def extension_of(filename: Optional[str]) -> str:
    """
    Extension of a client supplied filename, including the dot.

    Everything from the last dot of the final path component, kept as sent:
    ``../../x.txt`` gives ``.txt``, ``notes.café`` gives ``.café`` and
    ``.bashrc`` gives ``.bashrc``. Both ``/`` and ``\\`` count as separators.
    """
    if not filename:
        return ""
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot < 0:
        return ""
    return base[dot:].replace("\x00", "")


class ObjectStore:
    """
    Domain service owning the object namespace under one storage root.

    Coordinates name assignment, single and batch ingestion, and reads.
    """

    def __init__(
        self,
        repository: IObjectStorageRepository,
        name_generator: Optional[NameGenerator] = None,
        name_length: int = 3,
        max_attempts_per_length: int = 8,
        max_extra_length: int = 5,
        publish: Optional[Callable[[DomainEvent], None]] = None,
    ):
        """
        Initialize ObjectStore.

        Args:
            repository: Storage root adapter
            name_generator: Random name source
            name_length: Length of the random part of new names
            max_attempts_per_length: Collisions tolerated before widening names
            max_extra_length: How far names may widen before giving up
            publish: Optional callable receiving domain events
        """
        self.repository = repository
        self.name_generator = name_generator or NameGenerator()
        self.name_length = name_length
        self.max_attempts_per_length = max_attempts_per_length
        self.max_extra_length = max_extra_length
        self._publish = publish

    # Ingestion

    def ingest_single(self, filename: str, content: UploadContent) -> str:
        """
        Store one file under a fresh name.

        Args:
            filename: Client filename, only its extension is kept
            content: Bytes or a readable binary stream

        Returns:
            The new object's full name (random letters plus extension)

        Raises:
            StorageIOError: If the write fails
            StorageExhaustedError: If no free name could be found
        """
        suffix = extension_of(filename)
        name, size = self._create_with_fresh_name("", suffix, _as_stream(content))

        self._emit(ObjectStoredEvent(
            aggregate_id=name,
            occurred_at=datetime.now(timezone.utc),
            original_filename=filename or "",
            size=size,
        ))
        return name

    def ingest_batch(self, items: Sequence[Tuple[str, UploadContent]]) -> str:
        """
        Store several files and a multi object listing them in order.

        The multi object is written only after every member succeeded.
        If any write fails, the members already written by this call
        are removed again and the error propagates.

        Returns:
            The multi object's name (``m-`` plus random letters)
        """
        if not items:
            raise ValueError("A batch needs at least one file")

        members: List[str] = []
        try:
            for filename, content in items:
                members.append(self.ingest_single(filename, content))

            body = "".join(member + "\n" for member in members).encode("utf-8")
            multi_name, _ = self._create_with_fresh_name(
                MULTI_PREFIX + NAME_SEPARATOR, "", BytesIO(body)
            )
        except Exception:
            self._rollback(members)
            raise

        self._emit(MultiObjectStoredEvent(
            aggregate_id=multi_name,
            occurred_at=datetime.now(timezone.utc),
            members=tuple(members),
        ))
        return multi_name

    # Reads

    def exists(self, name: str) -> bool:
        object_name = _parse_name(name)
        if object_name is None:
            return False
        return self.repository.exists(object_name.value)

    def retrieve(self, name: str) -> BinaryIO:
        """
        Open an object for reading. The caller closes the stream.

        Raises:
            ObjectNotFoundError: If no such object exists
        """
        object_name = _parse_name(name)
        stream = self.repository.open(object_name.value) if object_name else None
        if stream is None:
            raise ObjectNotFoundError(f"Object not found: {name}")
        return stream

    def stat(self, name: str) -> StoredObject:
        object_name = _parse_name(name)
        entry = self.repository.stat(object_name.value) if object_name else None
        if entry is None:
            raise ObjectNotFoundError(f"Object not found: {name}")
        return entry

    def path_for(self, name: str) -> Path:
        object_name = _parse_name(name)
        if object_name is None:
            raise ObjectNotFoundError(f"Object not found: {name}")
        return self.repository.path_for(object_name.value)

    @staticmethod
    def is_multi(name: str) -> bool:
        return is_multi_name(name)

    def list_members(self, multi_name: str) -> List[str]:
        """
        Member names of a multi object, in upload order.

        Members are not checked for existence here.
        """
        stream = self.retrieve(multi_name)
        try:
            body = stream.read().decode("utf-8", errors="replace")
        finally:
            stream.close()
        return [line for line in body.splitlines() if line]

    # Internals

    def _create_with_fresh_name(
        self, prefix: str, suffix: str, content: BinaryIO
    ) -> Tuple[str, int]:
        for length in range(self.name_length, self.name_length + self.max_extra_length + 1):
            for _ in range(self.max_attempts_per_length):
                name = ObjectName(prefix + self.name_generator.generate(length) + suffix).value
                try:
                    size = self.repository.create_exclusive(name, content)
                except FileExistsError:
                    logger.debug(f"Name collision on {name}, retrying")
                    continue
                return name, size
            logger.warning(
                f"No free name of length {length} after "
                f"{self.max_attempts_per_length} attempts, widening"
            )

        raise StorageExhaustedError(
            f"No free name found up to length {self.name_length + self.max_extra_length}"
        )

    def _rollback(self, names: List[str]) -> None:
        for name in names:
            try:
                self.repository.delete(name)
            except StorageIOError as e:
                logger.error(f"Could not roll back {name} after failed batch: {e}")

    def _emit(self, event: DomainEvent) -> None:
        if self._publish is not None:
            self._publish(event)


def _as_stream(content: UploadContent) -> BinaryIO:
    if isinstance(content, (bytes, bytearray)):
        return BytesIO(bytes(content))
    return content


def _parse_name(name: str) -> Optional[ObjectName]:
    """ObjectName for a requested name, or None if it is not a plain segment."""
    try:
        return ObjectName(name)
    except InvalidObjectNameError:
        return None
