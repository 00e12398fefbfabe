"""
Expiration Sweeper

Background loop that deletes stored objects older than the retention
lifetime. Runs in its own thread and can be stopped cleanly.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

from pastebox.domain.errors import StorageIOError, StorageListingError
from pastebox.domain.events import (
    DomainEvent,
    ObjectDeletionFailedEvent,
    ObjectExpiredEvent,
    SweepCompletedEvent,
)
from pastebox.domain.object_storage.repositories import IObjectStorageRepository
from pastebox.domain.object_storage.value_objects import RetentionPolicy

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 300.0


class SweeperState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"


@dataclass
class SweepResult:
    """Outcome of one sweep over the storage root."""
    scanned: int = 0
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "scanned": self.scanned,
            "deleted": list(self.deleted),
            "failed": dict(self.failed),
        }


def terminate_process(error: Exception) -> None:
    """Fatal handler: the storage root is unusable, stop the whole process."""
    logger.critical(f"Couldn't read upload dir, shutting down: {error}")
    logging.shutdown()
    os._exit(1)


class ExpirationSweeper:
    """
    Deletes every entry under the storage root whose modification time
    is strictly earlier than ``now - lifetime``.

    States: IDLE between sweeps, SCANNING during one. Sweeps never
    overlap, whether triggered by the background thread or by a direct
    call to sweep().

    Failure policy:
    - a single entry that cannot be deleted is logged and skipped
    - a root that cannot be listed is fatal; the background loop hands
      the error to ``on_fatal`` (terminate_process by default) and exits
    """

    def __init__(
        self,
        repository: IObjectStorageRepository,
        retention: RetentionPolicy,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        publish: Optional[Callable[[DomainEvent], None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_fatal: Optional[Callable[[Exception], None]] = None,
    ):
        self.repository = repository
        self.retention = retention
        self.interval_seconds = interval_seconds
        self._publish = publish
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._on_fatal = on_fatal or terminate_process

        self._state = SweeperState.IDLE
        self._sweep_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.last_result: Optional[SweepResult] = None

    @property
    def state(self) -> SweeperState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep(self) -> SweepResult:
        """
        Run one scan of the storage root.

        Raises:
            StorageListingError: If the root cannot be listed
        """
        with self._sweep_lock:
            self._state = SweeperState.SCANNING
            try:
                result = self._scan()
            finally:
                self._state = SweeperState.IDLE

        self.last_result = result
        return result

    def _scan(self) -> SweepResult:
        entries = self.repository.list_entries()
        now = self._clock()
        cutoff = self.retention.cutoff(now)
        result = SweepResult()

        for entry in entries:
            result.scanned += 1
            if not entry.last_modified < cutoff:
                continue

            try:
                self.repository.delete(entry.name)
            except StorageIOError as e:
                result.failed[entry.name] = str(e)
                self._emit(ObjectDeletionFailedEvent(
                    aggregate_id=entry.name,
                    occurred_at=now,
                    error_message=str(e),
                ))
                continue

            result.deleted.append(entry.name)
            self._emit(ObjectExpiredEvent(
                aggregate_id=entry.name,
                occurred_at=now,
                last_modified=entry.last_modified,
            ))

        self._emit(SweepCompletedEvent(
            aggregate_id=str(getattr(self.repository, "base_path", "")),
            occurred_at=now,
            scanned=result.scanned,
            deleted=len(result.deleted),
            failed=len(result.failed),
        ))
        return result

    # Background loop

    def start(self) -> None:
        """Start the background loop. Sweeps immediately, then every interval."""
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="expiration-sweeper", daemon=True
        )
        self._thread.start()
        logger.info(
            f"Expiration sweeper started (lifetime {self.retention.lifetime}, "
            f"every {self.interval_seconds:g}s)"
        )

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """Signal the loop to stop; optionally wait for the current sweep."""
        self._stop_event.set()
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Expiration sweeper stopped")

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.sweep()
            except StorageListingError as e:
                logger.critical(f"Could not read storage root: {e}")
                self._on_fatal(e)
                return
            except Exception:
                logger.exception("Unexpected error during expiration sweep")

            if self._stop_event.wait(self.interval_seconds):
                break

    def _emit(self, event: DomainEvent) -> None:
        if self._publish is not None:
            self._publish(event)
