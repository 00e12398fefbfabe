"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from pastebox.domain.events import (
    DomainEvent,
    MultiObjectStoredEvent,
    ObjectDeletionFailedEvent,
    ObjectExpiredEvent,
    ObjectStoredEvent,
    SweepCompletedEvent,
)


class LoggingEventHandler:
    """
    Subscribes to domain events and logs them.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        try:
            if isinstance(event, ObjectStoredEvent):
                self._handle_object_stored(event)
            elif isinstance(event, MultiObjectStoredEvent):
                self._handle_multi_stored(event)
            elif isinstance(event, ObjectExpiredEvent):
                self._handle_object_expired(event)
            elif isinstance(event, ObjectDeletionFailedEvent):
                self._handle_deletion_failed(event)
            elif isinstance(event, SweepCompletedEvent):
                self._handle_sweep_completed(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_object_stored(self, event: ObjectStoredEvent) -> None:
        self.logger.info(
            f"Stored {event.aggregate_id} ({event.size} bytes, "
            f"uploaded as '{event.original_filename}')"
        )

    def _handle_multi_stored(self, event: MultiObjectStoredEvent) -> None:
        self.logger.info(
            f"Stored multi upload {event.aggregate_id} with "
            f"{len(event.members)} files: {', '.join(event.members)}"
        )

    def _handle_object_expired(self, event: ObjectExpiredEvent) -> None:
        self.logger.info(
            f"Deleting: {event.aggregate_id} "
            f"(last modified {event.last_modified.isoformat()})"
        )

    def _handle_deletion_failed(self, event: ObjectDeletionFailedEvent) -> None:
        self.logger.error(
            f"Could not remove file {event.aggregate_id}: {event.error_message}"
        )

    def _handle_sweep_completed(self, event: SweepCompletedEvent) -> None:
        level = logging.WARNING if event.failed else logging.DEBUG
        self.logger.log(
            level,
            f"Sweep of {event.aggregate_id} done - scanned: {event.scanned}, "
            f"deleted: {event.deleted}, failed: {event.failed}",
        )
