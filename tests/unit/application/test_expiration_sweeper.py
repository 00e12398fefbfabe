"""
Unit tests for ExpirationSweeper.

The sweeper runs against the in-memory repository with a fixed clock.
"""

import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest

from pastebox.application.expiration_sweeper import (
    ExpirationSweeper,
    SweeperState,
    SweepResult,
    terminate_process,
)
from pastebox.domain.errors import StorageListingError
from pastebox.domain.events import (
    ObjectDeletionFailedEvent,
    ObjectExpiredEvent,
    SweepCompletedEvent,
)
from pastebox.domain.object_storage.value_objects import RetentionPolicy

from tests.fixtures.memory_repository import InMemoryObjectStorageRepository

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
LIFETIME = timedelta(hours=48)


@pytest.fixture
def repository():
    return InMemoryObjectStorageRepository(clock=lambda: NOW)


def make_sweeper(repository, **kwargs):
    kwargs.setdefault("clock", lambda: NOW)
    return ExpirationSweeper(repository, RetentionPolicy(LIFETIME), **kwargs)


class TestSweep:
    def test_deletes_only_expired_objects(self, repository):
        repository.put("old.txt", b"x", NOW - timedelta(hours=49))
        repository.put("fresh.txt", b"x", NOW - timedelta(hours=47))
        repository.put("m-abc", b"old.txt\n", NOW - timedelta(days=10))

        result = make_sweeper(repository).sweep()

        assert sorted(result.deleted) == ["m-abc", "old.txt"]
        assert result.scanned == 3
        assert set(repository.objects) == {"fresh.txt"}

    def test_object_at_cutoff_survives(self, repository):
        repository.put("edge.txt", b"x", NOW - LIFETIME)

        result = make_sweeper(repository).sweep()

        assert result.deleted == []
        assert "edge.txt" in repository.objects

    def test_empty_root(self, repository):
        result = make_sweeper(repository).sweep()
        assert result == SweepResult(scanned=0)

    def test_deletion_failure_skips_entry(self, repository):
        repository.put("stuck.txt", b"x", NOW - timedelta(days=3))
        repository.put("old.txt", b"x", NOW - timedelta(days=3))
        repository.undeletable.add("stuck.txt")

        result = make_sweeper(repository).sweep()

        assert result.deleted == ["old.txt"]
        assert "stuck.txt" in result.failed
        assert "stuck.txt" in repository.objects

    def test_listing_failure_raises(self, repository):
        repository.listing_error = "permission denied"

        with pytest.raises(StorageListingError):
            make_sweeper(repository).sweep()

    def test_state_and_last_result(self, repository):
        sweeper = make_sweeper(repository)
        assert sweeper.state == SweeperState.IDLE
        assert sweeper.last_result is None

        result = sweeper.sweep()

        assert sweeper.state == SweeperState.IDLE
        assert sweeper.last_result is result

    def test_state_returns_to_idle_after_failure(self, repository):
        repository.listing_error = "gone"
        sweeper = make_sweeper(repository)

        with pytest.raises(StorageListingError):
            sweeper.sweep()

        assert sweeper.state == SweeperState.IDLE

    def test_publishes_events(self, repository):
        repository.put("old.txt", b"x", NOW - timedelta(days=3))
        repository.put("stuck.txt", b"x", NOW - timedelta(days=3))
        repository.put("fresh.txt", b"x", NOW)
        repository.undeletable.add("stuck.txt")
        publish = Mock()

        make_sweeper(repository, publish=publish).sweep()

        events = [c.args[0] for c in publish.call_args_list]
        expired = [e for e in events if isinstance(e, ObjectExpiredEvent)]
        failed = [e for e in events if isinstance(e, ObjectDeletionFailedEvent)]
        completed = events[-1]

        assert [e.aggregate_id for e in expired] == ["old.txt"]
        assert [e.aggregate_id for e in failed] == ["stuck.txt"]
        assert isinstance(completed, SweepCompletedEvent)
        assert (completed.scanned, completed.deleted, completed.failed) == (3, 1, 1)

    def test_result_to_dict(self):
        result = SweepResult(scanned=2, deleted=["a"], failed={"b": "busy"})
        assert result.to_dict() == {"scanned": 2, "deleted": ["a"], "failed": {"b": "busy"}}


class TestBackgroundLoop:
    def test_first_sweep_runs_immediately(self, repository):
        repository.put("old.txt", b"x", NOW - timedelta(days=3))
        swept = threading.Event()

        def publish(event):
            if isinstance(event, SweepCompletedEvent):
                swept.set()

        sweeper = make_sweeper(repository, interval_seconds=3600, publish=publish)
        sweeper.start()
        try:
            assert swept.wait(5)
            assert "old.txt" not in repository.objects
        finally:
            sweeper.stop(timeout=5)

        assert sweeper.is_running is False

    def test_start_is_idempotent(self, repository):
        sweeper = make_sweeper(repository, interval_seconds=3600)
        sweeper.start()
        thread = sweeper._thread
        try:
            sweeper.start()
            assert sweeper._thread is thread
        finally:
            sweeper.stop(timeout=5)

    def test_listing_failure_calls_fatal_handler(self, repository):
        repository.listing_error = "root removed"
        fatal = threading.Event()
        on_fatal = Mock(side_effect=lambda error: fatal.set())

        sweeper = make_sweeper(repository, interval_seconds=3600, on_fatal=on_fatal)
        sweeper.start()

        assert fatal.wait(5)
        sweeper._thread.join(5)
        assert sweeper.is_running is False
        assert isinstance(on_fatal.call_args[0][0], StorageListingError)

    def test_unexpected_error_keeps_loop_alive(self, repository):
        calls = []
        second_sweep = threading.Event()

        def flaky_list():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("transient")
            second_sweep.set()
            return []

        repository.list_entries = flaky_list
        on_fatal = Mock()
        sweeper = make_sweeper(repository, interval_seconds=0.01, on_fatal=on_fatal)
        sweeper.start()
        try:
            assert second_sweep.wait(5)
        finally:
            sweeper.stop(timeout=5)

        on_fatal.assert_not_called()

    def test_stop_without_start(self, repository):
        make_sweeper(repository).stop()


class TestTerminateProcess:
    def test_exits_with_status_one(self):
        with patch("pastebox.application.expiration_sweeper.os._exit") as exit_mock, \
                patch("pastebox.application.expiration_sweeper.logging.shutdown"):
            terminate_process(StorageListingError("gone"))

        exit_mock.assert_called_once_with(1)
