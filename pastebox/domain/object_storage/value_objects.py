"""
Object Storage Value Objects

Immutable value objects for object names and the retention policy.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

MULTI_PREFIX = "m"
NAME_SEPARATOR = "-"

# Go-style duration units, as used by the ``lifetime`` config key.
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


class InvalidDurationError(ValueError):
    """Raised when a duration string cannot be parsed."""
    pass


class InvalidObjectNameError(ValueError):
    """Raised when a name is not a single plain path segment."""
    pass


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration string such as ``"48h"``, ``"1h30m"`` or ``"500ms"``.

    A bare ``"0"`` is accepted. Signs are not.

    Raises:
        InvalidDurationError: If the string is empty or malformed
    """
    if not isinstance(value, str):
        raise InvalidDurationError(f"Duration must be a string, got {type(value).__name__}")

    text = value.strip()
    if text == "0":
        return timedelta(0)
    if not text:
        raise InvalidDurationError("Duration cannot be empty")

    seconds = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        seconds += _DURATION_UNITS[match.group(2)] * float(match.group(1))
        position = match.end()

    if position != len(text):
        raise InvalidDurationError(f"Invalid duration: {value!r}")
    return timedelta(seconds=seconds)


def is_multi_name(name: str) -> bool:
    """True iff the first ``-`` separated segment is the multi prefix."""
    return name.split(NAME_SEPARATOR)[0] == MULTI_PREFIX


def is_plain_name(name: str) -> bool:
    """True iff ``name`` can be joined onto the storage root safely."""
    if not name or not isinstance(name, str):
        return False
    if name.startswith("."):
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name


@dataclass(frozen=True)
class ObjectName:
    """
    Value object for a stored object's name.

    The name is a single path segment: generated letters plus the preserved
    extension, or ``m-`` plus letters for a multi object.
    """
    value: str

    def __post_init__(self):
        if not is_plain_name(self.value):
            raise InvalidObjectNameError(f"Invalid object name: {self.value!r}")

    @property
    def is_multi(self) -> bool:
        return is_multi_name(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RetentionPolicy:
    """
    Value object for the single lifetime applied to every stored object.
    """
    lifetime: timedelta

    def __post_init__(self):
        if self.lifetime <= timedelta(0):
            raise InvalidDurationError(
                f"Retention lifetime must be positive, got {self.lifetime}"
            )

    @classmethod
    def from_string(cls, value: str) -> "RetentionPolicy":
        return cls(parse_duration(value))

    def cutoff(self, now: datetime) -> datetime:
        """Objects modified strictly before this instant are expired."""
        return now - self.lifetime

    def is_expired(self, last_modified: datetime, now: datetime) -> bool:
        return last_modified < self.cutoff(now)
