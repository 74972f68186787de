"""
Time sources for the signer.

The signer captures the time exactly once per call. Passing a clock in
(rather than calling ``datetime.now`` inside the signer) keeps signing
deterministic under test.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from .errors import ClockError

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Anything that can report the current UTC time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Wall clock backed by the operating system."""

    def now(self) -> datetime:
        try:
            return datetime.now(timezone.utc)
        except (OSError, OverflowError, ValueError) as e:
            logger.error("Failed to read system clock", extra={"error": str(e)})
            raise ClockError(f"Unable to read current time: {e}") from e


@dataclass(frozen=True)
class FixedClock:
    """A clock frozen at one instant. Used by tests and for replaying a signature."""
    instant: datetime

    def now(self) -> datetime:
        return self.instant


def read_utc(clock: Clock) -> datetime:
    """
    Read ``clock`` once and return the instant in UTC.

    Any failure of the clock, including returning a naive datetime whose
    offset cannot be known, surfaces as ClockError.
    """
    try:
        instant = clock.now()
    except ClockError:
        raise
    except Exception as e:
        logger.error("Clock raised while reading time", extra={"error": str(e)})
        raise ClockError(f"Unable to read current time: {e}") from e

    if not isinstance(instant, datetime):
        raise ClockError(f"Clock returned {type(instant).__name__}, expected datetime")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ClockError("Clock returned a naive datetime; a timezone-aware value is required")
    return instant.astimezone(timezone.utc)
