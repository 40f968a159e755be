"""
Injectable clock.

Engines take a ``now`` value or a ``Clock`` callable instead of reading the
system time, so tests can pin the current instant.
"""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)
