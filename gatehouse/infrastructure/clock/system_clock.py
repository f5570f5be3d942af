"""System clock adapter returning timezone-aware UTC timestamps."""

from datetime import UTC, datetime


class SystemClock:
    """Wall clock implementation of ClockProtocol."""

    def now(self) -> datetime:
        return datetime.now(UTC)
