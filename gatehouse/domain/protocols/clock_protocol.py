"""Clock protocol.

Every expiry decision reads a single injected clock at call time so tests can
pin or advance time deterministically.
"""

from datetime import datetime
from typing import Protocol


class ClockProtocol(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC timestamp."""
        ...
