"""Wall-clock implementation of ClockProtocol."""

from datetime import UTC, datetime


class SystemClock:
    """Current UTC time from the system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)
