"""Clock sources for policy evaluation."""
from __future__ import annotations

import os
from datetime import datetime
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

# IANA zone of the business clock; unset means the host's local time
BUSINESS_TIMEZONE = os.getenv("TIMEGATE_TIMEZONE")


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in the business timezone."""

    def __init__(self, tz_name: Optional[str] = BUSINESS_TIMEZONE) -> None:
        self.tz = ZoneInfo(tz_name) if tz_name else None

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now()
        return datetime.now(self.tz)


class FixedClock:
    """Always reports the same instant. Used for simulation and tests."""

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
