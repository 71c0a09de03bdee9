"""Business-hours write policy."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

OPENING_HOUR = 8
CLOSING_HOUR = 17  # exclusive: 17:00 is already closed
WEEKEND_DAYS = {5, 6}  # Saturday, Sunday


class DenialReason(str, Enum):
    WEEKEND = "weekend"
    OUTSIDE_HOURS = "outside_hours"


@dataclass(frozen=True)
class Decision:
    """Outcome of one policy evaluation. ``reason`` is None when allowed."""

    reason: Optional[DenialReason] = None

    @property
    def allowed(self) -> bool:
        return self.reason is None


ALLOWED = Decision()


def evaluate(timestamp: datetime) -> Decision:
    """Classify a local-time timestamp against the business window."""
    if timestamp.weekday() in WEEKEND_DAYS:
        return Decision(DenialReason.WEEKEND)
    if not OPENING_HOUR <= timestamp.hour < CLOSING_HOUR:
        return Decision(DenialReason.OUTSIDE_HOURS)
    return ALLOWED


def describe(reason: DenialReason) -> str:
    return {
        DenialReason.WEEKEND: "Writes are not permitted on weekends",
        DenialReason.OUTSIDE_HOURS: (
            f"Writes are only permitted between {OPENING_HOUR:02d}:00 and {CLOSING_HOUR:02d}:00"
        ),
    }[reason]
