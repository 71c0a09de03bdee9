from datetime import datetime, timedelta, timezone

import pytest

from timegate.app.domain.policy import ALLOWED, Decision, DenialReason, evaluate


@pytest.mark.parametrize("day", [1, 2])  # 2024-06-01 Saturday, 2024-06-02 Sunday
@pytest.mark.parametrize("hour", range(24))
def test_weekend_denied_regardless_of_hour(day, hour):
    decision = evaluate(datetime(2024, 6, day, hour, 30))
    assert decision == Decision(DenialReason.WEEKEND)
    assert not decision.allowed


@pytest.mark.parametrize("day", [3, 4, 5, 6, 7])
@pytest.mark.parametrize("hour", [0, 5, 7, 17, 18, 23])
def test_weekday_outside_hours_denied(day, hour):
    assert evaluate(datetime(2024, 6, day, hour, 0)).reason is DenialReason.OUTSIDE_HOURS


@pytest.mark.parametrize("day", [3, 4, 5, 6, 7])
@pytest.mark.parametrize("hour", range(8, 17))
def test_weekday_business_hours_allowed(day, hour):
    decision = evaluate(datetime(2024, 6, day, hour, 59))
    assert decision is ALLOWED
    assert decision.allowed


def test_window_boundaries():
    assert evaluate(datetime(2024, 6, 4, 7, 59, 59)).reason is DenialReason.OUTSIDE_HOURS
    assert evaluate(datetime(2024, 6, 4, 8, 0)).allowed
    assert evaluate(datetime(2024, 6, 4, 16, 59, 59)).allowed
    assert evaluate(datetime(2024, 6, 4, 17, 0)).reason is DenialReason.OUTSIDE_HOURS


def test_uses_local_fields_of_aware_timestamps():
    tokyo = timezone(timedelta(hours=9))
    # 10:00 in Tokyo on a Tuesday, 01:00 UTC
    assert evaluate(datetime(2024, 6, 4, 10, 0, tzinfo=tokyo)).allowed
