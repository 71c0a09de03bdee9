from datetime import datetime

import pytest

from timegate.app.domain.exceptions import PolicyViolation
from timegate.app.domain.models import OperationKind
from timegate.app.domain.policy import DenialReason
from timegate.app.infra.clock import FixedClock
from timegate.app.services.guard import WriteGuard

SATURDAY_10AM = datetime(2024, 6, 1, 10, 0)
TUESDAY_9AM = datetime(2024, 6, 4, 9, 0)


class RecordingSink:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)


def _guarded(guard, op, **kwargs):
    params = dict(store_name="employees", operation=OperationKind.UPDATE, principal="alice")
    params.update(kwargs)
    return guard.guard(op, **params)


def test_allowed_runs_op_without_audit():
    sink = RecordingSink()
    guard = WriteGuard(FixedClock(TUESDAY_9AM), sink)

    assert _guarded(guard, lambda: "done") == "done"
    assert sink.events == []


def test_denied_skips_op_and_notifies_sink():
    sink = RecordingSink()
    guard = WriteGuard(FixedClock(SATURDAY_10AM), sink)
    calls = []

    with pytest.raises(PolicyViolation) as excinfo:
        _guarded(guard, lambda: calls.append("ran"), detail="emp_id=2 fields=salary")

    assert excinfo.value.reason is DenialReason.WEEKEND
    assert calls == []
    assert len(sink.events) == 1
    event = sink.events[0]
    assert event.principal == "alice"
    assert event.store_name == "employees"
    assert event.operation is OperationKind.UPDATE
    assert event.attempted_at == SATURDAY_10AM
    assert event.reason is DenialReason.WEEKEND
    assert event.detail == "update on employees denied (weekend): emp_id=2 fields=salary"


def test_explicit_timestamp_overrides_clock():
    sink = RecordingSink()
    guard = WriteGuard(FixedClock(TUESDAY_9AM), sink)

    with pytest.raises(PolicyViolation) as excinfo:
        _guarded(guard, lambda: None, timestamp=datetime(2024, 6, 4, 18, 30))

    assert excinfo.value.reason is DenialReason.OUTSIDE_HOURS
    assert sink.events[0].attempted_at == datetime(2024, 6, 4, 18, 30)


def test_clock_read_once_per_attempt():
    class CountingClock:
        calls = 0

        def now(self):
            self.calls += 1
            return TUESDAY_9AM

    clock = CountingClock()
    guard = WriteGuard(clock, RecordingSink())
    _guarded(guard, lambda: None)
    assert clock.calls == 1


def test_violation_surfaces_when_sink_fails(caplog):
    def broken_sink(event):
        raise RuntimeError("broker down")

    guard = WriteGuard(FixedClock(SATURDAY_10AM), broken_sink)

    with caplog.at_level("ERROR"):
        with pytest.raises(PolicyViolation):
            _guarded(guard, lambda: None)
    assert "audit sink failed" in caplog.text
