from datetime import datetime

import pytest

from timegate.app.domain.models import OperationKind
from timegate.app.domain.policy import DenialReason
from timegate.app.services.audit import AuditLogger, DenialEvent
from timegate.app.tasks import audit as audit_tasks


@pytest.fixture
def eager_celery(monkeypatch, session_factory):
    monkeypatch.setattr(audit_tasks, "SessionLocal", session_factory)
    conf = audit_tasks.celery_app.conf
    previous = conf.task_always_eager, conf.result_backend
    conf.task_always_eager = True
    conf.result_backend = "cache+memory://"
    yield
    conf.task_always_eager, conf.result_backend = previous


def test_enqueue_denial_records_via_task(eager_celery, session_factory):
    event = DenialEvent(
        principal="mallory",
        store_name="employees",
        operation=OperationKind.UPDATE,
        attempted_at=datetime(2024, 6, 1, 10, 0),
        reason=DenialReason.WEEKEND,
        detail="emp_id=2",
    )
    audit_tasks.enqueue_denial(event)

    (record,) = AuditLogger(session_factory).query()
    assert record.principal == "mallory"
    assert record.attempted_at == datetime(2024, 6, 1, 10, 0)


def test_record_denial_returns_sequence_id(eager_celery):
    payload = {
        "principal": "bob",
        "store_name": "users",
        "operation": "create",
        "attempted_at": "2024-06-04T18:30:00",
        "reason": "outside_hours",
        "detail": "",
    }
    assert audit_tasks.record_denial.delay(payload).get() == 1


def test_audit_sink_selects_backend(monkeypatch, session_factory):
    from timegate.app import deps

    logger = AuditLogger(session_factory)
    assert deps.audit_sink(logger) == logger.consume

    monkeypatch.setattr(deps, "AUDIT_BACKEND", "celery")
    assert deps.audit_sink(logger) is audit_tasks.enqueue_denial
