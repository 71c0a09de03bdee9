"""Celery task for out-of-band audit capture."""
from __future__ import annotations

import os

from celery import Celery

from timegate.app.infra.db import SessionLocal
from timegate.app.services.audit import AuditLogger, DenialEvent

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/0")
CELERY_BACKEND_URL = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/1")

celery_app = Celery("timegate", broker=CELERY_BROKER_URL, backend=CELERY_BACKEND_URL)


@celery_app.task(name="audit.record_denial")
def record_denial(payload: dict) -> int | None:
    """Persist one rejected write attempt; returns the audit sequence id."""
    record = AuditLogger(SessionLocal).consume(DenialEvent.from_payload(payload))
    return record.id if record else None


def enqueue_denial(event: DenialEvent) -> None:
    """Audit sink that hands the event to a Celery worker."""
    record_denial.delay(event.to_payload())
