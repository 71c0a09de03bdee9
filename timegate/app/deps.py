"""Dependency injection utilities."""
from collections.abc import Generator
import os

from fastapi import Depends, Header
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session

from .infra.clock import Clock, SystemClock
from .infra.db import SessionLocal, get_session
from .services.audit import AuditLogger
from .services.guard import AuditSink, WriteGuard

AUDIT_BACKEND = os.getenv("AUDIT_BACKEND", "inline")

_system_clock = SystemClock()


def db_session() -> Generator[Session, None, None]:
    """Provide a scoped DB session to FastAPI endpoints."""
    with get_session() as session:
        yield session


def audit_session_factory() -> sessionmaker:
    """Sessions for audit appends, independent of the request transaction."""
    return SessionLocal


def clock() -> Clock:
    return _system_clock


def principal(x_principal: str = Header("anonymous")) -> str:
    """Identity of the caller, supplied upstream and not validated here."""
    return x_principal


def audit_logger(factory: sessionmaker = Depends(audit_session_factory)) -> AuditLogger:
    return AuditLogger(factory)


def audit_sink(logger: AuditLogger = Depends(audit_logger)) -> AuditSink:
    if AUDIT_BACKEND == "celery":
        from .tasks.audit import enqueue_denial

        return enqueue_denial
    return logger.consume


def write_guard(
    current_clock: Clock = Depends(clock),
    sink: AuditSink = Depends(audit_sink),
) -> WriteGuard:
    return WriteGuard(current_clock, sink)
