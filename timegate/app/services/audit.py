"""Audit logger: append-only record of rejected protected writes."""
from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, select

from ..domain.exceptions import AuditWriteFailure
from ..domain.merkle import compute_chain_hash, hash_material
from ..domain.models import AuditRecord, OperationKind
from ..domain.policy import DenialReason

# Operational error channel for dropped audit writes
logger = logging.getLogger("timegate.audit")

# Serializes sequence/hash assignment across every logger in the process
_append_lock = threading.Lock()


@dataclass(frozen=True)
class DenialEvent:
    """Structured description of one rejected write attempt."""

    principal: str
    store_name: str
    operation: OperationKind
    attempted_at: datetime
    reason: DenialReason
    detail: str = ""

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["operation"] = self.operation.value
        payload["reason"] = self.reason.value
        payload["attempted_at"] = self.attempted_at.isoformat()
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "DenialEvent":
        return cls(
            principal=payload["principal"],
            store_name=payload["store_name"],
            operation=OperationKind(payload["operation"]),
            attempted_at=datetime.fromisoformat(payload["attempted_at"]),
            reason=DenialReason(payload["reason"]),
            detail=payload.get("detail", ""),
        )


@dataclass
class AuditFilter:
    principal: Optional[str] = None
    store_name: Optional[str] = None
    operation: Optional[OperationKind] = None
    reason: Optional[DenialReason] = None
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    limit: Optional[int] = None


class AuditLogger:
    """Append-only audit log backed by SQLModel and hash chaining.

    Each append runs in its own session so that the rejected caller's
    rollback never removes the record. The write path is not subject to the
    business-hours policy.
    """

    max_attempts = 2  # first try plus one immediate retry

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def consume(self, event: DenialEvent) -> Optional[AuditRecord]:
        return self.record(
            principal=event.principal,
            store_name=event.store_name,
            operation=event.operation,
            timestamp=event.attempted_at,
            reason=event.reason,
            detail=event.detail,
        )

    def record(
        self,
        principal: str,
        store_name: str,
        operation: OperationKind,
        timestamp: datetime,
        reason: DenialReason,
        detail: str = "",
    ) -> Optional[AuditRecord]:
        """Append one record. Returns None when the write was dropped."""
        context = {
            "principal": principal,
            "store_name": store_name,
            "operation": operation.value,
            "reason": reason.value,
        }
        for attempt in range(1, self.max_attempts + 1):
            try:
                record = self._append(principal, store_name, operation, timestamp, reason, detail)
            except AuditWriteFailure as exc:
                if attempt < self.max_attempts:
                    logger.warning("audit append failed, retrying: %s", exc, extra=context)
                    continue
                logger.error(
                    "audit record dropped after %d attempts: %s",
                    attempt,
                    exc,
                    extra=context,
                )
                return None
            logger.info(
                "recorded denied %s on %s",
                operation.value,
                store_name,
                extra={**context, "audit_id": record.id},
            )
            return record
        return None

    def _append(
        self,
        principal: str,
        store_name: str,
        operation: OperationKind,
        timestamp: datetime,
        reason: DenialReason,
        detail: str,
    ) -> AuditRecord:
        # stored as naive business-local time; the database drops offsets
        attempted_at = timestamp.replace(tzinfo=None)
        with _append_lock:
            session = self.session_factory()
            try:
                prev_hash = self._latest_hash(session)
                record = AuditRecord(
                    principal=principal,
                    store_name=store_name,
                    operation=operation,
                    reason=reason,
                    attempted_at=attempted_at,
                    detail=detail,
                    prev_hash=prev_hash,
                    recorded_at=datetime.utcnow(),
                )
                record.curr_hash = compute_chain_hash(hash_material(record), prev_hash)
                session.add(record)
                session.commit()
                session.refresh(record)
                return record
            except SQLAlchemyError as exc:
                session.rollback()
                raise AuditWriteFailure(f"audit append failed: {exc}") from exc
            finally:
                session.close()

    @staticmethod
    def _latest_hash(session: Session) -> Optional[str]:
        stmt = select(AuditRecord.curr_hash).order_by(AuditRecord.id.desc()).limit(1)
        return session.exec(stmt).first()

    def query(self, filters: Optional[AuditFilter] = None) -> List[AuditRecord]:
        """Read-only listing in sequence order."""
        filters = filters or AuditFilter()
        stmt = select(AuditRecord).order_by(AuditRecord.id.asc())
        if filters.principal:
            stmt = stmt.where(AuditRecord.principal == filters.principal)
        if filters.store_name:
            stmt = stmt.where(AuditRecord.store_name == filters.store_name)
        if filters.operation:
            stmt = stmt.where(AuditRecord.operation == filters.operation)
        if filters.reason:
            stmt = stmt.where(AuditRecord.reason == filters.reason)
        if filters.since:
            stmt = stmt.where(AuditRecord.attempted_at >= filters.since)
        if filters.until:
            stmt = stmt.where(AuditRecord.attempted_at < filters.until)
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)
        session = self.session_factory()
        try:
            return list(session.exec(stmt).all())
        finally:
            session.close()
