"""Audit routes. Read-only and never gated by the business-hours policy."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import audit_logger
from ..domain.merkle import verify_chain
from ..domain.models import AuditRecordRead, OperationKind, StoreName
from ..domain.policy import DenialReason
from ..domain.schemas import ChainReport
from ..services.audit import AuditFilter, AuditLogger

router = APIRouter()


@router.get("/records", response_model=List[AuditRecordRead])
def audit_records(
    principal: Optional[str] = Query(None),
    store_name: Optional[StoreName] = Query(None),
    operation: Optional[OperationKind] = Query(None),
    reason: Optional[DenialReason] = Query(None),
    since: Optional[datetime] = Query(None),
    until: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    logger: AuditLogger = Depends(audit_logger),
):
    return logger.query(
        AuditFilter(
            principal=principal,
            store_name=store_name.value if store_name else None,
            operation=operation,
            reason=reason,
            since=since,
            until=until,
            limit=limit,
        )
    )


@router.get("/verify", response_model=ChainReport)
def audit_verify(logger: AuditLogger = Depends(audit_logger)):
    """Check the hash chain over the whole log."""
    records = logger.query()
    problems = verify_chain(records)
    return ChainReport(records=len(records), intact=not problems, problems=problems)
