"""Business-hours write gate for protected stores."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar

from ..domain.exceptions import PolicyViolation
from ..domain.models import OperationKind
from ..domain.policy import evaluate
from ..infra.clock import Clock
from .audit import DenialEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")
AuditSink = Callable[[DenialEvent], object]


class WriteGuard:
    """Check-then-act gate around a single protected write.

    The policy is evaluated exactly once per attempt, against the timestamp
    captured when the attempt starts.
    """

    def __init__(self, clock: Clock, audit_sink: AuditSink) -> None:
        self.clock = clock
        self.audit_sink = audit_sink

    def guard(
        self,
        op: Callable[[], T],
        *,
        store_name: str,
        operation: OperationKind,
        principal: str,
        timestamp: Optional[datetime] = None,
        detail: str = "",
    ) -> T:
        attempted_at = timestamp if timestamp is not None else self.clock.now()
        decision = evaluate(attempted_at)
        context = {
            "principal": principal,
            "store_name": store_name,
            "operation": operation.value,
        }
        if decision.allowed:
            logger.debug("allowed %s on %s", operation.value, store_name, extra=context)
            return op()

        reason = decision.reason
        logger.warning(
            "denied %s on %s: %s",
            operation.value,
            store_name,
            reason.value,
            extra={**context, "reason": reason.value},
        )
        summary = f"{operation.value} on {store_name} denied ({reason.value})"
        event = DenialEvent(
            principal=principal,
            store_name=store_name,
            operation=operation,
            attempted_at=attempted_at,
            reason=reason,
            detail=f"{summary}: {detail}" if detail else summary,
        )
        try:
            self.audit_sink(event)
        except Exception:
            # the rejection must still reach the caller
            logger.exception("audit sink failed for denied %s on %s", operation.value, store_name)
        raise PolicyViolation(reason)
