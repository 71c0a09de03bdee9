"""Typed domain errors. Routers translate these to HTTP responses."""
from __future__ import annotations

from typing import Any, Optional

from .policy import DenialReason, describe


class TimegateError(Exception):
    """Base for all timegate domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PolicyViolation(TimegateError):
    """A protected write was attempted outside the business window."""

    def __init__(self, reason: DenialReason) -> None:
        self.reason = reason
        super().__init__(describe(reason))


class AuditWriteFailure(TimegateError):
    """The durable audit append failed. Never surfaces to the writer."""


class DuplicateOrInvalidRecord(TimegateError):
    """A bulk-load batch was rejected because of one offending record."""

    def __init__(self, record_id: Optional[Any], message: str, duplicate: bool = False) -> None:
        self.record_id = record_id
        self.duplicate = duplicate
        super().__init__(message)


class RecordNotFound(TimegateError):
    def __init__(self, store_name: str, key: Any) -> None:
        self.store_name = store_name
        self.key = key
        super().__init__(f"{store_name} record {key} not found")


class PatientNotFound(RecordNotFound):
    def __init__(self, patient_id: int) -> None:
        super().__init__("patients", patient_id)
