"""API I/O schemas."""
from typing import Any, List, Optional

from pydantic import BaseModel


class BulkLoadResult(BaseModel):
    inserted: int


class AdmittedCount(BaseModel):
    admitted: int


class ChainReport(BaseModel):
    records: int
    intact: bool
    problems: List[str]


class PolicyViolationOut(BaseModel):
    detail: str
    reason: str


class RejectedRecordOut(BaseModel):
    detail: str
    record_id: Optional[Any] = None
