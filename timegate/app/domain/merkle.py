"""Hash chain utilities for the audit log."""
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from .models import AuditRecord


@dataclass
class ChainLink:
    value: bytes
    prev_hash: Optional[bytes]

    @property
    def hash(self) -> bytes:
        hasher = hashlib.sha256()
        hasher.update(self.value)
        if self.prev_hash:
            hasher.update(self.prev_hash)
        return hasher.digest()


def canonical_bytes(data: Mapping[str, Any]) -> bytes:
    """Serialize data with deterministic ordering for hashing."""
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


def compute_chain_hash(payload: Mapping[str, Any], prev_hash_hex: Optional[str]) -> str:
    """Return the new chain hash from payload + previous hash."""
    link = ChainLink(
        value=canonical_bytes(payload),
        prev_hash=bytes.fromhex(prev_hash_hex) if prev_hash_hex else None,
    )
    return link.hash.hex()


def hash_material(record: AuditRecord) -> dict:
    return {
        "principal": record.principal,
        "store_name": record.store_name,
        "operation": record.operation.value,
        "reason": record.reason.value,
        "attempted_at": record.attempted_at.isoformat(),
        "detail": record.detail,
    }


def verify_chain(records: Iterable[AuditRecord]) -> List[str]:
    """Return a list of integrity problems; empty when the chain is intact.

    ``records`` must be ordered by sequence id.
    """
    problems: List[str] = []
    prev_hash = None
    for record in records:
        expected = compute_chain_hash(hash_material(record), prev_hash)
        if record.prev_hash != prev_hash:
            problems.append(
                f"prev_hash mismatch at record {record.id}: "
                f"stored={record.prev_hash} expected={prev_hash}"
            )
        if record.curr_hash != expected:
            problems.append(
                f"curr_hash mismatch at record {record.id}: "
                f"stored={record.curr_hash} expected={expected}"
            )
        prev_hash = record.curr_hash
    return problems
