#!/usr/bin/env python3
"""
Verify the timegate audit log hash chain for tamper detection.

Usage:
    python scripts/verify_audit_chain.py --database-url sqlite:///./timegate.db
"""
from __future__ import annotations

import argparse
import os
import sys

from sqlalchemy import create_engine

from timegate.app.domain.merkle import verify_chain
from timegate.app.infra.db import make_session_factory
from timegate.app.services.audit import AuditFilter, AuditLogger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify audit log chain integrity.")
    parser.add_argument(
        "--principal",
        help="Optional principal to list alongside verification",
    )
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./timegate.db"),
        help="Database URL (SQLAlchemy compatible)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    engine = create_engine(args.database_url, future=True)
    audit = AuditLogger(make_session_factory(engine))
    records = audit.query()
    if not records:
        print("No audit records found for verification.")
        return 0
    problems = verify_chain(records)
    for problem in problems:
        print(f"[WARN] {problem}", file=sys.stderr)
    if args.principal:
        for record in audit.query(AuditFilter(principal=args.principal)):
            print(f"#{record.id} {record.attempted_at.isoformat()} {record.detail}")
    if problems:
        return 1
    print(f"Verified {len(records)} audit records; chain intact")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
