#!/usr/bin/env python3
"""Bulk-load patients from a JSON array file.

Usage:
    python scripts/load_patients.py patients.json
"""
from __future__ import annotations

import argparse
import json
import os
import sys

from sqlalchemy import create_engine

from timegate.app.domain.exceptions import DuplicateOrInvalidRecord
from timegate.app.infra.db import init_db, make_session_factory, session_scope
from timegate.app.services.patients import PatientAdmissionService


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bulk-load patient admission records")
    parser.add_argument("path", help="JSON file holding a list of patient objects")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./timegate.db"),
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    with open(args.path, encoding="utf-8") as fh:
        records = json.load(fh)
    if not isinstance(records, list):
        print("Expected a JSON array of patient records.", file=sys.stderr)
        return 2

    engine = create_engine(args.database_url, future=True)
    init_db(engine, attempts=1)
    try:
        with session_scope(make_session_factory(engine)) as db:
            inserted = PatientAdmissionService(db).bulk_load(records)
    except DuplicateOrInvalidRecord as exc:
        print(f"Batch rejected (record {exc.record_id}): {exc.message}", file=sys.stderr)
        return 1
    print(f"Loaded {inserted} patients.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
