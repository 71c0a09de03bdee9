"""Patient admission service. Not subject to the business-hours policy."""
from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..domain.exceptions import DuplicateOrInvalidRecord, PatientNotFound
from ..domain.models import Patient, PatientIn

logger = logging.getLogger(__name__)

PatientLike = Union[PatientIn, Mapping[str, Any]]


class PatientAdmissionService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def bulk_load(self, records: Sequence[PatientLike]) -> int:
        """Insert every record or none of them.

        The whole batch is validated before anything is written; the first
        malformed or duplicate record fails it.
        """
        validated = [self._validate(raw) for raw in records]

        seen: set[int] = set()
        for patient_in in validated:
            if patient_in.id in seen:
                raise DuplicateOrInvalidRecord(
                    patient_in.id, f"patient {patient_in.id} appears twice in batch", duplicate=True
                )
            seen.add(patient_in.id)

        if seen:
            existing = self.session.exec(
                select(Patient.id).where(Patient.id.in_(sorted(seen))).order_by(Patient.id).limit(1)
            ).first()
            if existing is not None:
                raise DuplicateOrInvalidRecord(
                    existing, f"patient {existing} already exists", duplicate=True
                )

        self.session.add_all(Patient(**patient_in.model_dump()) for patient_in in validated)
        try:
            self.session.flush()
        except IntegrityError as exc:
            # a concurrent loader won the race for one of the identities
            self.session.rollback()
            raise DuplicateOrInvalidRecord(None, "batch conflicts with existing patients", duplicate=True) from exc
        logger.info("bulk-loaded %d patients", len(validated))
        return len(validated)

    @staticmethod
    def _validate(raw: PatientLike) -> PatientIn:
        if isinstance(raw, PatientIn):
            return raw
        try:
            return PatientIn.model_validate(raw)
        except ValidationError as exc:
            record_id = raw.get("id") if isinstance(raw, Mapping) else None
            raise DuplicateOrInvalidRecord(record_id, f"invalid patient record {record_id}: {exc}") from exc

    def list_all(self, after: Optional[int] = None, limit: Optional[int] = None) -> Iterator[Patient]:
        """Lazily scan patients in id order, resuming after ``after`` if given."""
        stmt = select(Patient).order_by(Patient.id)
        if after is not None:
            stmt = stmt.where(Patient.id > after)
        if limit is not None:
            stmt = stmt.limit(limit)
        for patient in self.session.exec(stmt):
            yield patient

    def count_admitted(self) -> int:
        stmt = select(func.count()).select_from(Patient).where(Patient.admitted == True)  # noqa: E712
        return int(self.session.exec(stmt).one())

    def admit(self, patient_id: int) -> Patient:
        patient = self.session.get(Patient, patient_id)
        if not patient:
            raise PatientNotFound(patient_id)
        patient.admitted = True
        self.session.add(patient)
        self.session.flush()
        self.session.refresh(patient)
        return patient
