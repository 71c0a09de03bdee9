"""Patient admission endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..deps import db_session
from ..domain.models import PatientRead
from ..domain.schemas import AdmittedCount, BulkLoadResult
from ..services.patients import PatientAdmissionService

router = APIRouter()


@router.post("/bulk", response_model=BulkLoadResult)
def bulk_load(records: List[dict], session: Session = Depends(db_session)):
    # validated per record by the service so one bad row names itself
    inserted = PatientAdmissionService(session).bulk_load(records)
    return BulkLoadResult(inserted=inserted)


@router.get("/", response_model=List[PatientRead])
def list_patients(
    after: Optional[int] = Query(None, description="resume after this patient id"),
    limit: int = Query(100, ge=1, le=1000),
    session: Session = Depends(db_session),
):
    return list(PatientAdmissionService(session).list_all(after=after, limit=limit))


@router.get("/admitted/count", response_model=AdmittedCount)
def count_admitted(session: Session = Depends(db_session)):
    return AdmittedCount(admitted=PatientAdmissionService(session).count_admitted())


@router.post("/{patient_id}/admit", response_model=PatientRead)
def admit(patient_id: int, session: Session = Depends(db_session)):
    return PatientAdmissionService(session).admit(patient_id)
