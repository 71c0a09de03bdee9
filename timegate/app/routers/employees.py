"""Employee registry endpoints. Writes pass through the business-hours gate."""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from ..deps import db_session, principal, write_guard
from ..domain.models import EmployeeCreate, EmployeeRead, EmployeeUpdate
from ..services.guard import WriteGuard
from ..services.registry import EmployeeStore

router = APIRouter()


def _store(
    session: Session = Depends(db_session),
    guard: WriteGuard = Depends(write_guard),
) -> EmployeeStore:
    return EmployeeStore(session, guard)


@router.post("/", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    store: EmployeeStore = Depends(_store),
    actor: str = Depends(principal),
):
    return store.create(payload, actor)


@router.get("/", response_model=List[EmployeeRead])
def list_employees(store: EmployeeStore = Depends(_store)):
    return store.list()


@router.get("/{emp_id}", response_model=EmployeeRead)
def get_employee(emp_id: int, store: EmployeeStore = Depends(_store)):
    return store.get(emp_id)


@router.patch("/{emp_id}", response_model=EmployeeRead)
def update_employee(
    emp_id: int,
    payload: EmployeeUpdate,
    store: EmployeeStore = Depends(_store),
    actor: str = Depends(principal),
):
    return store.update(emp_id, payload, actor)


@router.delete("/{emp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    emp_id: int,
    store: EmployeeStore = Depends(_store),
    actor: str = Depends(principal),
):
    store.delete(emp_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
