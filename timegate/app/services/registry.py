"""Protected user and employee registries."""
from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..domain.exceptions import DuplicateOrInvalidRecord, RecordNotFound
from ..domain.models import (
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
    OperationKind,
    StoreName,
    User,
    UserCreate,
    UserUpdate,
)
from .guard import WriteGuard


class UserStore:
    store_name = StoreName.USERS.value

    def __init__(self, session: Session, guard: WriteGuard) -> None:
        self.session = session
        self.guard = guard

    def get(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if not user:
            raise RecordNotFound(self.store_name, user_id)
        return user

    def list(self) -> List[User]:
        return list(self.session.exec(select(User).order_by(User.id)).all())

    def create(self, payload: UserCreate, principal: str) -> User:
        return self.guard.guard(
            lambda: self._create(payload),
            store_name=self.store_name,
            operation=OperationKind.CREATE,
            principal=principal,
            detail=f"username={payload.username}",
        )

    def update(self, user_id: int, payload: UserUpdate, principal: str) -> User:
        changes = payload.model_dump(exclude_unset=True)
        return self.guard.guard(
            lambda: self._update(user_id, changes),
            store_name=self.store_name,
            operation=OperationKind.UPDATE,
            principal=principal,
            detail=f"id={user_id} fields={','.join(sorted(changes))}",
        )

    def delete(self, user_id: int, principal: str) -> None:
        self.guard.guard(
            lambda: self._delete(user_id),
            store_name=self.store_name,
            operation=OperationKind.DELETE,
            principal=principal,
            detail=f"id={user_id}",
        )

    def _username_taken(self, username: str) -> bool:
        return self.session.exec(select(User.id).where(User.username == username)).first() is not None

    def _create(self, payload: UserCreate) -> User:
        duplicate = DuplicateOrInvalidRecord(
            payload.username, f"username {payload.username} already exists", duplicate=True
        )
        if self._username_taken(payload.username):
            raise duplicate
        user = User(**payload.model_dump())
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError as exc:
            # a concurrent create claimed the username after the lookup
            self.session.rollback()
            raise duplicate from exc
        self.session.refresh(user)
        return user

    def _update(self, user_id: int, changes: dict) -> User:
        user = self.get(user_id)
        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = datetime.utcnow()
        self.session.add(user)
        self.session.flush()
        self.session.refresh(user)
        return user

    def _delete(self, user_id: int) -> None:
        self.session.delete(self.get(user_id))
        self.session.flush()


class EmployeeStore:
    store_name = StoreName.EMPLOYEES.value

    def __init__(self, session: Session, guard: WriteGuard) -> None:
        self.session = session
        self.guard = guard

    def get(self, emp_id: int) -> Employee:
        employee = self.session.get(Employee, emp_id)
        if not employee:
            raise RecordNotFound(self.store_name, emp_id)
        return employee

    def list(self) -> List[Employee]:
        return list(self.session.exec(select(Employee).order_by(Employee.emp_id)).all())

    def create(self, payload: EmployeeCreate, principal: str) -> Employee:
        return self.guard.guard(
            lambda: self._create(payload),
            store_name=self.store_name,
            operation=OperationKind.CREATE,
            principal=principal,
            detail=f"name={payload.name}",
        )

    def update(self, emp_id: int, payload: EmployeeUpdate, principal: str) -> Employee:
        changes = payload.model_dump(exclude_unset=True)
        return self.guard.guard(
            lambda: self._update(emp_id, changes),
            store_name=self.store_name,
            operation=OperationKind.UPDATE,
            principal=principal,
            detail=f"emp_id={emp_id} fields={','.join(sorted(changes))}",
        )

    def delete(self, emp_id: int, principal: str) -> None:
        self.guard.guard(
            lambda: self._delete(emp_id),
            store_name=self.store_name,
            operation=OperationKind.DELETE,
            principal=principal,
            detail=f"emp_id={emp_id}",
        )

    def _create(self, payload: EmployeeCreate) -> Employee:
        employee = Employee(**payload.model_dump())
        self.session.add(employee)
        self.session.flush()
        self.session.refresh(employee)
        return employee

    def _update(self, emp_id: int, changes: dict) -> Employee:
        employee = self.get(emp_id)
        for field, value in changes.items():
            setattr(employee, field, value)
        employee.updated_at = datetime.utcnow()
        self.session.add(employee)
        self.session.flush()
        self.session.refresh(employee)
        return employee

    def _delete(self, emp_id: int) -> None:
        self.session.delete(self.get(emp_id))
        self.session.flush()
