"""Domain models shared between API and persistence layers."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import DateTime
from sqlmodel import Field as SQLField, SQLModel

from .policy import DenialReason


class OperationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def _reject_null(value):
    # omitted fields stay unset; an explicit null would violate NOT NULL
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


class StoreName(str, Enum):
    USERS = "users"
    EMPLOYEES = "employees"


class User(SQLModel, table=True):
    """Protected user registry row."""

    __tablename__ = "users"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    username: str = SQLField(index=True, unique=True)
    email: str
    full_name: str = SQLField(default="")
    created_at: datetime = SQLField(default_factory=datetime.utcnow, sa_type=DateTime, nullable=False)
    updated_at: datetime = SQLField(default_factory=datetime.utcnow, sa_type=DateTime, nullable=False)


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    email: str
    full_name: str = ""


class UserUpdate(BaseModel):
    email: Optional[str] = None
    full_name: Optional[str] = None

    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        return _reject_null(value)


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Employee(SQLModel, table=True):
    """Protected employee registry row."""

    __tablename__ = "employees"

    emp_id: Optional[int] = SQLField(default=None, primary_key=True)
    name: str = SQLField(index=True)
    position: str = SQLField(default="")
    department: str = SQLField(default="", index=True)
    salary: int = SQLField(default=0)
    created_at: datetime = SQLField(default_factory=datetime.utcnow, sa_type=DateTime, nullable=False)
    updated_at: datetime = SQLField(default_factory=datetime.utcnow, sa_type=DateTime, nullable=False)


class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    position: str = ""
    department: str = ""
    salary: int = Field(0, ge=0)


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    salary: Optional[int] = Field(None, ge=0)

    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        return _reject_null(value)


class EmployeeRead(BaseModel):
    emp_id: int
    name: str
    position: str
    department: str
    salary: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuditRecord(SQLModel, table=True):
    """Append-only record of one rejected write. Rows are never updated."""

    __tablename__ = "audit_records"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    principal: str = SQLField(index=True)
    store_name: str = SQLField(index=True)
    operation: OperationKind
    reason: DenialReason
    attempted_at: datetime = SQLField(sa_type=DateTime, nullable=False, index=True)
    detail: str = SQLField(default="")
    prev_hash: Optional[str] = SQLField(default=None)
    curr_hash: Optional[str] = SQLField(default=None, index=True)
    recorded_at: datetime = SQLField(default_factory=datetime.utcnow, sa_type=DateTime, nullable=False)


class AuditRecordRead(BaseModel):
    id: int
    principal: str
    store_name: str
    operation: OperationKind
    reason: DenialReason
    attempted_at: datetime
    detail: str
    prev_hash: Optional[str]
    curr_hash: Optional[str]
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Patient(SQLModel, table=True):
    """Patient admission row. Identity is assigned by the caller."""

    __tablename__ = "patients"

    id: int = SQLField(primary_key=True, sa_column_kwargs={"autoincrement": False})
    name: str
    age: int
    gender: str
    admitted: bool = SQLField(default=False, index=True)


class PatientIn(BaseModel):
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=150)
    gender: str = Field(..., min_length=1)
    admitted: bool = False


class PatientRead(BaseModel):
    id: int
    name: str
    age: int
    gender: str
    admitted: bool

    model_config = ConfigDict(from_attributes=True)
