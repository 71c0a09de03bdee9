"""FastAPI application bootstrap for timegate."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .domain.exceptions import (
    DuplicateOrInvalidRecord,
    PolicyViolation,
    RecordNotFound,
)
from .domain.schemas import PolicyViolationOut, RejectedRecordOut
from .infra.db import init_db
from .infra.logconfig import configure_logging
from .routers import audit, employees, patients, users


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    yield


async def policy_violation_handler(request: Request, exc: PolicyViolation) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=PolicyViolationOut(detail=exc.message, reason=exc.reason.value).model_dump(),
    )


async def not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


async def bad_record_handler(request: Request, exc: DuplicateOrInvalidRecord) -> JSONResponse:
    code = status.HTTP_409_CONFLICT if exc.duplicate else status.HTTP_422_UNPROCESSABLE_ENTITY
    return JSONResponse(
        status_code=code,
        content=RejectedRecordOut(detail=exc.message, record_id=exc.record_id).model_dump(),
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Timegate API", version="0.1.0", lifespan=lifespan)

    app.add_exception_handler(PolicyViolation, policy_violation_handler)
    app.add_exception_handler(RecordNotFound, not_found_handler)
    app.add_exception_handler(DuplicateOrInvalidRecord, bad_record_handler)

    app.include_router(users.router, prefix="/users", tags=["users"])
    app.include_router(employees.router, prefix="/employees", tags=["employees"])
    app.include_router(audit.router, prefix="/audit", tags=["audit"])
    app.include_router(patients.router, prefix="/patients", tags=["patients"])

    return app


app = create_app()
