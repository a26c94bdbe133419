"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the student records backend.
Controllers are intentionally thin: they validate input, delegate to
exactly one `StudentService` operation and map its `Result` to a
status code.

Endpoints implemented (prefix /api/students):
- POST   /
- GET    /, /active, /search, /enrollment-year-range
- GET    /email/{email}, /department/{department},
         /department/{department}/active,
         /department/{department}/enrollment-year/{year},
         /enrollment-year/{year}, /count/department/{department},
         /check-email/{email}, /{id}
- PUT    /{id}
- DELETE /{id}
- PATCH  /{id}/deactivate, /{id}/activate
"""

import json
import logging
import time
import uuid
from typing import List

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from . import repositories, services
from .config import settings
from .database import create_db_and_tables, get_session
from .schemas import StudentIn, StudentOut, ValidationErrorOut
from .utils.validation import validate_student

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("student_records.api")

app = FastAPI(title="Student Records API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

create_db_and_tables()

ERROR_STATUS = {
    services.ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    services.ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
}


def _request_summary(request: Request, req_id: str, **extra) -> str:
    return json.dumps(
        {
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            **extra,
        },
        ensure_ascii=True,
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        # traceback is logged once, by unexpected_error_handler
        logger.error("request_failed %s", _request_summary(request, req_id, duration_ms=elapsed_ms))
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        _request_summary(request, req_id, status_code=response.status_code, duration_ms=elapsed_ms),
    )
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed body, path or query values as 400."""
    errors = [
        {"field": ".".join(str(p) for p in e["loc"][1:]) or str(e["loc"][0]), "message": e["msg"]}
        for e in exc.errors()
    ]
    logger.info("validation failed path=%s errors=%s", request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("unhandled error path=%s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "internal server error"},
    )


def get_student_service(db: Session = Depends(get_session)) -> services.StudentService:
    """Build a `StudentService` bound to the request's session."""
    return services.StudentService(repositories.StudentRepository(db))


def _unwrap(result: services.Result):
    if not result.ok:
        raise HTTPException(status_code=ERROR_STATUS[result.error], detail=result.message)
    return result.value


def _invalid(errors: List[dict]) -> JSONResponse:
    logger.info("student payload rejected errors=%s", errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "validation failed", "errors": errors},
    )


router = APIRouter(prefix="/api/students", tags=["students"])

_bad_request = {status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorOut}}


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED, responses=_bad_request)
@router.post("/", response_model=StudentOut, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_student(payload: StudentIn, svc: services.StudentService = Depends(get_student_service)):
    """Register a new student.

    Returns 400 for invalid fields or an email that is already taken.
    """
    errors = validate_student(payload)
    if errors:
        return _invalid(errors)
    return _unwrap(svc.create(payload))


@router.get("", response_model=List[StudentOut])
@router.get("/", response_model=List[StudentOut], include_in_schema=False)
def list_students(svc: services.StudentService = Depends(get_student_service)):
    return svc.list_all()


@router.get("/active", response_model=List[StudentOut])
def list_active_students(svc: services.StudentService = Depends(get_student_service)):
    return svc.list_active()


@router.get("/search", response_model=List[StudentOut])
def search_students(name: str, svc: services.StudentService = Depends(get_student_service)):
    """Students whose first or last name contains `name` (case-insensitive)."""
    return svc.search_by_name(name)


@router.get("/enrollment-year-range", response_model=List[StudentOut])
def list_students_by_year_range(
    start_year: int = Query(alias="startYear"),
    end_year: int = Query(alias="endYear"),
    svc: services.StudentService = Depends(get_student_service),
):
    """Students enrolled between `startYear` and `endYear`, both inclusive."""
    return svc.list_by_year_range(start_year, end_year)


@router.get("/email/{email}", response_model=StudentOut)
def get_student_by_email(email: str, svc: services.StudentService = Depends(get_student_service)):
    return _unwrap(svc.get_by_email(email))


@router.get("/department/{department}", response_model=List[StudentOut])
def list_students_by_department(department: str, svc: services.StudentService = Depends(get_student_service)):
    return svc.list_by_department(department)


@router.get("/department/{department}/active", response_model=List[StudentOut])
def list_students_by_department_and_active(
    department: str,
    is_active: bool = Query(True, alias="isActive"),
    svc: services.StudentService = Depends(get_student_service),
):
    return svc.list_by_department_and_active(department, is_active)


@router.get("/department/{department}/enrollment-year/{year}", response_model=List[StudentOut])
def list_students_by_department_and_year(
    department: str, year: int, svc: services.StudentService = Depends(get_student_service)
):
    return svc.list_by_department_and_year(department, year)


@router.get("/enrollment-year/{year}", response_model=List[StudentOut])
def list_students_by_enrollment_year(year: int, svc: services.StudentService = Depends(get_student_service)):
    return svc.list_by_enrollment_year(year)


@router.get("/count/department/{department}", response_model=int)
def count_students_by_department(department: str, svc: services.StudentService = Depends(get_student_service)):
    return svc.count_by_department(department)


@router.get("/check-email/{email}", response_model=bool)
def check_email(email: str, svc: services.StudentService = Depends(get_student_service)):
    return svc.email_exists(email)


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: int, svc: services.StudentService = Depends(get_student_service)):
    return _unwrap(svc.get_by_id(student_id))


@router.put("/{student_id}", response_model=StudentOut, responses=_bad_request)
def update_student(
    student_id: int, payload: StudentIn, svc: services.StudentService = Depends(get_student_service)
):
    """Replace every mutable field of a student.

    404 when the id is unknown; 400 for invalid fields or when the new
    email belongs to another student.
    """
    errors = validate_student(payload)
    if errors:
        return _invalid(errors)
    return _unwrap(svc.update(student_id, payload))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_student(student_id: int, svc: services.StudentService = Depends(get_student_service)):
    _unwrap(svc.delete(student_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{student_id}/deactivate", response_model=StudentOut)
def deactivate_student(student_id: int, svc: services.StudentService = Depends(get_student_service)):
    """Soft-delete: keep the record but flag it inactive."""
    return _unwrap(svc.deactivate(student_id))


@router.patch("/{student_id}/activate", response_model=StudentOut)
def activate_student(student_id: int, svc: services.StudentService = Depends(get_student_service)):
    return _unwrap(svc.activate(student_id))


app.include_router(router)


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}


@app.get("/")
def root():
    return {"service": "student-records", "students": "/api/students", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("student_records.main:app", host="0.0.0.0", port=8000)
