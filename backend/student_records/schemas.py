"""Pydantic request/response schemas used by the API.

Schemas only describe shapes and types. Field constraints (lengths,
email syntax, year bounds) are checked explicitly by
`utils.validation.validate_student` so that every violation can be
reported together before any business logic runs.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class StudentIn(BaseModel):
    """Create/update payload: every mutable student field."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    department: Optional[str] = None
    enrollment_year: Optional[int] = None


class StudentOut(BaseModel):
    """Representation returned by every student endpoint."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: str
    date_of_birth: date
    address: str
    department: str
    enrollment_year: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorOut(BaseModel):
    """Body of a 400 response caused by invalid input."""
    detail: str
    errors: List[FieldError]
