"""Explicit field validation for student payloads."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from ..schemas import StudentIn

PHONE_RE = re.compile(r"[0-9]{10}")
MIN_ENROLLMENT_YEAR = 2000
MAX_ENROLLMENT_YEAR = 2030


def _error(field: str, message: str) -> dict:
    return {"field": field, "message": message}


def _check_text(errors: List[dict], field: str, value: Optional[str], label: str,
                min_len: int = 0, max_len: Optional[int] = None, limit_msg: str = "") -> None:
    if value is None or not value.strip():
        errors.append(_error(field, f"{label} is required"))
        return
    if len(value) < min_len or (max_len is not None and len(value) > max_len):
        errors.append(_error(field, limit_msg))


def validate_student(data: StudentIn, today: Optional[date] = None) -> List[dict]:
    """Check every field constraint of a create/update payload.

    Returns a list of `{field, message}` dicts, one per violation, in
    field order. An empty list means the payload is valid.
    """
    today = today or date.today()
    errors: List[dict] = []

    _check_text(errors, "first_name", data.first_name, "First name", 2, 50,
                "First name must be between 2 and 50 characters")
    _check_text(errors, "last_name", data.last_name, "Last name", 2, 50,
                "Last name must be between 2 and 50 characters")

    if data.email is None or not data.email.strip():
        errors.append(_error("email", "Email is required"))
    else:
        try:
            validate_email(data.email, check_deliverability=False)
        except EmailNotValidError:
            errors.append(_error("email", "Please provide a valid email address"))

    if data.phone_number is None or not data.phone_number.strip():
        errors.append(_error("phone_number", "Phone number is required"))
    elif not PHONE_RE.fullmatch(data.phone_number):
        errors.append(_error("phone_number", "Phone number must be 10 digits"))

    if data.date_of_birth is None:
        errors.append(_error("date_of_birth", "Date of birth is required"))
    elif data.date_of_birth >= today:
        errors.append(_error("date_of_birth", "Date of birth must be in the past"))

    _check_text(errors, "address", data.address, "Address", max_len=200,
                limit_msg="Address cannot exceed 200 characters")
    _check_text(errors, "department", data.department, "Department", max_len=100,
                limit_msg="Department cannot exceed 100 characters")

    year = data.enrollment_year
    if year is None:
        errors.append(_error("enrollment_year", "Enrollment year is required"))
    elif year < MIN_ENROLLMENT_YEAR:
        errors.append(_error("enrollment_year", "Enrollment year must be 2000 or later"))
    elif year > MAX_ENROLLMENT_YEAR:
        errors.append(_error("enrollment_year", "Enrollment year cannot exceed 2030"))

    return errors
