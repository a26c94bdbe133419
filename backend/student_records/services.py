"""Business logic services used by HTTP controllers.

`StudentService` coordinates the student repository: it enforces email
uniqueness, sets timestamps and the active flag, and maps stored
entities to the `StudentOut` representation.

Expected failures are not raised. Each operation that can fail returns
a `Result` whose `error` names the kind of failure, so controllers can
map "not found" and "conflict" to different HTTP statuses.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError

from . import models, repositories
from .schemas import StudentIn, StudentOut

logger = logging.getLogger("student_records.services")

MUTABLE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "date_of_birth",
    "address",
    "department",
    "enrollment_year",
)


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass
class Result:
    """Outcome of a service call: a `value` or an `error` with a message."""
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None) -> "Result":
        return cls(value=value)

    @classmethod
    def not_found(cls, message: str) -> "Result":
        return cls(error=ErrorKind.NOT_FOUND, message=message)

    @classmethod
    def conflict(cls, message: str) -> "Result":
        return cls(error=ErrorKind.CONFLICT, message=message)


def normalize_email(email: str) -> str:
    """Emails are unique regardless of letter case; store them lowercased."""
    return email.strip().lower()


def to_out(student: models.Student) -> StudentOut:
    """Map a stored `Student` to its over-the-wire representation."""
    return StudentOut.model_validate(student)


class StudentService:
    """Student record operations on top of an injected repository."""
    def __init__(self, repo: repositories.StudentRepository):
        self.repo = repo

    def _many(self, students: List[models.Student]) -> List[StudentOut]:
        return [to_out(s) for s in students]

    def _missing(self, student_id: int) -> Result:
        return Result.not_found(f"Student not found with id: {student_id}")

    def _duplicate(self, email: str) -> Result:
        logger.warning("duplicate email rejected: %s", email)
        return Result.conflict(f"Student with email {email} already exists")

    def _persist(self, student: models.Student, email: str) -> Result:
        try:
            return Result.success(to_out(self.repo.save(student)))
        except IntegrityError:
            # lost a race against a concurrent write of the same email
            return self._duplicate(email)

    def create(self, data: StudentIn) -> Result:
        """Create a new active student.

        Fails with `CONFLICT` when the email is already registered.
        Both timestamps are set to the same instant.
        """
        email = normalize_email(data.email)
        if self.repo.exists_by_email(email):
            return self._duplicate(email)
        now = models.utcnow()
        fields = {f: getattr(data, f) for f in MUTABLE_FIELDS}
        fields["email"] = email
        student = models.Student(**fields, is_active=True, created_at=now, updated_at=now)
        result = self._persist(student, email)
        if result.ok:
            logger.info("student created id=%s", result.value.id)
        return result

    def get_by_id(self, student_id: int) -> Result:
        student = self.repo.get(student_id)
        if not student:
            return self._missing(student_id)
        return Result.success(to_out(student))

    def get_by_email(self, email: str) -> Result:
        student = self.repo.get_by_email(email)
        if not student:
            return Result.not_found(f"Student not found with email: {email}")
        return Result.success(to_out(student))

    def list_all(self) -> List[StudentOut]:
        return self._many(self.repo.list_all())

    def list_active(self) -> List[StudentOut]:
        return self._many(self.repo.list_active())

    def list_by_department(self, department: str) -> List[StudentOut]:
        return self._many(self.repo.list_by_department(department))

    def list_by_enrollment_year(self, year: int) -> List[StudentOut]:
        return self._many(self.repo.list_by_enrollment_year(year))

    def list_by_department_and_year(self, department: str, year: int) -> List[StudentOut]:
        return self._many(self.repo.list_by_department_and_year(department, year))

    def list_by_department_and_active(self, department: str, is_active: bool = True) -> List[StudentOut]:
        return self._many(self.repo.list_by_department_and_active(department, is_active))

    def list_by_year_range(self, start_year: int, end_year: int) -> List[StudentOut]:
        return self._many(self.repo.list_by_year_range(start_year, end_year))

    def search_by_name(self, fragment: str) -> List[StudentOut]:
        return self._many(self.repo.search_by_name(fragment))

    def update(self, student_id: int, data: StudentIn) -> Result:
        """Replace every mutable field of an existing student.

        The uniqueness check only runs when the email actually changes,
        so re-submitting a record's own email never conflicts.
        """
        student = self.repo.get(student_id)
        if not student:
            return self._missing(student_id)
        email = normalize_email(data.email)
        if normalize_email(student.email) != email and self.repo.exists_by_email(email):
            return self._duplicate(email)
        for field in MUTABLE_FIELDS:
            setattr(student, field, getattr(data, field))
        student.email = email
        student.updated_at = models.utcnow()
        result = self._persist(student, email)
        if result.ok:
            logger.info("student updated id=%s", student_id)
        return result

    def delete(self, student_id: int) -> Result:
        if not self.repo.delete_by_id(student_id):
            return self._missing(student_id)
        logger.info("student deleted id=%s", student_id)
        return Result.success()

    def _set_active(self, student_id: int, active: bool) -> Result:
        student = self.repo.get(student_id)
        if not student:
            return self._missing(student_id)
        student.is_active = active
        student.updated_at = models.utcnow()
        result = self._persist(student, student.email)
        if result.ok:
            logger.info("student %s id=%s", "activated" if active else "deactivated", student_id)
        return result

    def deactivate(self, student_id: int) -> Result:
        return self._set_active(student_id, False)

    def activate(self, student_id: int) -> Result:
        return self._set_active(student_id, True)

    def count_by_department(self, department: str) -> int:
        return self.repo.count_by_department(department)

    def email_exists(self, email: str) -> bool:
        return self.repo.exists_by_email(email)
