"""Repository classes encapsulating database operations.

`StudentRepository` is the only storage accessor. It returns SQLModel
objects and performs commits/refreshes where appropriate. Writes either
fully succeed or roll the session back, leaving stored state unchanged.
"""

from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from . import models

Student = models.Student


class StudentRepository:
    """CRUD and query operations for `Student` records."""
    def __init__(self, session: Session):
        self.session = session

    def _list(self, *criteria) -> List[Student]:
        stmt = select(Student).where(*criteria).order_by(Student.id)
        return list(self.session.exec(stmt).all())

    def get(self, student_id: int) -> Optional[Student]:
        """Get a `Student` by primary key or `None` if absent."""
        return self.session.get(Student, student_id)

    def get_by_email(self, email: str) -> Optional[Student]:
        """Return the student registered with `email`, ignoring letter case."""
        stmt = select(Student).where(func.lower(Student.email) == email.lower())
        return self.session.exec(stmt).first()

    def list_all(self) -> List[Student]:
        return self._list()

    def list_by_department(self, department: str) -> List[Student]:
        return self._list(Student.department == department)

    def list_by_enrollment_year(self, year: int) -> List[Student]:
        return self._list(Student.enrollment_year == year)

    def list_active(self) -> List[Student]:
        return self._list(Student.is_active == True)  # noqa: E712

    def search_by_name(self, fragment: str) -> List[Student]:
        """Return students whose first or last name contains `fragment`.

        Matching is case-insensitive and LIKE wildcards in `fragment`
        are escaped, so `%` and `_` only match themselves.
        """
        needle = fragment.lower()
        return self._list(or_(
            func.lower(Student.first_name).contains(needle, autoescape=True),
            func.lower(Student.last_name).contains(needle, autoescape=True),
        ))

    def list_by_department_and_year(self, department: str, year: int) -> List[Student]:
        return self._list(Student.department == department, Student.enrollment_year == year)

    def list_by_department_and_active(self, department: str, is_active: bool) -> List[Student]:
        return self._list(Student.department == department, Student.is_active == is_active)

    def list_by_year_range(self, start_year: int, end_year: int) -> List[Student]:
        """Return students enrolled between the two years, inclusive."""
        return self._list(Student.enrollment_year.between(start_year, end_year))

    def count_by_department(self, department: str) -> int:
        stmt = select(func.count()).select_from(Student).where(Student.department == department)
        return int(self.session.exec(stmt).one())

    def exists_by_email(self, email: str) -> bool:
        """Return True if any student already uses `email`, ignoring letter case."""
        stmt = select(Student.id).where(func.lower(Student.email) == email.lower())
        return self.session.exec(stmt).first() is not None

    def save(self, student: Student) -> Student:
        """Insert or update `student` and return the refreshed instance.

        A constraint violation (e.g. duplicate email) rolls the session
        back before the `IntegrityError` propagates.
        """
        self.session.add(student)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(student)
        return student

    def delete(self, student: Student) -> None:
        self.session.delete(student)
        self.session.commit()

    def delete_by_id(self, student_id: int) -> bool:
        """Remove the student with `student_id`; False if it did not exist."""
        student = self.get(student_id)
        if not student:
            return False
        self.delete(student)
        return True
