"""SQLModel data models.

This module defines the application's database tables using SQLModel.
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(SQLModel, table=True):
    """An enrolled student's record.

    Fields:
    - `email`: unique across all students
    - `is_active`: soft-delete flag; `False` keeps the row but marks it removed
    - `created_at` / `updated_at`: set by the service layer on every mutation
    """
    __tablename__ = "students"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=50, nullable=False)
    last_name: str = Field(max_length=50, nullable=False)
    email: str = Field(index=True, unique=True, nullable=False)
    phone_number: str = Field(max_length=10)
    date_of_birth: date
    address: str = Field(max_length=200)
    department: str = Field(index=True, max_length=100)
    enrollment_year: int = Field(index=True)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.first_name} {self.last_name}', email='{self.email}')>"
