import os
from datetime import date

import pytest

# must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from student_records import repositories, services  # noqa: E402
from student_records.database import create_db_and_tables, drop_db_and_tables, engine  # noqa: E402
from student_records.main import app  # noqa: E402
from student_records.schemas import StudentIn  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty tables."""
    drop_db_and_tables()
    create_db_and_tables()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def repo(session):
    return repositories.StudentRepository(session)


@pytest.fixture
def service(repo):
    return services.StudentService(repo)


def _payload(**overrides) -> dict:
    data = {
        "first_name": "Ann",
        "last_name": "Lee",
        "email": "ann@x.com",
        "phone_number": "1112223333",
        "date_of_birth": "1999-01-01",
        "address": "1 Rd",
        "department": "CS",
        "enrollment_year": 2021,
    }
    data.update(overrides)
    return data


@pytest.fixture
def payload():
    """Factory for a valid JSON body; keyword arguments replace fields."""
    return _payload


@pytest.fixture
def student_in():
    """Factory for a valid `StudentIn`; keyword arguments replace fields."""
    def make(**overrides) -> StudentIn:
        data = _payload(**overrides)
        if isinstance(data["date_of_birth"], str):
            data["date_of_birth"] = date.fromisoformat(data["date_of_birth"])
        return StudentIn(**data)
    return make
