from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from student_records import models


def _student(first, last, email, department="CS", year=2021, active=True):
    return models.Student(
        first_name=first,
        last_name=last,
        email=email,
        phone_number="1234567890",
        date_of_birth=date(2000, 1, 1),
        address="1 Main St",
        department=department,
        enrollment_year=year,
        is_active=active,
    )


@pytest.fixture
def seeded(repo):
    rows = [
        _student("John", "Doe", "john@x.com", "CS", 2020),
        _student("Johnny", "Appleseed", "johnny@x.com", "Math", 2021),
        _student("Jon", "Smith", "jon@x.com", "CS", 2022, active=False),
        _student("Mary", "Johnson", "mary@x.com", "Physics", 2023),
        _student("Eve", "Adams", "eve@x.com", "CS", 2019),
    ]
    return [repo.save(s) for s in rows]


def _names(students):
    return [s.first_name for s in students]


def test_save_assigns_id_and_get_returns_it(repo):
    saved = repo.save(_student("Ann", "Lee", "ann@x.com"))
    assert saved.id is not None
    assert repo.get(saved.id).email == "ann@x.com"
    assert repo.get(saved.id + 100) is None


def test_get_by_email_and_exists(repo, seeded):
    assert repo.get_by_email("jon@x.com").first_name == "Jon"
    assert repo.get_by_email("nobody@x.com") is None
    assert repo.exists_by_email("eve@x.com") is True
    assert repo.exists_by_email("nobody@x.com") is False


def test_list_filters(repo, seeded):
    assert _names(repo.list_all()) == ["John", "Johnny", "Jon", "Mary", "Eve"]
    assert _names(repo.list_by_department("CS")) == ["John", "Jon", "Eve"]
    assert _names(repo.list_by_enrollment_year(2021)) == ["Johnny"]
    assert _names(repo.list_active()) == ["John", "Johnny", "Mary", "Eve"]
    assert _names(repo.list_by_department_and_year("CS", 2022)) == ["Jon"]
    assert _names(repo.list_by_department_and_active("CS", False)) == ["Jon"]
    assert repo.list_by_department("History") == []


def test_year_range_is_inclusive(repo, seeded):
    assert _names(repo.list_by_year_range(2020, 2022)) == ["John", "Johnny", "Jon"]
    assert repo.list_by_year_range(2022, 2020) == []


def test_search_by_name_matches_substring_of_either_name(repo, seeded):
    assert _names(repo.search_by_name("John")) == ["John", "Johnny", "Mary"]
    assert _names(repo.search_by_name("john")) == ["John", "Johnny", "Mary"]
    assert repo.search_by_name("%") == []


def test_count_by_department(repo, seeded):
    assert repo.count_by_department("CS") == 3
    assert repo.count_by_department("History") == 0


def test_duplicate_email_rolls_back(repo, seeded):
    with pytest.raises(IntegrityError):
        repo.save(_student("Copy", "Cat", "john@x.com"))
    assert len(repo.list_all()) == 5


def test_delete_by_id(repo, seeded):
    target = seeded[0].id
    assert repo.delete_by_id(target) is True
    assert repo.get(target) is None
    assert repo.delete_by_id(target) is False
