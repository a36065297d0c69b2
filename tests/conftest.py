"""
Pytest configuration and shared fixtures.

Repositories run against real SQLite files under tmp_path, one
connection per operation, so resource release can be asserted.
"""

import os

# Must be set before config is imported anywhere.
os.environ.setdefault("DB_BACKEND", "sqlite")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from db.connection import SqliteConnectionProvider
from db.dialect import SQLITE
from db.init_db import create_tables
from models.employee import Employee
from repositories.employee_repo import make_employee_repository


@pytest.fixture
def provider(tmp_path):
    """SQLite provider with the Employees schema created."""
    p = SqliteConnectionProvider(tmp_path / "groton_test.db")
    create_tables(p)
    return p


@pytest.fixture
def employee_repo(provider):
    return make_employee_repository(provider, SQLITE)


@pytest.fixture
def seeded_repo(employee_repo):
    """Repository holding five employees, inserted out of key order."""
    for employee in (
        Employee(4, "Dan", "Ops"),
        Employee(1, "Ann", "Eng"),
        Employee(5, "Eve", "Eng"),
        Employee(2, "Bob", "Eng"),
        Employee(3, "Cat", "Sales"),
    ):
        employee_repo.add(employee)
    return employee_repo
