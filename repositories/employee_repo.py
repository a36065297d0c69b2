"""
repositories/employee_repo.py
-----------------------------
Data access for the `Employees` table.
Only the table-specific mapping lives here; the SQL comes from EntityRepository.
"""

from typing import Any, Mapping

from db.connection import ConnectionProvider
from db.dialect import POSTGRES, Dialect
from models.employee import Employee
from repositories.base import EntityRepository

TABLE_NAME = "Employees"
PRIMARY_KEY = "EmployeeID"


def row_to_employee(row: Mapping[str, Any]) -> Employee:
    """Convert a {column: value} row into an Employee."""
    return Employee(
        employee_id=int(row["EmployeeID"]),
        name=row["Name"],
        job_title=row["JobTitle"],
    )


def employee_to_params(employee: Employee) -> list[tuple[str, Any]]:
    """Column/value pairs used when inserting an Employee."""
    return [
        ("EmployeeID", employee.employee_id),
        ("Name", employee.name),
        ("JobTitle", employee.job_title),
    ]


def make_employee_repository(provider: ConnectionProvider,
                             dialect: Dialect = POSTGRES) -> EntityRepository[Employee]:
    """Build the repository for the Employees table on the given provider."""
    return EntityRepository(
        provider,
        TABLE_NAME,
        PRIMARY_KEY,
        row_to_employee,
        employee_to_params,
        dialect=dialect,
    )
