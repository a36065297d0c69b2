"""
models/employee.py
------------------
Domain model for employee records.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Employee:
    """
    Represents a single row of the Employees table.

    Attributes:
        employee_id: Primary key, assigned by the caller.
        name: Full name.
        job_title: Current job title.
    """
    employee_id: int
    name: Optional[str] = None
    job_title: Optional[str] = None

    def __str__(self) -> str:
        return f"#{self.employee_id} | {self.name} | {self.job_title}"
