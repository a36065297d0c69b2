"""
services/employee_service.py
----------------------------
Business logic for employee records.
Validates input before handing it to the Employees repository.
"""

from typing import Optional

from db.errors import InvalidArgumentError
from models.employee import Employee
from repositories.base import EntityRepository
from repositories.query_builder import PageSpec
from utils.logger import get_logger

logger = get_logger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class EmployeeService:
    """
    Handles all business rules related to employees.

    Required fields are checked here; the repository itself trusts its
    callers and only guarantees parameter binding.
    """

    def __init__(self, repository: EntityRepository[Employee]):
        self.repo = repository

    def add(self, employee: Employee) -> None:
        """
        Persist a new employee.

        Raises:
            InvalidArgumentError: If name or job title is missing.
        """
        if _is_blank(employee.name):
            raise InvalidArgumentError("Employee name is required")
        if _is_blank(employee.job_title):
            raise InvalidArgumentError("Employee job title is required")
        self.repo.add(employee)
        logger.info(f"Added employee #{employee.employee_id}")

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.repo.get_by_id(employee_id)

    def get_all(
        self,
        name: Optional[str] = None,
        job_title: Optional[str] = None,
        page_index: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> list[Employee]:
        """
        List employees, optionally filtered by exact name and/or job title.

        Blank filters are ignored. Paging needs both page_index and page_size.
        """
        filters = {}
        if not _is_blank(name):
            filters["Name"] = name
        if not _is_blank(job_title):
            filters["JobTitle"] = job_title

        page = PageSpec.from_optional(page_index, page_size)
        return self.repo.get_all(filters, page)

    def update(self, employee_id: int, name: Optional[str] = None,
               job_title: Optional[str] = None) -> bool:
        """
        Change the non-blank fields of one employee.

        Returns:
            True if a row was updated; False if nothing was given or the id is unknown.
        """
        changes = {}
        if not _is_blank(name):
            changes["Name"] = name
        if not _is_blank(job_title):
            changes["JobTitle"] = job_title

        updated = self.repo.update(employee_id, changes)
        if updated:
            logger.info(f"Updated employee #{employee_id}: {sorted(changes)}")
        return updated

    def delete(self, employee_id: int) -> bool:
        return self.repo.delete(employee_id)
