"""
main.py
-------
Command-line entry point for the Groton employee data layer.

Responsibilities:
    - Build the connection provider for the configured backend.
    - Dispatch one CRUD command against the Employees table.
    - Close the provider on the way out.

Usage:
    python main.py init-db
    python main.py add 1 "Ann" "Engineer"
    python main.py get 1
    python main.py list [--name N] [--job-title J] [--page I --page-size S]
    python main.py update 1 [--name N] [--job-title J]
    python main.py delete 1
"""

import argparse
import sys

from db.connection import ConnectionProvider, build_provider
from db.dialect import Dialect
from db.errors import RepositoryError
from db.init_db import create_tables
from models.employee import Employee
from repositories.employee_repo import make_employee_repository
from services.employee_service import EmployeeService
from utils.logger import get_logger

logger = get_logger(__name__)


def cmd_init_db(args: argparse.Namespace, provider: ConnectionProvider,
                service: EmployeeService) -> int:
    create_tables(provider)
    print("Database schema ready.")
    return 0


def cmd_add(args, provider, service) -> int:
    service.add(Employee(employee_id=args.id, name=args.name, job_title=args.job_title))
    print(f"Added employee #{args.id}.")
    return 0


def cmd_get(args, provider, service) -> int:
    employee = service.get_by_id(args.id)
    if employee is None:
        print(f"Employee #{args.id} not found.")
        return 1
    print(employee)
    return 0


def cmd_list(args, provider, service) -> int:
    employees = service.get_all(
        name=args.name,
        job_title=args.job_title,
        page_index=args.page,
        page_size=args.page_size,
    )
    if not employees:
        print("No employees found.")
        return 0
    for employee in employees:
        print(employee)
    return 0


def cmd_update(args, provider, service) -> int:
    if service.update(args.id, name=args.name, job_title=args.job_title):
        print(f"Updated employee #{args.id}.")
    else:
        print(f"Nothing updated for employee #{args.id}.")
    return 0


def cmd_delete(args, provider, service) -> int:
    if service.delete(args.id):
        print(f"Deleted employee #{args.id}.")
    else:
        print(f"Employee #{args.id} not found.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="groton",
        description="Groton - employee records over a generic SQL repository",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    init_parser = subparsers.add_parser("init-db", help="Create the Employees table")
    init_parser.set_defaults(func=cmd_init_db)

    add_parser = subparsers.add_parser("add", help="Add an employee")
    add_parser.add_argument("id", type=int, help="Employee ID")
    add_parser.add_argument("name", help="Full name")
    add_parser.add_argument("job_title", help="Job title")
    add_parser.set_defaults(func=cmd_add)

    get_parser = subparsers.add_parser("get", help="Show one employee")
    get_parser.add_argument("id", type=int, help="Employee ID")
    get_parser.set_defaults(func=cmd_get)

    list_parser = subparsers.add_parser("list", help="List employees")
    list_parser.add_argument("--name", help="Exact name filter")
    list_parser.add_argument("--job-title", help="Exact job title filter")
    list_parser.add_argument("--page", type=int, help="1-based page number")
    list_parser.add_argument("--page-size", type=int, help="Rows per page")
    list_parser.set_defaults(func=cmd_list)

    update_parser = subparsers.add_parser("update", help="Change an employee")
    update_parser.add_argument("id", type=int, help="Employee ID")
    update_parser.add_argument("--name", help="New name")
    update_parser.add_argument("--job-title", help="New job title")
    update_parser.set_defaults(func=cmd_update)

    delete_parser = subparsers.add_parser("delete", help="Delete an employee")
    delete_parser.add_argument("id", type=int, help="Employee ID")
    delete_parser.set_defaults(func=cmd_delete)

    return parser


def main(argv: list[str] | None = None,
         provider: ConnectionProvider | None = None,
         dialect: Dialect | None = None) -> int:
    """
    Run one CLI command.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:]).
        provider: Connection provider to use; built from config when omitted.
        dialect: SQL dialect matching the provider; required with `provider`.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    owns_provider = provider is None
    if not owns_provider and dialect is None:
        raise ValueError("dialect is required when a provider is passed in")

    try:
        if owns_provider:
            provider, dialect = build_provider()
        service = EmployeeService(make_employee_repository(provider, dialect))
        return args.func(args, provider, service)
    except RepositoryError as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if owns_provider and provider is not None:
            provider.close()


if __name__ == "__main__":
    sys.exit(main())
