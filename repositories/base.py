"""
repositories/base.py
--------------------
Generic CRUD repository over a single table.

Each concrete table is wired by configuration instead of subclassing:
a table name, a primary key column and two mapping functions
(row -> entity, entity -> insert parameters).
"""

from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from db.connection import ConnectionProvider
from db.dialect import POSTGRES, Dialect
from db.errors import (
    ConstraintViolationError,
    InvalidArgumentError,
    MappingError,
    StoreError,
)
from repositories.query_builder import PageSpec, QueryBuilder, Statement
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Row = Mapping[str, Any]
RowToEntity = Callable[[Row], T]
EntityToParams = Callable[[T], Iterable[tuple[str, Any]]]
ChangesToParams = Callable[[Mapping[str, Any]], Iterable[tuple[str, Any]]]


def _changes_as_params(changes: Mapping[str, Any]) -> list[tuple[str, Any]]:
    return list(changes.items())


def _store_error_for(conn, exc: Exception) -> Optional[type]:
    """
    Pick the wrapper for a driver exception, or None if it did not come
    from the driver. DB-API connections expose their module's exception
    classes as attributes, which keeps this driver agnostic.
    """
    integrity_error = getattr(conn, "IntegrityError", None)
    if integrity_error is not None and isinstance(exc, integrity_error):
        return ConstraintViolationError
    base_error = getattr(conn, "Error", None)
    if base_error is not None and isinstance(exc, base_error):
        return StoreError
    return None


class EntityRepository(Generic[T]):
    """
    CRUD and query operations for one entity type stored in one table.

    The instance only holds immutable configuration. Every operation
    borrows its own connection from the provider and gives it back on
    every exit path, so one repository can be shared between threads.

    Example:
        >>> repo = EntityRepository(provider, "Employees", "EmployeeID",
        ...                         row_to_employee, employee_to_params)
        >>> repo.get_all({"JobTitle": "Eng"}, PageSpec(1, 10))
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        table_name: str,
        primary_key_name: str,
        row_to_entity: RowToEntity,
        entity_to_params: EntityToParams,
        changes_to_params: Optional[ChangesToParams] = None,
        dialect: Dialect = POSTGRES,
    ):
        """
        Args:
            provider: Source of connections, one per operation.
            table_name: Table the entity lives in.
            primary_key_name: Column holding the primary key.
            row_to_entity: Builds an entity from a {column: value} row.
            entity_to_params: Returns (column, value) pairs for INSERT.
            changes_to_params: Turns an Update change set into (column, value)
                pairs. Defaults to the mapping's items.
            dialect: SQL dialect of the provider's database.

        Raises:
            InvalidArgumentError: If the table or key name is empty or not
                a plain identifier.
        """
        if not table_name:
            raise InvalidArgumentError("table_name must not be empty")
        if not primary_key_name:
            raise InvalidArgumentError("primary_key_name must not be empty")

        self._provider = provider
        self._table_name = table_name
        self._primary_key_name = primary_key_name
        self._row_to_entity = row_to_entity
        self._entity_to_params = entity_to_params
        self._changes_to_params = changes_to_params or _changes_as_params
        self._dialect = dialect
        self._builder = QueryBuilder(dialect, table_name, primary_key_name)

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def primary_key_name(self) -> str:
        return self._primary_key_name

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    # ── CREATE ────────────────────────────────────────────

    def add(self, entity: T) -> None:
        """
        Insert a new row for the entity.

        Raises:
            ConstraintViolationError: If the store rejects the row
                (duplicate key, NOT NULL, ...). Not retried.
            StoreError: For any other database failure.
        """
        statement = self._builder.insert(self._entity_to_params(entity))
        self._execute_write(statement, "add")
        logger.info(f"Added row to {self._table_name}")

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, entity_id: Any) -> Optional[T]:
        """
        Fetch a single entity by primary key.

        Returns:
            The entity, or None when no row matches.
        """
        rows = self._execute_read(self._builder.select_by_id(entity_id), "get_by_id")
        if not rows:
            return None
        return self._map_row(rows[0])

    def get_all(self, filters: Optional[Mapping[str, Any]] = None,
                page: Optional[PageSpec] = None) -> list[T]:
        """
        Fetch every entity matching all the filters.

        Args:
            filters: Column -> value equality conditions, combined with AND.
                Column names are not checked against the schema.
            page: Optional page. When given, rows are ordered by primary key
                ascending; otherwise the order is whatever the store returns.

        Returns:
            List of entities, possibly empty.
        """
        statement = self._builder.select(filters, page)
        return [self._map_row(row) for row in self._execute_read(statement, "get_all")]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, entity_id: Any, changes: Mapping[str, Any]) -> bool:
        """
        Set the given columns on one row.

        An empty change set is a no-op: nothing is sent to the database.
        A missing id simply affects zero rows.

        Returns:
            True if a row was updated, False otherwise.
        """
        if not changes:
            logger.debug(f"Empty change set for {self._table_name} id={entity_id!r}; skipping update")
            return False
        statement = self._builder.update(entity_id, self._changes_to_params(changes))
        return self._execute_write(statement, "update") > 0

    # ── DELETE ────────────────────────────────────────────

    def delete(self, entity_id: Any) -> bool:
        """
        Delete one row by primary key.

        Returns:
            True if a row was deleted, False otherwise.
        """
        deleted = self._execute_write(self._builder.delete(entity_id), "delete") > 0
        if deleted:
            logger.info(f"Deleted {self._table_name} id={entity_id!r}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    def _map_row(self, row: Row) -> T:
        try:
            return self._row_to_entity(row)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to map {self._table_name} row {dict(row)!r}: {e}")
            raise MappingError(f"Cannot map row from {self._table_name}: {e}") from e

    def _execute_read(self, statement: Statement, operation: str) -> list[dict[str, Any]]:
        """Run a SELECT and return rows as {column: value} dicts."""
        def fetch(cur):
            columns = [d[0] for d in cur.description]
            return [dict(zip(columns, r)) for r in cur.fetchall()]

        return self._execute(statement, operation, fetch, commit=False)

    def _execute_write(self, statement: Statement, operation: str) -> int:
        """Run an INSERT/UPDATE/DELETE, commit, and return the affected row count."""
        return self._execute(statement, operation, lambda cur: cur.rowcount, commit=True)

    def _execute(self, statement: Statement, operation: str, collect, commit: bool):
        logger.debug(f"{operation}: {statement.sql} {statement.params!r}")
        try:
            conn = self._provider.acquire()
        except Exception as e:
            logger.error(f"Failed to get a connection for {operation} on {self._table_name}: {e}")
            raise StoreError(f"{operation} on {self._table_name} could not get a connection", e) from e

        try:
            cur = conn.cursor()
            try:
                cur.execute(statement.sql, statement.params)
                result = collect(cur)
            finally:
                cur.close()
            if commit:
                conn.commit()
            return result
        except Exception as e:
            self._rollback(conn)
            logger.error(f"Failed to {operation} on {self._table_name}: {e}")
            wrapper = _store_error_for(conn, e)
            if wrapper is None:
                raise
            raise wrapper(f"{operation} on {self._table_name} failed", e) from e
        finally:
            self._provider.release(conn)

    def _rollback(self, conn) -> None:
        """Roll back after a failure; a dead connection must not hide the original error."""
        try:
            conn.rollback()
        except Exception as e:
            logger.error(f"Rollback failed on {self._table_name}: {e}")
