"""
repositories/query_builder.py
-----------------------------
Builds parameterized CRUD statements for a single table.

Every value supplied by a caller ends up in the params dict, never in the
SQL text. Table and column names are validated identifiers. Parameter
names are namespaced per role so one statement never binds two values
under the same name:

    pk            primary key in WHERE
    v_<column>    INSERT value
    f_<column>    filter value
    s_<column>    SET value
    page_offset / page_limit
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from db.dialect import Dialect
from db.errors import InvalidArgumentError

PK_PARAM = "pk"
OFFSET_PARAM = "page_offset"
LIMIT_PARAM = "page_limit"


class Statement(NamedTuple):
    """A SQL string plus the named parameters it binds."""
    sql: str
    params: dict[str, Any]


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class PageSpec:
    """
    One page of an ordered result.

    Attributes:
        index: 1-based page number.
        size: Rows per page.
    """
    index: int
    size: int

    def __post_init__(self):
        if not _is_positive_int(self.index):
            raise InvalidArgumentError(f"Page index must be an integer >= 1, got {self.index!r}")
        if not _is_positive_int(self.size):
            raise InvalidArgumentError(f"Page size must be an integer > 0, got {self.size!r}")

    @property
    def offset(self) -> int:
        return (self.index - 1) * self.size

    @classmethod
    def from_optional(cls, index: Optional[int], size: Optional[int]) -> Optional["PageSpec"]:
        """
        Build a PageSpec from two optional values.

        Returns None when neither is given. Supplying only one of them
        is rejected instead of silently returning an unpaged result.
        """
        if index is None and size is None:
            return None
        if index is None or size is None:
            raise InvalidArgumentError("Page index and page size must be given together")
        return cls(index, size)


class QueryBuilder:
    """Produces Statements for one table in one SQL dialect."""

    def __init__(self, dialect: Dialect, table_name: str, primary_key_name: str):
        self.dialect = dialect
        self._table = dialect.quote(table_name)
        self._pk = dialect.quote(primary_key_name)

    def _bind(self, name: str) -> str:
        return self.dialect.placeholder(name)

    def _pk_condition(self) -> str:
        return f"{self._pk} = {self._bind(PK_PARAM)}"

    # ── CREATE ────────────────────────────────────────────

    def insert(self, params: Iterable[tuple[str, Any]]) -> Statement:
        """INSERT one row from (column, value) pairs, in the given order."""
        pairs = list(params)
        if not pairs:
            raise InvalidArgumentError("Cannot build an INSERT without columns")
        columns = [column for column, _ in pairs]
        if len(set(columns)) != len(columns):
            raise InvalidArgumentError(f"Duplicate column in INSERT parameters: {columns}")

        quoted = ", ".join(self.dialect.quote(c) for c in columns)
        markers = ", ".join(self._bind(f"v_{c}") for c in columns)
        sql = f"INSERT INTO {self._table} ({quoted}) VALUES ({markers})"
        return Statement(sql, {f"v_{c}": value for c, value in pairs})

    # ── READ ──────────────────────────────────────────────

    def select_by_id(self, entity_id: Any) -> Statement:
        sql = f"SELECT * FROM {self._table} WHERE {self._pk_condition()}"
        return Statement(sql, {PK_PARAM: entity_id})

    def select(self, filters: Optional[Mapping[str, Any]] = None,
               page: Optional[PageSpec] = None) -> Statement:
        """
        SELECT with an optional conjunction of equality filters and an
        optional page. Filter keys are sorted so the SQL is reproducible.
        Paging always orders by the primary key.
        """
        sql = f"SELECT * FROM {self._table}"
        params: dict[str, Any] = {}

        if filters:
            clauses = []
            for column in sorted(filters):
                clauses.append(f"{self.dialect.quote(column)} = {self._bind(f'f_{column}')}")
                params[f"f_{column}"] = filters[column]
            sql += " WHERE " + " AND ".join(clauses)

        if page is not None:
            sql += f" ORDER BY {self._pk} " + self.dialect.paging_clause(OFFSET_PARAM, LIMIT_PARAM)
            params[OFFSET_PARAM] = page.offset
            params[LIMIT_PARAM] = page.size

        return Statement(sql, params)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, entity_id: Any, changes: Iterable[tuple[str, Any]]) -> Statement:
        """UPDATE the given columns of one row. An empty change list is rejected."""
        pairs = list(changes)
        if not pairs:
            raise InvalidArgumentError("Cannot build an UPDATE with an empty SET clause")
        columns = [column for column, _ in pairs]
        if len(set(columns)) != len(columns):
            raise InvalidArgumentError(f"Duplicate column in UPDATE changes: {columns}")

        assignments = ", ".join(
            f"{self.dialect.quote(c)} = {self._bind(f's_{c}')}" for c in columns
        )
        sql = f"UPDATE {self._table} SET {assignments} WHERE {self._pk_condition()}"
        params = {f"s_{c}": value for c, value in pairs}
        params[PK_PARAM] = entity_id
        return Statement(sql, params)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, entity_id: Any) -> Statement:
        sql = f"DELETE FROM {self._table} WHERE {self._pk_condition()}"
        return Statement(sql, {PK_PARAM: entity_id})
