"""Unit tests for repositories/query_builder.py and db/dialect.py.

Tests verify:
1. Generated SQL text for each statement in both dialects
2. Values are only ever bound as parameters
3. Parameter names never collide within one statement
4. PageSpec validation
"""

import pytest

from db.dialect import POSTGRES, SQLITE, get_dialect
from db.errors import InvalidArgumentError
from repositories.query_builder import PageSpec, QueryBuilder


@pytest.fixture
def pg():
    return QueryBuilder(POSTGRES, "Employees", "EmployeeID")


@pytest.fixture
def lite():
    return QueryBuilder(SQLITE, "Employees", "EmployeeID")


# =============================================================================
# Dialect Tests
# =============================================================================

class TestDialect:
    """Tests for placeholder, quoting and paging syntax."""

    def test_placeholders(self):
        assert POSTGRES.placeholder("pk") == "%(pk)s"
        assert SQLITE.placeholder("pk") == ":pk"

    def test_quote_valid_identifier(self):
        assert POSTGRES.quote("JobTitle") == '"JobTitle"'

    def test_sqlite_quotes_with_brackets(self):
        """Double quotes would let SQLite read an unknown column as a string."""
        assert SQLITE.quote("JobTitle") == "[JobTitle]"

    @pytest.mark.parametrize("bad", ["", "1abc", "Name; DROP TABLE x", 'a"b', "a b", None])
    def test_quote_rejects_invalid_identifier(self, bad):
        with pytest.raises(InvalidArgumentError):
            POSTGRES.quote(bad)

    def test_paging_clauses(self):
        assert POSTGRES.paging_clause("o", "l") == "OFFSET %(o)s ROWS FETCH NEXT %(l)s ROWS ONLY"
        assert SQLITE.paging_clause("o", "l") == "LIMIT :l OFFSET :o"

    def test_get_dialect(self):
        assert get_dialect("postgres") is POSTGRES
        assert get_dialect("SQLite") is SQLITE

    def test_get_dialect_unknown(self):
        with pytest.raises(InvalidArgumentError):
            get_dialect("oracle")


# =============================================================================
# PageSpec Tests
# =============================================================================

class TestPageSpec:
    """Tests for PageSpec validation and offset computation."""

    def test_offset(self):
        assert PageSpec(1, 10).offset == 0
        assert PageSpec(3, 10).offset == 20

    @pytest.mark.parametrize("index,size", [(0, 10), (-1, 10), (1, 0), (1, -5), (True, 10), (1.0, 10)])
    def test_rejects_invalid_values(self, index, size):
        with pytest.raises(InvalidArgumentError):
            PageSpec(index, size)

    def test_from_optional_none(self):
        assert PageSpec.from_optional(None, None) is None

    def test_from_optional_both(self):
        assert PageSpec.from_optional(2, 5) == PageSpec(2, 5)

    @pytest.mark.parametrize("index,size", [(1, None), (None, 10)])
    def test_from_optional_rejects_half_spec(self, index, size):
        with pytest.raises(InvalidArgumentError):
            PageSpec.from_optional(index, size)


# =============================================================================
# QueryBuilder Tests
# =============================================================================

class TestQueryBuilderConstruction:

    def test_invalid_table_name(self):
        with pytest.raises(InvalidArgumentError):
            QueryBuilder(POSTGRES, "Employees; --", "EmployeeID")

    def test_invalid_key_name(self):
        with pytest.raises(InvalidArgumentError):
            QueryBuilder(POSTGRES, "Employees", "")


class TestInsert:

    def test_insert_sql_and_params(self, pg):
        stmt = pg.insert([("EmployeeID", 1), ("Name", "Ann"), ("JobTitle", "Eng")])
        assert stmt.sql == (
            'INSERT INTO "Employees" ("EmployeeID", "Name", "JobTitle") '
            "VALUES (%(v_EmployeeID)s, %(v_Name)s, %(v_JobTitle)s)"
        )
        assert stmt.params == {"v_EmployeeID": 1, "v_Name": "Ann", "v_JobTitle": "Eng"}

    def test_insert_sqlite_markers(self, lite):
        stmt = lite.insert([("Name", "Ann")])
        assert stmt.sql == 'INSERT INTO [Employees] ([Name]) VALUES (:v_Name)'

    def test_insert_empty(self, pg):
        with pytest.raises(InvalidArgumentError):
            pg.insert([])

    def test_insert_duplicate_columns(self, pg):
        with pytest.raises(InvalidArgumentError):
            pg.insert([("Name", "a"), ("Name", "b")])

    def test_value_never_in_sql(self, pg):
        stmt = pg.insert([("Name", "Robert'); DROP TABLE Employees;--")])
        assert "DROP" not in stmt.sql


class TestSelect:

    def test_select_by_id(self, pg):
        stmt = pg.select_by_id(7)
        assert stmt.sql == 'SELECT * FROM "Employees" WHERE "EmployeeID" = %(pk)s'
        assert stmt.params == {"pk": 7}

    def test_select_all(self, pg):
        stmt = pg.select()
        assert stmt.sql == 'SELECT * FROM "Employees"'
        assert stmt.params == {}

    def test_empty_filters_same_as_none(self, pg):
        assert pg.select({}) == pg.select(None)

    def test_filters_sorted_and_conjoined(self, pg):
        stmt = pg.select({"Name": "Ann", "JobTitle": "Eng"})
        assert stmt.sql == (
            'SELECT * FROM "Employees" WHERE "JobTitle" = %(f_JobTitle)s AND "Name" = %(f_Name)s'
        )
        assert stmt.params == {"f_JobTitle": "Eng", "f_Name": "Ann"}

    def test_filter_order_does_not_change_sql(self, pg):
        a = pg.select({"Name": "Ann", "JobTitle": "Eng"})
        b = pg.select({"JobTitle": "Eng", "Name": "Ann"})
        assert a == b

    def test_paging_postgres(self, pg):
        stmt = pg.select({"JobTitle": "Eng"}, PageSpec(3, 10))
        assert stmt.sql == (
            'SELECT * FROM "Employees" WHERE "JobTitle" = %(f_JobTitle)s '
            'ORDER BY "EmployeeID" OFFSET %(page_offset)s ROWS FETCH NEXT %(page_limit)s ROWS ONLY'
        )
        assert stmt.params == {"f_JobTitle": "Eng", "page_offset": 20, "page_limit": 10}

    def test_paging_sqlite(self, lite):
        stmt = lite.select(None, PageSpec(1, 2))
        assert stmt.sql == (
            'SELECT * FROM [Employees] ORDER BY [EmployeeID] LIMIT :page_limit OFFSET :page_offset'
        )
        assert stmt.params == {"page_offset": 0, "page_limit": 2}

    def test_no_order_by_without_page(self, pg):
        assert "ORDER BY" not in pg.select({"Name": "Ann"}).sql

    def test_invalid_filter_column(self, pg):
        with pytest.raises(InvalidArgumentError):
            pg.select({"Name = 1 OR 1": "x"})

    def test_filter_on_key_column_does_not_collide(self, pg):
        stmt = pg.select({"EmployeeID": 1, "pk": 2, "page_offset": 3}, PageSpec(2, 5))
        assert stmt.params == {
            "f_EmployeeID": 1,
            "f_pk": 2,
            "f_page_offset": 3,
            "page_offset": 5,
            "page_limit": 5,
        }


class TestUpdateDelete:

    def test_update(self, pg):
        stmt = pg.update(3, [("Name", "Ann"), ("JobTitle", "Eng")])
        assert stmt.sql == (
            'UPDATE "Employees" SET "Name" = %(s_Name)s, "JobTitle" = %(s_JobTitle)s '
            'WHERE "EmployeeID" = %(pk)s'
        )
        assert stmt.params == {"s_Name": "Ann", "s_JobTitle": "Eng", "pk": 3}

    def test_update_key_column_does_not_collide(self, pg):
        stmt = pg.update(3, [("EmployeeID", 30)])
        assert stmt.params == {"s_EmployeeID": 30, "pk": 3}

    def test_update_empty_rejected(self, pg):
        with pytest.raises(InvalidArgumentError):
            pg.update(1, [])

    def test_delete(self, lite):
        stmt = lite.delete(9)
        assert stmt.sql == 'DELETE FROM [Employees] WHERE [EmployeeID] = :pk'
        assert stmt.params == {"pk": 9}
