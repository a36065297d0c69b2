"""
db/dialect.py
-------------
SQL spelling differences between the supported stores.

Only the parts the repositories actually vary on live here:
bind placeholders, identifier quoting and the paging clause.
"""

import re
from dataclasses import dataclass

from db.errors import InvalidArgumentError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Dialect:
    """
    Describes how one database spells parameterized statements.

    Attributes:
        name: Backend name as used in configuration ('postgres', 'sqlite').
        paramstyle: DB-API paramstyle of the driver ('pyformat' or 'named').
        paging_template: Paging clause with ``{offset}`` and ``{limit}``
            slots, filled with bind placeholders.
        quote_open, quote_close: Delimiters around identifiers. SQLite reads
            an unknown double-quoted name as a string literal, so it uses
            brackets, which always name a column or table.
    """
    name: str
    paramstyle: str
    paging_template: str
    quote_open: str = '"'
    quote_close: str = '"'

    def placeholder(self, param_name: str) -> str:
        """Return the bind marker for a named parameter."""
        if self.paramstyle == "pyformat":
            return f"%({param_name})s"
        return f":{param_name}"

    def quote(self, identifier: str) -> str:
        """
        Validate and quote a table or column name.

        Raises:
            InvalidArgumentError: If the name is empty or not a plain identifier.
        """
        if not isinstance(identifier, str) or not _IDENTIFIER_RE.match(identifier):
            raise InvalidArgumentError(f"Invalid SQL identifier: {identifier!r}")
        return f"{self.quote_open}{identifier}{self.quote_close}"

    def paging_clause(self, offset_param: str, limit_param: str) -> str:
        """Return the windowing clause bound to the given parameter names."""
        return self.paging_template.format(
            offset=self.placeholder(offset_param),
            limit=self.placeholder(limit_param),
        )


POSTGRES = Dialect(
    name="postgres",
    paramstyle="pyformat",
    paging_template="OFFSET {offset} ROWS FETCH NEXT {limit} ROWS ONLY",
)

SQLITE = Dialect(
    name="sqlite",
    paramstyle="named",
    paging_template="LIMIT {limit} OFFSET {offset}",
    quote_open="[",
    quote_close="]",
)

_DIALECTS = {d.name: d for d in (POSTGRES, SQLITE)}


def get_dialect(name: str) -> Dialect:
    """Look up a dialect by its backend name."""
    try:
        return _DIALECTS[name.lower()]
    except (KeyError, AttributeError):
        raise InvalidArgumentError(
            f"Unknown database backend {name!r}; expected one of {sorted(_DIALECTS)}"
        ) from None
