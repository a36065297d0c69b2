"""
db/errors.py
------------
Exception taxonomy for the data layer.

Store failures are wrapped, never interpreted: the originating DB-API
exception is always chained as ``__cause__`` and kept on ``.cause``.
"""

from typing import Optional


class RepositoryError(Exception):
    """Base class for every error raised by the data layer."""


class InvalidArgumentError(RepositoryError, ValueError):
    """A caller passed a value the data layer refuses to build SQL from."""


class StoreError(RepositoryError):
    """The underlying database rejected or failed a statement."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(f"{message}" + (f": {cause}" if cause else ""))


class ConstraintViolationError(StoreError):
    """The store raised an IntegrityError (duplicate key, NOT NULL, ...)."""


class MappingError(RepositoryError):
    """A fetched row could not be converted into an entity."""
