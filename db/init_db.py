"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import ConnectionProvider
from db.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

# Quoted identifiers keep the mixed-case column names intact on PostgreSQL.
# One statement per entry: sqlite3 refuses multi-statement execute().
SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS "Employees" (
        "EmployeeID"    INTEGER PRIMARY KEY,
        "Name"          VARCHAR(100) NOT NULL,
        "JobTitle"      VARCHAR(100) NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_employees_job_title ON "Employees" ("JobTitle")
    """,
)


def create_tables(provider: ConnectionProvider) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Raises:
        StoreError: If no connection can be opened or a statement fails.
    """
    try:
        conn = provider.acquire()
    except Exception as e:
        logger.error(f"Failed to get a connection for schema setup: {e}")
        raise StoreError("Cannot initialize schema", e) from e

    try:
        cur = conn.cursor()
        try:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        finally:
            cur.close()
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        try:
            conn.rollback()
        except Exception as rollback_error:
            logger.error(f"Rollback failed during schema setup: {rollback_error}")
        logger.error(f"Failed to initialize schema: {e}")
        raise StoreError("Failed to initialize schema", e) from e
    finally:
        provider.release(conn)


if __name__ == "__main__":
    from db.connection import build_provider
    _provider, _ = build_provider()
    create_tables(_provider)
    _provider.close()
    print("Database schema created successfully.")
