"""
Database Connection Management

This module provides a DatabaseConnection class for managing connections
to MariaDB (production) or SQLite (local/embedded) and executing queries
against the airlines table and its analytical view.
"""

import logging
import sqlite3
from pathlib import Path
from typing import List, Tuple, Optional, Union

import pandas as pd

from airlines_bi.config import DB_CONFIG, DB_BACKEND, SQLITE_PATH, SUPPORTED_BACKENDS

logger = logging.getLogger(__name__)


def load_driver(backend: str):
    """
    Return the DB-API module for a backend.

    The MariaDB connector is only imported when that backend is used, so
    SQLite-only environments do not need the client library installed.

    Raises:
        ValueError: If the backend is not supported
    """
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unsupported backend '{backend}'. Expected one of {SUPPORTED_BACKENDS}")
    if backend == 'mariadb':
        import mariadb
        return mariadb
    return sqlite3


def split_statements(script: str) -> List[str]:
    """Split a SQL script on ';' into non-empty statements."""
    return [stmt.strip() for stmt in script.split(';') if stmt.strip()]


class DatabaseConnection:
    """
    Manages database connections and query execution for Airlines BI.

    Attributes:
        table_name (str): The name of the table or view to query
        backend (str): 'mariadb' or 'sqlite'
        conn: DB-API connection object
        cursor: DB-API cursor object
    """

    def __init__(self, table_name: str, backend: Optional[str] = None,
                 sqlite_path: Optional[Union[str, Path]] = None):
        """
        Initialize database connection manager.

        Args:
            table_name: Name of the table to use for queries
            backend: Database backend (defaults to config DB_BACKEND)
            sqlite_path: SQLite database file (defaults to config SQLITE_PATH)
        """
        self.table_name = table_name
        self.backend = backend or DB_BACKEND
        self.driver = load_driver(self.backend)
        self.config = DB_CONFIG
        self.sqlite_path = Path(sqlite_path) if sqlite_path else SQLITE_PATH
        self.conn = None
        self.cursor = None

    @property
    def target(self) -> str:
        """Human-readable database target."""
        if self.backend == 'sqlite':
            return f"{self.sqlite_path}:{self.table_name}"
        return f"{self.config['database']}.{self.table_name}"

    def connect(self) -> None:
        """
        Establish connection to the database.

        Raises:
            mariadb.Error / sqlite3.Error: If connection fails
        """
        try:
            if self.backend == 'sqlite':
                self.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
                self.conn = self.driver.connect(str(self.sqlite_path))
            else:
                self.conn = self.driver.connect(**self.config)
            self.cursor = self.conn.cursor()
            logger.info("Connected to %s", self.target)
        except self.driver.Error as e:
            logger.error("Error connecting to %s: %s", self.backend, e)
            raise

    def execute_query(self, sql: str, params: Optional[Tuple] = None) -> List[Tuple]:
        """
        Execute a SQL query and return results.

        Args:
            sql: SQL query string to execute
            params: Optional tuple of parameters for parameterized queries

        Returns:
            List of tuples containing query results
        """
        try:
            if params:
                self.cursor.execute(sql, params)
            else:
                self.cursor.execute(sql)
            return self.cursor.fetchall()
        except self.driver.Error as e:
            logger.error("Query error: %s", e)
            logger.error("SQL: %s...", sql[:200])
            raise

    def execute_write(self, sql: str, params: Optional[Tuple] = None) -> int:
        """
        Execute a write or DDL statement and commit.

        Returns:
            Number of affected rows
        """
        try:
            if params:
                self.cursor.execute(sql, params)
            else:
                self.cursor.execute(sql)
            self.conn.commit()
            return self.cursor.rowcount
        except self.driver.Error as e:
            self.conn.rollback()
            logger.error("Write query error: %s", e)
            logger.error("SQL: %s...", sql[:200])
            raise

    def execute_script(self, script: str) -> None:
        """
        Execute several ';'-separated statements, committing once at the end.
        """
        statements = split_statements(script)
        try:
            for stmt in statements:
                self.cursor.execute(stmt)
            self.conn.commit()
        except self.driver.Error as e:
            self.conn.rollback()
            logger.error("Script error: %s", e)
            raise

    def executemany(self, sql: str, data: List[Tuple]) -> int:
        """
        Execute a query with multiple parameter sets.

        Useful for bulk inserts.

        Args:
            sql: SQL query string with parameter placeholders
            data: List of tuples containing parameter values

        Returns:
            Number of affected rows
        """
        try:
            self.cursor.executemany(sql, data)
            self.conn.commit()
            return self.cursor.rowcount
        except self.driver.Error as e:
            self.conn.rollback()
            logger.error("Bulk insert error: %s", e)
            raise

    def fetch_frame(self, sql: str, params: Optional[Tuple] = None) -> pd.DataFrame:
        """
        Execute a query and return the results as a DataFrame.
        """
        rows = self.execute_query(sql, params)
        return pd.DataFrame(rows, columns=self.get_column_names())

    def get_explain(self, sql: str) -> List[Tuple]:
        """
        Get the query execution plan (EXPLAIN / EXPLAIN QUERY PLAN).
        """
        prefix = "EXPLAIN QUERY PLAN" if self.backend == 'sqlite' else "EXPLAIN"
        return self.execute_query(f"{prefix} {sql}")

    def get_table_info(self) -> dict:
        """
        Get information about the table (row count, size, engine).

        Returns:
            Dictionary with table information
        """
        info = {}

        count_sql = f"SELECT COUNT(*) FROM {self.table_name}"
        result = self.execute_query(count_sql)
        info['row_count'] = result[0][0] if result else 0

        if self.backend == 'sqlite':
            result = self.execute_query(
                "SELECT type FROM sqlite_master WHERE name = ?", (self.table_name,)
            )
            info.update({
                'engine': 'sqlite',
                'object_type': result[0][0] if result else None
            })
            return info

        metadata_sql = """
            SELECT
                engine,
                table_type,
                table_rows,
                ROUND((data_length + index_length) / 1024 / 1024, 2) AS total_mb,
                create_time
            FROM information_schema.tables
            WHERE table_schema = DATABASE()
            AND table_name = ?
        """
        result = self.execute_query(metadata_sql, (self.table_name,))

        if result:
            row = result[0]
            info.update({
                'engine': row[0],
                'object_type': row[1],
                'estimated_rows': row[2],
                'total_mb': row[3],
                'create_time': row[4]
            })

        return info

    def get_column_names(self) -> List[str]:
        """
        Get column names from the last executed query.

        Raises:
            RuntimeError: If no query has been executed yet
        """
        if self.cursor is None or self.cursor.description is None:
            raise RuntimeError("No query has been executed yet")

        return [desc[0] for desc in self.cursor.description]

    def test_connection(self) -> bool:
        """
        Test if the connection is alive and working.

        Returns:
            True if connection is working, False otherwise
        """
        try:
            self.cursor.execute("SELECT 1")
            return True
        except (self.driver.Error, AttributeError):
            return False

    def close(self) -> None:
        """Close database connection and cursor."""
        if self.cursor:
            self.cursor.close()
            self.cursor = None
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Closed connection to %s", self.target)

    def __enter__(self):
        """Context manager entry: establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: close connection."""
        self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self.test_connection() else "disconnected"
        return f"DatabaseConnection(table='{self.table_name}', backend='{self.backend}', status='{status}')"


if __name__ == "__main__":
    import sys

    from airlines_bi.config import BASE_TABLE, ANALYTICS_VIEW, setup_logging

    setup_logging()
    print("Testing Database Connection...")
    print("=" * 50)

    try:
        for name in (BASE_TABLE, ANALYTICS_VIEW):
            with DatabaseConnection(name) as conn:
                info = conn.get_table_info()
                print(f"\n{name} Info:")
                for key, value in info.items():
                    print(f"  {key}: {value}")
    except Exception as e:
        print(f"Test failed: {e}")
        sys.exit(1)

    print("\nAll checks passed!")
