"""DuckDB connection management for the Portfolio Status Dashboard

This module provides a singleton connection manager for the local store
(weekly reports, technical reviews, LLM configuration, users).
Supports transaction management and query execution.
"""

import duckdb
import threading
from pathlib import Path
from typing import Optional, Any, Dict, List, Tuple
import logging
from contextlib import contextmanager

from config.constants import DATABASE_PATH

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Manages DuckDB connection lifecycle with singleton pattern

    A single DuckDB connection is shared by the server's worker threads,
    so every statement and its fetch run under one re-entrant lock.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection manager

        Args:
            db_path: Path to DuckDB database file, or ':memory:'.
                    If None, defaults to DATABASE_PATH.
        """
        if db_path is None:
            db_path = str(DATABASE_PATH)
            logger.info(f"No db_path provided, defaulting to {db_path}")

        self.db_path = str(db_path)
        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()
        logger.info(f"DatabaseConnection initialized with path: {self.db_path}")

    def get_connection(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection

        Returns:
            Active DuckDB connection
        """
        if self._conn is None:
            if self.db_path != ':memory:':
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            try:
                self._conn = duckdb.connect(self.db_path)
                logger.info(f"DuckDB connected: {self.db_path}")
            except Exception as e:
                logger.error(f"Failed to connect to DuckDB: {e}")
                raise
        return self._conn

    def close(self):
        """Close database connection"""
        with self._lock:
            if self._conn:
                try:
                    self._conn.close()
                    logger.info("DuckDB connection closed")
                except Exception as e:
                    logger.error(f"Error closing connection: {e}")
                finally:
                    self._conn = None

    def execute(self, query: str, params: Optional[Tuple] = None) -> duckdb.DuckDBPyConnection:
        """Execute SQL query with optional parameters

        Args:
            query: SQL query string
            params: Optional tuple of parameter values for parameterized queries

        Returns:
            DuckDB connection with executed query cursor

        Example:
            >>> db.execute("DELETE FROM technical_review WHERE review_id = ?", (12,))
        """
        with self._lock:
            conn = self.get_connection()
            try:
                if params:
                    return conn.execute(query, params)
                return conn.execute(query)
            except Exception as e:
                logger.error(f"Query execution failed: {query[:100]}... Error: {e}")
                raise

    def fetch_one(self, query: str, params: Optional[Tuple] = None) -> Optional[Tuple]:
        """Execute query and fetch one result

        Returns:
            Single row as tuple, or None if no results
        """
        with self._lock:
            return self.execute(query, params).fetchone()

    def fetch_dicts(self, query: str, params: Optional[Tuple] = None) -> List[Dict[str, Any]]:
        """Execute query and return rows as dicts keyed by column name"""
        with self._lock:
            result = self.execute(query, params)
            columns = [column[0] for column in result.description]
            return [dict(zip(columns, row)) for row in result.fetchall()]

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists in the database

        Args:
            table_name: Name of table to check

        Returns:
            True if table exists, False otherwise
        """
        query = """
            SELECT COUNT(*)
            FROM information_schema.tables
            WHERE table_name = ?
        """
        result = self.fetch_one(query, (table_name,))
        return result[0] > 0 if result else False

    @contextmanager
    def transaction(self):
        """Context manager for database transactions

        Example:
            >>> with db.transaction():
            ...     db.execute("UPDATE llm_configuration SET is_active = FALSE")
            ...     db.execute("INSERT INTO llm_configuration ...")
            # Commits on success, rolls back on exception
        """
        with self._lock:
            conn = self.get_connection()
            try:
                conn.execute("BEGIN TRANSACTION")
                yield conn
                conn.execute("COMMIT")
                logger.debug("Transaction committed")
            except Exception as e:
                conn.execute("ROLLBACK")
                logger.error(f"Transaction rolled back due to error: {e}")
                raise

    def execute_script(self, script: str):
        """Execute multi-statement SQL script

        Args:
            script: SQL script with multiple statements separated by semicolons
        """
        statements = [stmt.strip() for stmt in script.split(';') if stmt.strip()]

        with self._lock:
            conn = self.get_connection()
            for stmt in statements:
                try:
                    conn.execute(stmt)
                    logger.debug(f"Executed: {stmt[:50]}...")
                except Exception as e:
                    logger.error(f"Script execution failed at statement: {stmt[:100]}... Error: {e}")
                    raise


# Global singleton instance
_db_instance: Optional[DatabaseConnection] = None


def get_db(db_path: Optional[str] = None) -> DatabaseConnection:
    """Get global database instance (singleton pattern)

    Args:
        db_path: Optional database path. Only used on first call.

    Returns:
        DatabaseConnection singleton instance
    """
    global _db_instance

    if _db_instance is None:
        _db_instance = DatabaseConnection(db_path)
    return _db_instance

