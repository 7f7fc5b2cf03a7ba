"""
Database utilities for the Hotel Contracts ETL
Provides connection pooling and COPY-based bulk loading for PostgreSQL
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List
from contextlib import contextmanager
from psycopg2 import pool

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """Database configuration loader"""

    def __init__(self, config_path: str):
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load database configuration from YAML"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return config['database']

    def get_psycopg2_params(self) -> Dict[str, Any]:
        """Get parameters for psycopg2 connection"""
        return {
            'host': self.config['host'],
            'port': self.config['port'],
            'database': self.config['database'],
            'user': self.config['user'],
            'password': self.config['password']
        }


class DatabaseManager:
    """
    Manages psycopg2 connections for bulk loads
    """

    def __init__(self, config_path: str):
        self.config = DatabaseConfig(config_path)
        self._connection_pool: Optional[pool.SimpleConnectionPool] = None

    def get_connection_pool(self) -> pool.SimpleConnectionPool:
        """Get psycopg2 connection pool (lazy initialization)"""
        if self._connection_pool is None:
            params = self.config.get_psycopg2_params()
            self._connection_pool = pool.SimpleConnectionPool(
                minconn=1,
                maxconn=4,
                **params
            )
            logger.info("psycopg2 connection pool initialized")
        return self._connection_pool

    @contextmanager
    def get_connection(self):
        """Context manager for psycopg2 connection from pool"""
        conn_pool = self.get_connection_pool()
        conn = conn_pool.getconn()
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            conn_pool.putconn(conn)

    @contextmanager
    def get_cursor(self):
        """Context manager for database cursor"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[tuple]:
        """Execute SELECT query and return results"""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            return cursor.fetchall()

    def execute_statement(self, query: str, params: Optional[tuple] = None) -> None:
        """Execute a statement that returns no rows (TRUNCATE, UPDATE, ...)"""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)

    def bulk_insert_copy(
        self,
        table_name: str,
        columns: List[str],
        data_buffer,
        header: bool = False
    ) -> int:
        """
        Bulk insert using PostgreSQL COPY command

        Args:
            table_name: Target table name
            columns: List of column names, in file order
            data_buffer: File-like object with CSV data
            header: Whether the first CSV line is a header row

        Returns:
            Number of rows inserted
        """
        with self.get_connection() as conn:
            with conn.cursor() as cursor:
                data_buffer.seek(0)

                options = "FORMAT CSV, NULL ''"
                if header:
                    options += ", HEADER true"
                copy_sql = f"COPY {table_name} ({','.join(columns)}) FROM STDIN WITH ({options})"
                cursor.copy_expert(copy_sql, data_buffer)

                rows_inserted = cursor.rowcount
                logger.info(f"Bulk inserted {rows_inserted} rows into {table_name}")
                return rows_inserted

    def table_exists(self, table_name: str) -> bool:
        """Check if table exists"""
        query = """
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_name = %s
            );
        """
        result = self.execute_query(query, (table_name,))
        return result[0][0] if result else False

    def close(self):
        """Close all connections"""
        if self._connection_pool:
            self._connection_pool.closeall()
            self._connection_pool = None
            logger.info("Connection pool closed")
