"""
MySQL Connector

mysql-connector-python is synchronous, so every operation opens its own
connection inside a worker thread (asyncio.to_thread). Nothing is pooled and
concurrent calls never share a connection.

SELECT statements are bounded by the session max_execution_time.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict
from collections.abc import Iterable
from typing import Any

import mysql.connector

from squix.connectors.base import (
    BaseConnector,
    ConnectionError,
    QueryError,
    QueryResult,
    SchemaError,
)
from squix.models.schema import ColumnDescription, ForeignKeyDescription, TableDescription

logger = logging.getLogger(__name__)

_KEY_ROLES = {"PRI": "primary", "UNI": "unique"}

_TABLES_QUERY = """
    SELECT table_name AS table_name
    FROM information_schema.tables
    WHERE table_schema = DATABASE() AND table_type = 'BASE TABLE'
    ORDER BY table_name
"""

_COLUMNS_QUERY = """
    SELECT
        table_name AS table_name,
        column_name AS column_name,
        column_type AS column_type,
        is_nullable AS is_nullable,
        column_key AS column_key
    FROM information_schema.columns
    WHERE table_schema = DATABASE()
    ORDER BY table_name, ordinal_position
"""

_FOREIGN_KEYS_QUERY = """
    SELECT
        table_name AS table_name,
        column_name AS column_name,
        referenced_table_name AS foreign_table_name,
        referenced_column_name AS foreign_column_name
    FROM information_schema.key_column_usage
    WHERE table_schema = DATABASE() AND referenced_table_name IS NOT NULL
    ORDER BY table_name, ordinal_position
"""


class MySQLConnector(BaseConnector):
    """MySQL connector running the blocking driver in worker threads."""

    dialect = "mysql"

    async def connect(self) -> None:
        if self._connected:
            return
        try:
            version = await asyncio.to_thread(self._run, self._fetch_version)
        except Exception as e:
            logger.error(f"MySQL connection failed: {e}", extra={"connection": self.identity})
            raise ConnectionError(f"Failed to connect to MySQL: {e}") from e

        self._connected = True
        logger.info(f"Connected to MySQL {version}", extra={"connection": self.identity})

    async def execute(self, sql: str) -> QueryResult:
        self._ensure_connected()
        started_at = time.perf_counter()
        try:
            rows, columns = await asyncio.to_thread(self._run, self._fetch_rows, sql)
        except Exception as e:
            logger.error(f"MySQL query failed: {e}", extra={"sql": sql[:200]})
            raise QueryError(f"Query execution failed: {e}") from e
        return QueryResult.from_rows(rows, columns, started_at)

    async def get_schema(self, excluded_tables: Iterable[str] = ()) -> list[TableDescription]:
        self._ensure_connected()
        try:
            tables = await asyncio.to_thread(self._run, self._describe_tables, set(excluded_tables))
        except Exception as e:
            logger.error(
                f"MySQL schema introspection failed: {e}", extra={"connection": self.identity}
            )
            raise SchemaError(f"Failed to introspect schema: {e}") from e

        logger.info(
            f"Introspected MySQL schema: {len(tables)} tables", extra={"connection": self.identity}
        )
        return tables

    async def close(self) -> None:
        self._connected = False

    def _run(self, operation, *args):
        """Open a connection, run operation(cursor, *args) and always clean up."""
        conn = mysql.connector.connect(
            host=self.host,
            port=self.port,
            database=self.database or None,
            user=self.user,
            password=self.password,
            autocommit=True,
            connection_timeout=self.timeout,
            **self.options,
        )
        cursor = conn.cursor(dictionary=True)
        try:
            return operation(cursor, *args)
        finally:
            cursor.close()
            conn.close()

    @staticmethod
    def _fetch_version(cursor) -> str:
        cursor.execute("SELECT VERSION() AS version")
        row = cursor.fetchone()
        return str(row["version"]) if row else "unknown"

    def _fetch_rows(self, cursor, sql: str) -> tuple[list[dict[str, Any]], list[str]]:
        cursor.execute(f"SET SESSION max_execution_time = {self.timeout * 1000}")
        cursor.execute(sql)
        if not cursor.with_rows:
            return [], []
        rows = cursor.fetchall()
        columns = [col[0] for col in cursor.description]
        return rows, columns

    def _describe_tables(self, cursor, excluded: set[str]) -> list[TableDescription]:
        cursor.execute(_TABLES_QUERY)
        table_names = [str(row["table_name"]) for row in cursor.fetchall()]

        cursor.execute(_COLUMNS_QUERY)
        columns: dict[str, list[ColumnDescription]] = defaultdict(list)
        for row in cursor.fetchall():
            columns[str(row["table_name"])].append(
                ColumnDescription(
                    name=str(row["column_name"]),
                    data_type=str(row["column_type"]),
                    is_nullable=str(row["is_nullable"]).upper() == "YES",
                    key_role=_KEY_ROLES.get(str(row["column_key"] or "").upper(), "none"),
                )
            )

        cursor.execute(_FOREIGN_KEYS_QUERY)
        foreign_keys: dict[str, list[ForeignKeyDescription]] = defaultdict(list)
        for row in cursor.fetchall():
            foreign_keys[str(row["table_name"])].append(
                ForeignKeyDescription(
                    column=str(row["column_name"]),
                    target_table=str(row["foreign_table_name"]),
                    target_column=str(row["foreign_column_name"]),
                )
            )

        return [
            TableDescription.build(
                table_name=name,
                schema_name=self.database or None,
                columns=columns[name],
                foreign_keys=foreign_keys[name],
            )
            for name in table_names
            if name not in excluded
        ]
