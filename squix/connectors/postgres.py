"""
PostgreSQL Connector

Pooled asyncpg connector. Every statement runs with a session
statement_timeout taken from the connector timeout. Introspection covers
base tables in all non-system schemas.

Usage:
    connector = PostgresConnector(
        host="localhost", port=5432, database="exams", user="analyst", password="secret"
    )
    async with connector:
        tables = await connector.get_schema()
"""

import logging
import time
from collections.abc import Iterable
from typing import Any

import asyncpg

from squix.connectors.base import (
    BaseConnector,
    ConnectionError,
    QueryError,
    QueryResult,
    SchemaError,
)
from squix.models.schema import ColumnDescription, ForeignKeyDescription, TableDescription

logger = logging.getLogger(__name__)

_TABLES_QUERY = """
    SELECT table_schema, table_name
    FROM information_schema.tables
    WHERE table_type = 'BASE TABLE'
    AND table_schema NOT IN ('pg_catalog', 'information_schema')
    AND table_schema NOT LIKE 'pg\\_%'
    ORDER BY table_schema, table_name
"""

_COLUMNS_QUERY = """
    SELECT column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = $1 AND table_name = $2
    ORDER BY ordinal_position
"""

_KEYS_QUERY = """
    SELECT a.attname, i.indisprimary, i.indisunique, i.indnatts
    FROM pg_index i
    JOIN pg_attribute a ON a.attrelid = i.indrelid
        AND a.attnum = ANY(i.indkey)
    WHERE i.indrelid = format('%I.%I', $1::text, $2::text)::regclass
    AND (i.indisprimary OR i.indisunique)
"""

_FOREIGN_KEYS_QUERY = """
    SELECT
        kcu.column_name,
        ccu.table_name AS foreign_table_name,
        ccu.column_name AS foreign_column_name
    FROM information_schema.table_constraints AS tc
    JOIN information_schema.key_column_usage AS kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage AS ccu
        ON ccu.constraint_name = tc.constraint_name
        AND ccu.table_schema = tc.table_schema
    WHERE tc.constraint_type = 'FOREIGN KEY'
    AND tc.table_schema = $1
    AND tc.table_name = $2
    ORDER BY kcu.ordinal_position
"""


def _key_roles(key_rows: Iterable[Any]) -> dict[str, str]:
    roles: dict[str, str] = {}
    for row in key_rows:
        if row["indisprimary"]:
            roles[row["attname"]] = "primary"
        # A composite unique index does not make any single column unique
        elif row["indisunique"] and row["indnatts"] == 1:
            roles.setdefault(row["attname"], "unique")
    return roles


class PostgresConnector(BaseConnector):
    """PostgreSQL connector backed by an asyncpg pool."""

    dialect = "postgresql"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._connected and self._pool:
            return

        logger.info(f"Connecting to {self.identity}", extra={"connection": self.identity})
        try:
            self._pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                database=self.database,
                user=self.user,
                password=self.password,
                min_size=1,
                max_size=self.pool_size,
                command_timeout=self.timeout,
                **self.options,
            )
            async with self._pool.acquire() as conn:
                version = await conn.fetchval("SELECT version()")
        except Exception as e:
            logger.error(f"PostgreSQL connection failed: {e}", extra={"connection": self.identity})
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}") from e

        self._connected = True
        logger.info(f"Connected to {version.split(',')[0]}", extra={"connection": self.identity})

    async def execute(self, sql: str) -> QueryResult:
        self._ensure_connected()
        started_at = time.perf_counter()

        try:
            async with self._pool.acquire() as conn:
                await conn.execute(f"SET statement_timeout = {self.timeout * 1000}")
                records = await conn.fetch(sql)
        except asyncpg.QueryCanceledError as e:
            logger.error(f"Query timed out after {self.timeout}s", extra={"sql": sql[:200]})
            raise QueryError(f"Query timeout ({self.timeout}s)") from e
        except Exception as e:
            logger.error(f"Query failed: {e}", extra={"sql": sql[:200]})
            raise QueryError(f"Query execution failed: {e}") from e

        rows = [dict(record) for record in records]
        columns = list(rows[0].keys()) if rows else []
        result = QueryResult.from_rows(rows, columns, started_at)
        logger.debug(
            f"Query returned {result.row_count} rows in {result.execution_time_ms:.2f}ms",
            extra={"row_count": result.row_count},
        )
        return result

    async def get_schema(self, excluded_tables: Iterable[str] = ()) -> list[TableDescription]:
        self._ensure_connected()
        excluded = set(excluded_tables)

        try:
            async with self._pool.acquire() as conn:
                tables = await conn.fetch(_TABLES_QUERY)
                descriptions = [
                    await self._describe_table(conn, row["table_schema"], row["table_name"])
                    for row in tables
                    if row["table_name"] not in excluded
                ]
        except Exception as e:
            logger.error(f"Schema introspection failed: {e}", extra={"connection": self.identity})
            raise SchemaError(f"Failed to introspect schema: {e}") from e

        logger.info(
            f"Introspected PostgreSQL schema: {len(descriptions)} tables",
            extra={"connection": self.identity},
        )
        return descriptions

    async def _describe_table(self, conn, table_schema: str, table_name: str) -> TableDescription:
        column_rows = await conn.fetch(_COLUMNS_QUERY, table_schema, table_name)
        roles = _key_roles(await conn.fetch(_KEYS_QUERY, table_schema, table_name))
        fk_rows = await conn.fetch(_FOREIGN_KEYS_QUERY, table_schema, table_name)

        return TableDescription.build(
            table_name=table_name,
            schema_name=table_schema,
            columns=[
                ColumnDescription(
                    name=row["column_name"],
                    data_type=row["data_type"],
                    is_nullable=row["is_nullable"] == "YES",
                    key_role=roles.get(row["column_name"], "none"),
                )
                for row in column_rows
            ],
            foreign_keys=[
                ForeignKeyDescription(
                    column=row["column_name"],
                    target_table=row["foreign_table_name"],
                    target_column=row["foreign_column_name"],
                )
                for row in fk_rows
            ],
        )

    async def close(self) -> None:
        pool, self._pool = self._pool, None
        self._connected = False
        if pool is not None:
            await pool.close()
            logger.info("PostgreSQL pool closed", extra={"connection": self.identity})
