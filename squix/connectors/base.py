"""
Base Database Connector

Connectors give the pipeline three things: run one validated statement,
describe the user tables, and release resources. Statements arrive fully
formed from the SQL validator, so execute() takes no bind parameters.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from squix.models.schema import TableDescription

logger = logging.getLogger(__name__)


class QueryResult(BaseModel):
    """Rows as returned by the driver, before JSON normalization."""

    rows: list[dict[str, Any]]
    columns: list[str]
    row_count: int = Field(..., ge=0)
    execution_time_ms: float = Field(..., ge=0.0)

    @classmethod
    def from_rows(
        cls, rows: list[dict[str, Any]], columns: list[str], started_at: float
    ) -> "QueryResult":
        """Build a result, timing from a time.perf_counter() start value."""
        return cls(
            rows=rows,
            row_count=len(rows),
            columns=columns,
            execution_time_ms=(time.perf_counter() - started_at) * 1000,
        )


class ConnectorError(Exception):
    """Raised by connectors; drivers' own exceptions are chained."""


class ConnectionError(ConnectorError):
    """The database could not be reached, or the connector is not connected."""


class SchemaError(ConnectionError):
    """Catalog introspection failed."""


class QueryError(ConnectorError):
    """The database rejected or failed a statement."""


class BaseConnector(ABC):
    """
    A target database the pipeline can describe and query.

    Usage:
        async with PostgresConnector(host="localhost", ...) as connector:
            tables = await connector.get_schema(excluded_tables=["_prisma_migrations"])
            result = await connector.execute('SELECT count(*) FROM "users"')
    """

    dialect: ClassVar[str] = ""

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        pool_size: int = 5,
        timeout: int = 30,
        **options: Any,
    ):
        """
        Args:
            host, port, database, user, password: Connection target
            pool_size: Maximum pooled connections, where the driver pools
            timeout: Per-statement timeout in seconds
            **options: Extra driver keyword arguments
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.pool_size = pool_size
        self.timeout = timeout
        self.options = options

        self._connected = False

    @abstractmethod
    async def connect(self) -> None:
        """
        Verify the target is reachable. Idempotent.

        Raises:
            ConnectionError: If connection fails
        """

    @abstractmethod
    async def execute(self, sql: str) -> QueryResult:
        """
        Run one statement and return its rows.

        Raises:
            QueryError: If the statement fails or times out
            ConnectionError: If not connected
        """

    @abstractmethod
    async def get_schema(self, excluded_tables: Iterable[str] = ()) -> list[TableDescription]:
        """
        Describe user tables in catalog order. Only metadata queries are issued.

        Raises:
            SchemaError: If introspection fails
            ConnectionError: If not connected
        """

    @abstractmethod
    async def close(self) -> None:
        """Release connections. Safe to call more than once."""

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def identity(self) -> str:
        """Stable key naming the connected database, without credentials."""
        return f"{self.dialect}://{self.user}@{self.host}:{self.port}/{self.database}"

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.identity} ({status})>"
