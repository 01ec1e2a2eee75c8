"""
ExecutorAgent: runs validated SQL and normalizes the rows.

Database values are reduced to JSON-safe scalars so that the result can be
embedded in a prompt verbatim and returned to callers without losing
precision:
- integers outside the IEEE-754 safe range become decimal strings
- Decimal becomes its string form
- dates, times and datetimes become ISO-8601 strings
- UUIDs become strings, bytes become hex
"""

import json
import logging
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from squix.agents.base import BaseAgent
from squix.connectors.base import BaseConnector, QueryError
from squix.models.agent import (
    ExecutionError,
    ExecutorAgentInput,
    ExecutorAgentOutput,
    QueryResultSet,
)

logger = logging.getLogger(__name__)

MAX_SAFE_INTEGER = 2**53 - 1


def normalize_value(value: Any) -> Any:
    """Convert one database value to a JSON-safe scalar."""
    if value is None or isinstance(value, (bool, str, float)):
        return value
    if isinstance(value, int):
        if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            return value
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, dict):
        return {str(k): normalize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def normalize_rows(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Normalize every value of every row, keeping column order."""
    return [{key: normalize_value(val) for key, val in row.items()} for row in rows]


class ExecutorAgent(BaseAgent):
    """Query execution agent. No LLM calls."""

    def __init__(self, connector: BaseConnector):
        super().__init__(name="ExecutorAgent")
        self.connector = connector

    async def execute(self, input: ExecutorAgentInput) -> ExecutorAgentOutput:
        """
        Execute validated SQL against the connected database.

        Raises:
            ExecutionError: If the database rejects or fails the statement
        """
        sql = input.validated_sql.sql

        try:
            raw = await self.connector.execute(sql)
        except QueryError as e:
            logger.error(
                f"[{self.name}] Query failed: {e}",
                extra={"agent": self.name, "sql": sql[:200]},
            )
            raise ExecutionError(self.name, f"Query execution failed: {e}", sql=sql) from e

        result = QueryResultSet(
            rows=normalize_rows(raw.rows),
            columns=list(raw.columns),
            row_count=raw.row_count,
            execution_time_ms=raw.execution_time_ms,
        )

        logger.info(
            f"[{self.name}] Returned {result.row_count} rows",
            extra={
                "agent": self.name,
                "row_count": result.row_count,
                "execution_time_ms": result.execution_time_ms,
            },
        )

        return ExecutorAgentOutput(success=True, result=result, metadata=self._metadata)
