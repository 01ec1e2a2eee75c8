"""
SQLSafetyValidator: read-only gate for generated SQL.

Rule-based, no LLM calls. A candidate statement passes only when, after
trailing semicolons are removed, it is a single statement that contains
none of the denied keywords as a whole word (case-insensitive).

The keyword scan is lexical: a denied word inside a string literal or a
quoted identifier is still rejected.
"""

import logging
import re

import sqlparse

from squix.models.agent import ResponseParseError, SQLSafetyViolation, ValidatedSQL

logger = logging.getLogger(__name__)

_TRAILING_SEMICOLONS = re.compile(r";+\s*$")


class SQLSafetyValidator:
    """Accepts one read-only statement, rejects everything else."""

    DENIED_KEYWORDS = (
        "DROP",
        "DELETE",
        "TRUNCATE",
        "ALTER",
        "CREATE",
        "INSERT",
        "UPDATE",
        "GRANT",
        "REVOKE",
        "EXEC",
    )

    def __init__(self, name: str = "SQLSafetyValidator"):
        self.name = name
        self._patterns = [
            (keyword, re.compile(rf"\b{keyword}\b", re.IGNORECASE))
            for keyword in self.DENIED_KEYWORDS
        ]

    def validate(self, candidate: str) -> ValidatedSQL:
        """
        Clean and check a candidate statement.

        Args:
            candidate: Raw SQL text as produced by the model

        Returns:
            ValidatedSQL with the cleaned statement

        Raises:
            ResponseParseError: If nothing remains after cleaning
            SQLSafetyViolation: If the text holds several statements or a denied keyword
        """
        sql = _TRAILING_SEMICOLONS.sub("", (candidate or "").strip()).strip()
        if not sql:
            raise ResponseParseError(self.name, "Generated SQL is empty", response_text=candidate)

        if ";" in sql:
            logger.warning(
                "Rejected SQL with multiple statements",
                extra={"validator": self.name, "sql": sql[:200]},
            )
            raise SQLSafetyViolation(
                self.name,
                "Security violation: multiple SQL statements are not allowed.",
                sql=sql,
            )

        for keyword, pattern in self._patterns:
            if pattern.search(sql):
                logger.warning(
                    f"Rejected SQL containing {keyword}",
                    extra={"validator": self.name, "keyword": keyword, "sql": sql[:200]},
                )
                raise SQLSafetyViolation(
                    self.name,
                    f"Security violation: generated query contains forbidden keyword {keyword}.",
                    sql=sql,
                    keyword=keyword,
                )

        return ValidatedSQL(sql=sql, statement_type=self._statement_type(sql))

    @staticmethod
    def _statement_type(sql: str) -> str:
        parsed = sqlparse.parse(sql)
        if not parsed:
            return "UNKNOWN"
        return parsed[0].get_type()
