"""
Schema Cache

Introspects the connected database once and memoizes the rendered schema
text that every prompt embeds. Entries are keyed by connection identity so
agents pointed at different databases never share schema text.

Refreshes are serialized with an asyncio.Lock and built completely before
being swapped in, so concurrent readers see either the old or the new text.
"""

import asyncio
import logging
import time
from collections.abc import Iterable

from squix.connectors.base import BaseConnector
from squix.schema.renderer import render_schema

logger = logging.getLogger(__name__)


class SchemaCache:
    """In-process cache of rendered schema text, one entry per connection."""

    def __init__(self, excluded_tables: Iterable[str] = ()):
        self.excluded_tables = tuple(excluded_tables)
        self._entries: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get_schema(
        self,
        connector: BaseConnector,
        dialect: str,
        force_refresh: bool = False,
    ) -> str:
        """
        Return the schema text for a connection, introspecting when needed.

        Args:
            connector: Connected database connector
            dialect: "postgresql" or "mysql", selects identifier quoting
            force_refresh: Re-introspect even if an entry exists

        Returns:
            Rendered schema text

        Raises:
            ConnectionError: If introspection fails (the entry is left unset)
        """
        key = connector.identity
        if not force_refresh:
            cached = self._entries.get(key)
            if cached is not None:
                logger.debug("Schema cache hit", extra={"connection": key})
                return cached

        async with self._lock:
            if not force_refresh:
                cached = self._entries.get(key)
                if cached is not None:
                    return cached

            start_time = time.perf_counter()
            try:
                tables = await connector.get_schema(excluded_tables=self.excluded_tables)
            except Exception:
                self._entries.pop(key, None)
                logger.error("Schema introspection failed", extra={"connection": key})
                raise

            schema_text = render_schema(tables, dialect)
            self._entries[key] = schema_text

            logger.info(
                f"Schema cached for {key}: {len(tables)} tables",
                extra={
                    "connection": key,
                    "table_count": len(tables),
                    "forced": force_refresh,
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                },
            )
            return schema_text

    def peek(self, connector: BaseConnector) -> str | None:
        """Return cached text without introspecting."""
        return self._entries.get(connector.identity)

    def invalidate(self, key: str | None = None) -> None:
        """Drop one entry, or all entries when no key is given."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
