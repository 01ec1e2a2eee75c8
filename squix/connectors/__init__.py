"""Async connectors for the PostgreSQL and MySQL databases Squix queries."""

from squix.connectors.base import (
    BaseConnector,
    ConnectionError,
    ConnectorError,
    QueryError,
    QueryResult,
    SchemaError,
)
from squix.connectors.factory import (
    ConnectionParams,
    create_connector,
    resolve_connection_url,
    resolve_database_type,
)
from squix.connectors.mysql import MySQLConnector
from squix.connectors.postgres import PostgresConnector

__all__ = [
    "BaseConnector",
    "PostgresConnector",
    "MySQLConnector",
    "ConnectionParams",
    "create_connector",
    "resolve_connection_url",
    "resolve_database_type",
    "QueryResult",
    "ConnectorError",
    "ConnectionError",
    "QueryError",
    "SchemaError",
]
