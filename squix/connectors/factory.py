"""Connection-target resolution and connector factory for supported databases."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote, urlparse

from pydantic import BaseModel

from squix.connectors.base import BaseConnector
from squix.connectors.mysql import MySQLConnector
from squix.connectors.postgres import PostgresConnector
from squix.models.agent import ConfigurationError

_POSTGRES_SCHEMES = {"postgres", "postgresql"}
_MYSQL_SCHEMES = {"mysql"}

REQUIRED_PARAMS = ("host", "port", "user", "password", "database")


class ConnectionParams(BaseModel):
    """Structured connection parameters; all five are required together."""

    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None


def resolve_database_type(database_type: str | None, database_url: str | None = None) -> str:
    """Resolve target database type from explicit type or URL."""
    if database_type:
        value = database_type.strip().lower()
        if value in _POSTGRES_SCHEMES:
            return "postgresql"
        if value in _MYSQL_SCHEMES:
            return "mysql"
        raise ConfigurationError(f"Unsupported database provider: {database_type}")
    if not database_url:
        raise ConfigurationError("Database provider could not be determined.")
    scheme = _parse_url(database_url).scheme.split("+")[0].lower()
    if scheme in _POSTGRES_SCHEMES:
        return "postgresql"
    if scheme in _MYSQL_SCHEMES:
        return "mysql"
    raise ConfigurationError(f"Unsupported database URL scheme: {scheme}")


def resolve_connection_url(
    provider: str,
    connection: str | ConnectionParams | dict[str, Any],
) -> str:
    """
    Resolve a connection target into a database URL.

    A string is used as-is. Structured parameters are assembled into
    ``<provider>://<user>:<password>@<host>:<port>/<database>``; a partial set
    is a configuration error rather than a default-fill.
    """
    if isinstance(connection, str):
        if not connection.strip():
            raise ConfigurationError("Connection string cannot be empty.")
        return connection.strip()

    params = (
        connection
        if isinstance(connection, ConnectionParams)
        else ConnectionParams.model_validate(connection)
    )
    missing = [
        name for name in REQUIRED_PARAMS if getattr(params, name) in (None, "")
    ]
    if missing:
        raise ConfigurationError(
            "Missing required connection parameters: host, port, user, password, database",
            context={"missing": missing},
        )

    return (
        f"{provider}://{quote(params.user, safe='')}:{quote(params.password, safe='')}"
        f"@{params.host}:{params.port}/{params.database}"
    )


def create_connector(
    *,
    database_url: str,
    database_type: str | None = None,
    pool_size: int = 10,
    timeout: int = 30,
    **kwargs,
) -> BaseConnector:
    """Create a typed connector instance from URL + optional database_type."""
    parsed = _parse_url(database_url)
    if not parsed.hostname:
        raise ConfigurationError("Invalid database URL: host is required.")

    target_type = resolve_database_type(database_type, database_url)
    db_name = unquote(parsed.path.lstrip("/"))
    user = unquote(parsed.username) if parsed.username else None
    password = unquote(parsed.password) if parsed.password else ""

    if target_type == "postgresql":
        return PostgresConnector(
            host=parsed.hostname,
            port=parsed.port or 5432,
            database=db_name or "postgres",
            user=user or "postgres",
            password=password,
            pool_size=pool_size,
            timeout=timeout,
            **kwargs,
        )

    return MySQLConnector(
        host=parsed.hostname,
        port=parsed.port or 3306,
        database=db_name,
        user=user or "root",
        password=password,
        pool_size=pool_size,
        timeout=timeout,
        **kwargs,
    )


def _parse_url(database_url: str):
    normalized = database_url.replace("postgresql+asyncpg://", "postgresql://")
    return urlparse(normalized)
