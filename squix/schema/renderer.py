"""Render introspected tables into the schema text embedded in prompts."""

from __future__ import annotations

from collections.abc import Sequence

from squix.models.schema import ColumnDescription, TableDescription

_QUOTES = {"postgresql": '"', "mysql": "`"}

# Tables in this schema are rendered unqualified
_DEFAULT_SCHEMAS = {"postgresql": "public"}


def quote_identifier(name: str, dialect: str) -> str:
    """Quote an identifier the way the dialect expects."""
    quote = _QUOTES.get(dialect, '"')
    return f"{quote}{name.replace(quote, quote * 2)}{quote}"


def _table_label(table: TableDescription, dialect: str) -> str:
    label = quote_identifier(table.table_name, dialect)
    default_schema = _DEFAULT_SCHEMAS.get(dialect)
    if default_schema and table.schema_name and table.schema_name != default_schema:
        return f"{quote_identifier(table.schema_name, dialect)}.{label}"
    return label


def _column_constraints(column: ColumnDescription) -> list[str]:
    constraints: list[str] = []
    if column.key_role == "primary":
        constraints.append("PRIMARY KEY")
    elif column.key_role == "unique":
        constraints.append("UNIQUE")
    if not column.is_nullable:
        constraints.append("NOT NULL")
    return constraints


def render_table(table: TableDescription, dialect: str) -> str:
    """
    Render one table block.

    Example (postgresql):
        Table "users":
          - "id" (integer) (PRIMARY KEY, NOT NULL)
          Relationships:
            - "org_id" references "orgs"("id")
    """
    lines = [f"Table {_table_label(table, dialect)}:"]
    for column in table.columns:
        constraints = _column_constraints(column)
        suffix = f" ({', '.join(constraints)})" if constraints else ""
        lines.append(
            f"  - {quote_identifier(column.name, dialect)} ({column.data_type}){suffix}"
        )

    if table.foreign_keys:
        lines.append("  Relationships:")
        for fk in table.foreign_keys:
            lines.append(
                f"    - {quote_identifier(fk.column, dialect)} references "
                f"{quote_identifier(fk.target_table, dialect)}"
                f"({quote_identifier(fk.target_column, dialect)})"
            )

    return "\n".join(lines) + "\n\n"


def render_schema(tables: Sequence[TableDescription], dialect: str) -> str:
    """Render all tables, in introspection order, into one text block."""
    return "".join(render_table(table, dialect) for table in tables)
