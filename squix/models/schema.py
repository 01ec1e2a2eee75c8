"""Schema description models produced by connector introspection."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

KeyRole = Literal["none", "primary", "unique"]


class ColumnDescription(BaseModel):
    """A single column as reported by the database catalog."""

    name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Dialect-native declared type")
    is_nullable: bool = Field(default=True, description="Whether column can be NULL")
    key_role: KeyRole = Field(default="none", description="Primary/unique key role")

    model_config = ConfigDict(frozen=True)


class ForeignKeyDescription(BaseModel):
    """A foreign-key edge from a column to another table's column."""

    column: str = Field(..., description="Source column")
    target_table: str = Field(..., description="Referenced table")
    target_column: str = Field(..., description="Referenced column")

    model_config = ConfigDict(frozen=True)


class TableDescription(BaseModel):
    """A user table with its columns and outgoing foreign keys."""

    schema_name: str | None = Field(None, description="Schema/database name")
    table_name: str = Field(..., description="Table name")
    columns: tuple[ColumnDescription, ...] = Field(default_factory=tuple)
    foreign_keys: tuple[ForeignKeyDescription, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def build(
        cls,
        table_name: str,
        columns: list[ColumnDescription],
        foreign_keys: list[ForeignKeyDescription],
        schema_name: str | None = None,
    ) -> TableDescription:
        """Create a table description, dropping duplicate foreign-key edges."""
        unique_fks = tuple(dict.fromkeys(foreign_keys))
        return cls(
            schema_name=schema_name,
            table_name=table_name,
            columns=tuple(columns),
            foreign_keys=unique_fks,
        )
