"""Schema introspection cache and prompt rendering."""

from squix.schema.cache import SchemaCache
from squix.schema.renderer import quote_identifier, render_schema, render_table

__all__ = ["SchemaCache", "quote_identifier", "render_schema", "render_table"]
