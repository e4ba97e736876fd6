"""Schema generation: Resolved Types to JSON Schema and example payloads."""

from .schema_generator import SchemaGenerator, UnionMode

__all__ = ["SchemaGenerator", "UnionMode"]
