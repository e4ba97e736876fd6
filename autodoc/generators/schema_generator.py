"""
Schema Generator - Converts Resolved Types into JSON Schema and example payloads.

Supports:
- Primitive type mapping (Date → string/date-time, void/null/undefined → null)
- Objects with required lists and per-property metadata
- Arrays, unions (oneOf), enums, unknown and circular references
- Validation-rule constraints (format, minLength, maximum, pattern, ...)
- Example generation from any schema produced here
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from autodoc.core.resolved_types import (
    ArrayType,
    EnumType,
    ObjectType,
    PrimitiveType,
    PropertyDescriptor,
    ReferenceType,
    ResolvedType,
    UnionType,
    UnknownType,
    ValidationRule,
)
from autodoc.core.validation import parse_literal

logger = logging.getLogger(__name__)

PRIMITIVE_SCHEMA_TYPES = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "Date": "string",
    "any": "object",
    "void": "null",
    "null": "null",
    "undefined": "null",
}

# Validation annotations that only set a format
_FORMAT_RULES = {
    "IsEmail": "email",
    "IsUrl": "uri",
    "IsDate": "date-time",
    "IsDateString": "date-time",
    "IsISO8601": "date-time",
    "IsUUID": "uuid",
}

_TYPE_RULES = {
    "IsString": "string",
    "IsNumber": "number",
    "IsInt": "integer",
    "IsBoolean": "boolean",
    "IsArray": "array",
    "IsObject": "object",
}

_BOUND_RULES = {
    "MinLength": "minLength",
    "MaxLength": "maxLength",
    "Min": "minimum",
    "Max": "maximum",
}


class UnionMode(str, Enum):
    """How a union made only of primitives is rendered."""

    FIRST = "first"  # schema of the first member only (lossy)
    ONE_OF = "one_of"  # oneOf composite of every member


class SchemaGenerator:
    """Maps Resolved Types to JSON Schema dictionaries"""

    def __init__(self, primitive_union_mode: str = UnionMode.FIRST.value):
        self.primitive_union_mode = UnionMode(primitive_union_mode)

    def generate_schema(self, resolved: ResolvedType) -> Dict[str, Any]:
        """
        Convert a Resolved Type to JSON Schema

        Args:
            resolved: Output of TypeResolver.resolve

        Returns:
            JSON Schema as a plain dictionary
        """
        if isinstance(resolved, PrimitiveType):
            return self._primitive_schema(resolved)
        if isinstance(resolved, ObjectType):
            return self._object_schema(resolved)
        if isinstance(resolved, ArrayType):
            return {"type": "array", "items": self.generate_schema(resolved.element)}
        if isinstance(resolved, UnionType):
            return self._union_schema(resolved)
        if isinstance(resolved, EnumType):
            return self._enum_schema(resolved)
        if isinstance(resolved, ReferenceType):
            return {
                "type": "object",
                "$ref": f"#/components/schemas/{resolved.name}",
                "description": f"Circular reference to {resolved.name}",
            }
        if isinstance(resolved, UnknownType):
            return {"type": "object", "description": f"Unknown type: {resolved.raw_name}"}

        logger.debug(f"Unsupported resolved type {resolved!r}")
        return {"type": "object", "description": f"Unknown type: {resolved!r}"}

    def _primitive_schema(self, resolved: PrimitiveType) -> Dict[str, Any]:
        schema = {"type": PRIMITIVE_SCHEMA_TYPES.get(resolved.name, "string")}
        if resolved.name == "Date":
            schema["format"] = "date-time"
        return schema

    def _object_schema(self, resolved: ObjectType) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "object"}
        if resolved.description:
            schema["description"] = resolved.description

        properties: Dict[str, Any] = {}
        required: List[str] = []
        for prop in resolved.properties:
            properties[prop.name] = self._property_schema(prop)
            if not prop.optional:
                required.append(prop.name)

        schema["properties"] = properties
        schema["required"] = required
        return schema

    def _property_schema(self, prop: PropertyDescriptor) -> Dict[str, Any]:
        schema = dict(self.generate_schema(prop.type))
        if prop.description:
            schema["description"] = prop.description
        if prop.optional:
            schema["optional"] = True
        if prop.default_value is not None:
            schema["examples"] = [parse_literal(prop.default_value)]
        if prop.validation_rules:
            for key, value in self.convert_validation_rules(prop.validation_rules).items():
                # Declared types win over validator hints
                if key == "type" and "type" in schema:
                    continue
                schema[key] = value
        return schema

    def _union_schema(self, resolved: UnionType) -> Dict[str, Any]:
        if not resolved.members:
            return {"type": "string"}

        if resolved.is_primitive_union and self.primitive_union_mode == UnionMode.FIRST:
            return self.generate_schema(resolved.members[0])

        return {"oneOf": [self.generate_schema(m) for m in resolved.members]}

    def _enum_schema(self, resolved: EnumType) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "string"}
        if resolved.description:
            schema["description"] = resolved.description
        values = [value for _, value in resolved.members if value is not None]
        if values:
            schema["enum"] = values
        return schema

    def convert_validation_rules(self, rules: List[ValidationRule]) -> Dict[str, Any]:
        """Convert validation rules to JSON Schema constraints"""
        schema: Dict[str, Any] = {}
        for rule in rules:
            if rule.rule in _TYPE_RULES:
                schema["type"] = _TYPE_RULES[rule.rule]
            elif rule.rule in _FORMAT_RULES:
                schema["format"] = _FORMAT_RULES[rule.rule]
            elif rule.rule in _BOUND_RULES:
                if isinstance(rule.value, (int, float)) and not isinstance(rule.value, bool):
                    schema[_BOUND_RULES[rule.rule]] = rule.value
            elif rule.rule == "Matches":
                if isinstance(rule.value, str):
                    schema["pattern"] = rule.value
            elif rule.rule == "IsEnum":
                if isinstance(rule.value, list) and rule.value:
                    schema["enum"] = list(rule.value)
        return schema

    def generate_example(self, schema: Dict[str, Any]) -> Any:
        """
        Generate example data from a schema

        Only required object properties are populated.
        """
        examples = schema.get("examples")
        if examples:
            return examples[0]

        schema_type = schema.get("type")

        if schema_type == "string":
            if schema.get("format") == "date-time":
                return datetime.now(timezone.utc).isoformat()
            if schema.get("enum"):
                return schema["enum"][0]
            return "string"

        if schema_type in ("number", "integer"):
            return 0

        if schema_type == "boolean":
            return True

        if schema_type == "array":
            items = schema.get("items")
            if items:
                return [self.generate_example(items)]
            return []

        if schema_type == "object":
            properties = schema.get("properties") or {}
            required = schema.get("required") or []
            return {
                name: self.generate_example(prop_schema)
                for name, prop_schema in properties.items()
                if name in required
            }

        return None

    def generate_examples(
        self,
        request_schema: Optional[Dict[str, Any]] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Generate request/response examples, each only if its schema is given"""
        examples: Dict[str, Any] = {}
        if request_schema is not None:
            examples["request"] = self.generate_example(request_schema)
        if response_schema is not None:
            examples["response"] = self.generate_example(response_schema)
        return examples
