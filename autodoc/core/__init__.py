"""
Type Resolution Module

Dereferences type-reference text into Resolved Types.
Supports:
- Primitive/built-in names, arrays, unions, literal and function types
- Inline object shapes
- Interfaces, classes, enums and type aliases across source units
- Per-run memoization and circular-reference placeholders
- class-validator annotations as validation rules
"""

from .resolved_types import (
    ArrayType,
    EnumType,
    ObjectKind,
    ObjectType,
    PrimitiveType,
    PropertyDescriptor,
    ReferenceType,
    ResolvedType,
    TypeKind,
    UnionType,
    UnknownType,
    ValidationRule,
)
from .type_expression import TypeExpressionError, normalize_type_text, parse_type_expression
from .type_resolver import PRIMITIVE_TYPES, TypeResolver

__all__ = [
    "ArrayType",
    "EnumType",
    "ObjectKind",
    "ObjectType",
    "PrimitiveType",
    "PropertyDescriptor",
    "ReferenceType",
    "ResolvedType",
    "TypeKind",
    "UnionType",
    "UnknownType",
    "ValidationRule",
    "TypeExpressionError",
    "normalize_type_text",
    "parse_type_expression",
    "PRIMITIVE_TYPES",
    "TypeResolver",
]
