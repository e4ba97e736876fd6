"""Resolved Type model: the fully dereferenced descriptor of a type reference."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class TypeKind(str, Enum):
    """Tags of the Resolved Type variant."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    UNION = "union"
    ENUM = "enum"
    OBJECT = "object"
    UNKNOWN = "unknown"
    REFERENCE = "reference"


class ObjectKind(str, Enum):
    INTERFACE = "interface"
    CLASS = "class"


@dataclass
class ValidationRule:
    """A validation constraint taken from a property annotation."""

    field: str
    rule: str  # annotation name, e.g. "IsEmail", "MinLength"
    value: Any = None
    parameters: List[str] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "field": self.field,
            "rule": self.rule,
            "value": self.value,
            "parameters": self.parameters,
            "message": self.message,
        }


@dataclass
class PrimitiveType:
    name: str

    kind = TypeKind.PRIMITIVE

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "name": self.name}


@dataclass
class ArrayType:
    element: "ResolvedType"

    kind = TypeKind.ARRAY

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "items": self.element.to_dict()}


@dataclass
class UnionType:
    members: List["ResolvedType"] = field(default_factory=list)

    kind = TypeKind.UNION

    @property
    def is_primitive_union(self) -> bool:
        return bool(self.members) and all(isinstance(m, PrimitiveType) for m in self.members)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "members": [m.to_dict() for m in self.members]}


@dataclass
class PropertyDescriptor:
    """A property of an object or enum type."""

    name: str
    type: "ResolvedType"
    optional: bool = False
    description: Optional[str] = None
    default_value: Any = None
    validation_rules: List[ValidationRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "name": self.name,
            "type": self.type.to_dict(),
            "optional": self.optional,
            "description": self.description,
            "default_value": self.default_value,
        }
        if self.validation_rules:
            data["validation_rules"] = [r.to_dict() for r in self.validation_rules]
        return data


@dataclass
class EnumType:
    """An enumeration; each member is a property whose default is its literal."""

    name: str
    properties: List[PropertyDescriptor] = field(default_factory=list)
    origin_unit: Optional[str] = None
    description: Optional[str] = None

    kind = TypeKind.ENUM

    @property
    def members(self) -> List[Tuple[str, Any]]:
        """(member name, literal value) pairs in declaration order."""
        return [(p.name, p.default_value) for p in self.properties]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "members": [{"name": n, "value": v} for n, v in self.members],
            "file_path": self.origin_unit,
            "description": self.description,
        }


@dataclass
class ObjectType:
    """An interface, class or inline object shape."""

    name: str
    object_kind: ObjectKind = ObjectKind.INTERFACE
    properties: List[PropertyDescriptor] = field(default_factory=list)
    origin_unit: Optional[str] = None
    description: Optional[str] = None

    kind = TypeKind.OBJECT

    def get_property(self, name: str) -> Optional[PropertyDescriptor]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "object_kind": self.object_kind.value,
            "properties": [p.to_dict() for p in self.properties],
            "file_path": self.origin_unit,
            "description": self.description,
        }


@dataclass
class UnknownType:
    """A reference no declaration could be found for."""

    raw_name: str

    kind = TypeKind.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "raw_name": self.raw_name}


@dataclass
class ReferenceType:
    """Placeholder for a declaration that is still being resolved (a cycle)."""

    name: str
    origin_unit: Optional[str] = None

    kind = TypeKind.REFERENCE

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "name": self.name, "file_path": self.origin_unit}


ResolvedType = Union[
    PrimitiveType, ArrayType, UnionType, EnumType, ObjectType, UnknownType, ReferenceType
]
