"""Models for the Source Unit Index: parsed modules and their declarations."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class DeclarationKind(str, Enum):
    """Kinds of top-level structural declarations."""

    INTERFACE = "interface"
    CLASS = "class"
    ENUM = "enum"
    ALIAS = "alias"


# Order in which a unit is searched for a declaration name
SEARCH_ORDER = [
    DeclarationKind.INTERFACE,
    DeclarationKind.CLASS,
    DeclarationKind.ENUM,
    DeclarationKind.ALIAS,
]


def strip_quotes(text: str) -> Optional[str]:
    """Return the content of a quoted string literal, or None."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return None


@dataclass
class Annotation:
    """A decorator attached to a declaration, member or parameter."""

    name: str
    arguments: List[str] = field(default_factory=list)  # raw argument text

    def first_string_argument(self) -> Optional[str]:
        """Return the first argument if it is a string literal."""
        if not self.arguments:
            return None
        return strip_quotes(self.arguments[0])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"name": self.name, "arguments": self.arguments}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Annotation":
        return cls(name=data["name"], arguments=list(data.get("arguments", [])))


def _annotations_from(data: Dict[str, Any]) -> List[Annotation]:
    return [Annotation.from_dict(a) for a in data.get("annotations", [])]


@dataclass
class PropertyDeclaration:
    """A declared property of an interface or class."""

    name: str
    type_text: Optional[str] = None
    optional: bool = False
    description: Optional[str] = None
    default_value: Optional[str] = None  # initializer text
    annotations: List[Annotation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "type": self.type_text,
            "optional": self.optional,
            "description": self.description,
            "default": self.default_value,
            "annotations": [a.to_dict() for a in self.annotations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyDeclaration":
        return cls(
            name=data["name"],
            type_text=data.get("type"),
            optional=bool(data.get("optional", False)),
            description=data.get("description"),
            default_value=data.get("default"),
            annotations=_annotations_from(data),
        )


@dataclass
class ParameterDeclaration:
    """A method or constructor parameter."""

    name: str
    type_text: Optional[str] = None
    optional: bool = False
    default_value: Optional[str] = None
    annotations: List[Annotation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "type": self.type_text,
            "optional": self.optional,
            "default": self.default_value,
            "annotations": [a.to_dict() for a in self.annotations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterDeclaration":
        return cls(
            name=data["name"],
            type_text=data.get("type"),
            optional=bool(data.get("optional", False)),
            default_value=data.get("default"),
            annotations=_annotations_from(data),
        )


@dataclass
class MethodDeclaration:
    """A method (or constructor) of a class-like declaration."""

    name: str
    parameters: List[ParameterDeclaration] = field(default_factory=list)
    return_type: Optional[str] = None
    annotations: List[Annotation] = field(default_factory=list)
    visibility: str = "public"  # "public", "protected", "private"
    description: Optional[str] = None

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_constructor(self) -> bool:
        return self.name == "constructor"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "parameters": [p.to_dict() for p in self.parameters],
            "return_type": self.return_type,
            "annotations": [a.to_dict() for a in self.annotations],
            "visibility": self.visibility,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MethodDeclaration":
        return cls(
            name=data["name"],
            parameters=[ParameterDeclaration.from_dict(p) for p in data.get("parameters", [])],
            return_type=data.get("return_type"),
            annotations=_annotations_from(data),
            visibility=data.get("visibility", "public"),
            description=data.get("description"),
        )


@dataclass
class EnumMember:
    """An enumeration member and its literal value."""

    name: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumMember":
        return cls(name=data["name"], value=data.get("value"))


@dataclass
class Declaration:
    """A named interface, class, enum or type alias."""

    name: str
    kind: DeclarationKind
    description: Optional[str] = None
    annotations: List[Annotation] = field(default_factory=list)
    properties: List[PropertyDeclaration] = field(default_factory=list)
    methods: List[MethodDeclaration] = field(default_factory=list)
    members: List[EnumMember] = field(default_factory=list)
    aliased_type: Optional[str] = None

    def get_annotation(self, name: str) -> Optional[Annotation]:
        """Return the first annotation with the given name."""
        for annotation in self.annotations:
            if annotation.name == name:
                return annotation
        return None

    def has_annotation(self, name: str) -> bool:
        return self.get_annotation(name) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "description": self.description,
            "annotations": [a.to_dict() for a in self.annotations],
        }
        if self.kind == DeclarationKind.ENUM:
            data["members"] = [m.to_dict() for m in self.members]
        elif self.kind == DeclarationKind.ALIAS:
            data["aliased_type"] = self.aliased_type
        else:
            data["properties"] = [p.to_dict() for p in self.properties]
            data["methods"] = [m.to_dict() for m in self.methods]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Declaration":
        return cls(
            name=data["name"],
            kind=DeclarationKind(data["kind"]),
            description=data.get("description"),
            annotations=_annotations_from(data),
            properties=[PropertyDeclaration.from_dict(p) for p in data.get("properties", [])],
            methods=[MethodDeclaration.from_dict(m) for m in data.get("methods", [])],
            members=[EnumMember.from_dict(m) for m in data.get("members", [])],
            aliased_type=data.get("aliased_type"),
        )


@dataclass
class SourceUnit:
    """One parsed module."""

    id: str
    declarations: List[Declaration] = field(default_factory=list)

    def declarations_of(self, kind: DeclarationKind) -> List[Declaration]:
        return [d for d in self.declarations if d.kind == kind]

    @property
    def classes(self) -> List[Declaration]:
        return self.declarations_of(DeclarationKind.CLASS)

    def find_declaration(self, name: str) -> Optional[Declaration]:
        """Find a declaration by name: interfaces, then classes, enums, aliases."""
        for kind in SEARCH_ORDER:
            for declaration in self.declarations:
                if declaration.kind == kind and declaration.name == name:
                    return declaration
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "declarations": [d.to_dict() for d in self.declarations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceUnit":
        return cls(
            id=data["id"],
            declarations=[Declaration.from_dict(d) for d in data.get("declarations", [])],
        )


@dataclass
class SourceIndex:
    """Read-only, ordered collection of source units."""

    units: List[SourceUnit] = field(default_factory=list)

    def __iter__(self) -> Iterator[SourceUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    def get_unit(self, unit_id: Optional[str]) -> Optional[SourceUnit]:
        """Return the unit with the given id."""
        if unit_id is None:
            return None
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def iter_declarations(self) -> Iterator[Tuple[SourceUnit, Declaration]]:
        """Yield (unit, declaration) pairs in index order."""
        for unit in self.units:
            for declaration in unit.declarations:
                yield unit, declaration

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"units": [u.to_dict() for u in self.units]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceIndex":
        return cls(units=[SourceUnit.from_dict(u) for u in data.get("units", [])])
