"""
Type Resolver - Dereferences type-reference text into Resolved Types.

Supports:
- Primitive/built-in names
- Arrays, unions, parenthesized groups, literal and function types
- Inline object shapes
- Interface, class, enum and type-alias declarations across source units
- Per-instance memoization keyed by (cleaned text, scope)
- Self-referential declarations (revisits become ReferenceType placeholders)

Resolution never raises: anything that cannot be found or parsed degrades to
UnknownType.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from autodoc.core.resolved_types import (
    ArrayType,
    EnumType,
    ObjectKind,
    ObjectType,
    PrimitiveType,
    PropertyDescriptor,
    ReferenceType,
    ResolvedType,
    UnionType,
    UnknownType,
)
from autodoc.core.type_expression import (
    ArrayNode,
    FunctionNode,
    LiteralNode,
    NameNode,
    ObjectNode,
    TypeExpressionError,
    TypeNode,
    UnionNode,
    normalize_type_text,
    parse_type_expression,
)
from autodoc.core.validation import rules_from_annotations
from autodoc.source.models import (
    Declaration,
    DeclarationKind,
    PropertyDeclaration,
    SourceIndex,
    SourceUnit,
)

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = frozenset([
    "string",
    "number",
    "boolean",
    "Date",
    "any",
    "void",
    "null",
    "undefined",
    "Object",
    "Function",
    "Promise",
    "Array",
])

INLINE_OBJECT_NAME = "InlineObject"

CacheKey = Tuple[str, Optional[str]]
DeclarationKey = Tuple[str, str]


def enum_member_type() -> UnionType:
    """Type given to every enumeration member."""
    return UnionType([PrimitiveType("string"), PrimitiveType("number")])


@dataclass
class _Frame:
    key: Tuple[Any, ...]
    tainted: bool = False


class TypeResolver:
    """
    Resolves type references against a Source Unit Index

    One instance belongs to one analysis run; its cache is never shared.

    Within one top-level resolve() call a named declaration is expanded
    inline at most once. A later visit that the cache cannot answer (the
    declaration sits in a cycle) yields a ReferenceType, which bounds the
    result by the number of declarations instead of the number of paths.

    Usage:
    ```python
    resolver = TypeResolver(index)
    user = resolver.resolve("User[]", scope="src/users/users.controller.ts")
    ```
    """

    def __init__(self, index: Optional[SourceIndex] = None):
        self.index = index or SourceIndex()
        self._cache: Dict[CacheKey, ResolvedType] = {}
        self._declarations: Dict[DeclarationKey, ResolvedType] = {}
        self._stack: List[_Frame] = []
        self._expanded: Set[DeclarationKey] = set()

    def resolve(self, type_text: Optional[str], scope: Optional[str] = None) -> ResolvedType:
        """
        Resolve a type reference to its full definition

        Args:
            type_text: Raw type-reference text, e.g. "Promise<User[]>" or "string | null"
            scope: Id of the source unit the reference appears in (None for global)

        Returns:
            The Resolved Type; UnknownType when nothing matches
        """
        raw = type_text or ""
        cleaned = normalize_type_text(raw)
        key = (cleaned, scope)

        if key in self._cache:
            logger.debug(f"Type cache hit: {cleaned}:{scope or 'global'}")
            return self._cache[key]

        if not self._stack:
            self._expanded = set()

        frame_key = ("type", cleaned, scope)
        index = self._frame_index(frame_key)
        if index >= 0:
            return self._placeholder(index, cleaned, scope)

        frame = _Frame(frame_key)
        self._stack.append(frame)
        try:
            resolved = self._classify(cleaned, raw, scope)
        finally:
            self._stack.pop()

        if not frame.tainted:
            self._cache[key] = resolved
        return resolved

    def clear_cache(self) -> None:
        """Drop every memoized resolution"""
        self._cache.clear()
        self._declarations.clear()

    def cache_stats(self) -> Dict[str, Any]:
        """Return cache size and keys ("name:scope" strings)"""
        return {
            "size": len(self._cache),
            "keys": [f"{name}:{scope or 'global'}" for name, scope in self._cache],
        }

    def _frame_index(self, key: Tuple[Any, ...]) -> int:
        for i, frame in enumerate(self._stack):
            if frame.key == key:
                return i
        return -1

    def _placeholder(self, index: int, name: str, unit_id: Optional[str]) -> ReferenceType:
        """Break a cycle back to the frame at `index`.

        Every frame opened after it now depends on an unfinished result and
        must not be cached.
        """
        logger.debug(f"Circular reference detected: {name}")
        for frame in self._stack[index + 1:]:
            frame.tainted = True
        return ReferenceType(name, unit_id)

    def _classify(self, cleaned: str, raw: str, scope: Optional[str]) -> ResolvedType:
        if not cleaned:
            return UnknownType(raw.strip())

        if cleaned in PRIMITIVE_TYPES:
            return PrimitiveType(cleaned)

        try:
            node = parse_type_expression(cleaned)
        except TypeExpressionError as e:
            logger.debug(f"Malformed type reference {raw!r}, resolving as a name: {e}")
            return self._resolve_name(cleaned, raw, scope)

        return self._resolve_node(node, raw, scope)

    def _resolve_node(self, node: TypeNode, raw: str, scope: Optional[str]) -> ResolvedType:
        if isinstance(node, NameNode):
            return self._resolve_name(node.text, raw, scope)

        if isinstance(node, LiteralNode):
            return PrimitiveType(node.primitive)

        if isinstance(node, FunctionNode):
            return PrimitiveType("Function")

        if isinstance(node, ArrayNode):
            return ArrayType(self.resolve(node.element.text, scope))

        if isinstance(node, UnionNode):
            return UnionType([self.resolve(member.text, scope) for member in node.members])

        if isinstance(node, ObjectNode):
            properties = [
                PropertyDescriptor(
                    name=member.name,
                    type=self.resolve(member.type_text, scope),
                    optional=member.optional,
                )
                for member in node.members
            ]
            return ObjectType(INLINE_OBJECT_NAME, ObjectKind.INTERFACE, properties, origin_unit=scope)

        return UnknownType(raw.strip())

    def _resolve_name(self, name: str, raw: str, scope: Optional[str]) -> ResolvedType:
        if name in PRIMITIVE_TYPES:
            return PrimitiveType(name)

        found = self._find_declaration(name, scope)
        if found is None and "." in name:
            # Namespace-qualified reference, e.g. Dto.CreateUser
            found = self._find_declaration(name.rsplit(".", 1)[1], scope)

        if found is None:
            logger.debug(f"Type not found in any source unit: {name}")
            return UnknownType(raw.strip())

        unit, declaration = found
        return self._resolve_declaration(declaration, unit)

    def _find_declaration(
        self,
        name: str,
        scope: Optional[str],
    ) -> Optional[Tuple[SourceUnit, Declaration]]:
        """Search the scope unit first, then every unit in index order"""
        scope_unit = self.index.get_unit(scope)
        if scope_unit is not None:
            declaration = scope_unit.find_declaration(name)
            if declaration is not None:
                return scope_unit, declaration

        for unit in self.index:
            declaration = unit.find_declaration(name)
            if declaration is not None:
                return unit, declaration
        return None

    def _resolve_declaration(self, declaration: Declaration, unit: SourceUnit) -> ResolvedType:
        declaration_key = (unit.id, declaration.name)
        if declaration_key in self._declarations:
            return self._declarations[declaration_key]

        frame_key = ("decl", unit.id, declaration.name)
        index = self._frame_index(frame_key)
        if index >= 0:
            return self._placeholder(index, declaration.name, unit.id)

        if declaration_key in self._expanded:
            # Already inlined elsewhere in this resolution
            logger.debug(f"Declaration already expanded, referencing: {declaration.name}")
            for frame in self._stack:
                frame.tainted = True
            return ReferenceType(declaration.name, unit.id)
        self._expanded.add(declaration_key)

        frame = _Frame(frame_key)
        self._stack.append(frame)
        try:
            if declaration.kind == DeclarationKind.ENUM:
                resolved = self._resolve_enum(declaration, unit)
            elif declaration.kind == DeclarationKind.ALIAS:
                resolved = self.resolve(declaration.aliased_type or "any", unit.id)
            else:
                resolved = self._resolve_object(declaration, unit)
        finally:
            self._stack.pop()

        if not frame.tainted:
            self._declarations[declaration_key] = resolved
        return resolved

    def _resolve_object(self, declaration: Declaration, unit: SourceUnit) -> ObjectType:
        object_kind = ObjectKind.CLASS if declaration.kind == DeclarationKind.CLASS else ObjectKind.INTERFACE
        return ObjectType(
            name=declaration.name,
            object_kind=object_kind,
            properties=[self._resolve_property(p, unit) for p in declaration.properties],
            origin_unit=unit.id,
            description=declaration.description,
        )

    def _resolve_property(self, prop: PropertyDeclaration, unit: SourceUnit) -> PropertyDescriptor:
        rules = rules_from_annotations(prop.name, prop.annotations)
        for rule in rules:
            if rule.rule == "IsEnum":
                rule.value = self._enum_values(rule.value, unit) or rule.value
        if prop.type_text:
            prop_type = self.resolve(prop.type_text, unit.id)
        else:
            prop_type = PrimitiveType("any")
        return PropertyDescriptor(
            name=prop.name,
            type=prop_type,
            optional=prop.optional or any(r.rule == "IsOptional" for r in rules),
            description=prop.description,
            default_value=prop.default_value,
            validation_rules=rules,
        )

    def _enum_values(self, name: Any, unit: SourceUnit) -> Optional[List[Any]]:
        """Member values of the enum named by an `@IsEnum(Name)` argument."""
        if not isinstance(name, str):
            return None
        found = self._find_declaration(name, unit.id)
        if found is None or found[1].kind != DeclarationKind.ENUM:
            return None
        resolved = self._resolve_declaration(found[1], found[0])
        if not isinstance(resolved, EnumType):
            return None
        return [value for _, value in resolved.members if value is not None]

    def _resolve_enum(self, declaration: Declaration, unit: SourceUnit) -> EnumType:
        properties = [
            PropertyDescriptor(
                name=member.name,
                type=enum_member_type(),
                optional=False,
                default_value=member.value,
            )
            for member in declaration.members
        ]
        return EnumType(
            name=declaration.name,
            properties=properties,
            origin_unit=unit.id,
            description=declaration.description,
        )
