"""
Unit tests for the Type Resolver

Tests:
- Classification: primitives, arrays, unions, literals, inline objects
- Declaration lookup: scope first, index order, kind order, aliases, enums
- Memoization and cache statistics
- Self- and mutually-referential declarations
"""

import json

import pytest

from autodoc.core.resolved_types import (
    ArrayType,
    EnumType,
    ObjectKind,
    ObjectType,
    PrimitiveType,
    ReferenceType,
    UnionType,
    UnknownType,
)
from autodoc.core.type_resolver import INLINE_OBJECT_NAME, TypeResolver
from autodoc.generators.schema_generator import SchemaGenerator
from autodoc.source.models import (
    Annotation,
    Declaration,
    DeclarationKind,
    EnumMember,
    PropertyDeclaration,
    SourceIndex,
    SourceUnit,
)


# ============================================================================
# FIXTURES
# ============================================================================


def interface(name, *properties, description=None):
    return Declaration(
        name=name,
        kind=DeclarationKind.INTERFACE,
        description=description,
        properties=list(properties),
    )


def prop(name, type_text=None, optional=False, **kwargs):
    return PropertyDeclaration(name=name, type_text=type_text, optional=optional, **kwargs)


@pytest.fixture
def user_index():
    """One declared shape: User { id: string; name: string; age?: number }"""
    user = interface(
        "User",
        prop("id", "string"),
        prop("name", "string"),
        prop("age", "number", optional=True),
    )
    return SourceIndex([SourceUnit("models.ts", [user])])


@pytest.fixture
def resolver(user_index):
    return TypeResolver(user_index)


# ============================================================================
# TEST: Classification
# ============================================================================


class TestClassification:
    """Tests for text classification"""

    @pytest.mark.parametrize("name", [
        "string", "number", "boolean", "Date", "any", "void",
        "null", "undefined", "Object", "Function", "Promise", "Array",
    ])
    def test_primitives(self, resolver, name):
        assert resolver.resolve(name) == PrimitiveType(name)

    def test_generic_arguments_discarded(self, resolver):
        assert resolver.resolve("Promise<User>") == PrimitiveType("Promise")
        assert resolver.resolve("Array<User>") == PrimitiveType("Array")

    def test_array_of_declared(self, resolver):
        """A[] is always Array{element = resolve(A)}"""
        assert resolver.resolve("User[]") == ArrayType(resolver.resolve("User"))

    def test_union_order_preserved(self, resolver):
        resolved = resolver.resolve("string | number | boolean")

        assert resolved == UnionType([
            PrimitiveType("string"),
            PrimitiveType("number"),
            PrimitiveType("boolean"),
        ])

    def test_union_not_deduplicated(self, resolver):
        resolved = resolver.resolve("string | string")
        assert len(resolved.members) == 2

    def test_union_with_array_member(self, resolver):
        resolved = resolver.resolve("User | string[]")

        assert isinstance(resolved.members[0], ObjectType)
        assert resolved.members[1] == ArrayType(PrimitiveType("string"))

    def test_literal_types(self, resolver):
        resolved = resolver.resolve("'admin' | 'user' | 42")
        assert [m.name for m in resolved.members] == ["string", "string", "number"]

    def test_function_type(self, resolver):
        assert resolver.resolve("(id: string) => User") == PrimitiveType("Function")

    def test_inline_object(self, resolver):
        resolved = resolver.resolve("{ owner: User; note?: string }", "models.ts")

        assert isinstance(resolved, ObjectType)
        assert resolved.name == INLINE_OBJECT_NAME
        assert resolved.get_property("owner").type.name == "User"
        assert resolved.get_property("note").optional is True

    def test_unknown_fallback(self, resolver):
        assert resolver.resolve("Frobnicator", "models.ts") == UnknownType("Frobnicator")

    def test_malformed_text_is_unknown(self, resolver):
        """Unparseable text is looked up as a plain name"""
        assert resolver.resolve("A & B") == UnknownType("A & B")
        assert resolver.resolve("Map<string, X>&") == UnknownType("Map<string, X>&")

    def test_empty_text(self, resolver):
        assert resolver.resolve("") == UnknownType("")
        assert resolver.resolve(None) == UnknownType("")

    def test_resolver_without_index(self):
        resolver = TypeResolver()
        assert resolver.resolve("User") == UnknownType("User")
        assert resolver.resolve("number[]") == ArrayType(PrimitiveType("number"))


# ============================================================================
# TEST: Declarations
# ============================================================================


class TestDeclarations:
    """Tests for declaration lookup and resolution"""

    def test_end_to_end_user(self, resolver):
        user = resolver.resolve("User")

        assert isinstance(user, ObjectType)
        assert user.object_kind == ObjectKind.INTERFACE
        assert user.origin_unit == "models.ts"
        assert [(p.name, p.type, p.optional) for p in user.properties] == [
            ("id", PrimitiveType("string"), False),
            ("name", PrimitiveType("string"), False),
            ("age", PrimitiveType("number"), True),
        ]

    def test_property_metadata_carried(self):
        declaration = Declaration(
            name="Settings",
            kind=DeclarationKind.CLASS,
            properties=[
                prop("theme", "string", description="UI theme", default_value="'dark'"),
                prop("legacy"),
                prop("nickname", "string", annotations=[Annotation("IsOptional")]),
            ],
        )
        resolver = TypeResolver(SourceIndex([SourceUnit("settings.ts", [declaration])]))
        settings = resolver.resolve("Settings")

        assert settings.object_kind == ObjectKind.CLASS
        theme = settings.get_property("theme")
        assert theme.description == "UI theme"
        assert theme.default_value == "'dark'"
        assert settings.get_property("legacy").type == PrimitiveType("any")
        nickname = settings.get_property("nickname")
        assert nickname.optional is True
        assert nickname.validation_rules[0].rule == "IsOptional"

    def test_enum_contract(self):
        color = Declaration(
            name="Color",
            kind=DeclarationKind.ENUM,
            members=[EnumMember("RED", 0), EnumMember("GREEN", 1)],
        )
        resolver = TypeResolver(SourceIndex([SourceUnit("color.ts", [color])]))
        resolved = resolver.resolve("Color")

        assert isinstance(resolved, EnumType)
        assert [p.name for p in resolved.properties] == ["RED", "GREEN"]
        assert [p.default_value for p in resolved.properties] == [0, 1]
        for member in resolved.properties:
            assert member.type == UnionType([PrimitiveType("string"), PrimitiveType("number")])

    def test_is_enum_argument_resolved_to_values(self):
        """@IsEnum(Role) on a string property constrains it to Role's values"""
        role = Declaration(
            name="Role",
            kind=DeclarationKind.ENUM,
            members=[EnumMember("ADMIN", "admin"), EnumMember("USER", "user")],
        )
        dto = Declaration(
            name="UpdateRoleDto",
            kind=DeclarationKind.CLASS,
            properties=[
                prop("role", "string", annotations=[Annotation("IsEnum", ["Role"])]),
                prop("level", "number", annotations=[Annotation("IsEnum", ["Missing"])]),
            ],
        )
        index = SourceIndex([SourceUnit("role.enum.ts", [role]), SourceUnit("update-role.dto.ts", [dto])])
        resolved = TypeResolver(index).resolve("UpdateRoleDto")

        assert resolved.get_property("role").validation_rules[0].value == ["admin", "user"]
        assert resolved.get_property("level").validation_rules[0].value == "Missing"

        schema = SchemaGenerator().generate_schema(resolved)
        assert schema["properties"]["role"] == {"type": "string", "enum": ["admin", "user"]}
        assert schema["properties"]["level"] == {"type": "number"}

    def test_alias_resolves_aliased_text(self, user_index):
        user_index.units[0].declarations.append(
            Declaration(name="Users", kind=DeclarationKind.ALIAS, aliased_type="User[]")
        )
        resolver = TypeResolver(user_index)

        resolved = resolver.resolve("Users")
        assert isinstance(resolved, ArrayType)
        assert resolved.element.name == "User"

    def test_scope_shadows_global(self):
        """The scope unit is searched before the rest of the index"""
        first = interface("Status", prop("code", "number"))
        local = interface("Status", prop("label", "string"))
        index = SourceIndex([
            SourceUnit("a.ts", [first]),
            SourceUnit("b.ts", [local]),
        ])
        resolver = TypeResolver(index)

        assert resolver.resolve("Status").properties[0].name == "code"
        assert resolver.resolve("Status", "b.ts").properties[0].name == "label"
        assert resolver.resolve("Status", "missing.ts").origin_unit == "a.ts"

    def test_kind_search_order(self):
        """Interfaces win over classes and enums of the same name"""
        unit = SourceUnit("mixed.ts", [
            Declaration(name="Thing", kind=DeclarationKind.ENUM, members=[EnumMember("A", 0)]),
            Declaration(name="Thing", kind=DeclarationKind.CLASS),
            interface("Thing", prop("x", "string")),
        ])
        resolver = TypeResolver(SourceIndex([unit]))
        resolved = resolver.resolve("Thing")

        assert isinstance(resolved, ObjectType)
        assert resolved.object_kind == ObjectKind.INTERFACE

    def test_namespace_qualified_name(self, resolver):
        assert resolver.resolve("Models.User").name == "User"

    def test_property_types_resolved_in_declaring_scope(self):
        """Properties of a global match resolve against its own unit"""
        order = interface("Order", prop("status", "Status"))
        own = Declaration(name="Status", kind=DeclarationKind.ENUM, members=[EnumMember("OPEN", "open")])
        other = interface("Status", prop("unrelated", "string"))
        index = SourceIndex([
            SourceUnit("other.ts", [other]),
            SourceUnit("order.ts", [order, own]),
        ])
        resolved = TypeResolver(index).resolve("Order", "controller.ts")

        assert isinstance(resolved.get_property("status").type, EnumType)


# ============================================================================
# TEST: Cache
# ============================================================================


class TestCache:
    """Tests for memoization"""

    def test_idempotent(self, resolver):
        first = resolver.resolve("User")
        second = resolver.resolve("User")

        assert first == second
        assert second is first

    def test_cache_stats(self, resolver):
        resolver.resolve("User")
        stats = resolver.cache_stats()

        assert "User:global" in stats["keys"]
        assert "string:models.ts" in stats["keys"]
        assert stats["size"] == len(stats["keys"])

    def test_cache_keyed_by_cleaned_text(self, resolver):
        resolver.resolve("Promise<User>")
        resolver.resolve("Promise< Order >")
        assert resolver.cache_stats()["keys"].count("Promise:global") == 1

    def test_clear_cache(self, resolver):
        resolver.resolve("User")
        resolver.clear_cache()

        assert resolver.cache_stats() == {"size": 0, "keys": []}

    def test_separate_resolvers_do_not_share(self, user_index):
        TypeResolver(user_index).resolve("User")
        assert TypeResolver(user_index).cache_stats()["size"] == 0


# ============================================================================
# TEST: Cycles
# ============================================================================


class TestCycles:
    """Tests for self- and mutually-referential declarations"""

    @pytest.fixture
    def tree_index(self):
        node = interface(
            "TreeNode",
            prop("value", "string"),
            prop("parent", "TreeNode", optional=True),
            prop("children", "TreeNode[]"),
        )
        return SourceIndex([SourceUnit("tree.ts", [node])])

    @pytest.fixture
    def mutual_index(self):
        author = interface("Author", prop("books", "Book[]"))
        book = interface("Book", prop("author", "Author"))
        return SourceIndex([SourceUnit("library.ts", [author, book])])

    def test_self_reference_terminates(self, tree_index):
        resolved = TypeResolver(tree_index).resolve("TreeNode")

        assert isinstance(resolved, ObjectType)
        assert resolved.get_property("parent").type == ReferenceType("TreeNode", "tree.ts")
        assert resolved.get_property("children").type == ArrayType(ReferenceType("TreeNode", "tree.ts"))

    def test_placeholder_results_not_cached(self, tree_index):
        resolver = TypeResolver(tree_index)
        resolver.resolve("TreeNode")
        keys = resolver.cache_stats()["keys"]

        assert "TreeNode:global" in keys
        assert "TreeNode:tree.ts" not in keys
        assert "TreeNode[]:tree.ts" not in keys

    def test_mutual_reference_terminates(self, mutual_index):
        author = TypeResolver(mutual_index).resolve("Author")
        book = author.get_property("books").type.element

        assert book.name == "Book"
        assert book.get_property("author").type == ReferenceType("Author", "library.ts")

    def test_only_cycle_entry_is_cached(self, mutual_index):
        """Frames inside an open cycle are not memoized"""
        resolver = TypeResolver(mutual_index)
        author = resolver.resolve("Author", "library.ts")
        keys = resolver.cache_stats()["keys"]

        assert "Author:library.ts" in keys
        assert "Book:library.ts" not in keys
        assert "Book[]:library.ts" not in keys

        book = resolver.resolve("Book", "library.ts")
        assert book.get_property("author").type is author
        assert "Book:library.ts" in resolver.cache_stats()["keys"]

    @staticmethod
    def entity_graph(count, links):
        """E{i} holds E{(i+j) % count}[] for j in 1..links: every entity reaches every other"""
        entities = [
            interface(
                f"E{i}",
                prop("id", "string"),
                *[prop(f"rel{j}", f"E{(i + j) % count}[]") for j in range(1, links + 1)],
            )
            for i in range(count)
        ]
        return SourceIndex([SourceUnit("entities.ts", entities)])

    @staticmethod
    def expanded_objects(resolved, found=None):
        found = [] if found is None else found
        if isinstance(resolved, ObjectType):
            found.append(resolved.name)
            for p in resolved.properties:
                TestCycles.expanded_objects(p.type, found)
        elif isinstance(resolved, ArrayType):
            TestCycles.expanded_objects(resolved.element, found)
        return found

    def test_connected_graph_expands_each_entity_once(self):
        """14 entities linked both ways resolve to one inline copy of each"""
        resolver = TypeResolver(self.entity_graph(14, 4))

        resolved = resolver.resolve("E0", "entities.ts")
        names = self.expanded_objects(resolved)

        assert sorted(names) == sorted(f"E{i}" for i in range(14))

    def test_connected_graph_schema_is_bounded(self):
        index = self.entity_graph(14, 4)
        resolver = TypeResolver(index)
        generator = SchemaGenerator()

        for i in range(14):
            schema = generator.generate_schema(resolver.resolve(f"E{i}", "entities.ts"))
            size = len(json.dumps(schema))
            # 14 inline objects, 4 relations each
            assert size < 20000
            assert json.dumps(schema).count('"$ref"') <= 14 * 4

    def test_shared_declaration_inlined_everywhere(self):
        """Non-cyclic reuse keeps full copies"""
        address = interface("Address", prop("city", "string"))
        order = interface("Order", prop("billing", "Address"), prop("shipping", "Address[]"))
        index = SourceIndex([SourceUnit("order.ts", [order]), SourceUnit("address.ts", [address])])

        resolved = TypeResolver(index).resolve("Order", "order.ts")

        assert resolved.get_property("billing").type.name == "Address"
        assert resolved.get_property("shipping").type.element.name == "Address"
        assert isinstance(resolved.get_property("shipping").type.element, ObjectType)

    def test_fresh_resolution_from_other_entry(self, mutual_index):
        book = TypeResolver(mutual_index).resolve("Book", "library.ts")
        author = book.get_property("author").type

        assert isinstance(author, ObjectType)
        assert author.get_property("books").type.element == ReferenceType("Book", "library.ts")
