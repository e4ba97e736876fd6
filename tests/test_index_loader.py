"""Unit tests for loading, dumping and building Source Unit Indexes"""

import json

import pytest

from autodoc.errors import AutoDocError, SourceIndexError
from autodoc.source.index_loader import build_index, dump_index, load_index
from autodoc.source.models import (
    Annotation,
    Declaration,
    DeclarationKind,
    EnumMember,
    MethodDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    SourceIndex,
    SourceUnit,
)

from conftest import USERS_DTO


class TestLoadIndex:
    """Tests for load_index and dump_index"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceIndexError) as exc_info:
            load_index(str(tmp_path / "missing.json"))
        assert exc_info.value.reason == "file not found"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "index.json"
        path.write_text("{not json")

        with pytest.raises(AutoDocError):
            load_index(str(path))

    @pytest.mark.parametrize("content", ['[]', '{"files": []}', '{"units": {}}'])
    def test_units_list_required(self, tmp_path, content):
        path = tmp_path / "index.json"
        path.write_text(content)

        with pytest.raises(SourceIndexError, match="units"):
            load_index(str(path))

    def test_malformed_declaration(self, tmp_path):
        path = tmp_path / "index.json"
        path.write_text(json.dumps({"units": [{"id": "a.ts", "declarations": [{"name": "A", "kind": "struct"}]}]}))

        with pytest.raises(SourceIndexError, match="malformed declaration"):
            load_index(str(path))

    def test_dump_then_load(self, tmp_path):
        """A dumped index loads back unchanged"""
        controller = Declaration(
            name="UsersController",
            kind=DeclarationKind.CLASS,
            annotations=[Annotation("Controller", ["'users'"])],
            methods=[MethodDeclaration(
                name="findOne",
                parameters=[ParameterDeclaration("id", "string", annotations=[Annotation("Param", ["'id'"])])],
                return_type="Promise<User>",
                annotations=[Annotation("Get", ["':id'"])],
            )],
        )
        index = SourceIndex([
            SourceUnit("users.controller.ts", [controller]),
            SourceUnit("users.dto.ts", [
                Declaration("Role", DeclarationKind.ENUM, members=[EnumMember("Admin", "admin")]),
                Declaration("User", DeclarationKind.INTERFACE, description="A user", properties=[
                    PropertyDeclaration("age", "number", optional=True, default_value="0"),
                ]),
                Declaration("Id", DeclarationKind.ALIAS, aliased_type="string"),
            ]),
        ])
        path = tmp_path / "nested" / "index.json"

        dump_index(index, str(path))

        assert load_index(str(path)) == index

    def test_minimal_unit(self, tmp_path):
        """Only ids are required; declarations default to empty"""
        path = tmp_path / "index.json"
        path.write_text('{"units": [{"id": "empty.ts"}]}')

        index = load_index(str(path))

        assert len(index) == 1
        assert index.get_unit("empty.ts").declarations == []


class TestBuildIndex:
    """Tests for build_index"""

    def test_missing_path(self, tmp_path):
        with pytest.raises(SourceIndexError, match="does not exist"):
            build_index(str(tmp_path / "nope"))

    def test_single_ts_file(self, tmp_path):
        path = tmp_path / "users.dto.ts"
        path.write_text(USERS_DTO)

        index = build_index(str(path))

        assert [u.id for u in index] == ["users.dto.ts"]
        assert index.get_unit("users.dto.ts").find_declaration("User") is not None

    def test_directory(self, sample_project):
        index = build_index(str(sample_project), exclude_patterns=["*.controller.ts"])
        assert [u.id for u in index] == ["users/users.dto.ts", "users/users.service.ts"]

    def test_json_dump(self, tmp_path, sample_project):
        path = tmp_path / "index.json"
        dump_index(build_index(str(sample_project)), str(path))

        index = build_index(str(path))

        assert len(index) == 3

    def test_unsupported_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(SourceIndexError, match="unsupported|expected"):
            build_index(str(path))
