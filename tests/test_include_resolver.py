"""
Tests for include resolution.
"""

import pytest

from mfdcore import ast
from mfdcore.resolver import IncludeResolver, ResolveErrorType, resolve_file, resolve_source
from mfdcore.settings import Settings
from mfd_nodes import component, entity, enum, include, system

pytestmark = pytest.mark.fast


def _entity_names(items):
    names = []
    for item in items:
        if isinstance(item, ast.EntityDecl):
            names.append(item.name)
        elif isinstance(item, (ast.SystemDecl, ast.ComponentDecl)):
            names.extend(_entity_names(item.body))
    return names


class TestSplicing:
    """Included content replaces the include directive."""

    def test_include_inside_component(self, write_mfd, json_parser):
        write_mfd("auth/entities.mfd", [entity("User"), entity("Session")])
        root = write_mfd("main.mfd", [component("Auth", include("auth/entities"))])

        result = resolve_file(root, json_parser)

        assert result.ok
        comp = result.document.body[0]
        assert isinstance(comp, ast.ComponentDecl)
        assert [e.name for e in comp.body] == ["User", "Session"]
        assert len(result.files) == 2
        assert result.files[0] == str(root)

    def test_extension_not_doubled(self, write_mfd, json_parser):
        write_mfd("types.mfd", [entity("Money")])
        root = write_mfd("main.mfd", [include("types.mfd")])

        result = resolve_file(root, json_parser)

        assert result.ok
        assert _entity_names(result.document.body) == ["Money"]

    def test_nested_include_is_relative_to_including_file(self, write_mfd, json_parser):
        write_mfd("lib/money.mfd", [entity("Money")])
        write_mfd("lib/index.mfd", [include("money")])
        root = write_mfd("main.mfd", [include("lib/index")])

        result = resolve_file(root, json_parser)

        assert result.ok
        assert _entity_names(result.document.body) == ["Money"]

    def test_document_without_includes_is_unchanged(self, write_mfd, json_parser):
        root = write_mfd("main.mfd", [component("Auth", entity("User"))])

        result = resolve_file(root, json_parser)

        assert result.ok
        assert result.document == json_parser.parse(root.read_text(), str(root))


class TestSystemHoisting:
    """Non-component content included into a system moves before it."""

    def test_shared_types_hoisted_before_system(self, write_mfd, json_parser):
        write_mfd("shared.mfd", [enum("Currency", "USD"), entity("Money")])
        write_mfd("orders.mfd", [component("Orders", entity("Order"))])
        root = write_mfd("main.mfd", [system("Shop", include("shared"), include("orders"))])

        result = resolve_file(root, json_parser)

        assert result.ok
        body = result.document.body
        assert [type(item).__name__ for item in body] == ["EnumDecl", "EntityDecl", "SystemDecl"]
        shop = body[2]
        assert [c.name for c in shop.body] == ["Orders"]

    def test_hoisting_keeps_include_order(self, write_mfd, json_parser):
        write_mfd("a.mfd", [entity("A")])
        write_mfd("b.mfd", [entity("B")])
        root = write_mfd("main.mfd", [system("S", include("a"), component("C"), include("b"))])

        result = resolve_file(root, json_parser)

        assert [e.name for e in result.document.body[:2]] == ["A", "B"]
        assert [c.name for c in result.document.body[2].body] == ["C"]


class TestCircularIncludes:
    def test_two_file_cycle(self, write_mfd, json_parser):
        write_mfd("b.mfd", [include("a"), entity("B")])
        root = write_mfd("a.mfd", [include("b"), entity("A")])

        result = resolve_file(root, json_parser)

        circular = result.errors_of(ResolveErrorType.CIRCULAR_INCLUDE)
        assert len(circular) == 1
        assert len(result.errors) == 1
        assert circular[0].include_chain == ("a.mfd", "b.mfd", "a.mfd")
        assert "a.mfd → b.mfd → a.mfd" in circular[0].message
        assert circular[0].included_from.endswith("b.mfd")
        # Both files still contribute their content once
        assert sorted(_entity_names(result.document.body)) == ["A", "B"]
        assert len(result.files) == 2

    def test_self_include(self, write_mfd, json_parser):
        root = write_mfd("self.mfd", [include("self"), entity("X")])

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.CIRCULAR_INCLUDE]
        assert result.errors[0].include_chain == ("self.mfd", "self.mfd")

    def test_diamond_is_not_circular(self, write_mfd, json_parser):
        write_mfd("d.mfd", [entity("D")])
        write_mfd("b.mfd", [include("d")])
        write_mfd("c.mfd", [include("d")])
        root = write_mfd("a.mfd", [include("b"), include("c")])

        result = resolve_file(root, json_parser)

        assert result.ok
        assert _entity_names(result.document.body) == ["D"]
        assert len(result.files) == 4


class TestDepthLimit:
    def test_chain_beyond_limit_reports_once(self, write_mfd, json_parser):
        for i in range(1, 22):
            body = [entity(f"E{i}")]
            if i < 21:
                body.insert(0, include(f"f{i + 1}"))
            write_mfd(f"f{i}.mfd", body)
        root = write_mfd("root.mfd", [include("f1")])

        result = resolve_file(root, json_parser)

        exceeded = result.errors_of(ResolveErrorType.MAX_DEPTH_EXCEEDED)
        assert len(exceeded) == 1
        assert len(result.errors) == 1
        assert exceeded[0].file.endswith("f21.mfd")
        assert exceeded[0].include_chain[-1] == "f21.mfd"
        assert len(result.files) == 21
        assert "E21" not in _entity_names(result.document.body)
        assert "E20" in _entity_names(result.document.body)

    def test_custom_depth(self, write_mfd, json_parser):
        write_mfd("b.mfd", [entity("B")])
        write_mfd("a.mfd", [include("b")])
        root = write_mfd("main.mfd", [include("a")])

        result = IncludeResolver(json_parser, max_depth=1).resolve_file(root)

        assert [e.type for e in result.errors] == [ResolveErrorType.MAX_DEPTH_EXCEEDED]

    def test_depth_from_settings(self, temp_dir, write_mfd, json_parser):
        (temp_dir / ".mfd").mkdir()
        (temp_dir / ".mfd" / "config.json").write_text('{"resolver": {"max_include_depth": 1}}')
        settings = Settings(project_root=temp_dir, home=temp_dir / "home")
        write_mfd("b.mfd", [entity("B")])
        write_mfd("a.mfd", [include("b")])
        root = write_mfd("main.mfd", [include("a")])

        result = resolve_file(root, json_parser, settings=settings)

        assert [e.type for e in result.errors] == [ResolveErrorType.MAX_DEPTH_EXCEEDED]


class TestRecoverableErrors:
    """Every problem is reported and resolution carries on."""

    def test_missing_include(self, write_mfd, json_parser):
        write_mfd("present.mfd", [entity("Present")])
        root = write_mfd("main.mfd", [include("missing"), include("present")])

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.FILE_NOT_FOUND]
        error = result.errors[0]
        assert error.file.endswith("missing.mfd")
        assert error.included_from == str(root)
        assert _entity_names(result.document.body) == ["Present"]

    def test_parse_error_keeps_location_and_siblings(self, temp_dir, write_mfd, json_parser):
        (temp_dir / "bad.mfd").write_text("{not json")
        write_mfd("good.mfd", [entity("Good")])
        root = write_mfd("main.mfd", [include("bad"), include("good")])

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.PARSE_ERROR]
        error = result.errors[0]
        assert error.file.endswith("bad.mfd")
        assert error.included_from == str(root)
        assert error.location is not None
        assert error.location.line == 1
        assert error.format().startswith(f"{error.file}:1:")
        assert _entity_names(result.document.body) == ["Good"]
        # A file that fails to parse still counts as loaded
        assert len(result.files) == 3

    def test_unknown_node_is_a_parse_error(self, temp_dir, write_mfd, json_parser):
        (temp_dir / "odd.mfd").write_text('{"type": "MfdDocument", "body": [{"type": "Bogus"}]}')
        root = write_mfd("main.mfd", [include("odd")])

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.PARSE_ERROR]

    def test_missing_root(self, temp_dir, json_parser):
        result = resolve_file(temp_dir / "nope.mfd", json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.FILE_NOT_FOUND]
        assert result.document.body == []
        assert result.files == []

    def test_unparsable_root(self, temp_dir, json_parser):
        root = temp_dir / "main.mfd"
        root.write_text("[")

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.PARSE_ERROR]
        assert result.errors[0].included_from is None
        assert result.document.body == []

    def test_path_outside_project(self, temp_dir, write_mfd, json_parser):
        write_mfd("outside.mfd", [entity("Outside")])
        root = write_mfd("project/main.mfd", [include("../outside")])

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.SUSPICIOUS_PATH]
        assert _entity_names(result.document.body) == ["Outside"]

    def test_absolute_path(self, temp_dir, write_mfd, json_parser):
        target = write_mfd("abs.mfd", [entity("Abs")])
        root = write_mfd("main.mfd", [include(str(target))])

        result = resolve_file(root, json_parser)

        assert [e.type for e in result.errors] == [ResolveErrorType.SUSPICIOUS_PATH]
        assert "absolute" in result.errors[0].message
        assert _entity_names(result.document.body) == ["Abs"]

    def test_explicit_project_root_allows_parent_includes(self, temp_dir, write_mfd, json_parser):
        write_mfd("shared.mfd", [entity("Shared")])
        root = write_mfd("app/main.mfd", [include("../shared")])

        result = resolve_file(root, json_parser, project_root=str(temp_dir))

        assert result.ok


class TestDeterminism:
    def test_resolution_is_idempotent(self, write_mfd, json_parser):
        write_mfd("b.mfd", [include("a"), entity("B")])
        write_mfd("c.mfd", [entity("C")])
        root = write_mfd("a.mfd", [system("S", include("b"), include("c"), include("gone"))])

        first = resolve_file(root, json_parser)
        second = resolve_file(root, json_parser)

        assert first.document == second.document
        assert first.errors == second.errors
        assert first.files == second.files

    def test_resolver_instance_is_reusable(self, write_mfd, json_parser):
        write_mfd("b.mfd", [entity("B")])
        root = write_mfd("a.mfd", [include("b")])
        resolver = IncludeResolver(json_parser)

        assert resolver.resolve_file(root).files == resolver.resolve_file(root).files

    def test_resolve_source(self, temp_dir, write_mfd, json_parser):
        import json

        from mfd_nodes import document

        write_mfd("types.mfd", [entity("Money")])
        source = json.dumps(document(include("types")))

        result = resolve_source(source, temp_dir / "buffer.mfd", json_parser)

        assert result.ok
        assert _entity_names(result.document.body) == ["Money"]
