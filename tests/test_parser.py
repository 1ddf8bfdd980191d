"""
Tests for the JSON AST parser and parse errors.
"""

import pytest

from mfdcore import ast
from mfdcore.exceptions import ParseError, classify_parse_error
from mfdcore.parser import JsonAstParser, collect_error_nodes, parse_json_ast, strip_error_nodes

pytestmark = pytest.mark.fast


class TestJsonAstParser:
    def test_camel_case_keys(self):
        doc = parse_json_ast(
            '{"type": "MfdDocument", "body": [{"type": "StateDecl", "name": "S", "enumRef": "E",'
            ' "transitions": [{"type": "StateTransition", "from": "A", "to": "B", "event": "Go"}]}]}'
        )

        state = doc.body[0]
        assert isinstance(state, ast.StateDecl)
        assert state.enum_ref == "E"
        assert state.transitions[0].from_ == "A"

    def test_nested_type_expressions(self):
        doc = parse_json_ast(
            '{"type": "MfdDocument", "body": [{"type": "EntityDecl", "name": "X", "fields": [{"type": "FieldDecl",'
            ' "name": "tags", "fieldType": {"type": "OptionalType", "inner": {"type": "ArrayType",'
            ' "inner": {"type": "ReferenceType", "name": "Tag"}}}}]}]}'
        )

        field_type = doc.body[0].fields[0].field_type
        assert isinstance(field_type, ast.OptionalType)
        assert isinstance(field_type.inner.inner, ast.ReferenceType)

    def test_invalid_json(self):
        with pytest.raises(ParseError) as exc_info:
            JsonAstParser().parse('{"type": "MfdDocument",\n  "body": [', "broken.mfd")

        error = exc_info.value
        assert error.file_path == "broken.mfd"
        assert error.line == 2
        assert "broken.mfd:2:" in str(error)

    def test_unknown_node_type(self):
        with pytest.raises(ParseError) as exc_info:
            parse_json_ast('{"type": "MfdDocument", "body": [{"type": "Wat"}]}', "odd.mfd")

        assert exc_info.value.location == (1, 1)


class TestErrorNodes:
    def test_collect_and_strip(self):
        doc = ast.Document(
            body=[
                ast.ErrorNode(raw="???"),
                ast.ComponentDecl(name="C", body=[ast.ErrorNode(raw="!!!"), ast.EntityDecl(name="E")]),
            ]
        )

        assert [n.raw for n in collect_error_nodes(doc)] == ["???", "!!!"]
        stripped = strip_error_nodes(doc)
        assert collect_error_nodes(stripped) == []
        assert [type(n).__name__ for n in stripped.body[0].body] == ["EntityDecl"]


class TestParseErrorCodes:
    @pytest.mark.parametrize(
        "message,code",
        [
            ("Unexpected end of input", "E011"),
            ('Expected "}" but found EOF', "E003"),
            ("Unexpected token '->'", "E002"),
            ("Invalid decorator arguments", "E006"),
            ("Something odd", "E001"),
        ],
    )
    def test_classification(self, message, code):
        assert classify_parse_error(message) == code

    def test_error_carries_code(self):
        assert ParseError("x.mfd", "Unexpected token").code == "E002"
