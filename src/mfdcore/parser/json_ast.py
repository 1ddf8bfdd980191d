"""
Parser for the JSON AST interchange format.

The upstream grammar can dump a parsed file as JSON (`parse --json`); this
parser loads such a dump back into the typed AST so pre-parsed models can be
fed through the resolver.
"""

import json

from pydantic import ValidationError

from mfdcore import ast
from mfdcore.exceptions import ParseError
from mfdcore.logging_config import logger


class JsonAstParser:
    """Parser implementation reading JSON-serialized documents."""

    def parse(self, source: str, path: str) -> ast.Document:
        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            raise ParseError(path, e.msg, (e.lineno, e.colno)) from e

        try:
            document = ast.Document.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            where = ".".join(str(part) for part in first["loc"])
            raise ParseError(path, f"Unexpected node at {where}: {first['msg']}", (1, 1)) from e

        logger.debug(f"Loaded JSON AST from {path} ({len(document.body)} top-level items)")
        return document


def parse_json_ast(source: str, path: str = "<input>") -> ast.Document:
    return JsonAstParser().parse(source, path)
