"""
Parser boundary: the Parser protocol, a JSON AST parser and ErrorNode helpers.
"""

from .base import Parser, collect_error_nodes, strip_error_nodes
from .json_ast import JsonAstParser, parse_json_ast

__all__ = [
    "Parser",
    "collect_error_nodes",
    "strip_error_nodes",
    "JsonAstParser",
    "parse_json_ast",
]
