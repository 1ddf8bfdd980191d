from typing import List, Protocol

from mfdcore import ast


class Parser(Protocol):
    """
    Anything that turns MFD source text into a Document.

    Implementations raise mfdcore.exceptions.ParseError on malformed input.
    """

    def parse(self, source: str, path: str) -> ast.Document:
        ...


def _error_nodes(items, out: List[ast.ErrorNode]) -> None:
    for item in items:
        if isinstance(item, ast.ErrorNode):
            out.append(item)
        elif isinstance(item, (ast.SystemDecl, ast.ComponentDecl)):
            _error_nodes(item.body, out)


def collect_error_nodes(document: ast.Document) -> List[ast.ErrorNode]:
    """All ErrorNode instances a recovering parser left in the tree."""
    found: List[ast.ErrorNode] = []
    _error_nodes(document.body, found)
    return found


def _strip(items):
    kept = []
    for item in items:
        if isinstance(item, ast.ErrorNode):
            continue
        if isinstance(item, (ast.SystemDecl, ast.ComponentDecl)):
            item = item.model_copy(update={"body": _strip(item.body)})
        kept.append(item)
    return kept


def strip_error_nodes(document: ast.Document) -> ast.Document:
    """Copy of the document with all ErrorNodes removed."""
    return document.model_copy(update={"body": _strip(document.body)})
