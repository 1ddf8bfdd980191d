"""Type-expression helpers."""

from typing import Iterable, List, Optional

from mfdcore import ast

PRIMITIVE_TYPES = ("string", "number", "boolean", "date", "datetime", "uuid", "void")


def extract_type_refs(expr: Optional[ast.Node]) -> List[str]:
    """
    Names referenced by a type expression.

    Optional and array wrap one inner type, unions expand to every
    alternative. Primitives and inline objects reference nothing.
    """
    if expr is None:
        return []
    if isinstance(expr, ast.ReferenceType):
        return [expr.name]
    if isinstance(expr, (ast.OptionalType, ast.ArrayType)):
        return extract_type_refs(expr.inner)
    if isinstance(expr, ast.UnionType):
        refs: List[str] = []
        for alt in expr.alternatives:
            refs.extend(extract_type_refs(alt))
        return refs
    return []


def refs_of_all(exprs: Iterable[Optional[ast.Node]]) -> List[str]:
    refs: List[str] = []
    for expr in exprs:
        refs.extend(extract_type_refs(expr))
    return refs
