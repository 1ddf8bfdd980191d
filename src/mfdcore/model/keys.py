"""
Construct keys: the `(kind, name)` identity every stage addresses constructs by.
"""

from enum import Enum
from typing import Iterator, NamedTuple, Optional

from mfdcore import ast


class ConstructKind(str, Enum):
    ELEMENT = "element"
    ENTITY = "entity"
    ENUM = "enum"
    FLOW = "flow"
    STATE = "state"
    EVENT = "event"
    SIGNAL = "signal"
    API = "api"
    RULE = "rule"
    SCREEN = "screen"
    JOURNEY = "journey"
    OPERATION = "operation"
    ACTION = "action"
    COMPONENT = "component"
    SYSTEM = "system"
    DEP = "dep"
    SECRET = "secret"
    NODE = "node"

    def __str__(self) -> str:
        return self.value


class ConstructKey(NamedTuple):
    kind: ConstructKind
    name: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.name}"


# Declaration class -> construct kind
DECL_KINDS = {
    ast.ElementDecl: ConstructKind.ELEMENT,
    ast.EntityDecl: ConstructKind.ENTITY,
    ast.EnumDecl: ConstructKind.ENUM,
    ast.FlowDecl: ConstructKind.FLOW,
    ast.StateDecl: ConstructKind.STATE,
    ast.EventDecl: ConstructKind.EVENT,
    ast.SignalDecl: ConstructKind.SIGNAL,
    ast.ApiDecl: ConstructKind.API,
    ast.RuleDecl: ConstructKind.RULE,
    ast.ScreenDecl: ConstructKind.SCREEN,
    ast.JourneyDecl: ConstructKind.JOURNEY,
    ast.OperationDecl: ConstructKind.OPERATION,
    ast.ActionDecl: ConstructKind.ACTION,
    ast.ComponentDecl: ConstructKind.COMPONENT,
    ast.SystemDecl: ConstructKind.SYSTEM,
    ast.DepDecl: ConstructKind.DEP,
    ast.SecretDecl: ConstructKind.SECRET,
    ast.NodeDecl: ConstructKind.NODE,
}


def kind_of(node) -> Optional[ConstructKind]:
    """Construct kind of a declaration node, None for anything else."""
    return DECL_KINDS.get(type(node))


def api_key_name(api: ast.ApiDecl) -> str:
    """
    Key name for an API declaration.

    APIs are usually anonymous (`api REST @prefix(/auth)`: REST is the style,
    not a name), so the name falls back to the style and the @prefix value is
    appended: "REST:/auth", or just "REST" without a prefix.
    """
    label = api.name or api.style or "api"
    prefix = ast.decorator_value(api, "prefix")
    return f"{label}:{prefix}" if prefix else label


def api_key(api: ast.ApiDecl) -> ConstructKey:
    return ConstructKey(ConstructKind.API, api_key_name(api))


def construct_key(node) -> Optional[ConstructKey]:
    """Key for any declaration node; None for non-declarations."""
    kind = kind_of(node)
    if kind is None:
        return None
    if kind is ConstructKind.API:
        return api_key(node)
    if kind is ConstructKind.DEP:
        return ConstructKey(kind, node.target)
    return ConstructKey(kind, node.name)


def key(kind: ConstructKind, name: str) -> ConstructKey:
    return ConstructKey(ConstructKind(kind), name)


def iter_construct_keys(model) -> Iterator[ConstructKey]:
    """
    Every ownable construct key of a collected model, in a fixed kind order.

    Systems are containers of components and are not owned by one.
    """
    for kind in OWNABLE_KINDS:
        for node in model.of_kind(kind):
            yield construct_key(node)


OWNABLE_KINDS = (
    ConstructKind.ELEMENT,
    ConstructKind.ENTITY,
    ConstructKind.ENUM,
    ConstructKind.FLOW,
    ConstructKind.STATE,
    ConstructKind.EVENT,
    ConstructKind.SIGNAL,
    ConstructKind.API,
    ConstructKind.RULE,
    ConstructKind.SCREEN,
    ConstructKind.JOURNEY,
    ConstructKind.OPERATION,
    ConstructKind.ACTION,
    ConstructKind.COMPONENT,
    ConstructKind.DEP,
    ConstructKind.SECRET,
    ConstructKind.NODE,
)
