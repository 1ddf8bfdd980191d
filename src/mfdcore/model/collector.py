"""
Model collector.

Flattens a (resolved) document into ordered per-kind sequences. Only System
and Component bodies are descended into; every other declaration is appended
to the sequence of its kind in source order.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from mfdcore import ast
from mfdcore.logging_config import logger
from .keys import ConstructKind
from .types import PRIMITIVE_TYPES

# Node classes that carry no construct and are skipped on purpose
_SKIPPED = (ast.SemanticComment, ast.IncludeDecl, ast.ErrorNode)

# Declaration class -> CollectedModel field
_BUCKETS = {
    ast.SystemDecl: "systems",
    ast.ComponentDecl: "components",
    ast.ElementDecl: "elements",
    ast.EntityDecl: "entities",
    ast.EnumDecl: "enums",
    ast.FlowDecl: "flows",
    ast.StateDecl: "states",
    ast.EventDecl: "events",
    ast.SignalDecl: "signals",
    ast.ApiDecl: "apis",
    ast.RuleDecl: "rules",
    ast.DepDecl: "deps",
    ast.SecretDecl: "secrets",
    ast.ScreenDecl: "screens",
    ast.JourneyDecl: "journeys",
    ast.OperationDecl: "operations",
    ast.ActionDecl: "actions",
    ast.NodeDecl: "nodes",
}

_KIND_FIELDS = {
    ConstructKind.SYSTEM: "systems",
    ConstructKind.COMPONENT: "components",
    ConstructKind.ELEMENT: "elements",
    ConstructKind.ENTITY: "entities",
    ConstructKind.ENUM: "enums",
    ConstructKind.FLOW: "flows",
    ConstructKind.STATE: "states",
    ConstructKind.EVENT: "events",
    ConstructKind.SIGNAL: "signals",
    ConstructKind.API: "apis",
    ConstructKind.RULE: "rules",
    ConstructKind.DEP: "deps",
    ConstructKind.SECRET: "secrets",
    ConstructKind.SCREEN: "screens",
    ConstructKind.JOURNEY: "journeys",
    ConstructKind.OPERATION: "operations",
    ConstructKind.ACTION: "actions",
    ConstructKind.NODE: "nodes",
}


@dataclass(frozen=True)
class CollectedModel:
    """All constructs of a document, one ordered tuple per kind."""
    systems: Tuple[ast.SystemDecl, ...] = ()
    components: Tuple[ast.ComponentDecl, ...] = ()
    elements: Tuple[ast.ElementDecl, ...] = ()
    entities: Tuple[ast.EntityDecl, ...] = ()
    enums: Tuple[ast.EnumDecl, ...] = ()
    flows: Tuple[ast.FlowDecl, ...] = ()
    states: Tuple[ast.StateDecl, ...] = ()
    events: Tuple[ast.EventDecl, ...] = ()
    signals: Tuple[ast.SignalDecl, ...] = ()
    apis: Tuple[ast.ApiDecl, ...] = ()
    rules: Tuple[ast.RuleDecl, ...] = ()
    deps: Tuple[ast.DepDecl, ...] = ()
    secrets: Tuple[ast.SecretDecl, ...] = ()
    screens: Tuple[ast.ScreenDecl, ...] = ()
    journeys: Tuple[ast.JourneyDecl, ...] = ()
    operations: Tuple[ast.OperationDecl, ...] = ()
    actions: Tuple[ast.ActionDecl, ...] = ()
    nodes: Tuple[ast.NodeDecl, ...] = ()
    # Nodes the traversal did not recognize (never silently dropped)
    unhandled: Tuple[ast.Node, ...] = field(default=())

    def of_kind(self, kind: ConstructKind) -> Tuple[ast.Node, ...]:
        return getattr(self, _KIND_FIELDS[ConstructKind(kind)])

    def stats(self) -> Dict[str, int]:
        """Per-kind construct counts."""
        return {kind.value: len(self.of_kind(kind)) for kind in _KIND_FIELDS}


def collect_model(document: ast.Document) -> CollectedModel:
    """
    Collect all constructs from a document recursively.

    Args:
        document: Root document, normally the resolver's merged output

    Returns:
        CollectedModel with every declaration bucketed by kind
    """
    buckets: Dict[str, List[ast.Node]] = {name: [] for name in set(_BUCKETS.values())}
    unhandled: List[ast.Node] = []

    def visit(items) -> None:
        for item in items:
            bucket = _BUCKETS.get(type(item))
            if bucket is not None:
                buckets[bucket].append(item)
                if isinstance(item, (ast.SystemDecl, ast.ComponentDecl)):
                    visit(item.body)
            elif isinstance(item, ast.IncludeDecl):
                logger.debug(f"Unresolved include '{item.path}' left in document, skipping")
            elif isinstance(item, _SKIPPED):
                continue
            else:
                logger.warning(f"Unhandled node kind in model collection: {type(item).__name__}")
                unhandled.append(item)

    visit(document.body)

    model = CollectedModel(
        **{name: tuple(items) for name, items in buckets.items()},
        unhandled=tuple(unhandled),
    )
    logger.debug(f"Collected model: {model.stats()}")
    return model


def known_types(model: CollectedModel) -> Set[str]:
    """
    All type names usable in a type expression.

    Events are included because STREAM endpoints return event payloads.
    """
    names = set(PRIMITIVE_TYPES)
    for decl in model.entities + model.enums + model.events:
        names.add(decl.name)
    return names


def known_names(model: CollectedModel) -> Set[str]:
    """All identifiers usable as a cross-reference target."""
    names: Set[str] = set()
    for seq in (
        model.elements,
        model.entities,
        model.enums,
        model.flows,
        model.events,
        model.signals,
        model.components,
        model.screens,
        model.journeys,
        model.operations,
        model.actions,
    ):
        names.update(decl.name for decl in seq)
    return names
