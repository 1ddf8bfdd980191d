"""
Relationship graph builder.

Walks a collected model together with its ownership map and records every
typed reference between constructs. Each edge is written on both of its
ends, and only when both ends have an owner.
"""

import re
from typing import Dict, List, Optional, Tuple

from mfdcore import ast
from mfdcore.logging_config import logger
from mfdcore.model import (
    CollectedModel,
    ConstructKey,
    ConstructKind,
    api_key,
    construct_key,
    extract_type_refs,
    key,
)
from mfdcore.model.types import refs_of_all
from mfdcore.ownership import OwnershipMap
from .categories import EDGE_SPECS, INHERITABLE_KINDS, EdgeCategory
from .config import GRAPH_CONFIG
from .graph import RelationshipGraph
from .schemas import ConstructRef, EndpointRef, RelationshipRecord


def normalize_path(path: str) -> str:
    """Strip trailing slashes; an empty path is the root."""
    return path.rstrip("/") or "/"


def _first_word(text: str) -> str:
    return re.split(r"[\s(]", text.strip(), maxsplit=1)[0]


class GraphBuilder:
    """
    Builds one RelationshipGraph.

    Records are drafted as plain dicts of lists while edges are added and
    frozen into RelationshipRecord models by build().
    """

    def __init__(self, model: CollectedModel, owners: OwnershipMap):
        self.model = model
        self.owners = owners
        self._drafts: Dict[ConstructKey, dict] = {}
        self._refs: Dict[ConstructKey, ConstructRef] = {}
        self._edge_count = 0

        self.entity_names = [e.name for e in model.entities]
        self.enum_names = {e.name for e in model.enums}
        self.event_names = [e.name for e in model.events]
        self.operation_names = {o.name for o in model.operations}
        # (api key, method, normalized full path) per endpoint
        self._endpoints: List[Tuple[ConstructKey, str, str]] = []
        for api in model.apis:
            prefix = ast.decorator_value(api, "prefix") or ""
            for ep in api.endpoints:
                self._endpoints.append((api_key(api), ep.method, normalize_path(prefix + ep.path)))

    # ------------------------------------------------------------------
    # Record helpers
    # ------------------------------------------------------------------

    def ref(self, construct: ConstructKey) -> Optional[ConstructRef]:
        """Reference for an owned construct, creating its record on first use."""
        if construct in self._refs:
            return self._refs[construct]
        component = self.owners.owner(construct)
        if component is None:
            return None
        ref = ConstructRef(component=component, kind=construct.kind, name=construct.name)
        self._refs[construct] = ref
        self._drafts[construct] = {}
        return ref

    def link(self, category: EdgeCategory, source: ConstructKey, target: ConstructKey) -> bool:
        """
        Add one edge on both ends.

        Returns False when either end is unowned. Duplicates are ignored,
        single-valued forward fields keep the first target.
        """
        source_ref = self.ref(source)
        target_ref = self.ref(target)
        if source_ref is None or target_ref is None:
            return False

        spec = EDGE_SPECS[category]
        source_draft = self._drafts[source]
        if spec.single:
            if source_draft.get(spec.forward) is not None:
                return False
            source_draft[spec.forward] = target_ref
        else:
            forward = source_draft.setdefault(spec.forward, [])
            if target_ref in forward:
                return False
            forward.append(target_ref)

        inverse = self._drafts[target].setdefault(spec.inverse, [])
        if source_ref not in inverse:
            inverse.append(source_ref)
        self._edge_count += 1
        return True

    def annotate(self, construct: ConstructKey, field: str, endpoint: EndpointRef) -> None:
        if self.ref(construct) is None:
            return
        endpoints = self._drafts[construct].setdefault(field, [])
        if endpoint not in endpoints:
            endpoints.append(endpoint)

    def _mentioned_entities(self, text: str) -> List[str]:
        return [name for name in self.entity_names if name in text]

    def _matching_apis(self, method: Optional[str], path: str) -> List[ConstructKey]:
        wanted = normalize_path(path)
        matches: List[ConstructKey] = []
        for api_k, ep_method, ep_path in self._endpoints:
            if ep_path != wanted:
                continue
            if method is not None and ep_method != method:
                continue
            if api_k not in matches:
                matches.append(api_k)
        return matches

    def _endpoint_clause(self, source: ConstructKey, clause, field: str, category: EdgeCategory) -> None:
        owner = self.owners.owner(source)
        if owner is None:
            return
        self.annotate(source, field, EndpointRef(method=clause.method, path=clause.path, component=owner))
        for api_k in self._matching_apis(clause.method, clause.path):
            self.link(category, source, api_k)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _touch_owned(self) -> None:
        for construct in self.owners.universe:
            self.ref(construct)

    def _entity_fields(self) -> None:
        for entity in self.model.entities:
            source = key(ConstructKind.ENTITY, entity.name)
            for fld in entity.fields:
                for ref in extract_type_refs(fld.field_type):
                    kind = ConstructKind.ENUM if ref in self.enum_names else ConstructKind.ENTITY
                    self.link(EdgeCategory.ENTITY_FIELD_REF, source, key(kind, ref))

    def _flows(self) -> None:
        declared_events = set(self.event_names)
        for flow in self.model.flows:
            source = key(ConstructKind.FLOW, flow.name)
            for ref in refs_of_all(list(flow.params) + [flow.return_type]):
                self.link(EdgeCategory.FLOW_ENTITY, source, key(ConstructKind.ENTITY, ref))

            for item in flow.body:
                if isinstance(item, ast.OnClause) and item.event in declared_events:
                    self.link(EdgeCategory.FLOW_ON_EVENT, source, key(ConstructKind.EVENT, item.event))
                elif isinstance(item, ast.EmitsClause) and item.event in declared_events:
                    self.link(EdgeCategory.FLOW_EMITS_EVENT, source, key(ConstructKind.EVENT, item.event))
                elif isinstance(item, (ast.FlowStep, ast.FlowOverrideStep)):
                    text = f"{item.action or ''} {item.args or ''}"
                    for name in self._mentioned_entities(text):
                        self.link(EdgeCategory.FLOW_ENTITY, source, key(ConstructKind.ENTITY, name))
                    for name in self.event_names:
                        if name in text:
                            self.link(EdgeCategory.FLOW_EMITS_EVENT, source, key(ConstructKind.EVENT, name))

    def _apis(self) -> None:
        entity_names = set(self.entity_names)
        for api in self.model.apis:
            source = api_key(api)
            for ep in api.endpoints:
                for ref in refs_of_all([ep.input_expr, ep.output_expr]):
                    if ref in entity_names:
                        self.link(EdgeCategory.API_EXPOSES_ENTITY, source, key(ConstructKind.ENTITY, ref))

    def _states(self) -> None:
        declared_events = set(self.event_names)
        for state in self.model.states:
            source = key(ConstructKind.STATE, state.name)
            if state.enum_ref in self.enum_names:
                self.link(EdgeCategory.STATE_ENUM, source, key(ConstructKind.ENUM, state.enum_ref))
            for transition in state.transitions:
                if transition.event and transition.event in declared_events:
                    self.link(EdgeCategory.STATE_ON_EVENT, source, key(ConstructKind.EVENT, transition.event))
            for entity in self.model.entities:
                if any(state.enum_ref in extract_type_refs(f.field_type) for f in entity.fields):
                    self.link(EdgeCategory.ENTITY_STATE, key(ConstructKind.ENTITY, entity.name), source)

    def _actions(self) -> None:
        end = GRAPH_CONFIG["screen_sentinels"][0]
        for action in self.model.actions:
            source = key(ConstructKind.ACTION, action.name)
            for item in action.body:
                if isinstance(item, ast.ActionFromClause):
                    self.link(EdgeCategory.ACTION_FROM_SCREEN, source, key(ConstructKind.SCREEN, item.screen))
                elif isinstance(item, ast.ActionOnStreamClause):
                    for api_k in self._matching_apis("STREAM", item.path):
                        self.link(EdgeCategory.ACTION_STREAM_API, source, api_k)
                elif isinstance(item, ast.ActionOnSignalClause):
                    self.link(EdgeCategory.ACTION_ON_SIGNAL, source, key(ConstructKind.SIGNAL, item.signal))
                elif isinstance(item, ast.ActionEmitsSignalClause):
                    self.link(EdgeCategory.ACTION_EMITS_SIGNAL, source, key(ConstructKind.SIGNAL, item.signal))
                elif isinstance(item, ast.ActionResult) and item.screen != end:
                    self.ref(key(ConstructKind.SCREEN, item.screen))

    def _rules(self) -> None:
        reserved = GRAPH_CONFIG["rule_reserved_actions"]
        for rule in self.model.rules:
            source = key(ConstructKind.RULE, rule.name)
            for clause in rule.body:
                if isinstance(clause, ast.SemanticComment):
                    continue
                text = " ".join(
                    getattr(clause, attr) for attr in ("expression", "condition", "action")
                    if getattr(clause, attr, None)
                )
                for name in self._mentioned_entities(text):
                    self.link(EdgeCategory.RULE_ENTITY, source, key(ConstructKind.ENTITY, name))

                if isinstance(clause, (ast.ThenClause, ast.ElseIfClause, ast.ElseClause)) and "(" in clause.action:
                    word = _first_word(clause.action)
                    if word and word not in reserved and word in self.operation_names:
                        self.link(EdgeCategory.RULE_TRIGGERS_OPERATION, source, key(ConstructKind.OPERATION, word))

    def _operations(self) -> None:
        for op in self.model.operations:
            source = key(ConstructKind.OPERATION, op.name)
            for item in op.body:
                if isinstance(item, ast.EmitsClause):
                    self.link(EdgeCategory.OPERATION_EMITS_EVENT, source, key(ConstructKind.EVENT, item.event))
                elif isinstance(item, ast.OnClause):
                    self.link(EdgeCategory.OPERATION_ON_EVENT, source, key(ConstructKind.EVENT, item.event))
                elif isinstance(item, ast.EnforcesClause):
                    self.link(EdgeCategory.OPERATION_ENFORCES_RULE, source, key(ConstructKind.RULE, item.rule))
                elif isinstance(item, ast.OperationHandlesClause):
                    self._endpoint_clause(source, item, "handles_endpoints", EdgeCategory.HANDLES_API)
                elif isinstance(item, ast.OperationCallsClause):
                    self._endpoint_clause(source, item, "calls_endpoints", EdgeCategory.CALLS_API)

    def _flow_operations(self) -> None:
        reserved = GRAPH_CONFIG["flow_reserved_actions"]
        for flow in self.model.flows:
            source = key(ConstructKind.FLOW, flow.name)
            for item in flow.body:
                if isinstance(item, ast.FlowStep) and item.has_arrow:
                    word = _first_word(item.action)
                    if word and word not in reserved and word in self.operation_names:
                        self.link(EdgeCategory.FLOW_USES_OPERATION, source, key(ConstructKind.OPERATION, word))
                elif isinstance(item, ast.OperationHandlesClause):
                    self._endpoint_clause(source, item, "handles_endpoints", EdgeCategory.HANDLES_API)

    def _screens(self) -> None:
        for screen in self.model.screens:
            source = key(ConstructKind.SCREEN, screen.name)
            for item in screen.body:
                if isinstance(item, ast.UsesDecl):
                    self.link(EdgeCategory.SCREEN_USES_ELEMENT, source, key(ConstructKind.ELEMENT, item.element))

    def _inheritance(self) -> None:
        for kind in INHERITABLE_KINDS:
            decls = self.model.of_kind(kind)
            declared = {d.name for d in decls}
            for decl in decls:
                source = construct_key(decl)
                if decl.extends and decl.extends in declared:
                    self.link(EdgeCategory.EXTENDS, source, key(kind, decl.extends))
                for iface in decl.implements:
                    if iface in declared:
                        self.link(EdgeCategory.IMPLEMENTS, source, key(kind, iface))

    def _journeys(self) -> None:
        sentinels = GRAPH_CONFIG["screen_sentinels"]
        for journey in self.model.journeys:
            for step in journey.body:
                if not isinstance(step, ast.JourneyStep):
                    continue
                for screen in (step.from_, step.to):
                    if screen and screen not in sentinels:
                        self.ref(key(ConstructKind.SCREEN, screen))

    def build(self) -> RelationshipGraph:
        self._touch_owned()
        self._entity_fields()
        self._flows()
        self._apis()
        self._states()
        self._actions()
        self._rules()
        self._operations()
        self._flow_operations()
        self._screens()
        self._inheritance()
        self._journeys()

        records = {
            construct: RelationshipRecord(
                **{name: tuple(value) if isinstance(value, list) else value for name, value in draft.items()}
            )
            for construct, draft in self._drafts.items()
        }
        logger.info(f"Built relationship graph: {len(records)} record(s), {self._edge_count} edge(s)")
        return RelationshipGraph(records, self._refs)


def build_graph(model: CollectedModel, owners: OwnershipMap) -> RelationshipGraph:
    """
    Build the relationship graph of a model.

    Args:
        model: Collected model
        owners: Ownership map for the same model

    Returns:
        RelationshipGraph keyed by construct key. Every owned construct has
        a record; edges exist only between owned constructs.
    """
    if not owners.has_components:
        logger.warning("Model declares no components, relationship graph will be empty")
    return GraphBuilder(model, owners).build()
