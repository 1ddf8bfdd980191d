"""
The seven ownership passes.

Each pass receives the assignments made by the passes before it as a
read-only mapping and returns the assignments it proposes. The mapper keeps
only proposals for keys that are still unassigned, so earlier passes win.
"""

from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from mfdcore import ast
from mfdcore.logging_config import logger
from mfdcore.model import (
    CollectedModel,
    ConstructKey,
    ConstructKind,
    api_key,
    construct_key,
    extract_type_refs,
    iter_construct_keys,
    key,
)
from mfdcore.model.types import refs_of_all
from .config import OWNERSHIP_CONFIG
from .scoring import ScoreBoard

Assignments = Dict[ConstructKey, str]
Assigned = Mapping[ConstructKey, str]


class OwnershipPass(str, Enum):
    """The seven passes, in execution order."""
    DIRECT_NESTING = "direct_nesting"
    API_NAME_PREFIX = "api_name_prefix"
    TYPE_SCORING = "type_scoring"
    FLOW_SCORING = "flow_scoring"
    ENUM_INHERITANCE = "enum_inheritance"
    KIND_HEURISTICS = "kind_heuristics"
    FALLBACK = "fallback"


class OwnershipContext:
    """
    Inputs shared by the passes of one assign_owners() run.

    Also carries the pass-3 scoring arena, which pass 4 reads.
    """

    def __init__(self, model: CollectedModel):
        self.model = model
        self.component_names: List[str] = [c.name for c in model.components]
        self.entity_names = [e.name for e in model.entities]
        self.enum_order = [e.name for e in model.enums]
        self.enum_names = set(self.enum_order)
        self.type_scores = ScoreBoard()
        # Ownership as it stood when type scoring started
        self.owned_before_scoring: Mapping[ConstructKey, str] = {}

    def owner_of_type(self, assigned: Assigned, name: str) -> Optional[str]:
        """Owner of an entity or enum called name."""
        return assigned.get(key(ConstructKind.ENTITY, name)) or assigned.get(key(ConstructKind.ENUM, name))


def _step_text(step) -> str:
    return f"{step.action or ''} {step.args or ''}"


def _first_owner(assigned: Assigned, keys) -> Optional[str]:
    for candidate in keys:
        owner = assigned.get(candidate)
        if owner:
            return owner
    return None


# ---------------------------------------------------------------------------
# Pass 1
# ---------------------------------------------------------------------------

def direct_nesting(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """Constructs declared inside a component body belong to it."""
    result: Assignments = {}
    for comp in ctx.model.components:
        result.setdefault(key(ConstructKind.COMPONENT, comp.name), comp.name)
        for item in comp.body:
            if isinstance(item, (ast.ComponentDecl, ast.SystemDecl)):
                continue
            item_key = construct_key(item)
            if item_key is not None:
                result.setdefault(item_key, comp.name)
    return result


# ---------------------------------------------------------------------------
# Pass 2
# ---------------------------------------------------------------------------

def api_name_prefix(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """"AuthAPI" goes to component "Auth" (first case-insensitive prefix match)."""
    result: Assignments = {}
    for api in ctx.model.apis:
        api_k = api_key(api)
        if api_k in assigned or not api.name:
            continue
        lowered = api.name.lower()
        for comp_name in ctx.component_names:
            if lowered.startswith(comp_name.lower()):
                result.setdefault(api_k, comp_name)
                break
    return result


# ---------------------------------------------------------------------------
# Pass 3
# ---------------------------------------------------------------------------

def type_scoring(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """
    Entities and enums go to the component whose APIs use them most.

    Every endpoint input/output reference from an owned API scores the API's
    component for the referenced (still unowned) entity or enum.
    """
    weight = OWNERSHIP_CONFIG["api_type_ref_weight"]
    ctx.owned_before_scoring = dict(assigned)
    declared = set(ctx.entity_names) | ctx.enum_names

    for api in ctx.model.apis:
        api_comp = assigned.get(api_key(api))
        if not api_comp:
            continue
        for ep in api.endpoints:
            for ref in refs_of_all((ep.input_expr, ep.output_expr)):
                if ref in declared and not ctx.owner_of_type(assigned, ref):
                    ctx.type_scores.add(ref, api_comp, weight)

    result: Assignments = {}
    for kind, names in ((ConstructKind.ENTITY, ctx.entity_names), (ConstructKind.ENUM, ctx.enum_order)):
        for name in names:
            type_key = key(kind, name)
            if type_key in assigned:
                continue
            best = ctx.type_scores.best(name)
            if best:
                result.setdefault(type_key, best)
    return result


# ---------------------------------------------------------------------------
# Pass 4
# ---------------------------------------------------------------------------

def flow_scoring(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """
    Flows go to the component whose entities they mention and take.

    Entity ownership is read as it was before type scoring; an entity that
    only has pass-3 scores lends those raw scores to the flow instead.
    """
    mention_weight = OWNERSHIP_CONFIG["flow_step_mention_weight"]
    ref_weight = OWNERSHIP_CONFIG["flow_type_ref_weight"]
    before = ctx.owned_before_scoring
    scores = ScoreBoard()

    for flow in ctx.model.flows:
        if key(ConstructKind.FLOW, flow.name) in assigned:
            continue

        for step in flow.body:
            if not isinstance(step, (ast.FlowStep, ast.FlowOverrideStep)):
                continue
            text = _step_text(step)
            for entity in ctx.entity_names:
                if entity not in text:
                    continue
                entity_comp = before.get(key(ConstructKind.ENTITY, entity))
                if entity_comp:
                    scores.add(flow.name, entity_comp, mention_weight)
                else:
                    scores.merge(flow.name, ctx.type_scores.scores(entity))

        for ref in refs_of_all(list(flow.params) + [flow.return_type]):
            ref_comp = ctx.owner_of_type(before, ref)
            if ref_comp:
                scores.add(flow.name, ref_comp, ref_weight)

    result: Assignments = {}
    for flow in ctx.model.flows:
        flow_key = key(ConstructKind.FLOW, flow.name)
        if flow_key in assigned:
            continue
        best = scores.best(flow.name)
        if best:
            result.setdefault(flow_key, best)
    return result


# ---------------------------------------------------------------------------
# Pass 5
# ---------------------------------------------------------------------------

def enum_inheritance(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """An unowned enum follows the first owned entity with a field of that type."""
    result: Assignments = {}
    for en in ctx.model.enums:
        enum_key = key(ConstructKind.ENUM, en.name)
        if enum_key in assigned:
            continue
        for entity in ctx.model.entities:
            entity_comp = assigned.get(key(ConstructKind.ENTITY, entity.name))
            if not entity_comp:
                continue
            if any(en.name in extract_type_refs(f.field_type) for f in entity.fields):
                result[enum_key] = entity_comp
                break
    return result


# ---------------------------------------------------------------------------
# Pass 6
# ---------------------------------------------------------------------------

def _by_entity_in_name(ctx: OwnershipContext, assigned: Assigned, name: str) -> Optional[str]:
    return _first_owner(
        assigned,
        (key(ConstructKind.ENTITY, e) for e in ctx.entity_names if e in name),
    )


def _rule_owner(ctx: OwnershipContext, assigned: Assigned, rule: ast.RuleDecl) -> Optional[str]:
    weight = OWNERSHIP_CONFIG["rule_mention_weight"]
    scores = ScoreBoard()
    for clause in rule.body:
        if isinstance(clause, ast.SemanticComment):
            continue
        text = " ".join(
            getattr(clause, attr) for attr in ("expression", "condition", "action")
            if getattr(clause, attr, None)
        )
        for entity in ctx.entity_names:
            if entity in text:
                entity_comp = assigned.get(key(ConstructKind.ENTITY, entity))
                if entity_comp:
                    scores.add(rule.name, entity_comp, weight)
    return scores.best(rule.name, order=ctx.component_names)


def _journey_owner(assigned: Assigned, journey: ast.JourneyDecl) -> Optional[str]:
    wildcard = OWNERSHIP_CONFIG["journey_wildcard"]
    return _first_owner(
        assigned,
        (
            key(ConstructKind.SCREEN, step.from_)
            for step in journey.body
            if isinstance(step, ast.JourneyStep) and step.from_ and step.from_ != wildcard
        ),
    )


def _operation_owner(ctx: OwnershipContext, assigned: Assigned, op: ast.OperationDecl) -> Optional[str]:
    ref_weight = OWNERSHIP_CONFIG["operation_type_ref_weight"]
    event_weight = OWNERSHIP_CONFIG["operation_event_weight"]
    scores = ScoreBoard()
    for ref in refs_of_all(list(op.params) + [op.return_type]):
        ref_comp = ctx.owner_of_type(assigned, ref)
        if ref_comp:
            scores.add(op.name, ref_comp, ref_weight)
    for item in op.body:
        if isinstance(item, (ast.EmitsClause, ast.OnClause)):
            event_comp = assigned.get(key(ConstructKind.EVENT, item.event))
            if event_comp:
                scores.add(op.name, event_comp, event_weight)
    return scores.best(op.name, order=ctx.component_names)


def _element_owner(assigned: Assigned, element: ast.ElementDecl) -> Optional[str]:
    return _first_owner(
        assigned,
        (
            key(ConstructKind.ENTITY, item.prop_type.name)
            for item in element.body
            if isinstance(item, ast.PropDecl) and isinstance(item.prop_type, ast.ReferenceType)
        ),
    )


def _action_owner(assigned: Assigned, action: ast.ActionDecl) -> Optional[str]:
    return _first_owner(
        assigned,
        (key(ConstructKind.SCREEN, item.screen) for item in action.body if isinstance(item, ast.ActionFromClause)),
    )


def kind_heuristics(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """
    Per-kind heuristics for everything still unowned.

    Every heuristic reads the ownership left by passes 1-5 only, so results
    do not depend on the order kinds are visited in.
    """
    model = ctx.model
    candidates = []
    candidates += [(construct_key(e), _by_entity_in_name(ctx, assigned, e.name)) for e in model.events]
    candidates += [(construct_key(s), _by_entity_in_name(ctx, assigned, s.name)) for s in model.signals]
    candidates += [(construct_key(s), assigned.get(key(ConstructKind.ENUM, s.enum_ref))) for s in model.states]
    candidates += [(construct_key(r), _rule_owner(ctx, assigned, r)) for r in model.rules]
    candidates += [(construct_key(j), _journey_owner(assigned, j)) for j in model.journeys]
    candidates += [(construct_key(o), _operation_owner(ctx, assigned, o)) for o in model.operations]
    candidates += [(construct_key(el), _element_owner(assigned, el)) for el in model.elements]
    candidates += [(construct_key(a), _action_owner(assigned, a)) for a in model.actions]

    result: Assignments = {}
    for cand_key, owner in candidates:
        if owner and cand_key not in assigned:
            result.setdefault(cand_key, owner)
    return result


# ---------------------------------------------------------------------------
# Pass 7
# ---------------------------------------------------------------------------

def fallback(ctx: OwnershipContext, assigned: Assigned) -> Assignments:
    """Whatever is left goes to the first declared component."""
    if not ctx.component_names:
        logger.debug("No components declared, ownership fallback skipped")
        return {}
    first = ctx.component_names[0]
    return {k: first for k in iter_construct_keys(ctx.model) if k not in assigned}


PASSES: Sequence[Tuple[OwnershipPass, Callable[[OwnershipContext, Assigned], Assignments]]] = (
    (OwnershipPass.DIRECT_NESTING, direct_nesting),
    (OwnershipPass.API_NAME_PREFIX, api_name_prefix),
    (OwnershipPass.TYPE_SCORING, type_scoring),
    (OwnershipPass.FLOW_SCORING, flow_scoring),
    (OwnershipPass.ENUM_INHERITANCE, enum_inheritance),
    (OwnershipPass.KIND_HEURISTICS, kind_heuristics),
    (OwnershipPass.FALLBACK, fallback),
)
