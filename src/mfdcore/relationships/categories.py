"""
Edge categories of the relationship graph.

Every category pairs a forward field on the source record with an inverse
field on the target record; the builder always writes both.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet

from mfdcore.model import ConstructKind as K


class EdgeCategory(str, Enum):
    ENTITY_FIELD_REF = "entity_field_ref"
    FLOW_ENTITY = "flow_entity"
    FLOW_ON_EVENT = "flow_on_event"
    FLOW_EMITS_EVENT = "flow_emits_event"
    API_EXPOSES_ENTITY = "api_exposes_entity"
    STATE_ENUM = "state_enum"
    STATE_ON_EVENT = "state_on_event"
    ENTITY_STATE = "entity_state"
    ACTION_FROM_SCREEN = "action_from_screen"
    ACTION_ON_SIGNAL = "action_on_signal"
    ACTION_EMITS_SIGNAL = "action_emits_signal"
    ACTION_STREAM_API = "action_stream_api"
    RULE_ENTITY = "rule_entity"
    OPERATION_EMITS_EVENT = "operation_emits_event"
    OPERATION_ON_EVENT = "operation_on_event"
    OPERATION_ENFORCES_RULE = "operation_enforces_rule"
    FLOW_USES_OPERATION = "flow_uses_operation"
    RULE_TRIGGERS_OPERATION = "rule_triggers_operation"
    SCREEN_USES_ELEMENT = "screen_uses_element"
    HANDLES_API = "handles_api"
    CALLS_API = "calls_api"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"


@dataclass(frozen=True)
class EdgeSpec:
    sources: FrozenSet[K]
    targets: FrozenSet[K]
    forward: str
    inverse: str
    single: bool = False    # forward field holds one reference, not a list
    overview: bool = True   # shown in simplified architecture overviews


def _spec(sources, targets, forward, inverse, **kw) -> EdgeSpec:
    return EdgeSpec(frozenset(sources), frozenset(targets), forward, inverse, **kw)


INHERITABLE_KINDS = (K.ELEMENT, K.ENTITY, K.FLOW, K.EVENT, K.SIGNAL, K.SCREEN, K.COMPONENT)

EDGE_SPECS: Dict[EdgeCategory, EdgeSpec] = {
    EdgeCategory.ENTITY_FIELD_REF: _spec([K.ENTITY], [K.ENTITY, K.ENUM], "references_types", "referenced_by_entities"),
    EdgeCategory.FLOW_ENTITY: _spec([K.FLOW], [K.ENTITY], "involved_entities", "used_by_flows"),
    EdgeCategory.FLOW_ON_EVENT: _spec([K.FLOW], [K.EVENT], "triggered_by_events", "triggers_flows"),
    EdgeCategory.FLOW_EMITS_EVENT: _spec([K.FLOW], [K.EVENT], "emits_events", "emitted_by"),
    # Entity exposure is routed through flows/operations in overviews
    EdgeCategory.API_EXPOSES_ENTITY: _spec(
        [K.API], [K.ENTITY], "exposes_entities", "exposed_by_api", overview=False
    ),
    EdgeCategory.STATE_ENUM: _spec([K.STATE], [K.ENUM], "enum_ref", "used_by_states", single=True),
    EdgeCategory.STATE_ON_EVENT: _spec([K.STATE], [K.EVENT], "triggered_by_events", "triggers_states"),
    EdgeCategory.ENTITY_STATE: _spec([K.ENTITY], [K.STATE], "governed_by_states", "governs_entities"),
    EdgeCategory.ACTION_FROM_SCREEN: _spec([K.ACTION], [K.SCREEN], "source_screens", "action_sources"),
    EdgeCategory.ACTION_ON_SIGNAL: _spec([K.ACTION], [K.SIGNAL], "on_signals", "signal_listened_by_actions"),
    EdgeCategory.ACTION_EMITS_SIGNAL: _spec([K.ACTION], [K.SIGNAL], "emits_signals", "signal_emitted_by_actions"),
    EdgeCategory.ACTION_STREAM_API: _spec([K.ACTION], [K.API], "stream_apis", "called_by_actions"),
    EdgeCategory.RULE_ENTITY: _spec([K.RULE], [K.ENTITY], "governs_entities", "governed_by_rules"),
    EdgeCategory.OPERATION_EMITS_EVENT: _spec([K.OPERATION], [K.EVENT], "emits_events", "emitted_by"),
    EdgeCategory.OPERATION_ON_EVENT: _spec([K.OPERATION], [K.EVENT], "triggered_by_events", "triggers_operations"),
    EdgeCategory.OPERATION_ENFORCES_RULE: _spec(
        [K.OPERATION], [K.RULE], "enforces_rules", "enforced_by_operations"
    ),
    EdgeCategory.FLOW_USES_OPERATION: _spec([K.FLOW], [K.OPERATION], "uses_operations", "used_by_flows"),
    EdgeCategory.RULE_TRIGGERS_OPERATION: _spec(
        [K.RULE], [K.OPERATION], "triggers_operations", "triggered_by_rules"
    ),
    EdgeCategory.SCREEN_USES_ELEMENT: _spec([K.SCREEN], [K.ELEMENT], "uses_elements", "used_by_screens"),
    EdgeCategory.HANDLES_API: _spec([K.FLOW, K.OPERATION], [K.API], "handles_apis", "handled_by"),
    EdgeCategory.CALLS_API: _spec([K.OPERATION], [K.API], "calls_apis", "called_by_operations"),
    EdgeCategory.EXTENDS: _spec(
        INHERITABLE_KINDS, INHERITABLE_KINDS, "extends_parent", "extended_by_children", single=True
    ),
    EdgeCategory.IMPLEMENTS: _spec(
        INHERITABLE_KINDS, INHERITABLE_KINDS, "implements_interfaces", "implemented_by_concretes"
    ),
}
