"""Data models for the relationship graph."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from mfdcore.model import ConstructKey, ConstructKind


class ConstructRef(BaseModel):
    """Identity triple of a construct: owning component, kind and name."""

    model_config = ConfigDict(frozen=True)

    component: str
    kind: ConstructKind
    name: str

    @property
    def key(self) -> ConstructKey:
        return ConstructKey(self.kind, self.name)

    def __str__(self) -> str:
        return f"{self.component}:{self.kind.value}:{self.name}"


class EndpointRef(BaseModel):
    """An endpoint named by a handles/calls clause."""

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    component: str


Refs = Tuple[ConstructRef, ...]


class RelationshipRecord(BaseModel):
    """
    Every typed reference to and from one construct.

    List fields are deduplicated and keep first-seen order. Forward/inverse
    pairs are listed in mfdcore.relationships.categories.
    """

    model_config = ConfigDict(frozen=True)

    # entity fields
    references_types: Refs = Field(default=(), description="Entities/enums this entity's fields reference")
    referenced_by_entities: Refs = Field(default=(), description="Entities with a field of this type")
    # flows
    involved_entities: Refs = Field(default=(), description="Entities a flow takes, returns or mentions")
    used_by_flows: Refs = Field(default=(), description="Flows involving this entity / using this operation")
    uses_operations: Refs = ()
    # events
    triggered_by_events: Refs = Field(default=(), description="Events this flow/state/operation reacts to")
    triggers_flows: Refs = ()
    triggers_states: Refs = ()
    triggers_operations: Refs = Field(default=(), description="Operations triggered by this event or rule")
    emits_events: Refs = ()
    emitted_by: Refs = Field(default=(), description="Flows and operations emitting this event")
    # apis
    exposes_entities: Refs = ()
    exposed_by_api: Refs = Field(default=(), description="APIs whose endpoints carry this entity (detail only)")
    handles_apis: Refs = ()
    handled_by: Refs = ()
    calls_apis: Refs = ()
    called_by_operations: Refs = ()
    stream_apis: Refs = ()
    called_by_actions: Refs = Field(default=(), description="Actions subscribed to a STREAM endpoint of this API")
    # states
    enum_ref: Optional[ConstructRef] = None
    used_by_states: Refs = ()
    governed_by_states: Refs = Field(default=(), description="States whose enum types a field of this entity")
    governs_entities: Refs = Field(default=(), description="Entities governed by this state or rule")
    # rules
    governed_by_rules: Refs = ()
    enforces_rules: Refs = ()
    enforced_by_operations: Refs = ()
    triggered_by_rules: Refs = ()
    # ui
    source_screens: Refs = ()
    action_sources: Refs = Field(default=(), description="Actions started from this screen")
    uses_elements: Refs = ()
    used_by_screens: Refs = ()
    on_signals: Refs = ()
    signal_listened_by_actions: Refs = ()
    emits_signals: Refs = ()
    signal_emitted_by_actions: Refs = ()
    # inheritance
    extends_parent: Optional[ConstructRef] = None
    extended_by_children: Refs = ()
    implements_interfaces: Refs = ()
    implemented_by_concretes: Refs = ()
    # endpoint annotations
    handles_endpoints: Tuple[EndpointRef, ...] = ()
    calls_endpoints: Tuple[EndpointRef, ...] = ()
