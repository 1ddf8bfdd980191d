"""
AST node models for MFD documents.

Every node is a frozen pydantic model discriminated on its ``type`` field.
Field names are snake_case in Python and accept the camelCase keys used by
the upstream parser's JSON output (``fieldType``, ``enumRef``, ``hasArrow``...).
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SourceLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    offset: int = 0
    source: Optional[str] = None


class SourceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: SourceLocation
    end: SourceLocation


class Node(BaseModel):
    """Base for every AST node."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    loc: Optional[SourceRange] = None


PrimitiveName = Literal["string", "number", "boolean", "date", "datetime", "uuid", "void"]
ApiStyle = Literal["REST", "GraphQL", "gRPC"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "STREAM"]


# ---------------------------------------------------------------------------
# Shared leaf nodes
# ---------------------------------------------------------------------------

class DecoratorValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string", "number", "identifier", "duration", "rate"]
    value: Union[int, float, str]
    unit: Optional[str] = None


class Decorator(Node):
    type: Literal["Decorator"] = "Decorator"
    name: str
    params: List[DecoratorValue] = Field(default_factory=list)


class SemanticComment(Node):
    type: Literal["SemanticComment"] = "SemanticComment"
    text: str


class ErrorNode(Node):
    """A line the grammar could not recognize, kept for recovery."""
    type: Literal["ErrorNode"] = "ErrorNode"
    raw: str
    context: str = ""


class IncludeDecl(Node):
    """`include "path"` or `import "path"`."""
    type: Literal["IncludeDecl"] = "IncludeDecl"
    path: str


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------

class PrimitiveType(Node):
    type: Literal["PrimitiveType"] = "PrimitiveType"
    name: PrimitiveName


class ReferenceType(Node):
    type: Literal["ReferenceType"] = "ReferenceType"
    name: str


class OptionalType(Node):
    type: Literal["OptionalType"] = "OptionalType"
    inner: "TypeExpr"


class ArrayType(Node):
    type: Literal["ArrayType"] = "ArrayType"
    inner: "TypeExpr"


class UnionType(Node):
    type: Literal["UnionType"] = "UnionType"
    alternatives: List["TypeExpr"] = Field(default_factory=list)


class InlineObjectType(Node):
    type: Literal["InlineObjectType"] = "InlineObjectType"
    fields: List["FieldDecl"] = Field(default_factory=list)


TypeExpr = Annotated[
    Union[PrimitiveType, ReferenceType, OptionalType, ArrayType, UnionType, InlineObjectType],
    Field(discriminator="type"),
]


class FieldDecl(Node):
    type: Literal["FieldDecl"] = "FieldDecl"
    name: str
    field_type: TypeExpr
    decorators: List[Decorator] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Construct bodies
# ---------------------------------------------------------------------------

class PropDecl(Node):
    type: Literal["PropDecl"] = "PropDecl"
    name: str
    prop_type: TypeExpr
    decorators: List[Decorator] = Field(default_factory=list)


class FormDecl(Node):
    type: Literal["FormDecl"] = "FormDecl"
    name: Optional[str] = None
    fields: List[FieldDecl] = Field(default_factory=list)


class UsesDecl(Node):
    type: Literal["UsesDecl"] = "UsesDecl"
    element: str
    alias: str = ""
    decorators: List[Decorator] = Field(default_factory=list)


class EnumValue(Node):
    type: Literal["EnumValue"] = "EnumValue"
    name: str


class FlowBranch(Node):
    type: Literal["FlowBranch"] = "FlowBranch"
    condition: str
    action: str


class FlowStep(Node):
    type: Literal["FlowStep"] = "FlowStep"
    has_arrow: bool = True
    action: str
    args: Optional[str] = None
    decorators: List[Decorator] = Field(default_factory=list)
    branches: List[FlowBranch] = Field(default_factory=list)


class FlowOverrideStep(Node):
    type: Literal["FlowOverrideStep"] = "FlowOverrideStep"
    target: str
    action: str
    args: Optional[str] = None
    decorators: List[Decorator] = Field(default_factory=list)


class EmitsClause(Node):
    type: Literal["EmitsClause"] = "EmitsClause"
    event: str


class OnClause(Node):
    type: Literal["OnClause"] = "OnClause"
    event: str


class EnforcesClause(Node):
    type: Literal["EnforcesClause"] = "EnforcesClause"
    rule: str


class OperationHandlesClause(Node):
    type: Literal["OperationHandlesClause"] = "OperationHandlesClause"
    method: str
    path: str


class OperationCallsClause(Node):
    type: Literal["OperationCallsClause"] = "OperationCallsClause"
    method: str
    path: str


class StateTransition(Node):
    type: Literal["StateTransition"] = "StateTransition"
    from_: str = Field(alias="from")
    to: str
    event: Optional[str] = None
    decorators: List[Decorator] = Field(default_factory=list)


class ApiEndpointSimple(Node):
    """METHOD /path (InputType) -> ReturnType"""
    type: Literal["ApiEndpointSimple"] = "ApiEndpointSimple"
    method: HttpMethod
    path: str
    input_type: Optional[TypeExpr] = None
    return_type: Optional[TypeExpr] = None
    decorators: List[Decorator] = Field(default_factory=list)

    @property
    def input_expr(self):
        return self.input_type

    @property
    def output_expr(self):
        return self.return_type


class ApiEndpointExpanded(Node):
    """Endpoint with body:/response:/query: sections."""
    type: Literal["ApiEndpointExpanded"] = "ApiEndpointExpanded"
    method: HttpMethod
    path: str
    body: Optional[TypeExpr] = None
    response: Optional[TypeExpr] = None
    query: Optional[TypeExpr] = None
    decorators: List[Decorator] = Field(default_factory=list)

    @property
    def input_expr(self):
        return self.body

    @property
    def output_expr(self):
        return self.response


ApiEndpoint = Annotated[
    Union[ApiEndpointSimple, ApiEndpointExpanded],
    Field(discriminator="type"),
]


class WhenClause(Node):
    type: Literal["WhenClause"] = "WhenClause"
    expression: str


class ThenClause(Node):
    type: Literal["ThenClause"] = "ThenClause"
    action: str


class ElseIfClause(Node):
    type: Literal["ElseIfClause"] = "ElseIfClause"
    condition: str
    action: str


class ElseClause(Node):
    type: Literal["ElseClause"] = "ElseClause"
    action: str


class JourneyStep(Node):
    type: Literal["JourneyStep"] = "JourneyStep"
    from_: str = Field(alias="from")
    to: str
    trigger: str = ""
    decorators: List[Decorator] = Field(default_factory=list)


class ActionFromClause(Node):
    type: Literal["ActionFromClause"] = "ActionFromClause"
    screen: str


class ActionCallsClause(Node):
    type: Literal["ActionCallsClause"] = "ActionCallsClause"
    method: str
    path: str


class ActionOnStreamClause(Node):
    type: Literal["ActionOnStreamClause"] = "ActionOnStreamClause"
    path: str


class ActionOnSignalClause(Node):
    type: Literal["ActionOnSignalClause"] = "ActionOnSignalClause"
    signal: str


class ActionEmitsSignalClause(Node):
    type: Literal["ActionEmitsSignalClause"] = "ActionEmitsSignalClause"
    signal: str


class ActionResult(Node):
    type: Literal["ActionResult"] = "ActionResult"
    outcome: str
    screen: str
    decorators: List[Decorator] = Field(default_factory=list)


def _body(*kinds):
    return Annotated[Union[kinds], Field(discriminator="type")]


ElementBodyItem = _body(PropDecl, FormDecl, SemanticComment)
ScreenBodyItem = _body(UsesDecl, FormDecl, SemanticComment)
FlowBodyItem = _body(FlowStep, FlowOverrideStep, OnClause, EmitsClause, OperationHandlesClause, SemanticComment)
RuleBodyItem = _body(WhenClause, ThenClause, ElseIfClause, ElseClause, SemanticComment)
JourneyBodyItem = _body(JourneyStep, SemanticComment)
OperationBodyItem = _body(
    OperationHandlesClause, OperationCallsClause, EmitsClause, OnClause, EnforcesClause, SemanticComment
)
ActionBodyItem = _body(
    ActionFromClause,
    ActionCallsClause,
    ActionOnStreamClause,
    ActionOnSignalClause,
    ActionEmitsSignalClause,
    ActionResult,
    SemanticComment,
)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class DepDecl(Node):
    type: Literal["DepDecl"] = "DepDecl"
    target: str
    decorators: List[Decorator] = Field(default_factory=list)


class SecretDecl(Node):
    type: Literal["SecretDecl"] = "SecretDecl"
    name: str
    decorators: List[Decorator] = Field(default_factory=list)


class NodeDecl(Node):
    """Deployment node."""
    type: Literal["NodeDecl"] = "NodeDecl"
    name: str
    decorators: List[Decorator] = Field(default_factory=list)


class ElementDecl(Node):
    type: Literal["ElementDecl"] = "ElementDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[ElementBodyItem] = Field(default_factory=list)


class EntityDecl(Node):
    type: Literal["EntityDecl"] = "EntityDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    fields: List[FieldDecl] = Field(default_factory=list)


class EnumDecl(Node):
    type: Literal["EnumDecl"] = "EnumDecl"
    name: str
    decorators: List[Decorator] = Field(default_factory=list)
    values: List[EnumValue] = Field(default_factory=list)


class FlowDecl(Node):
    type: Literal["FlowDecl"] = "FlowDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    params: List[TypeExpr] = Field(default_factory=list)
    return_type: Optional[TypeExpr] = None
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[FlowBodyItem] = Field(default_factory=list)


class StateDecl(Node):
    type: Literal["StateDecl"] = "StateDecl"
    name: str
    enum_ref: str
    decorators: List[Decorator] = Field(default_factory=list)
    transitions: List[StateTransition] = Field(default_factory=list)
    comments: List[SemanticComment] = Field(default_factory=list)


class EventDecl(Node):
    type: Literal["EventDecl"] = "EventDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    fields: List[FieldDecl] = Field(default_factory=list)


class SignalDecl(Node):
    type: Literal["SignalDecl"] = "SignalDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    fields: List[FieldDecl] = Field(default_factory=list)


class ApiDecl(Node):
    type: Literal["ApiDecl"] = "ApiDecl"
    name: Optional[str] = None
    style: ApiStyle = "REST"
    decorators: List[Decorator] = Field(default_factory=list)
    endpoints: List[ApiEndpoint] = Field(default_factory=list)
    comments: List[SemanticComment] = Field(default_factory=list)


class RuleDecl(Node):
    type: Literal["RuleDecl"] = "RuleDecl"
    name: str
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[RuleBodyItem] = Field(default_factory=list)


class ScreenDecl(Node):
    type: Literal["ScreenDecl"] = "ScreenDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[ScreenBodyItem] = Field(default_factory=list)


class JourneyDecl(Node):
    type: Literal["JourneyDecl"] = "JourneyDecl"
    name: str
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[JourneyBodyItem] = Field(default_factory=list)


class OperationDecl(Node):
    type: Literal["OperationDecl"] = "OperationDecl"
    name: str
    params: List[TypeExpr] = Field(default_factory=list)
    return_type: Optional[TypeExpr] = None
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[OperationBodyItem] = Field(default_factory=list)


class ActionDecl(Node):
    type: Literal["ActionDecl"] = "ActionDecl"
    name: str
    params: List[TypeExpr] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[ActionBodyItem] = Field(default_factory=list)


ComponentBodyItem = _body(
    DepDecl,
    SecretDecl,
    NodeDecl,
    ElementDecl,
    EntityDecl,
    EnumDecl,
    FlowDecl,
    StateDecl,
    EventDecl,
    SignalDecl,
    ApiDecl,
    RuleDecl,
    ScreenDecl,
    JourneyDecl,
    OperationDecl,
    ActionDecl,
    IncludeDecl,
    SemanticComment,
    ErrorNode,
)


class ComponentDecl(Node):
    type: Literal["ComponentDecl"] = "ComponentDecl"
    name: str
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[ComponentBodyItem] = Field(default_factory=list)


SystemBodyItem = _body(IncludeDecl, ComponentDecl, SemanticComment, ErrorNode)


class SystemDecl(Node):
    type: Literal["SystemDecl"] = "SystemDecl"
    name: str
    decorators: List[Decorator] = Field(default_factory=list)
    body: List[SystemBodyItem] = Field(default_factory=list)


TopLevelItem = _body(
    SystemDecl,
    ComponentDecl,
    DepDecl,
    SecretDecl,
    NodeDecl,
    ElementDecl,
    EntityDecl,
    EnumDecl,
    FlowDecl,
    StateDecl,
    EventDecl,
    SignalDecl,
    ApiDecl,
    RuleDecl,
    ScreenDecl,
    JourneyDecl,
    OperationDecl,
    ActionDecl,
    IncludeDecl,
    SemanticComment,
    ErrorNode,
)


class Document(Node):
    """A parsed MFD file: a system, loose constructs, or both."""
    type: Literal["MfdDocument"] = "MfdDocument"
    body: List[TopLevelItem] = Field(default_factory=list)


for _model in (OptionalType, ArrayType, UnionType, InlineObjectType, FieldDecl):
    _model.model_rebuild()


def decorator_value(node, name: str) -> Optional[str]:
    """First parameter of decorator ``name`` on ``node``, as a string."""
    for deco in getattr(node, "decorators", None) or []:
        if deco.name == name:
            if deco.params:
                return str(deco.params[0].value)
            return None
    return None
