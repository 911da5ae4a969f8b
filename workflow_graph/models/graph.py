"""Graph model - the editor's nodes and edges.

These models mirror the shape the visual editor produces:
- Nodes are either actions (bound to an action definition) or branches
- Edges connect node ids, optionally through a named source handle
- Wire keys are camelCase, Python attributes are snake_case
"""
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class NodeKind(str, Enum):
    """Kinds of editor nodes."""
    ACTION = "action"
    BRANCH = "branch"


class ActionCategory(str, Enum):
    """Categories of catalog actions."""
    NOTIFICATION = "notification"
    DATA = "data"
    APPROVAL = "approval"
    INTEGRATION = "integration"
    LOGIC = "logic"


class ConditionLogic(str, Enum):
    """How conditions of one branch path are combined."""
    AND = "AND"
    OR = "OR"


class ConditionOperator(str, Enum):
    """Operators available in the condition builder."""
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"


VALUELESS_OPERATORS = frozenset({ConditionOperator.IS_EMPTY.value, ConditionOperator.IS_NOT_EMPTY.value})

APPROVE_HANDLE = "approve"
REJECT_HANDLE = "reject"


def branch_handle(index: int) -> str:
    """Source handle id of the branch path at ``index``."""
    return f"branch-{index}"


class GraphModel(BaseModel):
    """Base for all wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(populate_by_name=True)


class Position(GraphModel):
    """2D position in editor units."""

    x: float = Field(0, description="X coordinate")
    y: float = Field(0, description="Y coordinate")


class ActionField(GraphModel):
    """A single configurable field of an action definition."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., description="Config key the value is stored under")
    label: str = Field("", description="Human label shown in the editor")
    required: bool = Field(False, description="Whether the field must be configured")
    type: str = Field("text", description="Input type of the field")


class ActionDefinition(GraphModel):
    """Cached copy of an action from the external action catalog."""

    id: Optional[str] = Field(None, alias="_id", description="Catalog action id")
    display_name: Optional[str] = Field(None, alias="displayName")
    category: Optional[str] = Field(None, description="Action category")
    fields: list[ActionField] = Field(
        default_factory=list,
        description="Configurable fields of the action",
    )

    @model_validator(mode="before")
    @classmethod
    def lift_config_schema(cls, data: Any) -> Any:
        """Accept the catalog's nested ``configSchema.fields`` shape."""
        if isinstance(data, dict) and "fields" not in data:
            schema = data.get("configSchema") or data.get("config_schema")
            if isinstance(schema, dict) and "fields" in schema:
                data = {**data, "fields": schema["fields"]}
        return data

    @property
    def is_approval(self) -> bool:
        return self.category == ActionCategory.APPROVAL.value

    def required_fields(self) -> list[ActionField]:
        return [f for f in self.fields if f.required]


class ConditionData(GraphModel):
    """One condition of a branch path."""

    field: str = Field(..., description="Form field the condition reads")
    operator: str = Field(
        ConditionOperator.EQ.value,
        description="Usually a ConditionOperator value; other operators pass through unchanged",
    )
    value: Any = Field(None, description="Comparison value (unused for emptiness checks)")

    @model_validator(mode="after")
    def drop_value_for_emptiness_checks(self) -> "ConditionData":
        if self.operator in VALUELESS_OPERATORS:
            self.value = None
        return self


class BranchData(GraphModel):
    """One outgoing path of a branch node."""

    name: str = Field(..., description="Path name shown on the handle")
    conditions: list[ConditionData] = Field(default_factory=list)
    condition_logic: ConditionLogic = Field(ConditionLogic.AND, alias="conditionLogic")
    target_step_temp_id: Optional[str] = Field(None, alias="targetStepTempId")
    next_step_temp_id_after_branch: Optional[str] = Field(
        None,
        alias="nextStepTempIdAfterBranch",
    )


class NodeData(GraphModel):
    """Payload carried by every node."""

    label: str = Field("", description="Display label")
    temp_id: str = Field(..., alias="tempId", description="Identity that survives save/reload")
    step_name: str = Field("", alias="stepName", description="Step name used in messages and IR")

    # Action-specific
    action_id: Optional[str] = Field(None, alias="actionId")
    action_definition: Optional[ActionDefinition] = Field(
        None,
        validation_alias=AliasChoices("actionDefinition", "action", "action_definition"),
        serialization_alias="actionDefinition",
    )
    config: dict[str, Any] = Field(default_factory=dict)

    # Branch-specific
    branches: Optional[list[BranchData]] = Field(None)


class Node(GraphModel):
    """A vertex of the workflow graph."""

    id: str = Field(..., description="Editor-local node id")
    type: NodeKind = Field(..., description="Node kind")
    position: Position = Field(default_factory=Position)
    data: NodeData

    @property
    def temp_id(self) -> str:
        return self.data.temp_id

    @property
    def step_name(self) -> str:
        return self.data.step_name

    @property
    def is_action(self) -> bool:
        return self.type == NodeKind.ACTION

    @property
    def is_branch(self) -> bool:
        return self.type == NodeKind.BRANCH

    @property
    def is_approval(self) -> bool:
        definition = self.data.action_definition
        return self.is_action and definition is not None and definition.is_approval


class Edge(GraphModel):
    """A directed connection between two nodes."""

    id: str = Field("", description="Edge id")
    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")
    source_handle: Optional[str] = Field(
        None,
        alias="sourceHandle",
        description="Output handle on the source node (branch-N, approve, reject)",
    )


class WorkflowGraph(GraphModel):
    """Serializable editor state: the ordered node list plus edges."""

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[Node]:
        """Get a node by its editor id."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        """Get an edge by its id."""
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None
