"""Graph builders shared by the test modules."""
from typing import Optional

from workflow_graph.models.graph import (
    ActionDefinition,
    ActionField,
    BranchData,
    ConditionData,
    Edge,
    Node,
    NodeData,
    NodeKind,
    Position,
)


def action_node(
    node_id: str,
    action_id: Optional[str] = "action-1",
    definition: Optional[ActionDefinition] = None,
    config: Optional[dict] = None,
    temp_id: Optional[str] = None,
    x: float = 0,
    y: float = 0,
) -> Node:
    return Node(
        id=node_id,
        type=NodeKind.ACTION,
        position=Position(x=x, y=y),
        data=NodeData(
            label=f"Action {node_id}",
            temp_id=temp_id or f"tmp-{node_id}",
            step_name=f"Action Step {node_id}",
            action_id=action_id,
            action_definition=definition,
            config=config or {},
        ),
    )


def branch_node(
    node_id: str,
    branches: Optional[list[BranchData]] = None,
    temp_id: Optional[str] = None,
) -> Node:
    return Node(
        id=node_id,
        type=NodeKind.BRANCH,
        data=NodeData(
            label=f"Branch {node_id}",
            temp_id=temp_id or f"tmp-{node_id}",
            step_name=f"Branch Step {node_id}",
            branches=branches if branches is not None else [],
        ),
    )


def edge(source: str, target: str, handle: Optional[str] = None) -> Edge:
    return Edge(id=f"{source}-{target}", source=source, target=target, source_handle=handle)


def definition(*fields: tuple[str, str, bool], category: str = "data") -> ActionDefinition:
    """Action definition from (name, label, required) triples."""
    return ActionDefinition(
        id="action-1",
        display_name="Send Email",
        category=category,
        fields=[ActionField(name=name, label=label, required=required) for name, label, required in fields],
    )


def approval_definition() -> ActionDefinition:
    return ActionDefinition(id="approval-1", display_name="Manager Approval", category="approval")


def condition(field: str = "status", operator: str = "eq", value="approved") -> ConditionData:
    return ConditionData(field=field, operator=operator, value=value)
