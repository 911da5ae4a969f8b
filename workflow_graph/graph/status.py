"""Single-node checks behind the live status badges.

The whole-graph validator runs the same helpers, so a badge and the
diagnostics list never disagree about a node.
"""
from workflow_graph.models.graph import ActionField, BranchData, Node
from workflow_graph.models.validation import NodeStatus


def missing_required_fields(node: Node) -> list[ActionField]:
    """Required fields of the node's action that have no key in its config.

    Only key absence counts: a key holding ``""`` or ``None`` is configured.
    """
    definition = node.data.action_definition
    if definition is None:
        return []
    configured = set(node.data.config.keys())
    return [f for f in definition.required_fields() if f.name not in configured]


def branches_without_conditions(node: Node) -> list[BranchData]:
    return [b for b in node.data.branches or [] if not b.conditions]


def get_node_validation_status(node: Node) -> NodeStatus:
    """Classify one node as valid, warning or error."""
    if node.is_action:
        if not node.data.action_id:
            return NodeStatus.ERROR
        if missing_required_fields(node):
            return NodeStatus.ERROR
    elif node.is_branch:
        if branches_without_conditions(node):
            return NodeStatus.WARNING

    return NodeStatus.VALID
