"""WorkflowSession - editor-side owner of the graph state.

The session is the single writer of a WorkflowGraph. The editor calls its
methods directly for every user gesture (drop, click-add, duplicate,
delete, connect, config edits, auto-arrange, save); validation, compilation
and layout stay pure functions the session delegates to.
"""
from typing import Any, Optional
from uuid import uuid4

import structlog

from workflow_graph.config import get_settings
from workflow_graph.errors import (
    EdgeNotFoundError,
    InvalidBranchConfigError,
    NodeNotFoundError,
    WorkflowValidationError,
)
from workflow_graph.graph.compiler import WorkflowCompiler
from workflow_graph.graph.layout import (
    NODE_HEIGHT,
    NODE_WIDTH,
    auto_arrange_nodes,
    find_non_overlapping_position,
    get_default_node_position,
    nodes_overlap,
    snap_to_grid,
)
from workflow_graph.graph.status import get_node_validation_status
from workflow_graph.graph.validator import WorkflowValidator
from workflow_graph.models.graph import (
    ActionDefinition,
    BranchData,
    Edge,
    Node,
    NodeData,
    NodeKind,
    Position,
    WorkflowGraph,
)
from workflow_graph.models.validation import NodeStatus, ValidationResult
from workflow_graph.models.workflow_json import SaveWorkflowRequest, WorkflowJSON

logger = structlog.get_logger()

# Tighter padding for the drop-point overlap check than for slot search
DROP_OVERLAP_PADDING = 20
DUPLICATE_OFFSET = 50
MIN_BRANCH_PATHS = 2


def _new_id(kind: str) -> str:
    return f"{kind}-{str(uuid4())[:8]}"


class WorkflowSession:
    """Graph editing session for one workflow."""

    def __init__(
        self,
        graph: Optional[WorkflowGraph] = None,
        workflow_id: Optional[str] = None,
        snap_to_grid_enabled: Optional[bool] = None,
    ):
        self.graph = graph or WorkflowGraph()
        self.workflow_id = workflow_id
        if snap_to_grid_enabled is None:
            snap_to_grid_enabled = get_settings().snap_to_grid
        self.snap_to_grid_enabled = snap_to_grid_enabled
        self.validator = WorkflowValidator()
        self.compiler = WorkflowCompiler()

    @property
    def nodes(self) -> list[Node]:
        return self.graph.nodes

    @property
    def edges(self) -> list[Edge]:
        return self.graph.edges

    def get_node(self, node_id: str) -> Node:
        node = self.graph.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def _snap(self, position: Position) -> Position:
        return snap_to_grid(position) if self.snap_to_grid_enabled else position

    def _action_node(self, action: ActionDefinition, position: Position) -> Node:
        name = action.display_name or "Action"
        return Node(
            id=_new_id(NodeKind.ACTION.value),
            type=NodeKind.ACTION,
            position=position,
            data=NodeData(
                label=name,
                temp_id=_new_id(NodeKind.ACTION.value),
                step_name=name,
                action_id=action.id,
                action_definition=action,
                config={},
            ),
        )

    def _append(self, node: Node) -> Node:
        self.graph.nodes.append(node)
        logger.info("node_added", node_id=node.id, node_type=node.type.value)
        return node

    # =========================================================================
    # Adding nodes
    # =========================================================================

    def drop_action(self, action: ActionDefinition, drop_point: Position) -> Node:
        """Add an action node centered on the point it was dropped at."""
        position = Position(
            x=drop_point.x - NODE_WIDTH / 2,
            y=drop_point.y - NODE_HEIGHT / 2,
        )
        position = self._snap(position)

        if any(nodes_overlap(position, n.position, DROP_OVERLAP_PADDING) for n in self.nodes):
            position = find_non_overlapping_position(position, self.nodes, "bottom")

        return self._append(self._action_node(action, position))

    def add_action_node(
        self,
        action: ActionDefinition,
        viewport_center: Optional[Position] = None,
    ) -> Node:
        """Add an action node at the default position."""
        position = self._snap(get_default_node_position(self.nodes, viewport_center))
        return self._append(self._action_node(action, position))

    def add_branch_node(self, viewport_center: Optional[Position] = None) -> Node:
        """Add a branch node with two empty paths."""
        position = self._snap(get_default_node_position(self.nodes, viewport_center))
        node = Node(
            id=_new_id(NodeKind.BRANCH.value),
            type=NodeKind.BRANCH,
            position=position,
            data=NodeData(
                label="Branch Decision",
                temp_id=_new_id(NodeKind.BRANCH.value),
                step_name="Branch Decision",
                config={},
                branches=[
                    BranchData(name="Path 1"),
                    BranchData(name="Path 2"),
                ],
            ),
        )
        return self._append(node)

    def duplicate_node(self, node_id: str) -> Node:
        """Copy a node next to the original with fresh ids and no edges."""
        original = self.get_node(node_id)

        position = Position(
            x=original.position.x + DUPLICATE_OFFSET,
            y=original.position.y + DUPLICATE_OFFSET,
        )
        position = self._snap(find_non_overlapping_position(position, self.nodes, "diagonal"))

        kind = original.type.value
        data = original.data.model_copy(
            deep=True,
            update={
                "temp_id": _new_id(kind),
                "step_name": f"{original.data.step_name} (Copy)",
            },
        )
        copy = original.model_copy(update={"id": _new_id(kind), "position": position, "data": data})
        return self._append(copy)

    # =========================================================================
    # Editing nodes
    # =========================================================================

    def move_node(self, node_id: str, position: Position) -> Node:
        node = self.get_node(node_id)
        node.position = self._snap(position)
        return node

    def change_action(self, node_id: str, action: ActionDefinition) -> Node:
        """Bind an action node to a different action; its config is reset."""
        node = self.get_node(node_id)
        name = action.display_name or node.data.step_name
        node.data.label = name
        node.data.step_name = name
        node.data.action_id = action.id
        node.data.action_definition = action
        node.data.config = {}
        logger.info("node_action_changed", node_id=node_id, action_id=action.id)
        return node

    def update_config(self, node_id: str, config: dict[str, Any]) -> Node:
        node = self.get_node(node_id)
        node.data.config = dict(config)
        logger.info("node_config_updated", node_id=node_id, keys=sorted(config))
        return node

    def update_branches(self, node_id: str, branches: list[BranchData]) -> Node:
        """Replace the paths of a branch node.

        Raises:
            InvalidBranchConfigError: Node is not a branch, or fewer than
                two paths would remain
        """
        node = self.get_node(node_id)
        if not node.is_branch:
            raise InvalidBranchConfigError(f"Node {node_id} is not a branch node")
        if len(branches) < MIN_BRANCH_PATHS:
            raise InvalidBranchConfigError(
                f"A branch needs at least {MIN_BRANCH_PATHS} paths, got {len(branches)}"
            )
        node.data.branches = list(branches)
        logger.info("node_branches_updated", node_id=node_id, path_count=len(branches))
        return node

    def delete_node(self, node_id: str) -> None:
        """Delete a node and every edge touching it."""
        self.get_node(node_id)
        self.delete_nodes([node_id])

    def delete_nodes(self, node_ids: list[str]) -> int:
        """Delete several nodes and their edges. Returns the number deleted."""
        doomed = set(node_ids)
        before = len(self.graph.nodes)
        self.graph.nodes = [n for n in self.graph.nodes if n.id not in doomed]
        self.graph.edges = [
            e for e in self.graph.edges
            if e.source not in doomed and e.target not in doomed
        ]
        deleted = before - len(self.graph.nodes)
        logger.info("node_deleted", node_ids=sorted(doomed), deleted_count=deleted)
        return deleted

    # =========================================================================
    # Edges
    # =========================================================================

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
    ) -> Edge:
        """Connect two nodes. Connecting the same pair and handle twice is a no-op."""
        self.get_node(source)
        self.get_node(target)

        for edge in self.graph.edges:
            if (edge.source, edge.target, edge.source_handle) == (source, target, source_handle):
                return edge

        edge = Edge(
            id=_new_id("edge"),
            source=source,
            target=target,
            source_handle=source_handle,
        )
        self.graph.edges.append(edge)
        logger.info("edge_connected", source=source, target=target, handle=source_handle)
        return edge

    def disconnect(self, edge_id: str) -> None:
        """Remove one edge. Only the first edge carrying ``edge_id`` goes."""
        edge = self.graph.get_edge(edge_id)
        if edge is None:
            raise EdgeNotFoundError(edge_id)
        self.graph.edges = [e for e in self.graph.edges if e is not edge]
        logger.info("edge_disconnected", edge_id=edge_id)

    # =========================================================================
    # Layout, validation, compilation
    # =========================================================================

    def auto_arrange(self) -> list[Node]:
        self.graph.nodes = auto_arrange_nodes(self.nodes, self.edges)
        return self.graph.nodes

    def validate(self) -> ValidationResult:
        """Validate the graph; an empty workflow is an error here."""
        return self.validator.validate(self.nodes, self.edges, allow_empty=False)

    def node_status(self, node_id: str) -> NodeStatus:
        return get_node_validation_status(self.get_node(node_id))

    def generate(self) -> Optional[WorkflowJSON]:
        """Compile the current graph, or None if it has validation errors."""
        return self.compiler.compile(
            self.nodes,
            self.edges,
            validation=self.validate(),
            workflow_id=self.workflow_id,
        )

    def build_save_request(
        self,
        name: str,
        description: Optional[str] = None,
    ) -> SaveWorkflowRequest:
        """Build the payload for the persistence collaborator.

        Raises:
            WorkflowValidationError: The graph has validation errors
        """
        validation = self.validate()
        workflow_json = self.compiler.compile(
            self.nodes,
            self.edges,
            validation=validation,
            workflow_id=self.workflow_id,
        )
        if workflow_json is None:
            raise WorkflowValidationError(validation)

        return SaveWorkflowRequest(
            workflow_id=self.workflow_id,
            name=name,
            description=description,
            nodes=[n.model_copy(deep=True) for n in self.nodes],
            edges=[e.model_copy() for e in self.edges],
            workflow_json=workflow_json,
        )

    def mark_saved(self, workflow_id: str) -> None:
        """Record the id the persistence layer assigned on first save."""
        self.workflow_id = workflow_id
        logger.info("workflow_saved", workflow_id=workflow_id)
