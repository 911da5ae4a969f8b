"""Validator - whole-graph diagnostics for the workflow editor.

The validator performs, in order:
1. Empty graph check (only when the caller forbids empty workflows)
2. Start-node inference
3. Per-node configuration checks
4. Disconnected node detection
5. Cycle detection
6. Dangling edge detection

It never mutates the graph and never raises for well-typed input.
"""
import structlog

from workflow_graph.graph.index import GraphIndex
from workflow_graph.graph.status import branches_without_conditions, missing_required_fields
from workflow_graph.models.graph import Edge, Node
from workflow_graph.models.validation import ValidationResult

logger = structlog.get_logger()

EMPTY_WORKFLOW_MESSAGE = "Workflow is empty. Add at least one node."
NO_START_NODE_MESSAGE = "No starting node found. All nodes have incoming connections."
CIRCULAR_DEPENDENCY_MESSAGE = (
    "Circular dependency detected in workflow. This will cause an infinite loop."
)


class WorkflowValidator:
    """Validates an editor graph and reports errors and warnings."""

    def validate(
        self,
        nodes: list[Node],
        edges: list[Edge],
        *,
        allow_empty: bool = True,
    ) -> ValidationResult:
        """Validate a graph.

        Args:
            nodes: Ordered node list; order decides the start-node tie-break
            edges: Edge list
            allow_empty: When False an empty graph is an error

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult()

        if not nodes:
            if not allow_empty:
                result.add_error(EMPTY_WORKFLOW_MESSAGE)
            return result

        index = GraphIndex(nodes, edges)

        start_nodes = index.start_nodes()
        if not start_nodes:
            result.add_error(NO_START_NODE_MESSAGE)
        elif len(start_nodes) > 1:
            result.add_warning(
                f"Multiple starting nodes found ({len(start_nodes)}). "
                "Only the first will be used."
            )
        start_node = start_nodes[0] if start_nodes else None

        for node in nodes:
            if node.is_action:
                self._validate_action_node(node, result)
            elif node.is_branch:
                self._validate_branch_node(node, index, result)

            if not index.incoming(node.id) and (start_node is None or node.id != start_node.id):
                result.add_warning(
                    f'Node "{node.step_name}" is disconnected and will not be executed.',
                    node_id=node.id,
                )

        cycle_root = self._find_cycle(index)
        if cycle_root is not None:
            result.add_error(CIRCULAR_DEPENDENCY_MESSAGE, node_id=cycle_root)

        for edge in index.dangling_edges:
            known_end = next(
                (end for end in (edge.source, edge.target) if index.node_by_id(end)),
                "",
            )
            result.add_warning(
                f'Connection "{edge.id}" references a missing node and will be ignored.',
                node_id=known_end,
            )

        logger.debug(
            "validation_complete",
            node_count=len(nodes),
            edge_count=len(edges),
            error_count=len(result.errors),
            warning_count=len(result.warnings),
        )

        return result

    def _validate_action_node(self, node: Node, result: ValidationResult) -> None:
        if not node.data.action_id:
            result.add_error(
                f'Action node "{node.step_name}" has no action selected.',
                node_id=node.id,
            )

        missing = missing_required_fields(node)
        if missing:
            labels = ", ".join(f.label for f in missing)
            result.add_error(
                f'Action node "{node.step_name}" is missing required fields: {labels}',
                node_id=node.id,
            )

    def _validate_branch_node(
        self,
        node: Node,
        index: GraphIndex,
        result: ValidationResult,
    ) -> None:
        unconditioned = branches_without_conditions(node)
        if unconditioned:
            result.add_warning(
                f'Branch node "{node.step_name}" has {len(unconditioned)} '
                "path(s) without conditions.",
                node_id=node.id,
            )

        # Aggregate count only; handles are not matched one by one.
        declared = len(node.data.branches or [])
        if len(index.outgoing(node.id)) < declared:
            result.add_warning(
                f'Branch node "{node.step_name}" has unconnected paths.',
                node_id=node.id,
            )

    def _find_cycle(self, index: GraphIndex):
        """Depth-first search for a back edge.

        Returns the id of the root node whose traversal found the first
        cycle, or None for an acyclic graph.
        """
        visited: set[str] = set()
        on_stack: set[str] = set()

        for root in index.nodes:
            if root.id in visited:
                continue

            visited.add(root.id)
            on_stack.add(root.id)
            stack = [(root.id, iter(index.successors(root.id)))]

            while stack:
                node_id, children = stack[-1]
                child = next(children, None)
                if child is None:
                    on_stack.discard(node_id)
                    stack.pop()
                elif child in on_stack:
                    return root.id
                elif child not in visited:
                    visited.add(child)
                    on_stack.add(child)
                    stack.append((child, iter(index.successors(child))))

        return None


def validate_workflow(
    nodes: list[Node],
    edges: list[Edge],
    *,
    allow_empty: bool = True,
) -> ValidationResult:
    """Validate a graph with a default validator."""
    return WorkflowValidator().validate(nodes, edges, allow_empty=allow_empty)
