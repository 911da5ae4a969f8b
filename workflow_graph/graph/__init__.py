"""Graph analysis: validation, compilation and layout."""
from workflow_graph.graph.compiler import WorkflowCompiler, generate_workflow_json
from workflow_graph.graph.index import GraphIndex
from workflow_graph.graph.layout import (
    auto_arrange_nodes,
    find_non_overlapping_position,
    get_default_node_position,
    get_node_bounds,
    nodes_overlap,
    snap_to_grid,
)
from workflow_graph.graph.status import get_node_validation_status
from workflow_graph.graph.validator import WorkflowValidator, validate_workflow

__all__ = [
    "WorkflowCompiler",
    "generate_workflow_json",
    "GraphIndex",
    "auto_arrange_nodes",
    "find_non_overlapping_position",
    "get_default_node_position",
    "get_node_bounds",
    "nodes_overlap",
    "snap_to_grid",
    "get_node_validation_status",
    "WorkflowValidator",
    "validate_workflow",
]
