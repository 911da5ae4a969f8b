"""Exceptions raised by the graph editing layer.

The validator and compiler never raise; they report diagnostics instead.
"""
from workflow_graph.models.validation import ValidationResult

CANNOT_GENERATE_MESSAGE = "Cannot generate workflow: Please fix validation errors"


class WorkflowGraphError(Exception):
    """Base error for workflow graph operations."""
    pass


class NodeNotFoundError(WorkflowGraphError):
    """Raised when an operation names a node that is not in the graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class EdgeNotFoundError(WorkflowGraphError):
    """Raised when an operation names an edge that is not in the graph."""

    def __init__(self, edge_id: str):
        self.edge_id = edge_id
        super().__init__(f"Edge not found: {edge_id}")


class InvalidBranchConfigError(WorkflowGraphError):
    """Raised when a branch edit would leave the node with too few paths."""
    pass


class WorkflowValidationError(WorkflowGraphError):
    """Raised when a save is attempted on a graph with validation errors."""

    def __init__(self, validation: ValidationResult):
        self.validation = validation
        super().__init__(CANNOT_GENERATE_MESSAGE)
