"""Pydantic models for the workflow graph."""
from workflow_graph.models.graph import (
    ActionCategory,
    ActionDefinition,
    ActionField,
    BranchData,
    ConditionData,
    ConditionLogic,
    ConditionOperator,
    Edge,
    Node,
    NodeData,
    NodeKind,
    Position,
    WorkflowGraph,
)
from workflow_graph.models.validation import (
    Diagnostic,
    NodeStatus,
    Severity,
    ValidationResult,
)
from workflow_graph.models.workflow_json import (
    NEW_WORKFLOW_ID,
    CompiledBranch,
    SaveWorkflowRequest,
    WorkflowJSON,
    WorkflowStep,
)

__all__ = [
    "ActionCategory",
    "ActionDefinition",
    "ActionField",
    "BranchData",
    "ConditionData",
    "ConditionLogic",
    "ConditionOperator",
    "Edge",
    "Node",
    "NodeData",
    "NodeKind",
    "Position",
    "WorkflowGraph",
    "Diagnostic",
    "NodeStatus",
    "Severity",
    "ValidationResult",
    "NEW_WORKFLOW_ID",
    "CompiledBranch",
    "SaveWorkflowRequest",
    "WorkflowJSON",
    "WorkflowStep",
]
