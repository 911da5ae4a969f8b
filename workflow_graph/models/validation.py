"""Validation result models shared by the validator and the editor."""
from enum import Enum

from pydantic import Field, computed_field

from workflow_graph.models.graph import GraphModel


class Severity(str, Enum):
    """Diagnostic severity. Only errors block compilation."""
    ERROR = "error"
    WARNING = "warning"


class NodeStatus(str, Enum):
    """Live badge state of a single node."""
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(GraphModel):
    """A single validation finding."""

    node_id: str = Field("", alias="nodeId", description="Offending node id, empty for graph-level findings")
    severity: Severity = Field(..., alias="type")
    message: str = Field(..., description="Human readable message")


class ValidationResult(GraphModel):
    """Categorized diagnostics for a whole graph."""

    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)

    @computed_field(alias="isValid")
    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, message: str, node_id: str = "") -> None:
        self.errors.append(Diagnostic(node_id=node_id, severity=Severity.ERROR, message=message))

    def add_warning(self, message: str, node_id: str = "") -> None:
        self.warnings.append(Diagnostic(node_id=node_id, severity=Severity.WARNING, message=message))
