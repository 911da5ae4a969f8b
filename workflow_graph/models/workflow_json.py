"""WorkflowJSON - the compiled step representation handed to the execution engine.

Every link between steps is expressed through ``tempId``; the editor's
transient node ids never appear here.
"""
from typing import Any, Literal, Optional

from pydantic import Field

from workflow_graph.models.graph import (
    ConditionData,
    ConditionLogic,
    Edge,
    GraphModel,
    Node,
)

NEW_WORKFLOW_ID = "new-workflow"


class CompiledBranch(GraphModel):
    """A branch path with its successor resolved to a step tempId."""

    name: str
    conditions: list[ConditionData] = Field(default_factory=list)
    condition_logic: ConditionLogic = Field(ConditionLogic.AND, alias="conditionLogic")
    target_step_temp_id: Optional[str] = Field(None, alias="targetStepTempId")
    next_step_temp_id_after_branch: Optional[str] = Field(None, alias="nextStepTempIdAfterBranch")


class WorkflowStep(GraphModel):
    """One executable step; exactly one per graph node."""

    temp_id: str = Field(..., alias="tempId")
    step_name: str = Field(..., alias="stepName")
    type: Literal["action", "branch"]
    action_id: Optional[str] = Field(None, alias="actionId")
    conditions: list[ConditionData] = Field(default_factory=list)
    condition_logic: ConditionLogic = Field(ConditionLogic.AND, alias="conditionLogic")
    config: dict[str, Any] = Field(default_factory=dict)
    next_step_temp_id: Optional[str] = Field(None, alias="nextStepTempId")


class WorkflowJSON(GraphModel):
    """Compiled workflow."""

    workflow_id: str = Field(NEW_WORKFLOW_ID, alias="workflowId")
    start_step_temp_id: str = Field("", alias="startStepTempId")
    steps: list[WorkflowStep] = Field(default_factory=list)

    def get_step(self, temp_id: str) -> Optional[WorkflowStep]:
        """Get a step by its tempId."""
        for step in self.steps:
            if step.temp_id == temp_id:
                return step
        return None


class SaveWorkflowRequest(GraphModel):
    """Payload handed to the persistence collaborator on save."""

    workflow_id: Optional[str] = Field(None, alias="workflowId")
    name: str
    description: Optional[str] = None
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    workflow_json: WorkflowJSON = Field(..., alias="workflowJSON")
