"""Compiler to transform the editor graph into WorkflowJSON.

The compiler handles:
- Choosing the start step (same rule as the validator)
- Resolving each node's successor through tempIds
- Resolving branch paths by their ``branch-N`` handles
- Encoding approve/reject paths of approval actions into step config
"""
from copy import deepcopy
from typing import Any, Optional

import structlog

from workflow_graph.errors import CANNOT_GENERATE_MESSAGE
from workflow_graph.graph.index import GraphIndex
from workflow_graph.graph.validator import validate_workflow
from workflow_graph.models.graph import (
    APPROVE_HANDLE,
    REJECT_HANDLE,
    ConditionLogic,
    Edge,
    Node,
    branch_handle,
)
from workflow_graph.models.validation import ValidationResult
from workflow_graph.models.workflow_json import (
    NEW_WORKFLOW_ID,
    CompiledBranch,
    WorkflowJSON,
    WorkflowStep,
)

logger = structlog.get_logger()

ON_APPROVE_KEY = "onApproveNextStepTempId"
ON_REJECT_KEY = "onRejectNextStepTempId"


class WorkflowCompiler:
    """Compiles an editor graph to WorkflowJSON."""

    def compile(
        self,
        nodes: list[Node],
        edges: list[Edge],
        validation: Optional[ValidationResult] = None,
        workflow_id: Optional[str] = None,
    ) -> Optional[WorkflowJSON]:
        """Compile a graph to WorkflowJSON.

        Compilation is gated on ``validation.is_valid``; warnings do not
        block it. When no validation result is passed the graph is
        validated first.

        Returns:
            WorkflowJSON, or None when the graph has validation errors
        """
        if validation is None:
            validation = validate_workflow(nodes, edges)

        if not validation.is_valid:
            logger.warning(
                "workflow_not_compiled",
                reason=CANNOT_GENERATE_MESSAGE,
                error_count=len(validation.errors),
            )
            return None

        logger.info("compile_start", workflow_id=workflow_id, node_count=len(nodes))

        index = GraphIndex(nodes, edges)
        start_node = index.start_node()

        steps = [self._compile_step(node, index) for node in nodes]

        workflow = WorkflowJSON(
            workflow_id=workflow_id or NEW_WORKFLOW_ID,
            start_step_temp_id=start_node.temp_id if start_node else "",
            steps=steps,
        )

        logger.info(
            "compile_complete",
            step_count=len(steps),
            start_step=workflow.start_step_temp_id,
        )

        return workflow

    def _compile_step(self, node: Node, index: GraphIndex) -> WorkflowStep:
        """Compile a single node to a step."""
        if node.is_branch:
            return WorkflowStep(
                temp_id=node.temp_id,
                step_name=node.step_name,
                type="branch",
                action_id=None,
                conditions=[],
                condition_logic=ConditionLogic.AND,
                config=self._build_branch_config(node, index),
                next_step_temp_id=None,
            )

        config = deepcopy(node.data.config)
        if node.is_approval:
            # Approve/reject paths live in config; the step pointer stays empty.
            config[ON_APPROVE_KEY] = index.target_temp_id(
                index.edge_for_handle(node.id, APPROVE_HANDLE)
            )
            config[ON_REJECT_KEY] = index.target_temp_id(
                index.edge_for_handle(node.id, REJECT_HANDLE)
            )
            next_step_temp_id = None
        else:
            outgoing = index.outgoing(node.id)
            next_step_temp_id = index.target_temp_id(outgoing[0]) if outgoing else None

        return WorkflowStep(
            temp_id=node.temp_id,
            step_name=node.step_name,
            type="action",
            action_id=node.data.action_id,
            conditions=[],
            condition_logic=ConditionLogic.AND,
            config=config,
            next_step_temp_id=next_step_temp_id,
        )

    def _build_branch_config(self, node: Node, index: GraphIndex) -> dict[str, Any]:
        """Resolve every declared path through its ``branch-N`` handle."""
        branches = []
        for i, branch in enumerate(node.data.branches or []):
            edge = index.edge_for_handle(node.id, branch_handle(i))
            compiled = CompiledBranch(
                name=branch.name,
                conditions=branch.conditions,
                condition_logic=branch.condition_logic,
                target_step_temp_id=index.target_temp_id(edge),
                next_step_temp_id_after_branch=None,
            )
            branches.append(compiled.model_dump(mode="json", by_alias=True))

        return {
            "branches": branches,
            "defaultTargetTempId": None,
        }

    def validate_compiled(self, compiled: WorkflowJSON) -> list[str]:
        """Check the linkage of a compiled workflow.

        Returns list of problems (empty if every tempId reference resolves).
        """
        errors = []
        temp_ids = set()

        for step in compiled.steps:
            if step.temp_id in temp_ids:
                errors.append(f"Duplicate step tempId: {step.temp_id}")
            temp_ids.add(step.temp_id)

        if compiled.steps and compiled.start_step_temp_id not in temp_ids:
            errors.append(f"Start step not found: {compiled.start_step_temp_id}")

        for step in compiled.steps:
            references = [step.next_step_temp_id]
            if step.type == "branch":
                references.extend(
                    b.get("targetStepTempId") for b in step.config.get("branches", [])
                )
            else:
                references.append(step.config.get(ON_APPROVE_KEY))
                references.append(step.config.get(ON_REJECT_KEY))

            for ref in references:
                if ref is not None and ref not in temp_ids:
                    errors.append(f"Step '{step.step_name}' links to unknown step: {ref}")

        return errors


def generate_workflow_json(
    nodes: list[Node],
    edges: list[Edge],
    validation: Optional[ValidationResult] = None,
    workflow_id: Optional[str] = None,
) -> Optional[WorkflowJSON]:
    """Compile a graph with a default compiler."""
    return WorkflowCompiler().compile(nodes, edges, validation, workflow_id)
