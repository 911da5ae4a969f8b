"""Utility to print compiled workflows in clean text representation."""

from typing import Union
import json

from workflow_graph.models.workflow_json import WorkflowJSON, WorkflowStep


def print_workflow_json(workflow: Union[WorkflowJSON, dict], include_config: bool = False) -> str:
    """
    Convert a compiled WorkflowJSON to a clean text representation.

    Args:
        workflow: WorkflowJSON model or its camelCase dict form
        include_config: Include step config in output (default: False)

    Returns:
        Formatted string representation of the workflow
    """
    if isinstance(workflow, dict):
        workflow = WorkflowJSON.model_validate(workflow)

    lines = []

    # Header
    lines.append("=" * 60)
    lines.append(f"  WORKFLOW: {workflow.workflow_id}")
    lines.append("=" * 60)
    lines.append(f"  Start: {workflow.start_step_temp_id or '(none)'}")
    lines.append("")

    names = {step.temp_id: step.step_name for step in workflow.steps}

    # Steps section
    lines.append("  STEPS:")
    lines.append("  " + "-" * 56)

    for i, step in enumerate(workflow.steps, 1):
        icon = _get_step_icon(step)
        lines.append(f"  {icon} [{i}] {step.step_name} ({step.temp_id})")
        lines.append(f"       Type: {step.type}")
        if step.action_id:
            lines.append(f"       Action: {step.action_id}")

        for label, target in _step_links(step):
            lines.append(f"       {label} ──→ {names.get(target, target)}")

        if include_config:
            config = {
                k: v for k, v in step.config.items()
                if k != "branches"
            }
            if config:
                lines.append("       Config:")
                for key, value in config.items():
                    lines.append(f"         • {key}: {_format_config_value(value)}")

        lines.append("")

    lines.append("=" * 60)

    return "\n".join(lines)


def print_workflow_compact(workflow: Union[WorkflowJSON, dict]) -> str:
    """
    Print a compact one-line flow, following next pointers from the start step.

    Branching and approval steps end the line; their paths are listed in
    the full representation.
    """
    if isinstance(workflow, dict):
        workflow = WorkflowJSON.model_validate(workflow)

    parts = []
    visited = set()
    current = workflow.get_step(workflow.start_step_temp_id)
    while current is not None and current.temp_id not in visited:
        visited.add(current.temp_id)
        parts.append(f"{_get_step_icon(current)} {current.step_name}")
        if current.next_step_temp_id is None:
            break
        current = workflow.get_step(current.next_step_temp_id)

    return " → ".join(parts) if parts else "(No steps)"


def _step_links(step: WorkflowStep) -> list[tuple[str, str]]:
    """Labelled outgoing links of a step."""
    links = []
    if step.next_step_temp_id:
        links.append(("next", step.next_step_temp_id))

    for branch in step.config.get("branches", []):
        target = branch.get("targetStepTempId")
        if target:
            links.append((f"if {branch.get('name', '?')}", target))

    for label, key in (("approve", "onApproveNextStepTempId"), ("reject", "onRejectNextStepTempId")):
        target = step.config.get(key)
        if target:
            links.append((label, target))

    return links


def _get_step_icon(step: WorkflowStep) -> str:
    """Get an icon for a step."""
    if step.type == "branch":
        return "🔀"
    if "onApproveNextStepTempId" in step.config:
        return "✅"
    return "⚙️"


def _format_config_value(value, max_len: int = 50) -> str:
    """Format a config value for display."""
    if isinstance(value, str):
        if len(value) > max_len:
            return f'"{value[:max_len]}..."'
        return f'"{value}"'
    elif isinstance(value, dict):
        return f"{{...}} ({len(value)} keys)"
    elif isinstance(value, list):
        return f"[...] ({len(value)} items)"
    else:
        return str(value)


def dump_workflow_json(workflow: WorkflowJSON) -> str:
    """Serialize a compiled workflow to its camelCase JSON text."""
    return json.dumps(workflow.model_dump(mode="json", by_alias=True), indent=2)
