"""Utilities for inspecting compiled workflows."""
from workflow_graph.utils.workflow_printer import (
    dump_workflow_json,
    print_workflow_compact,
    print_workflow_json,
)

__all__ = ["dump_workflow_json", "print_workflow_compact", "print_workflow_json"]
