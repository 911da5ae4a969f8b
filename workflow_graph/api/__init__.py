"""API route modules."""
from workflow_graph.api import workflows

__all__ = ["workflows"]
