"""Workflow graph compiler, validator and layout engine."""

__version__ = "0.1.0"
