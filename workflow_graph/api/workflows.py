"""Workflow graph API endpoints - validate, compile and lay out editor graphs.

The endpoints are stateless: every request carries the whole graph and
nothing is persisted.
"""
from typing import Literal, Optional

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import Field

from workflow_graph.errors import CANNOT_GENERATE_MESSAGE
from workflow_graph.graph.compiler import WorkflowCompiler
from workflow_graph.graph.layout import (
    auto_arrange_nodes,
    find_non_overlapping_position,
    get_default_node_position,
)
from workflow_graph.graph.status import get_node_validation_status
from workflow_graph.graph.validator import validate_workflow
from workflow_graph.models.graph import Edge, GraphModel, Node, Position
from workflow_graph.models.validation import NodeStatus, ValidationResult
from workflow_graph.models.workflow_json import WorkflowJSON

logger = structlog.get_logger()

router = APIRouter()


class GraphRequest(GraphModel):
    """Request body carrying an editor graph."""

    nodes: list[Node] = Field(default_factory=list, description="Ordered node list")
    edges: list[Edge] = Field(default_factory=list, description="Edge list")


class ValidateRequest(GraphRequest):
    """Request body for graph validation."""

    allow_empty: bool = Field(
        True,
        alias="allowEmpty",
        description="Treat an empty graph as valid",
    )


class CompileRequest(GraphRequest):
    """Request body for graph compilation."""

    workflow_id: Optional[str] = Field(
        None,
        alias="workflowId",
        description="Existing workflow id; omitted on first save",
    )


class PlacementRequest(GraphModel):
    """Request body for placing a new node."""

    nodes: list[Node] = Field(default_factory=list, description="Nodes already on the canvas")
    target: Optional[Position] = Field(
        None,
        description="Desired position; omitted for default placement",
    )
    viewport_center: Optional[Position] = Field(None, alias="viewportCenter")
    direction: Literal["right", "bottom", "diagonal"] = "diagonal"


@router.post("/validate", response_model=ValidationResult, response_model_by_alias=True)
def validate_graph(request: ValidateRequest) -> ValidationResult:
    """Validate a graph and return its errors and warnings."""
    return validate_workflow(request.nodes, request.edges, allow_empty=request.allow_empty)


@router.post("/compile", response_model=WorkflowJSON, response_model_by_alias=True)
def compile_graph(request: CompileRequest) -> WorkflowJSON:
    """
    Compile a graph to WorkflowJSON.

    Empty graphs and graphs with validation errors are rejected with 422;
    the response detail carries the validation result.
    """
    validation = validate_workflow(request.nodes, request.edges, allow_empty=False)
    workflow = WorkflowCompiler().compile(
        request.nodes,
        request.edges,
        validation=validation,
        workflow_id=request.workflow_id,
    )

    if workflow is None:
        logger.warning("compile_rejected", error_count=len(validation.errors))
        raise HTTPException(
            status_code=422,
            detail={
                "message": CANNOT_GENERATE_MESSAGE,
                "validation": validation.model_dump(mode="json", by_alias=True),
            },
        )

    return workflow


@router.post("/node-status")
def node_status(request: GraphRequest) -> dict[str, NodeStatus]:
    """Live status badge for every node, keyed by node id."""
    return {node.id: get_node_validation_status(node) for node in request.nodes}


@router.post("/arrange", response_model=list[Node], response_model_by_alias=True)
def arrange_graph(request: GraphRequest) -> list[Node]:
    """Auto-arrange a graph into layers by depth."""
    return auto_arrange_nodes(request.nodes, request.edges)


@router.post("/placement", response_model=Position)
def place_node(request: PlacementRequest) -> Position:
    """Find a position for a new node."""
    if request.target is None:
        return get_default_node_position(request.nodes, request.viewport_center)
    return find_non_overlapping_position(request.target, request.nodes, request.direction)
