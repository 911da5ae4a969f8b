"""Node placement for the workflow editor.

Pure functions over positions and node lists:
- Grid snapping
- Bounding-box overlap checks
- Free-slot search for dropped, added and duplicated nodes
- Layered auto-arrangement by graph depth

Drop-time overlap checks and auto-arrangement share the same size and
spacing constants, so manually placed and arranged nodes line up.
"""
import math
from typing import NamedTuple, Optional

import structlog

from workflow_graph.graph.index import GraphIndex
from workflow_graph.models.graph import Edge, Node, Position

logger = structlog.get_logger()

NODE_WIDTH = 240
NODE_HEIGHT = 150
GRID_SIZE = 20
MIN_SPACING = 50

DEFAULT_NODE_POSITION = Position(x=250, y=100)
MAX_PLACEMENT_ATTEMPTS = 100

# Auto-arrange grid
COLUMN_SPACING = NODE_WIDTH + MIN_SPACING * 2
ROW_SPACING = NODE_HEIGHT + MIN_SPACING * 3

_STEP_X = NODE_WIDTH + MIN_SPACING
_STEP_Y = NODE_HEIGHT + MIN_SPACING

PLACEMENT_STEPS = {
    "right": (_STEP_X, 0),
    "bottom": (0, _STEP_Y),
    "diagonal": (_STEP_X / 2, _STEP_Y),
}


class NodeBounds(NamedTuple):
    """Box enclosing a set of nodes."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snap_to_grid(position: Position, cell_size: int = GRID_SIZE) -> Position:
    """Snap a position to the nearest grid point (halves round up)."""
    return Position(
        x=_round_half_up(position.x / cell_size) * cell_size,
        y=_round_half_up(position.y / cell_size) * cell_size,
    )


def nodes_overlap(pos1: Position, pos2: Position, padding: float = MIN_SPACING) -> bool:
    """Check whether two node boxes, grown by ``padding``, overlap."""
    return (
        abs(pos1.x - pos2.x) < NODE_WIDTH + padding
        and abs(pos1.y - pos2.y) < NODE_HEIGHT + padding
    )


def find_non_overlapping_position(
    target: Position,
    existing_nodes: list[Node],
    preferred_direction: str = "diagonal",
) -> Position:
    """Find a free, grid-aligned slot at or after ``target``.

    Candidates are ``target`` itself, then ``target`` moved one fixed step
    at a time in ``preferred_direction``. The first candidate that overlaps
    no existing node is returned; after MAX_PLACEMENT_ATTEMPTS the last
    candidate is returned as is.

    Args:
        target: Desired position
        existing_nodes: Nodes already on the canvas
        preferred_direction: "right", "bottom" or "diagonal"
    """
    if preferred_direction not in PLACEMENT_STEPS:
        raise ValueError(f"Unknown placement direction: {preferred_direction}")

    dx, dy = PLACEMENT_STEPS[preferred_direction]
    candidate = snap_to_grid(target)

    for i in range(MAX_PLACEMENT_ATTEMPTS):
        candidate = snap_to_grid(Position(x=target.x + dx * i, y=target.y + dy * i))
        if not any(nodes_overlap(candidate, node.position) for node in existing_nodes):
            return candidate

    logger.warning(
        "placement_attempts_exhausted",
        direction=preferred_direction,
        node_count=len(existing_nodes),
    )
    return candidate


def get_node_bounds(nodes: list[Node]) -> Optional[NodeBounds]:
    """Get the box enclosing all nodes, or None for an empty list."""
    if not nodes:
        return None

    return NodeBounds(
        min_x=min(n.position.x for n in nodes),
        max_x=max(n.position.x + NODE_WIDTH for n in nodes),
        min_y=min(n.position.y for n in nodes),
        max_y=max(n.position.y + NODE_HEIGHT for n in nodes),
    )


def get_default_node_position(
    nodes: list[Node],
    viewport_center: Optional[Position] = None,
) -> Position:
    """Position for a node added without a drop point.

    An empty canvas uses the viewport center (or a fixed default); otherwise
    the node goes one row below the most recently added node, moving further
    down until it is clear of every node.
    """
    if not nodes:
        return snap_to_grid(viewport_center or DEFAULT_NODE_POSITION)

    last = nodes[-1].position
    below = Position(x=last.x, y=last.y + _STEP_Y)
    return find_non_overlapping_position(below, nodes, "bottom")


def assign_layers(nodes: list[Node], edges: list[Edge]) -> dict[str, int]:
    """Assign every node a depth layer.

    Start nodes form layer 0 and each successor sits one layer below the
    node that first reaches it (breadth-first). Nodes that no start node
    reaches, i.e. cycles with no entry, are swept afterwards: each sweep
    starts a new layer below the deepest one so far.
    """
    index = GraphIndex(nodes, edges)
    layers: dict[str, int] = {}

    def sweep(roots: list[str], base: int) -> None:
        queue = []
        for root in roots:
            if root not in layers:
                layers[root] = base
                queue.append(root)
        while queue:
            current = queue.pop(0)
            for child in index.successors(current):
                if child not in layers:
                    layers[child] = layers[current] + 1
                    queue.append(child)

    sweep([n.id for n in index.start_nodes()], 0)

    for node in nodes:
        if node.id not in layers:
            sweep([node.id], max(layers.values(), default=-1) + 1)

    return layers


def auto_arrange_nodes(nodes: list[Node], edges: list[Edge]) -> list[Node]:
    """Lay the graph out in rows by depth.

    Layers are stacked top to bottom ROW_SPACING apart; nodes sharing a
    layer keep their list order and are centered horizontally COLUMN_SPACING
    apart. Returns copies of the nodes with only ``position`` changed.
    """
    if not nodes:
        return []

    layers = assign_layers(nodes, edges)

    by_layer: dict[int, list[str]] = {}
    for node in nodes:
        by_layer.setdefault(layers[node.id], []).append(node.id)

    arranged = []
    for node in nodes:
        level = layers[node.id]
        members = by_layer[level]
        offset = members.index(node.id) - (len(members) - 1) / 2
        position = snap_to_grid(Position(x=offset * COLUMN_SPACING, y=level * ROW_SPACING))
        arranged.append(node.model_copy(update={"position": position}, deep=True))

    logger.info(
        "nodes_arranged",
        node_count=len(arranged),
        layer_count=len(by_layer),
    )

    return arranged
