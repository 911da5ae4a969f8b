"""Edge lookups shared by the validator, compiler and layout engine.

All three must agree on which node starts the workflow and on how edges
that point at missing nodes are treated, so they all read the graph
through this index.
"""
from typing import Optional

from workflow_graph.models.graph import Edge, Node


class GraphIndex:
    """Read-only adjacency view over an ordered node list and its edges.

    Edges whose source or target does not name an existing node are kept
    aside in ``dangling_edges`` and take no part in any lookup.
    """

    def __init__(self, nodes: list[Node], edges: list[Edge]):
        self.nodes = nodes
        self._nodes_by_id: dict[str, Node] = {}
        for node in nodes:
            self._nodes_by_id.setdefault(node.id, node)

        self.resolved_edges: list[Edge] = []
        self.dangling_edges: list[Edge] = []
        self._outgoing: dict[str, list[Edge]] = {}
        self._incoming: dict[str, list[Edge]] = {}

        for edge in edges:
            if edge.source not in self._nodes_by_id or edge.target not in self._nodes_by_id:
                self.dangling_edges.append(edge)
                continue
            self.resolved_edges.append(edge)
            self._outgoing.setdefault(edge.source, []).append(edge)
            self._incoming.setdefault(edge.target, []).append(edge)

    def node_by_id(self, node_id: str) -> Optional[Node]:
        return self._nodes_by_id.get(node_id)

    def outgoing(self, node_id: str) -> list[Edge]:
        """Resolved edges leaving ``node_id``, in input order."""
        return self._outgoing.get(node_id, [])

    def incoming(self, node_id: str) -> list[Edge]:
        """Resolved edges entering ``node_id``, in input order."""
        return self._incoming.get(node_id, [])

    def successors(self, node_id: str) -> list[str]:
        return [edge.target for edge in self.outgoing(node_id)]

    def start_nodes(self) -> list[Node]:
        """Nodes without incoming edges, in node list order."""
        return [node for node in self.nodes if not self.incoming(node.id)]

    def start_node(self) -> Optional[Node]:
        """The node execution starts from: the first start candidate."""
        candidates = self.start_nodes()
        return candidates[0] if candidates else None

    def target_temp_id(self, edge: Optional[Edge]) -> Optional[str]:
        """tempId of the node an edge points at."""
        if edge is None:
            return None
        target = self.node_by_id(edge.target)
        return target.temp_id if target else None

    def edge_for_handle(self, node_id: str, handle: str) -> Optional[Edge]:
        """First outgoing edge of ``node_id`` leaving through ``handle``."""
        for edge in self.outgoing(node_id):
            if edge.source_handle == handle:
                return edge
        return None
