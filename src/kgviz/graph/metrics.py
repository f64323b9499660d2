"""Summary statistics shown next to the graph."""

import logging
from collections import Counter
from dataclasses import dataclass, field

from kgviz.graph.model import GraphModel

logger = logging.getLogger(__name__)


@dataclass
class GraphStats:
    """Counts for the stats panel."""

    total_nodes: int = 0
    total_edges: int = 0
    node_type_count: int = 0
    avg_connections: float = 0.0  # edges per node, one decimal
    isolated_nodes: int = 0  # nodes with no edges
    connected_components: int = 0
    nodes_by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "node_type_count": self.node_type_count,
            "avg_connections": self.avg_connections,
            "isolated_nodes": self.isolated_nodes,
            "connected_components": self.connected_components,
            "nodes_by_type": dict(self.nodes_by_type),
        }


def compute_stats(model: GraphModel) -> GraphStats:
    """Compute stats for a model."""
    import networkx as nx

    total_nodes = len(model)
    total_edges = len(model.edges)

    if total_edges and total_nodes:
        avg_connections = round(total_edges / total_nodes, 1)
    else:
        avg_connections = 0.0

    by_type = Counter(node.type for node in model.nodes)
    nodes_by_type = {t: by_type[t] for t in model.type_legend()}

    isolated = sum(1 for node in model.nodes if not model.neighbors_of(node.id))
    components = nx.number_connected_components(model.to_networkx()) if total_nodes else 0

    return GraphStats(
        total_nodes=total_nodes,
        total_edges=total_edges,
        node_type_count=len(model.node_types()),
        avg_connections=avg_connections,
        isolated_nodes=isolated,
        connected_components=components,
        nodes_by_type=nodes_by_type,
    )
