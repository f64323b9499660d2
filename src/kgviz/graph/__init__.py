"""Graph snapshot model, filtering and statistics.

Provides:
- GraphModel (validated, immutable node/edge arena with adjacency index)
- Snapshot schema and parsing
- FilterEngine (search/type visibility subset)
- Graph statistics
"""

from kgviz.graph.errors import (
    DanglingEdge,
    DuplicateNodeId,
    EmptyGraphWarning,
    GraphValidationError,
    MalformedSnapshot,
)
from kgviz.graph.filter import FilterEngine, FilterResult, filter_graph
from kgviz.graph.metrics import GraphStats, compute_stats
from kgviz.graph.model import GraphModel
from kgviz.graph.snapshot import EdgePayload, GraphSnapshot, NodePayload, parse_snapshot

__all__ = [
    # Errors
    "GraphValidationError",
    "DuplicateNodeId",
    "DanglingEdge",
    "MalformedSnapshot",
    "EmptyGraphWarning",
    # Model
    "GraphModel",
    "GraphSnapshot",
    "NodePayload",
    "EdgePayload",
    "parse_snapshot",
    # Filtering
    "FilterEngine",
    "FilterResult",
    "filter_graph",
    # Stats
    "GraphStats",
    "compute_stats",
]
