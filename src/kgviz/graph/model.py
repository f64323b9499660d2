"""Immutable graph container with a derived adjacency index."""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import cached_property
from typing import TYPE_CHECKING, Any, Iterable, Iterator

from kgviz.graph.errors import DanglingEdge, DuplicateNodeId
from kgviz.graph.snapshot import parse_snapshot
from kgviz.models import Edge, Node

if TYPE_CHECKING:
    import networkx as nx

logger = logging.getLogger(__name__)

Neighbor = tuple[str, Edge]


class GraphModel:
    """
    Nodes and edges of one snapshot.

    Nodes and edges live in flat tuples; every cross-reference is an id
    resolved through the adjacency index. Instances are never mutated after
    `build`; a refetch produces a new model.
    """

    def __init__(
        self,
        nodes: tuple[Node, ...],
        edges: tuple[Edge, ...],
        index: dict[str, int],
        adjacency: dict[str, frozenset[Neighbor]],
    ) -> None:
        self._nodes = nodes
        self._edges = edges
        self._index = index
        self._adjacency = adjacency

    @classmethod
    def build(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> GraphModel:
        """Validate and index a node/edge set.

        Raises:
            DuplicateNodeId: two nodes share an id
            DanglingEdge: an edge endpoint is not among the nodes
        """
        node_tuple = tuple(nodes)
        index: dict[str, int] = {}
        for i, node in enumerate(node_tuple):
            if node.id in index:
                raise DuplicateNodeId(node.id)
            index[node.id] = i

        indexed_edges: list[Edge] = []
        for i, edge in enumerate(edges):
            for endpoint in (edge.source, edge.target):
                if endpoint not in index:
                    raise DanglingEdge(i, endpoint)
            indexed_edges.append(edge if edge.index == i else replace(edge, index=i))
        edge_tuple = tuple(indexed_edges)

        neighbors: dict[str, set[Neighbor]] = {node.id: set() for node in node_tuple}
        for edge in edge_tuple:
            neighbors[edge.source].add((edge.target, edge))
            if not edge.is_self_loop:
                neighbors[edge.target].add((edge.source, edge))

        adjacency = {node_id: frozenset(items) for node_id, items in neighbors.items()}

        logger.debug(f"Built graph model: {len(node_tuple)} nodes, {len(edge_tuple)} edges")
        return cls(node_tuple, edge_tuple, index, adjacency)

    @classmethod
    def from_snapshot(cls, data: Any) -> GraphModel:
        """Parse a raw snapshot mapping and build the model from it."""
        nodes, edges = parse_snapshot(data)
        return cls.build(nodes, edges)

    @classmethod
    def empty(cls) -> GraphModel:
        return cls.build((), ())

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self._edges

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def node(self, node_id: str) -> Node | None:
        i = self._index.get(node_id)
        return None if i is None else self._nodes[i]

    def index_of(self, node_id: str) -> int | None:
        """Arena slot of a node, shared with the simulation arrays."""
        return self._index.get(node_id)

    def neighbors_of(self, node_id: str) -> frozenset[Neighbor]:
        """(neighbor id, edge) pairs for every edge touching node_id."""
        return self._adjacency.get(node_id, frozenset())

    def neighbor_ids(self, node_id: str) -> frozenset[str]:
        return frozenset(neighbor for neighbor, _ in self.neighbors_of(node_id))

    def degree(self, node_id: str) -> int:
        """Number of edge endpoints at node_id (self-loops count twice)."""
        return sum(2 if edge.is_self_loop else 1 for _, edge in self.neighbors_of(node_id))

    @cached_property
    def _type_legend(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for node in self._nodes:
            seen.setdefault(node.type, None)
        return tuple(seen)

    def type_legend(self) -> tuple[str, ...]:
        """Node types in first-seen order, for legends and filter menus."""
        return self._type_legend

    @cached_property
    def _node_types(self) -> frozenset[str]:
        return frozenset(self._type_legend)

    def node_types(self) -> frozenset[str]:
        """Distinct node type tags."""
        return self._node_types

    def to_networkx(self) -> nx.MultiGraph:
        """Undirected multigraph view for ad hoc analysis."""
        import networkx as nx

        graph = nx.MultiGraph()
        for node in self._nodes:
            graph.add_node(node.id, name=node.name, type=node.type)
        for edge in self._edges:
            graph.add_edge(edge.source, edge.target, key=edge.index, label=edge.label)
        return graph

    def __repr__(self) -> str:
        return f"GraphModel(nodes={len(self._nodes)}, edges={len(self._edges)})"
