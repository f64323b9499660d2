"""Search-term and type-based visibility filtering.

Filtering only hides. Hidden nodes keep participating in the layout physics,
so changing the filter never moves the nodes that remain visible.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from kgviz.graph.model import GraphModel
from kgviz.models import Edge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterResult:
    """Visible subset of a GraphModel."""

    node_ids: frozenset[str]
    edges: tuple[Edge, ...]
    search_term: str = ""
    types: frozenset[str] = frozenset()

    @property
    def edge_indices(self) -> frozenset[int]:
        return frozenset(edge.index for edge in self.edges)

    @property
    def is_unfiltered(self) -> bool:
        return not self.search_term and not self.types

    def is_node_visible(self, node_id: str) -> bool:
        return node_id in self.node_ids

    def is_edge_visible(self, edge: Edge) -> bool:
        return edge.source in self.node_ids and edge.target in self.node_ids


def filter_graph(
    model: GraphModel,
    search_term: str = "",
    types: Iterable[str] = (),
) -> FilterResult:
    """Compute the visible node and edge subsets.

    A node is visible when it matches the search term (case-insensitive
    substring of name or description; empty term matches everything) AND its
    type is in `types` (empty set allows every type). An edge is visible only
    when both endpoints are.
    """
    term = search_term or ""
    needle = term.casefold()
    allowed = frozenset(types)

    visible = frozenset(
        node.id
        for node in model.nodes
        if node.matches(needle) and (not allowed or node.type in allowed)
    )
    edges = tuple(
        edge for edge in model.edges
        if edge.source in visible and edge.target in visible
    )
    return FilterResult(node_ids=visible, edges=edges, search_term=term, types=allowed)


class FilterEngine:
    """Holds the active filter inputs and the subset they produce.

    The result is recomputed synchronously on every input change and is
    always `filter_graph(model, search_term, types)`.
    """

    def __init__(self, model: GraphModel | None = None) -> None:
        self._model = model or GraphModel.empty()
        self._search_term = ""
        self._types: frozenset[str] = frozenset()
        self._result = filter_graph(self._model)

    @property
    def model(self) -> GraphModel:
        return self._model

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def types(self) -> frozenset[str]:
        return self._types

    @property
    def result(self) -> FilterResult:
        return self._result

    def set_search_term(self, term: str | None) -> FilterResult:
        self._search_term = term or ""
        return self._recompute()

    def set_type_filter(self, types: Iterable[str] | None) -> FilterResult:
        self._types = frozenset(types or ())
        return self._recompute()

    def clear(self) -> FilterResult:
        self._search_term = ""
        self._types = frozenset()
        return self._recompute()

    def rebind(self, model: GraphModel) -> FilterResult:
        """Apply the current inputs to a replacement model."""
        self._model = model
        return self._recompute()

    def _recompute(self) -> FilterResult:
        self._result = filter_graph(self._model, self._search_term, self._types)
        logger.debug(
            f"Filter recomputed: term={self._search_term!r} types={sorted(self._types)} "
            f"-> {len(self._result.node_ids)}/{len(self._model)} nodes visible"
        )
        return self._result
