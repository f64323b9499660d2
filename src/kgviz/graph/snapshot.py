"""Snapshot payload schema.

The graph arrives from an external fetch as a plain mapping:

    {"nodes": [{"id", "name", "type"?, "description"?, "properties"?, "x"?, "y"?}],
     "edges": [{"source", "target", "relationship"?, "type"?}]}

`links` is accepted as an alias of `edges`. A single malformed entry rejects
the whole snapshot.
"""

import logging
from typing import Any, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from kgviz.graph.errors import MalformedSnapshot
from kgviz.models import DEFAULT_NODE_TYPE, Edge, Node

logger = logging.getLogger(__name__)

ScalarPayload = Union[str, int, float, bool, None]


class NodePayload(BaseModel):
    """One node entry of the snapshot."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str
    type: str | None = None
    description: str | None = None
    properties: dict[str, Union[ScalarPayload, list[ScalarPayload]]] = Field(default_factory=dict)
    x: float | None = Field(default=None, allow_inf_nan=False)
    y: float | None = Field(default=None, allow_inf_nan=False)

    def to_node(self) -> Node:
        return Node(
            id=self.id,
            name=self.name,
            type=self.type or DEFAULT_NODE_TYPE,
            description=self.description,
            properties=dict(self.properties),
            x=self.x,
            y=self.y,
        )


class EdgePayload(BaseModel):
    """One edge entry of the snapshot."""

    model_config = ConfigDict(extra="ignore")

    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    relationship: str | None = None
    type: str | None = None

    def to_edge(self) -> Edge:
        return Edge(
            source=self.source,
            target=self.target,
            relationship=self.relationship,
            type=self.type,
        )


class GraphSnapshot(BaseModel):
    """Whole snapshot as delivered by the fetch collaborator."""

    model_config = ConfigDict(extra="ignore")

    nodes: list[NodePayload] = Field(default_factory=list)
    edges: list[EdgePayload] = Field(
        default_factory=list,
        validation_alias=AliasChoices("edges", "links"),
    )


def parse_snapshot(data: Any) -> tuple[list[Node], list[Edge]]:
    """Validate a raw snapshot mapping and convert it to model records.

    Raises:
        MalformedSnapshot: if any entry is missing required fields or has
            the wrong shape.
    """
    if isinstance(data, GraphSnapshot):
        snapshot = data
    else:
        try:
            snapshot = GraphSnapshot.model_validate(data)
        except ValidationError as e:
            errors = [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ]
            logger.debug(f"Snapshot failed schema validation: {errors}")
            raise MalformedSnapshot(
                f"Snapshot rejected: {e.error_count()} invalid field(s)", errors=errors
            ) from e

    nodes = [payload.to_node() for payload in snapshot.nodes]
    edges = [payload.to_edge() for payload in snapshot.edges]
    return nodes, edges
