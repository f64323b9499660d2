"""Node and edge records of a knowledge-graph snapshot."""

from dataclasses import dataclass, field
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]
PropertyValue = Union[Scalar, list[Scalar]]

DEFAULT_NODE_TYPE = "Unknown"


@dataclass(frozen=True)
class Node:
    """
    An entity in the knowledge graph.

    Carries only descriptive data. Kinetic state (position, velocity, pin)
    lives in the simulation's arrays and is addressed by node index.
    """

    id: str
    name: str
    type: str = DEFAULT_NODE_TYPE
    description: str | None = None
    properties: dict[str, PropertyValue] = field(default_factory=dict, hash=False, compare=False)

    # Optional seed position supplied by the snapshot
    x: float | None = None
    y: float | None = None

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on name or description."""
        if not needle:
            return True
        if needle in self.name.casefold():
            return True
        return bool(self.description) and needle in self.description.casefold()

    def display_properties(self) -> dict[str, str]:
        """Properties flattened to strings, lists joined with commas."""
        flat: dict[str, str] = {}
        for key, value in self.properties.items():
            if isinstance(value, list):
                flat[key] = ", ".join("" if v is None else str(v) for v in value)
            else:
                flat[key] = "" if value is None else str(value)
        return flat

    def to_dict(self) -> dict:
        """Convert to dictionary in snapshot form."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "properties": dict(self.properties),
        }
        if self.x is not None and self.y is not None:
            data["x"] = self.x
            data["y"] = self.y
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        """Create from a snapshot entry that has already been validated."""
        return cls(
            id=data["id"],
            name=data["name"],
            type=data.get("type") or DEFAULT_NODE_TYPE,
            description=data.get("description"),
            properties=dict(data.get("properties") or {}),
            x=data.get("x"),
            y=data.get("y"),
        )


@dataclass(frozen=True)
class Edge:
    """
    A typed relation between two nodes, referenced by id.

    `index` is the edge's slot in its GraphModel and keeps parallel edges
    with identical endpoints and labels distinct.
    """

    source: str
    target: str
    relationship: str | None = None
    type: str | None = None
    index: int = -1

    @property
    def label(self) -> str:
        """Text drawn at the edge midpoint."""
        return self.relationship or self.type or ""

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def other(self, node_id: str) -> str:
        """Endpoint opposite to node_id."""
        return self.target if node_id == self.source else self.source

    def touches(self, node_id: str) -> bool:
        return node_id == self.source or node_id == self.target

    def to_dict(self) -> dict:
        """Convert to dictionary in snapshot form."""
        return {
            "source": self.source,
            "target": self.target,
            "relationship": self.relationship,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        """Create from a snapshot entry that has already been validated."""
        return cls(
            source=data["source"],
            target=data["target"],
            relationship=data.get("relationship"),
            type=data.get("type"),
        )
