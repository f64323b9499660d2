"""kgviz data models."""

from kgviz.models.node import DEFAULT_NODE_TYPE, Edge, Node, PropertyValue, Scalar

__all__ = [
    "DEFAULT_NODE_TYPE",
    "Edge",
    "Node",
    "PropertyValue",
    "Scalar",
]
