"""Unit tests for node and edge records."""

import pytest

from kgviz.models import DEFAULT_NODE_TYPE, Edge, Node


class TestNode:
    """Tests for Node model."""

    def test_create_node_defaults(self) -> None:
        """Test creating a node with only required fields."""
        node = Node(id="n1", name="Docker")
        assert node.type == DEFAULT_NODE_TYPE
        assert node.description is None
        assert node.properties == {}
        assert node.x is None and node.y is None

    def test_node_from_dict_missing_type(self) -> None:
        """Test a missing or empty type falls back to Unknown."""
        assert Node.from_dict({"id": "a", "name": "A"}).type == "Unknown"
        assert Node.from_dict({"id": "a", "name": "A", "type": ""}).type == "Unknown"

    def test_node_to_dict_roundtrip(self) -> None:
        """Test converting node to dictionary and back."""
        node = Node(
            id="py",
            name="Python",
            type="Technology",
            description="Language",
            properties={"year": 1991},
            x=1.0,
            y=2.0,
        )
        data = node.to_dict()
        assert data["x"] == 1.0
        assert Node.from_dict(data) == node

    def test_node_to_dict_omits_partial_position(self) -> None:
        """Test that a half-specified seed position is not serialized."""
        data = Node(id="a", name="A", x=5.0).to_dict()
        assert "x" not in data
        assert "y" not in data

    @pytest.mark.parametrize(
        "needle,expected",
        [
            ("", True),
            ("pyth", True),
            ("language", True),
            ("rust", False),
        ],
    )
    def test_matches(self, needle: str, expected: bool) -> None:
        """Test substring matching against name and description."""
        node = Node(id="py", name="Python", description="Programming Language")
        assert node.matches(needle.casefold()) is expected

    def test_matches_without_description(self) -> None:
        """Test matching a node that has no description."""
        node = Node(id="a", name="AI")
        assert not node.matches("ml")

    def test_display_properties(self) -> None:
        """Test list values are joined with commas."""
        node = Node(
            id="a",
            name="A",
            properties={"tags": ["x", "y", None], "count": 3, "missing": None},
        )
        assert node.display_properties() == {"tags": "x, y, ", "count": "3", "missing": ""}

    def test_node_is_hashable(self) -> None:
        """Test nodes with dict properties can still live in sets."""
        node = Node(id="a", name="A", properties={"k": "v"})
        assert node in {node}


class TestEdge:
    """Tests for Edge model."""

    def test_label_prefers_relationship(self) -> None:
        """Test the label is the relationship, falling back to type."""
        assert Edge("a", "b", relationship="uses", type="rel").label == "uses"
        assert Edge("a", "b", type="rel").label == "rel"
        assert Edge("a", "b").label == ""

    def test_other_endpoint(self) -> None:
        """Test resolving the opposite endpoint."""
        edge = Edge("a", "b")
        assert edge.other("a") == "b"
        assert edge.other("b") == "a"
        assert edge.touches("a") and edge.touches("b")
        assert not edge.touches("c")

    def test_self_loop(self) -> None:
        """Test self-loop detection."""
        assert Edge("a", "a").is_self_loop
        assert not Edge("a", "b").is_self_loop

    def test_parallel_edges_distinct_by_index(self) -> None:
        """Test identical endpoints and labels stay distinct through index."""
        first = Edge("a", "b", relationship="r", index=0)
        second = Edge("a", "b", relationship="r", index=1)
        assert first != second
        assert len({first, second}) == 2

    def test_edge_from_dict(self) -> None:
        """Test creating edge from dictionary."""
        edge = Edge.from_dict({"source": "a", "target": "b", "relationship": "r"})
        assert edge.source == "a"
        assert edge.target == "b"
        assert edge.type is None
        assert edge.to_dict()["relationship"] == "r"
