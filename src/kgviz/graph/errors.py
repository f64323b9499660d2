"""Failures raised while turning a snapshot into a GraphModel."""


class GraphValidationError(ValueError):
    """A snapshot that cannot become a GraphModel.

    Fatal to the load attempt only; callers keep whatever model they had.
    """

    kind = "validation_error"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": str(self)}


class DuplicateNodeId(GraphValidationError):
    """Two nodes share the same id."""

    kind = "duplicate_node_id"

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Duplicate node id: {node_id!r}")
        self.node_id = node_id


class DanglingEdge(GraphValidationError):
    """An edge references a node id missing from the snapshot."""

    kind = "dangling_edge"

    def __init__(self, edge_index: int, missing_id: str) -> None:
        super().__init__(f"Edge #{edge_index} references unknown node {missing_id!r}")
        self.edge_index = edge_index
        self.missing_id = missing_id


class MalformedSnapshot(GraphValidationError):
    """Payload does not follow the snapshot schema (missing id/name, bad types)."""

    kind = "malformed_snapshot"

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class EmptyGraphWarning(UserWarning):
    """Snapshot with zero nodes. Rendered as an empty canvas, not an error."""
