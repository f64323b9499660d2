"""Kinetic state of a layout run."""

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from kgviz.graph.model import GraphModel

# Golden angle used for the initial spiral placement
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))
INITIAL_RADIUS = 10.0


class RunState(str, Enum):
    """Whether the scheduler should keep requesting ticks."""

    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class NodeLayout:
    """Point-in-time layout values of one node."""

    id: str
    x: float
    y: float
    vx: float
    vy: float
    fx: float | None = None
    fy: float | None = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None


@dataclass
class SimulationState:
    """
    Per-node kinetic arrays plus global energy.

    Arrays are indexed by the node's slot in the GraphModel. A NaN pin
    means the node is free.
    """

    ids: tuple[str, ...]
    x: np.ndarray
    y: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    fx: np.ndarray
    fy: np.ndarray
    alpha: float = 1.0
    alpha_target: float = 0.0
    run_state: RunState = RunState.RUNNING
    ticks: int = 0
    _index: dict[str, int] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self._index:
            self._index = {node_id: i for i, node_id in enumerate(self.ids)}

    @classmethod
    def seed(
        cls,
        model: GraphModel,
        center: tuple[float, float] = (0.0, 0.0),
        previous: "SimulationState | None" = None,
        alpha: float = 1.0,
    ) -> "SimulationState":
        """Initial placement for a model.

        Positions come from (in order): the previous state for ids it
        already knows, the snapshot's seed x/y, the phyllotaxis spiral
        around `center`. Placement is deterministic.
        """
        n = len(model)
        x = np.empty(n, dtype=float)
        y = np.empty(n, dtype=float)
        vx = np.zeros(n, dtype=float)
        vy = np.zeros(n, dtype=float)
        cx, cy = center

        for i, node in enumerate(model.nodes):
            prior = previous.index_of(node.id) if previous is not None else None
            if prior is not None:
                x[i] = previous.x[prior]
                y[i] = previous.y[prior]
                vx[i] = previous.vx[prior]
                vy[i] = previous.vy[prior]
            elif node.x is not None and node.y is not None:
                x[i] = node.x
                y[i] = node.y
            else:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                x[i] = cx + radius * math.cos(angle)
                y[i] = cy + radius * math.sin(angle)

        return cls(
            ids=tuple(node.id for node in model.nodes),
            x=x,
            y=y,
            vx=vx,
            vy=vy,
            fx=np.full(n, np.nan),
            fy=np.full(n, np.nan),
            alpha=alpha,
        )

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def running(self) -> bool:
        return self.run_state is RunState.RUNNING

    @property
    def pinned_mask(self) -> np.ndarray:
        return ~np.isnan(self.fx)

    def index_of(self, node_id: str) -> int | None:
        return self._index.get(node_id)

    def position(self, node_id: str) -> tuple[float, float] | None:
        i = self._index.get(node_id)
        if i is None:
            return None
        return float(self.x[i]), float(self.y[i])

    def layout_of(self, node_id: str) -> NodeLayout | None:
        i = self._index.get(node_id)
        if i is None:
            return None
        pinned = not math.isnan(self.fx[i])
        return NodeLayout(
            id=node_id,
            x=float(self.x[i]),
            y=float(self.y[i]),
            vx=float(self.vx[i]),
            vy=float(self.vy[i]),
            fx=float(self.fx[i]) if pinned else None,
            fy=float(self.fy[i]) if pinned else None,
        )

    def positions(self) -> dict[str, tuple[float, float]]:
        return {
            node_id: (float(self.x[i]), float(self.y[i]))
            for i, node_id in enumerate(self.ids)
        }
