"""Force-directed layout simulation.

Algorithm (one tick, see `advance`):
1. Move alpha toward alpha_target by alpha_decay
2. Let every force add to node velocities
3. Free nodes: damp velocity, then step position by velocity
   Pinned nodes: snap to the pin, zero velocity
4. Stop once alpha falls below alpha_min
"""

import logging
import math
from typing import Callable, Iterable

import numpy as np

from kgviz.config import settings
from kgviz.graph.model import GraphModel
from kgviz.layout.forces import Force, default_forces
from kgviz.layout.state import NodeLayout, RunState, SimulationState

logger = logging.getLogger(__name__)


def advance(
    state: SimulationState,
    forces: Iterable[Force],
    alpha_decay: float,
    alpha_min: float,
    velocity_decay: float,
) -> SimulationState:
    """Run one tick against an explicit state object."""
    state.alpha += (state.alpha_target - state.alpha) * alpha_decay

    for force in forces:
        force.apply(state, state.alpha)

    pinned = state.pinned_mask
    free = ~pinned
    keep = 1.0 - velocity_decay
    state.vx[free] *= keep
    state.vy[free] *= keep
    state.x[free] += state.vx[free]
    state.y[free] += state.vy[free]

    state.x[pinned] = state.fx[pinned]
    state.y[pinned] = state.fy[pinned]
    state.vx[pinned] = 0.0
    state.vy[pinned] = 0.0

    state.ticks += 1
    if state.alpha < alpha_min:
        state.run_state = RunState.STOPPED
    return state


class ForceSimulation:
    """
    Layout of one GraphModel.

    Owns the SimulationState and the force list; rebuilt when the model is
    replaced. Pin and reheat calls for ids the model does not know are
    ignored, since UI events can race a model replacement.
    """

    def __init__(
        self,
        model: GraphModel,
        forces: list[Force] | None = None,
        center: tuple[float, float] | None = None,
        alpha_decay: float | None = None,
        alpha_min: float | None = None,
        velocity_decay: float | None = None,
        reheat_alpha: float | None = None,
        seed: int | None = None,
        previous: SimulationState | None = None,
        initial_alpha: float = 1.0,
    ) -> None:
        self.model = model
        self.center = center if center is not None else (
            settings.canvas_width / 2,
            settings.canvas_height / 2,
        )
        self.alpha_decay = alpha_decay if alpha_decay is not None else settings.alpha_decay
        self.alpha_min = alpha_min if alpha_min is not None else settings.alpha_min
        self.velocity_decay = velocity_decay if velocity_decay is not None else settings.velocity_decay
        self.reheat_alpha = reheat_alpha if reheat_alpha is not None else settings.reheat_alpha
        self.seed = seed if seed is not None else settings.random_seed

        self.rng = np.random.default_rng(self.seed)
        self.state = SimulationState.seed(
            model, center=self.center, previous=previous, alpha=initial_alpha
        )
        self.forces = forces if forces is not None else default_forces(center=self.center)
        for force in self.forces:
            force.initialize(model, self.state, self.rng)

        self._reheat_listeners: list[Callable[[], None]] = []
        logger.debug(
            f"Simulation seeded: {len(model)} nodes, alpha={self.state.alpha:.3f}, seed={self.seed}"
        )

    @property
    def alpha(self) -> float:
        return self.state.alpha

    @property
    def alpha_target(self) -> float:
        return self.state.alpha_target

    @property
    def running(self) -> bool:
        return self.state.running

    def on_reheat(self, listener: Callable[[], None]) -> None:
        """Register a callback fired whenever ticking is re-armed."""
        self._reheat_listeners.append(listener)

    def tick(self, iterations: int = 1) -> bool:
        """Advance the layout; returns whether the simulation is still running."""
        for _ in range(iterations):
            advance(
                self.state,
                self.forces,
                alpha_decay=self.alpha_decay,
                alpha_min=self.alpha_min,
                velocity_decay=self.velocity_decay,
            )
        return self.state.running

    def ticks_to_settle(self) -> int | None:
        """Upper bound on ticks until alpha drops below alpha_min.

        None while an alpha target keeps the layout warm (during a drag).
        """
        alpha = self.state.alpha
        if alpha < self.alpha_min:
            return 0
        if self.state.alpha_target >= self.alpha_min:
            return None
        target = self.state.alpha_target
        ratio = (self.alpha_min - target) / (alpha - target)
        return math.ceil(math.log(ratio) / math.log(1 - self.alpha_decay)) + 1

    def reheat(self, to_alpha: float | None = None) -> None:
        """Restore energy and re-arm ticking."""
        alpha = self.reheat_alpha if to_alpha is None else to_alpha
        self.state.alpha = min(max(alpha, 0.0), 1.0)
        self.state.run_state = RunState.RUNNING
        for listener in self._reheat_listeners:
            listener()

    def set_alpha_target(self, target: float) -> None:
        self.state.alpha_target = min(max(target, 0.0), 1.0)

    def stop(self) -> None:
        self.state.run_state = RunState.STOPPED

    def pin(self, node_id: str, x: float, y: float) -> bool:
        """Fix a node at (x, y); it leaves integration until unpinned.

        Non-finite coordinates are refused and leave any existing pin in place.
        """
        i = self.state.index_of(node_id)
        if i is None:
            logger.debug(f"Ignoring pin for unknown node {node_id!r}")
            return False
        if not (math.isfinite(x) and math.isfinite(y)):
            logger.debug(f"Ignoring non-finite pin ({x!r}, {y!r}) for {node_id!r}")
            return False
        self.state.fx[i] = x
        self.state.fy[i] = y
        self.state.x[i] = x
        self.state.y[i] = y
        self.state.vx[i] = 0.0
        self.state.vy[i] = 0.0
        return True

    def unpin(self, node_id: str) -> bool:
        i = self.state.index_of(node_id)
        if i is None:
            logger.debug(f"Ignoring unpin for unknown node {node_id!r}")
            return False
        self.state.fx[i] = np.nan
        self.state.fy[i] = np.nan
        return True

    def is_pinned(self, node_id: str) -> bool:
        i = self.state.index_of(node_id)
        return i is not None and not math.isnan(self.state.fx[i])

    def position(self, node_id: str) -> tuple[float, float] | None:
        return self.state.position(node_id)

    def layout_of(self, node_id: str) -> NodeLayout | None:
        return self.state.layout_of(node_id)

    def positions(self) -> dict[str, tuple[float, float]]:
        return self.state.positions()

    def find(self, x: float, y: float, radius: float = math.inf) -> str | None:
        """Closest node to a model-space point within radius."""
        if not len(self.state):
            return None
        d2 = (self.state.x - x) ** 2 + (self.state.y - y) ** 2
        i = int(np.argmin(d2))
        if d2[i] > radius * radius:
            return None
        return self.state.ids[i]
