"""Forces of the layout simulation.

Every force follows the same two-step protocol: `initialize` once per
model (precomputes per-edge or per-node constants) and `apply` once per
tick, adding to the velocity arrays of the state (the centering force
shifts positions directly). Forces read pinned nodes like any other, so a
dragged node still pushes and pulls its neighbours.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Protocol

import numpy as np

from kgviz.config import settings
from kgviz.graph.model import GraphModel
from kgviz.layout.quadtree import QuadCell, QuadTree
from kgviz.layout.state import SimulationState

logger = logging.getLogger(__name__)


def jiggle(rng: np.random.Generator) -> float:
    """Tiny random offset to separate coincident points."""
    return (rng.random() - 0.5) * 1e-6


class Force(Protocol):
    """Interface shared by all forces."""

    name: str

    def initialize(self, model: GraphModel, state: SimulationState, rng: np.random.Generator) -> None:
        ...

    def apply(self, state: SimulationState, alpha: float) -> None:
        ...


class LinkForce:
    """
    Spring along every edge toward a rest distance.

    Strength per edge is 1 / min(degree(source), degree(target)) so hubs are
    not torn apart; the correction is split between the endpoints in
    proportion to their degrees (bias).
    """

    name = "link"

    def __init__(self, distance: float | None = None) -> None:
        self.distance = distance if distance is not None else settings.link_distance
        self._source = np.empty(0, dtype=int)
        self._target = np.empty(0, dtype=int)
        self._strength = np.empty(0, dtype=float)
        self._bias = np.empty(0, dtype=float)
        self._rng: np.random.Generator | None = None

    def initialize(self, model: GraphModel, state: SimulationState, rng: np.random.Generator) -> None:
        self._rng = rng
        pairs = [
            (model.index_of(edge.source), model.index_of(edge.target))
            for edge in model.edges
            if not edge.is_self_loop
        ]
        n = len(model)
        count = np.zeros(n, dtype=float)
        for s, t in pairs:
            count[s] += 1
            count[t] += 1

        self._source = np.array([s for s, _ in pairs], dtype=int)
        self._target = np.array([t for _, t in pairs], dtype=int)
        if pairs:
            cs = count[self._source]
            ct = count[self._target]
            self._strength = 1.0 / np.minimum(cs, ct)
            self._bias = cs / (cs + ct)
        else:
            self._strength = np.empty(0, dtype=float)
            self._bias = np.empty(0, dtype=float)

    def apply(self, state: SimulationState, alpha: float) -> None:
        if not len(self._source):
            return
        s, t = self._source, self._target
        dx = state.x[t] + state.vx[t] - state.x[s] - state.vx[s]
        dy = state.y[t] + state.vy[t] - state.y[s] - state.vy[s]

        zero_x = dx == 0
        zero_y = dy == 0
        if zero_x.any() or zero_y.any():
            for k in np.flatnonzero(zero_x):
                dx[k] = jiggle(self._rng)
            for k in np.flatnonzero(zero_y):
                dy[k] = jiggle(self._rng)

        length = np.sqrt(dx * dx + dy * dy)
        scale = (length - self.distance) / length * alpha * self._strength
        dx *= scale
        dy *= scale

        np.add.at(state.vx, t, -dx * self._bias)
        np.add.at(state.vy, t, -dy * self._bias)
        np.add.at(state.vx, s, dx * (1 - self._bias))
        np.add.at(state.vy, s, dy * (1 - self._bias))


class ManyBodyForce:
    """
    Pairwise charge between all nodes; negative strength repels.

    Exact and vectorised up to `barnes_hut_threshold` nodes, Barnes-Hut
    approximation over a quadtree beyond that.
    """

    name = "charge"

    def __init__(
        self,
        strength: float | None = None,
        theta: float | None = None,
        distance_min: float | None = None,
        barnes_hut_threshold: int | None = None,
    ) -> None:
        self.strength = strength if strength is not None else settings.charge_strength
        self.theta = theta if theta is not None else settings.charge_theta
        self.distance_min = distance_min if distance_min is not None else settings.charge_distance_min
        self.barnes_hut_threshold = (
            barnes_hut_threshold if barnes_hut_threshold is not None
            else settings.barnes_hut_threshold
        )
        self._strengths = np.empty(0, dtype=float)
        self._rng: np.random.Generator | None = None

    def initialize(self, model: GraphModel, state: SimulationState, rng: np.random.Generator) -> None:
        self._rng = rng
        self._strengths = np.full(len(model), self.strength, dtype=float)

    def uses_barnes_hut(self, n: int) -> bool:
        return n > self.barnes_hut_threshold

    def apply(self, state: SimulationState, alpha: float) -> None:
        n = len(state)
        if n < 2:
            return
        if self.uses_barnes_hut(n):
            self._apply_barnes_hut(state, alpha)
        else:
            self._apply_exact(state, alpha)

    def _apply_exact(self, state: SimulationState, alpha: float) -> None:
        dx = state.x[np.newaxis, :] - state.x[:, np.newaxis]
        dy = state.y[np.newaxis, :] - state.y[:, np.newaxis]
        off_diagonal = ~np.eye(len(state), dtype=bool)

        coincident = (dx == 0) & off_diagonal
        if coincident.any():
            for i, j in zip(*np.nonzero(coincident)):
                dx[i, j] = jiggle(self._rng)
        coincident = (dy == 0) & off_diagonal
        if coincident.any():
            for i, j in zip(*np.nonzero(coincident)):
                dy[i, j] = jiggle(self._rng)

        d2 = dx * dx + dy * dy
        min2 = self.distance_min * self.distance_min
        d2 = np.where(d2 < min2, np.sqrt(min2 * d2), d2)
        np.fill_diagonal(d2, 1.0)

        weight = self._strengths[np.newaxis, :] * alpha / d2
        np.fill_diagonal(weight, 0.0)

        state.vx += (dx * weight).sum(axis=1)
        state.vy += (dy * weight).sum(axis=1)

    def _apply_barnes_hut(self, state: SimulationState, alpha: float) -> None:
        xs = state.x.tolist()
        ys = state.y.tolist()
        strengths = self._strengths.tolist()
        tree = QuadTree(xs, ys)
        tree.accumulate(strengths)

        theta2 = self.theta * self.theta
        min2 = self.distance_min * self.distance_min
        rng = self._rng
        dvx = [0.0] * len(xs)
        dvy = [0.0] * len(xs)

        for i in range(len(xs)):
            xi, yi = xs[i], ys[i]
            ax = 0.0
            ay = 0.0

            def visit(cell: QuadCell) -> bool:
                nonlocal ax, ay
                if not cell.value:
                    return True
                x = cell.cx - xi
                y = cell.cy - yi
                w = cell.size
                l = x * x + y * y

                # Far enough: treat the whole cell as one body
                if w * w / theta2 < l:
                    if x == 0:
                        x = jiggle(rng)
                        l += x * x
                    if y == 0:
                        y = jiggle(rng)
                        l += y * y
                    if l < min2:
                        l = math.sqrt(min2 * l)
                    ax += x * cell.value * alpha / l
                    ay += y * cell.value * alpha / l
                    return True

                if cell.children is not None:
                    return False

                for j in cell.points:
                    if j == i:
                        continue
                    px = xs[j] - xi
                    py = ys[j] - yi
                    pl = px * px + py * py
                    if px == 0:
                        px = jiggle(rng)
                        pl += px * px
                    if py == 0:
                        py = jiggle(rng)
                        pl += py * py
                    if pl < min2:
                        pl = math.sqrt(min2 * pl)
                    k = strengths[j] * alpha / pl
                    ax += px * k
                    ay += py * k
                return True

            tree.visit(visit)
            dvx[i] = ax
            dvy[i] = ay

        state.vx += np.asarray(dvx)
        state.vy += np.asarray(dvy)


class CenterForce:
    """Translate free nodes so the centroid of the whole set moves to (cx, cy)."""

    name = "center"

    def __init__(
        self,
        cx: float | None = None,
        cy: float | None = None,
        strength: float | None = None,
    ) -> None:
        self.cx = cx if cx is not None else settings.canvas_width / 2
        self.cy = cy if cy is not None else settings.canvas_height / 2
        self.strength = strength if strength is not None else settings.center_strength

    def initialize(self, model: GraphModel, state: SimulationState, rng: np.random.Generator) -> None:
        pass

    def apply(self, state: SimulationState, alpha: float) -> None:
        if not len(state):
            return
        sx = (float(state.x.mean()) - self.cx) * self.strength
        sy = (float(state.y.mean()) - self.cy) * self.strength
        free = ~state.pinned_mask
        state.x[free] -= sx
        state.y[free] -= sy


class CollideForce:
    """
    Push overlapping circles apart.

    Candidate pairs come from a uniform grid with cells of one diameter, so
    only the 3x3 block around each node is inspected.
    """

    name = "collide"

    def __init__(self, radius: float | None = None, strength: float | None = None) -> None:
        self.radius = radius if radius is not None else settings.collision_radius
        self.strength = strength if strength is not None else settings.collision_strength
        self._rng: np.random.Generator | None = None

    def initialize(self, model: GraphModel, state: SimulationState, rng: np.random.Generator) -> None:
        self._rng = rng

    def apply(self, state: SimulationState, alpha: float) -> None:
        n = len(state)
        if n < 2 or self.radius <= 0:
            return
        # Predicted positions
        px = (state.x + state.vx).tolist()
        py = (state.y + state.vy).tolist()
        cell_size = 2 * self.radius
        reach = 2 * self.radius
        reach2 = reach * reach

        grid: dict[tuple[int, int], list[int]] = defaultdict(list)
        cells = []
        for i in range(n):
            key = (math.floor(px[i] / cell_size), math.floor(py[i] / cell_size))
            grid[key].append(i)
            cells.append(key)

        dvx = [0.0] * n
        dvy = [0.0] * n
        rng = self._rng
        for i in range(n):
            gx, gy = cells[i]
            for ox in (-1, 0, 1):
                for oy in (-1, 0, 1):
                    for j in grid.get((gx + ox, gy + oy), ()):
                        if j <= i:
                            continue
                        x = px[i] - px[j]
                        y = py[i] - py[j]
                        l = x * x + y * y
                        if l >= reach2:
                            continue
                        if x == 0:
                            x = jiggle(rng)
                            l += x * x
                        if y == 0:
                            y = jiggle(rng)
                            l += y * y
                        l = math.sqrt(l)
                        l = (reach - l) / l * self.strength
                        x *= l
                        y *= l
                        # Equal radii split the correction evenly
                        dvx[i] += x * 0.5
                        dvy[i] += y * 0.5
                        dvx[j] -= x * 0.5
                        dvy[j] -= y * 0.5

        state.vx += np.asarray(dvx)
        state.vy += np.asarray(dvy)


def default_forces(
    center: tuple[float, float] | None = None,
    barnes_hut_threshold: int | None = None,
) -> list[Force]:
    """Link, charge, centering and collision forces with configured defaults."""
    cx, cy = center if center is not None else (None, None)
    return [
        LinkForce(),
        ManyBodyForce(barnes_hut_threshold=barnes_hut_threshold),
        CenterForce(cx=cx, cy=cy),
        CollideForce(),
    ]
