"""Point-region quadtree with Barnes-Hut aggregates.

Each cell stores the summed charge of the points below it and their
charge-weighted centroid, so a distant cell can stand in for all of them.
"""

from __future__ import annotations

from typing import Callable, Sequence

# Cells smaller than this hold coincident points in one leaf
MIN_CELL_SIZE = 1e-6


class QuadCell:
    """One square region of the tree."""

    __slots__ = ("x0", "y0", "size", "children", "points", "value", "cx", "cy")

    def __init__(self, x0: float, y0: float, size: float) -> None:
        self.x0 = x0
        self.y0 = y0
        self.size = size
        self.children: list[QuadCell | None] | None = None
        self.points: list[int] = []
        self.value = 0.0
        self.cx = 0.0
        self.cy = 0.0

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def quadrant(self, x: float, y: float) -> int:
        half = self.size / 2
        right = x >= self.x0 + half
        bottom = y >= self.y0 + half
        return (2 if bottom else 0) + (1 if right else 0)

    def child(self, q: int) -> QuadCell:
        assert self.children is not None
        cell = self.children[q]
        if cell is None:
            half = self.size / 2
            cell = QuadCell(
                self.x0 + (half if q & 1 else 0.0),
                self.y0 + (half if q & 2 else 0.0),
                half,
            )
            self.children[q] = cell
        return cell


class QuadTree:
    """Quadtree over a fixed set of points given as parallel coordinate lists."""

    def __init__(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        self.xs = xs
        self.ys = ys
        self.root: QuadCell | None = None
        if len(xs):
            self._build()

    def _build(self) -> None:
        x_min, x_max = min(self.xs), max(self.xs)
        y_min, y_max = min(self.ys), max(self.ys)
        size = max(x_max - x_min, y_max - y_min, 1.0)
        # Pad so points on the max edge still fall inside
        self.root = QuadCell(x_min, y_min, size * (1 + 1e-9) + 1e-9)
        for i in range(len(self.xs)):
            self._insert(i)

    def _insert(self, i: int) -> None:
        x, y = self.xs[i], self.ys[i]
        cell = self.root
        assert cell is not None
        while True:
            if cell.is_leaf:
                if not cell.points:
                    cell.points.append(i)
                    return
                j = cell.points[0]
                same_spot = self.xs[j] == x and self.ys[j] == y
                if same_spot or cell.size / 2 < MIN_CELL_SIZE:
                    cell.points.append(i)
                    return
                # Split: push the resident points one level down
                residents = cell.points
                cell.points = []
                cell.children = [None, None, None, None]
                for r in residents:
                    cell.child(cell.quadrant(self.xs[r], self.ys[r])).points.append(r)
            cell = cell.child(cell.quadrant(x, y))

    def accumulate(self, strengths: Sequence[float]) -> None:
        """Compute per-cell charge totals and centroids (post-order)."""
        if self.root is None:
            return
        order: list[QuadCell] = []
        stack = [self.root]
        while stack:
            cell = stack.pop()
            order.append(cell)
            if cell.children is not None:
                stack.extend(c for c in cell.children if c is not None)

        for cell in reversed(order):
            value = 0.0
            weight = 0.0
            sx = 0.0
            sy = 0.0
            if cell.children is None:
                for i in cell.points:
                    s = strengths[i]
                    value += s
                    w = abs(s)
                    weight += w
                    sx += w * self.xs[i]
                    sy += w * self.ys[i]
            else:
                for c in cell.children:
                    if c is None:
                        continue
                    value += c.value
                    w = abs(c.value)
                    weight += w
                    sx += w * c.cx
                    sy += w * c.cy
            cell.value = value
            if weight:
                cell.cx = sx / weight
                cell.cy = sy / weight
            elif cell.children is None and cell.points:
                cell.cx = self.xs[cell.points[0]]
                cell.cy = self.ys[cell.points[0]]

    def visit(self, callback: Callable[[QuadCell], bool]) -> None:
        """Pre-order traversal; returning True from callback skips the children."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            cell = stack.pop()
            if callback(cell) or cell.children is None:
                continue
            stack.extend(c for c in cell.children if c is not None)

    def find(self, x: float, y: float, radius: float = float("inf")) -> int | None:
        """Index of the point closest to (x, y) within radius."""
        if self.root is None:
            return None
        best: int | None = None
        best_d2 = radius * radius

        stack = [self.root]
        while stack:
            cell = stack.pop()
            # Distance from query to the cell's box
            dx = max(cell.x0 - x, 0.0, x - (cell.x0 + cell.size))
            dy = max(cell.y0 - y, 0.0, y - (cell.y0 + cell.size))
            if dx * dx + dy * dy > best_d2:
                continue
            if cell.children is None:
                for i in cell.points:
                    d2 = (self.xs[i] - x) ** 2 + (self.ys[i] - y) ** 2
                    if d2 <= best_d2:
                        best, best_d2 = i, d2
            else:
                stack.extend(c for c in cell.children if c is not None)
        return best
