"""Pointer interaction: drag, hover, selection, pan and zoom gestures.

Drag is a per-node state machine:

    IDLE --drag_start--> DRAGGING --drag_end--> IDLE
                          |  ^
                          drag_move (re-pin at pointer)

Hover and selection are independent of drag. Hover only changes how
things are drawn (emphasis); it never touches the simulation. The renderer
queries this controller instead of the controller pushing flags into
drawables.
"""

import logging
import math
from enum import Enum

import numpy as np

from kgviz.config import settings
from kgviz.graph.filter import FilterEngine
from kgviz.graph.model import GraphModel
from kgviz.layout.simulation import ForceSimulation
from kgviz.models import Edge, Node
from kgviz.view.viewport import Point, ViewportTransform

logger = logging.getLogger(__name__)

# Wheel delta -> zoom exponent, per DOM deltaMode (pixel, line, page)
WHEEL_DELTA_SCALE = {0: 0.002, 1: 0.05, 2: 1.0}


class DragState(str, Enum):
    """Drag state of a single node."""

    IDLE = "idle"
    DRAGGING = "dragging"


class Emphasis(str, Enum):
    """Visual emphasis derived from hover."""

    NORMAL = "normal"
    EMPHASIZED = "emphasized"
    DEEMPHASIZED = "deemphasized"


class Gesture(str, Enum):
    """What the current pointer press is doing."""

    NONE = "none"
    DRAG = "drag"
    PAN = "pan"


class InteractionController:
    """Routes pointer events to the viewport, node pins and selection."""

    def __init__(
        self,
        model: GraphModel,
        simulation: ForceSimulation,
        viewport: ViewportTransform,
        filter_engine: FilterEngine | None = None,
        node_radius: float | None = None,
        click_tolerance: float | None = None,
        reheat_alpha: float | None = None,
    ) -> None:
        self.model = model
        self.simulation = simulation
        self.viewport = viewport
        self.filter_engine = filter_engine
        self.node_radius = node_radius if node_radius is not None else settings.node_radius
        self.click_tolerance = click_tolerance if click_tolerance is not None else settings.click_tolerance
        self.reheat_alpha = reheat_alpha if reheat_alpha is not None else settings.reheat_alpha

        self._dragging: str | None = None
        self._hovered: str | None = None
        self._hover_neighbors: frozenset[str] = frozenset()
        self._selected: str | None = None

        self._gesture = Gesture.NONE
        self._press_node: str | None = None
        self._press_point: Point | None = None
        self._last_point: Point | None = None
        self._travel = 0.0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def dragging_node(self) -> str | None:
        return self._dragging

    @property
    def hovered_node(self) -> str | None:
        return self._hovered

    @property
    def selected_node_id(self) -> str | None:
        return self._selected

    @property
    def selected_node(self) -> Node | None:
        """Selected node record, for detail panels."""
        return self.model.node(self._selected) if self._selected else None

    @property
    def gesture(self) -> Gesture:
        return self._gesture

    def drag_state(self, node_id: str) -> DragState:
        return DragState.DRAGGING if node_id == self._dragging else DragState.IDLE

    def node_emphasis(self, node_id: str) -> Emphasis:
        if self._hovered is None:
            return Emphasis.NORMAL
        if node_id == self._hovered or node_id in self._hover_neighbors:
            return Emphasis.EMPHASIZED
        return Emphasis.DEEMPHASIZED

    def edge_emphasis(self, edge: Edge) -> Emphasis:
        if self._hovered is None:
            return Emphasis.NORMAL
        return Emphasis.EMPHASIZED if edge.touches(self._hovered) else Emphasis.DEEMPHASIZED

    def hit_test(self, screen_point: Point) -> str | None:
        """Topmost visible node whose circle contains the screen point."""
        state = self.simulation.state
        if not len(state):
            return None
        mx, my = self.viewport.to_model(screen_point)
        d2 = (state.x - mx) ** 2 + (state.y - my) ** 2
        hits = d2 <= self.node_radius * self.node_radius
        if self.filter_engine is not None and not self.filter_engine.result.is_unfiltered:
            visible = self.filter_engine.result.node_ids
            hits &= np.fromiter((node_id in visible for node_id in state.ids), dtype=bool, count=len(state))
        candidates = np.flatnonzero(hits)
        if not len(candidates):
            return None
        # Later nodes are drawn on top
        return state.ids[int(candidates[-1])]

    # ------------------------------------------------------------------
    # Drag state machine
    # ------------------------------------------------------------------

    def drag_start(self, node_id: str, screen_point: Point) -> bool:
        """Pin node_id under the pointer and reheat the layout."""
        if node_id not in self.model:
            logger.debug(f"Ignoring drag start on unknown node {node_id!r}")
            return False
        if self._dragging is not None and self._dragging != node_id:
            self.drag_end()

        mx, my = self.viewport.to_model(screen_point)
        if not self.simulation.pin(node_id, mx, my):
            return False
        self._dragging = node_id
        self.simulation.set_alpha_target(self.reheat_alpha)
        self.simulation.reheat(self.reheat_alpha)
        return True

    def drag_move(self, screen_point: Point) -> bool:
        if self._dragging is None:
            return False
        mx, my = self.viewport.to_model(screen_point)
        return self.simulation.pin(self._dragging, mx, my)

    def drag_end(self) -> bool:
        """Release the dragged node back to the physics."""
        if self._dragging is None:
            return False
        self.simulation.unpin(self._dragging)
        self.simulation.set_alpha_target(0.0)
        self._dragging = None
        return True

    # ------------------------------------------------------------------
    # Hover and selection
    # ------------------------------------------------------------------

    def hover(self, node_id: str | None) -> None:
        if node_id is not None and node_id not in self.model:
            node_id = None
        if node_id == self._hovered:
            return
        self._hovered = node_id
        self._hover_neighbors = self.model.neighbor_ids(node_id) if node_id else frozenset()

    def select(self, node_id: str | None) -> Node | None:
        """Select a node, or clear the selection with None."""
        if node_id is None:
            self._selected = None
            return None
        node = self.model.node(node_id)
        if node is None:
            logger.debug(f"Ignoring selection of unknown node {node_id!r}")
            return self.selected_node
        self._selected = node_id
        return node

    # ------------------------------------------------------------------
    # Pointer events (screen coordinates)
    # ------------------------------------------------------------------

    def pointer_down(self, screen_point: Point) -> Gesture:
        node_id = self.hit_test(screen_point)
        self._press_point = screen_point
        self._last_point = screen_point
        self._travel = 0.0
        self._press_node = node_id
        if node_id is not None and self.drag_start(node_id, screen_point):
            self._gesture = Gesture.DRAG
        else:
            self._gesture = Gesture.PAN
        return self._gesture

    def pointer_move(self, screen_point: Point) -> None:
        if self._press_point is not None:
            px, py = self._press_point
            self._travel = max(self._travel, math.hypot(screen_point[0] - px, screen_point[1] - py))

        if self._gesture is Gesture.DRAG:
            self.drag_move(screen_point)
        elif self._gesture is Gesture.PAN and self._last_point is not None:
            lx, ly = self._last_point
            self.viewport.pan_by(screen_point[0] - lx, screen_point[1] - ly)
        else:
            self.hover(self.hit_test(screen_point))
        self._last_point = screen_point

    def pointer_up(self, screen_point: Point) -> Node | None:
        """End the press; a press that barely moved is a click.

        Returns the selected node after the gesture.
        """
        if self._gesture is Gesture.NONE:
            return self.selected_node
        self.pointer_move(screen_point)
        is_click = self._travel <= self.click_tolerance

        if self._gesture is Gesture.DRAG:
            self.drag_end()
            if is_click:
                self.select(self._press_node)
        elif is_click:
            self.select(None)

        self._gesture = Gesture.NONE
        self._press_node = None
        self._press_point = None
        self._last_point = None
        return self.selected_node

    def pointer_leave(self) -> None:
        self.hover(None)
        if self._gesture is Gesture.DRAG:
            self.drag_end()
        self._gesture = Gesture.NONE
        self._press_point = None
        self._last_point = None

    def wheel(self, screen_point: Point, delta_y: float, delta_mode: int = 0) -> float:
        """Zoom by 2 ** (-delta_y * k) around the pointer; returns the new scale."""
        k = WHEEL_DELTA_SCALE.get(delta_mode, WHEEL_DELTA_SCALE[0])
        return self.viewport.zoom_by(2 ** (-delta_y * k), screen_point)

    def double_click(self, screen_point: Point) -> float:
        return self.viewport.zoom_by(2.0, screen_point)

    # ------------------------------------------------------------------
    # Model replacement
    # ------------------------------------------------------------------

    def rebind(self, model: GraphModel, simulation: ForceSimulation) -> None:
        """Point at a replacement model; keep hover/selection only if their ids survive."""
        self._dragging = None
        self._gesture = Gesture.NONE
        self._press_node = None
        self._press_point = None
        self._last_point = None

        self.model = model
        self.simulation = simulation

        hovered = self._hovered
        self._hovered = None
        self._hover_neighbors = frozenset()
        self.hover(hovered)

        if self._selected is not None and self._selected not in model:
            logger.debug(f"Selection {self._selected!r} dropped by model replacement")
            self._selected = None
