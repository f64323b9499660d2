"""Graph view session: the command surface used by the surrounding UI.

Wires GraphModel, ForceSimulation, TickScheduler, ViewportTransform,
FilterEngine, InteractionController and Renderer together, and owns model
replacement. A rejected snapshot leaves the current model on screen.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from kgviz.config import Settings, settings
from kgviz.graph.errors import EmptyGraphWarning, GraphValidationError
from kgviz.graph.filter import FilterEngine, FilterResult
from kgviz.graph.metrics import GraphStats, compute_stats
from kgviz.graph.model import GraphModel
from kgviz.layout.forces import CenterForce, CollideForce, LinkForce, ManyBodyForce
from kgviz.layout.scheduler import RequestFrame, TickScheduler
from kgviz.layout.simulation import ForceSimulation
from kgviz.models import Node
from kgviz.view.interaction import Gesture, InteractionController
from kgviz.view.palette import LegendEntry, Palette
from kgviz.view.renderer import Frame, Renderer
from kgviz.view.svg_export import export_svg, render_svg
from kgviz.view.viewport import Point, ViewportTransform

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    """Outcome of a snapshot load."""

    LOADED = "loaded"
    EMPTY = "empty"  # accepted, zero nodes
    REJECTED = "rejected"  # previous model kept


@dataclass
class LoadResult:
    """Structured outcome of `GraphSession.load_snapshot`."""

    status: LoadStatus
    node_count: int = 0
    edge_count: int = 0
    error: GraphValidationError | None = None
    warnings: list[Warning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is not LoadStatus.REJECTED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "error": self.error.to_dict() if self.error else None,
            "warnings": [str(w) for w in self.warnings],
        }


class GraphSession:
    """
    One interactive graph view.

    The viewport survives model replacement; simulation, pins and drag
    state do not. Filter inputs are re-applied to each new model.
    """

    def __init__(
        self,
        model: GraphModel | None = None,
        config: Settings | None = None,
        request_frame: RequestFrame | None = None,
        palette: Palette | None = None,
    ) -> None:
        self.config = config or settings
        self.model = model or GraphModel.empty()
        self.palette = palette or Palette()

        self.viewport = ViewportTransform(
            min_scale=self.config.min_scale,
            max_scale=self.config.max_scale,
        )
        self.filter = FilterEngine(self.model)
        self.simulation = self._build_simulation(self.model)
        self.scheduler = TickScheduler(self.simulation, request_frame=request_frame)
        self.controller = InteractionController(
            self.model,
            self.simulation,
            self.viewport,
            filter_engine=self.filter,
            node_radius=self.config.node_radius,
            click_tolerance=self.config.click_tolerance,
            reheat_alpha=self.config.reheat_alpha,
        )
        self.renderer = Renderer(
            palette=self.palette,
            width=self.config.canvas_width,
            height=self.config.canvas_height,
            node_radius=self.config.node_radius,
            label_max_chars=self.config.label_max_chars,
            node_font_size=self.config.node_font_size,
            edge_font_size=self.config.edge_font_size,
            background=self.config.background_color,
        )
        self.scheduler.subscribe(lambda _sim: self.redraw())
        self.redraw()

    # ------------------------------------------------------------------
    # Model lifecycle
    # ------------------------------------------------------------------

    @property
    def canvas_center(self) -> Point:
        return self.config.canvas_width / 2, self.config.canvas_height / 2

    def _build_simulation(
        self,
        model: GraphModel,
        previous: ForceSimulation | None = None,
    ) -> ForceSimulation:
        c = self.config
        center = self.canvas_center
        forces = [
            LinkForce(distance=c.link_distance),
            ManyBodyForce(
                strength=c.charge_strength,
                theta=c.charge_theta,
                distance_min=c.charge_distance_min,
                barnes_hut_threshold=c.barnes_hut_threshold,
            ),
            CenterForce(cx=center[0], cy=center[1], strength=c.center_strength),
            CollideForce(radius=c.collision_radius, strength=c.collision_strength),
        ]
        has_previous = previous is not None and len(previous.state) > 0
        return ForceSimulation(
            model,
            forces=forces,
            center=center,
            alpha_decay=c.alpha_decay,
            alpha_min=c.alpha_min,
            velocity_decay=c.velocity_decay,
            reheat_alpha=c.reheat_alpha,
            seed=c.random_seed,
            previous=previous.state if has_previous else None,
            initial_alpha=c.reheat_alpha if has_previous else 1.0,
        )

    def load_snapshot(self, data: Any) -> LoadResult:
        """Build a model from a fetched snapshot and swap it in.

        On validation failure the current model stays rendered and the
        failure is returned, not raised.
        """
        try:
            model = GraphModel.from_snapshot(data)
        except GraphValidationError as e:
            logger.warning(f"Snapshot rejected ({e.kind}): {e}")
            return LoadResult(
                status=LoadStatus.REJECTED,
                node_count=len(self.model),
                edge_count=len(self.model.edges),
                error=e,
            )

        self.replace_model(model)
        result = LoadResult(
            status=LoadStatus.LOADED,
            node_count=len(model),
            edge_count=len(model.edges),
        )
        if model.is_empty:
            result.status = LoadStatus.EMPTY
            result.warnings.append(EmptyGraphWarning("Snapshot contains no nodes"))
        return result

    def replace_model(self, model: GraphModel) -> None:
        """Swap in a new model, carrying positions over for surviving ids."""
        simulation = self._build_simulation(model, previous=self.simulation)
        self.model = model
        self.simulation = simulation
        self.filter.rebind(model)
        self.controller.rebind(model, simulation)
        self.scheduler.attach(simulation)
        logger.info(f"Graph model replaced: {len(model)} nodes, {len(model.edges)} edges")
        self.redraw()

    def start(self) -> None:
        """Begin frame-driven ticking through the host's request_frame."""
        self.scheduler.start()

    def teardown(self) -> None:
        """Stop ticking; pending frames become no-ops."""
        self.scheduler.stop()

    def tick(self, count: int = 1) -> bool:
        """Advance the layout by hand; returns whether it is still running."""
        for _ in range(count):
            if not self.scheduler.step():
                break
        return self.simulation.running

    def run_until_stable(self, max_ticks: int | None = None) -> int:
        return self.scheduler.run_until_stable(max_ticks)

    # ------------------------------------------------------------------
    # Viewport commands
    # ------------------------------------------------------------------

    def zoom_in(self) -> float:
        scale = self.viewport.zoom_by(self.config.zoom_in_factor, self.canvas_center)
        self.redraw()
        return scale

    def zoom_out(self) -> float:
        scale = self.viewport.zoom_by(self.config.zoom_out_factor, self.canvas_center)
        self.redraw()
        return scale

    def zoom_by(self, factor: float, around: Point | None = None) -> float:
        scale = self.viewport.zoom_by(factor, around if around is not None else self.canvas_center)
        self.redraw()
        return scale

    def pan_by(self, dx: float, dy: float) -> None:
        self.viewport.pan_by(dx, dy)
        self.redraw()

    def reset_view(self) -> None:
        """Identity viewport and a reheated layout."""
        self.viewport.reset()
        self.simulation.reheat(self.config.reheat_alpha)
        self.redraw()

    # ------------------------------------------------------------------
    # Filter and selection commands
    # ------------------------------------------------------------------

    def set_search_term(self, term: str | None) -> FilterResult:
        result = self.filter.set_search_term(term)
        self.redraw()
        return result

    def set_type_filter(self, types: Iterable[str] | None) -> FilterResult:
        result = self.filter.set_type_filter(types)
        self.redraw()
        return result

    def select_node(self, node_id: str | None) -> Node | None:
        node = self.controller.select(node_id)
        self.redraw()
        return node

    def selected_details(self) -> dict | None:
        """Detail-panel data for the selected node."""
        node = self.controller.selected_node
        if node is None:
            return None
        return {
            "id": node.id,
            "name": node.name,
            "type": node.type,
            "description": node.description,
            "properties": node.display_properties(),
            "neighbors": sorted(self.model.neighbor_ids(node.id)),
        }

    # ------------------------------------------------------------------
    # Pointer passthrough
    # ------------------------------------------------------------------

    def pointer_down(self, point: Point) -> Gesture:
        gesture = self.controller.pointer_down(point)
        self.redraw()
        return gesture

    def pointer_move(self, point: Point) -> None:
        self.controller.pointer_move(point)
        self.redraw()

    def pointer_up(self, point: Point) -> Node | None:
        node = self.controller.pointer_up(point)
        self.redraw()
        return node

    def pointer_leave(self) -> None:
        self.controller.pointer_leave()
        self.redraw()

    def wheel(self, point: Point, delta_y: float, delta_mode: int = 0) -> float:
        scale = self.controller.wheel(point, delta_y, delta_mode)
        self.redraw()
        return scale

    def double_click(self, point: Point) -> float:
        scale = self.controller.double_click(point)
        self.redraw()
        return scale

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def redraw(self) -> Frame:
        return self.renderer.render(
            self.model,
            self.simulation.state,
            self.viewport,
            self.filter.result,
            self.controller,
        )

    @property
    def frame(self) -> Frame:
        return self.renderer.frame or self.redraw()

    def legend(self) -> list[LegendEntry]:
        return self.palette.legend(self.model.type_legend())

    def stats(self) -> GraphStats:
        return compute_stats(self.model)

    def export_image(self, path: str | Path | None = None) -> str:
        """SVG of the current view; also written to `path` when given."""
        frame = self.redraw()
        if path is not None:
            export_svg(frame, path)
        return render_svg(frame)
