"""Drawable primitives built from layout, viewport, filter and interaction state.

A Frame is a self-contained, screen-space description of what to draw.
It holds no references to live simulation arrays, so it can be exported
or sent to a client after the layout has moved on.
"""

import logging
from dataclasses import asdict, dataclass, field

from kgviz.config import settings
from kgviz.graph.filter import FilterResult
from kgviz.graph.model import GraphModel
from kgviz.layout.state import SimulationState
from kgviz.view.interaction import DragState, Emphasis, InteractionController
from kgviz.view.palette import Palette
from kgviz.view.viewport import TransformSnapshot, ViewportTransform

logger = logging.getLogger(__name__)

NODE_OPACITY = {
    Emphasis.NORMAL: 1.0,
    Emphasis.EMPHASIZED: 1.0,
    Emphasis.DEEMPHASIZED: 0.3,
}

EDGE_OPACITY = {
    Emphasis.NORMAL: 0.6,
    Emphasis.EMPHASIZED: 1.0,
    Emphasis.DEEMPHASIZED: 0.1,
}

ELLIPSIS = "..."


def truncate_label(text: str, max_chars: int) -> str:
    """Cut text to max_chars characters plus an ellipsis."""
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS


@dataclass(frozen=True)
class NodeGlyph:
    """A node circle with its label, in screen coordinates."""

    node_id: str
    cx: float
    cy: float
    r: float
    fill: str
    opacity: float
    label: str
    font_size: float
    node_type: str
    stroke: str = "#FFFFFF"
    stroke_width: float = 2.0
    selected: bool = False
    dragging: bool = False


@dataclass(frozen=True)
class EdgeGlyph:
    """A line between two node centres with a midpoint label."""

    edge_index: int
    source_id: str
    target_id: str
    x1: float
    y1: float
    x2: float
    y2: float
    opacity: float
    label: str
    label_x: float
    label_y: float
    font_size: float
    stroke: str = "#999999"
    stroke_width: float = 2.0
    label_color: str = "#666666"


@dataclass(frozen=True)
class Frame:
    """Everything needed to draw one view of the graph."""

    width: float
    height: float
    background: str
    transform: TransformSnapshot
    nodes: tuple[NodeGlyph, ...] = ()
    edges: tuple[EdgeGlyph, ...] = ()
    tick: int = 0
    alpha: float = 0.0
    selected_id: str | None = None
    hovered_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> NodeGlyph | None:
        for glyph in self.nodes:
            if glyph.node_id == node_id:
                return glyph
        return None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Renderer:
    """Builds Frames and keeps the most recent one."""

    palette: Palette = field(default_factory=Palette)
    width: float = field(default_factory=lambda: settings.canvas_width)
    height: float = field(default_factory=lambda: settings.canvas_height)
    node_radius: float = field(default_factory=lambda: settings.node_radius)
    label_max_chars: int = field(default_factory=lambda: settings.label_max_chars)
    node_font_size: float = field(default_factory=lambda: settings.node_font_size)
    edge_font_size: float = field(default_factory=lambda: settings.edge_font_size)
    background: str = field(default_factory=lambda: settings.background_color)
    frame: Frame | None = None
    frames_rendered: int = 0

    def render(
        self,
        model: GraphModel,
        state: SimulationState,
        viewport: ViewportTransform,
        visible: FilterResult,
        controller: InteractionController | None = None,
    ) -> Frame:
        """Build and store the frame for the current state."""
        transform = viewport.snapshot()
        k = transform.scale

        screen: dict[str, tuple[float, float]] = {}
        for i, node_id in enumerate(state.ids):
            if node_id in visible.node_ids:
                screen[node_id] = transform.to_screen((float(state.x[i]), float(state.y[i])))

        edges = []
        for edge in visible.edges:
            x1, y1 = screen[edge.source]
            x2, y2 = screen[edge.target]
            emphasis = controller.edge_emphasis(edge) if controller is not None else Emphasis.NORMAL
            edges.append(
                EdgeGlyph(
                    edge_index=edge.index,
                    source_id=edge.source,
                    target_id=edge.target,
                    x1=x1,
                    y1=y1,
                    x2=x2,
                    y2=y2,
                    opacity=EDGE_OPACITY[emphasis],
                    label=edge.label,
                    label_x=(x1 + x2) / 2,
                    label_y=(y1 + y2) / 2,
                    font_size=self.edge_font_size * k,
                    stroke_width=2.0 * k,
                )
            )

        nodes = []
        for node in model.nodes:
            if node.id not in screen:
                continue
            cx, cy = screen[node.id]
            emphasis = controller.node_emphasis(node.id) if controller is not None else Emphasis.NORMAL
            nodes.append(
                NodeGlyph(
                    node_id=node.id,
                    cx=cx,
                    cy=cy,
                    r=self.node_radius * k,
                    fill=self.palette.color_for(node.type),
                    opacity=NODE_OPACITY[emphasis],
                    label=truncate_label(node.name, self.label_max_chars),
                    font_size=self.node_font_size * k,
                    node_type=node.type,
                    stroke_width=2.0 * k,
                    selected=controller is not None and controller.selected_node_id == node.id,
                    dragging=controller is not None and controller.drag_state(node.id) is DragState.DRAGGING,
                )
            )

        self.frame = Frame(
            width=self.width,
            height=self.height,
            background=self.background,
            transform=transform,
            nodes=tuple(nodes),
            edges=tuple(edges),
            tick=state.ticks,
            alpha=state.alpha,
            selected_id=controller.selected_node_id if controller is not None else None,
            hovered_id=controller.hovered_node if controller is not None else None,
        )
        self.frames_rendered += 1
        return self.frame
