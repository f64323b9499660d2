"""Viewport, interaction, rendering and export."""

from kgviz.view.interaction import DragState, Emphasis, Gesture, InteractionController
from kgviz.view.palette import DEFAULT_COLOR, TYPE_COLORS, LegendEntry, Palette
from kgviz.view.renderer import (
    EDGE_OPACITY,
    NODE_OPACITY,
    EdgeGlyph,
    Frame,
    NodeGlyph,
    Renderer,
    truncate_label,
)
from kgviz.view.svg_export import build_svg, export_svg, render_svg
from kgviz.view.viewport import TransformSnapshot, ViewportTransform

__all__ = [
    # Viewport
    "ViewportTransform",
    "TransformSnapshot",
    # Interaction
    "InteractionController",
    "DragState",
    "Emphasis",
    "Gesture",
    # Palette
    "Palette",
    "LegendEntry",
    "TYPE_COLORS",
    "DEFAULT_COLOR",
    # Rendering
    "Renderer",
    "Frame",
    "NodeGlyph",
    "EdgeGlyph",
    "NODE_OPACITY",
    "EDGE_OPACITY",
    "truncate_label",
    # Export
    "build_svg",
    "render_svg",
    "export_svg",
]
