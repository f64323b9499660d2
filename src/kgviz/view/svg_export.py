"""Static SVG export of a rendered Frame."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from kgviz.view.renderer import Frame

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
DEFAULT_FILENAME = "knowledge-graph.svg"


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".") or "0"


def build_svg(frame: Frame, title: str | None = None) -> ET.Element:
    """Element tree for a frame: links, link labels, then nodes on top."""
    ET.register_namespace("", SVG_NS)
    svg = ET.Element(
        f"{{{SVG_NS}}}svg",
        {
            "width": _num(frame.width),
            "height": _num(frame.height),
            "viewBox": f"0 0 {_num(frame.width)} {_num(frame.height)}",
            "font-family": "sans-serif",
        },
    )
    if title:
        ET.SubElement(svg, f"{{{SVG_NS}}}title").text = title

    ET.SubElement(
        svg,
        f"{{{SVG_NS}}}rect",
        {"width": "100%", "height": "100%", "fill": frame.background},
    )

    links = ET.SubElement(svg, f"{{{SVG_NS}}}g", {"class": "links"})
    for edge in frame.edges:
        ET.SubElement(
            links,
            f"{{{SVG_NS}}}line",
            {
                "x1": _num(edge.x1),
                "y1": _num(edge.y1),
                "x2": _num(edge.x2),
                "y2": _num(edge.y2),
                "stroke": edge.stroke,
                "stroke-width": _num(edge.stroke_width),
                "stroke-opacity": _num(edge.opacity),
            },
        )

    link_labels = ET.SubElement(svg, f"{{{SVG_NS}}}g", {"class": "link-labels"})
    for edge in frame.edges:
        if not edge.label:
            continue
        text = ET.SubElement(
            link_labels,
            f"{{{SVG_NS}}}text",
            {
                "x": _num(edge.label_x),
                "y": _num(edge.label_y),
                "font-size": _num(edge.font_size),
                "fill": edge.label_color,
                "fill-opacity": _num(edge.opacity),
                "text-anchor": "middle",
            },
        )
        text.text = edge.label

    nodes = ET.SubElement(svg, f"{{{SVG_NS}}}g", {"class": "nodes"})
    for glyph in frame.nodes:
        group = ET.SubElement(
            nodes,
            f"{{{SVG_NS}}}g",
            {
                "class": "node selected" if glyph.selected else "node",
                "data-id": glyph.node_id,
                "data-type": glyph.node_type,
                "transform": f"translate({_num(glyph.cx)},{_num(glyph.cy)})",
                "opacity": _num(glyph.opacity),
            },
        )
        ET.SubElement(
            group,
            f"{{{SVG_NS}}}circle",
            {
                "r": _num(glyph.r),
                "fill": glyph.fill,
                "stroke": glyph.stroke,
                "stroke-width": _num(glyph.stroke_width),
            },
        )
        label = ET.SubElement(
            group,
            f"{{{SVG_NS}}}text",
            {
                "dy": _num(glyph.font_size * 0.4),
                "text-anchor": "middle",
                "font-size": _num(glyph.font_size),
                "font-weight": "bold",
                "fill": "#FFFFFF",
            },
        )
        label.text = glyph.label

    return svg


def render_svg(frame: Frame, title: str | None = "Knowledge Graph") -> str:
    """Serialize a frame to a standalone SVG document."""
    svg = build_svg(frame, title=title)
    body = ET.tostring(svg, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def export_svg(frame: Frame, path: str | Path, title: str | None = "Knowledge Graph") -> Path:
    """Write the frame as an SVG file and return its path."""
    target = Path(path)
    if target.is_dir():
        target = target / DEFAULT_FILENAME
    target.write_text(render_svg(frame, title=title), encoding="utf-8")
    logger.info(f"Exported {len(frame.nodes)} nodes / {len(frame.edges)} edges to {target}")
    return target
