"""Graph view endpoints.

Exposes the GraphSession commands over HTTP so a browser canvas can drive
layout, viewport, filtering and export while drawing the returned frames.
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from kgviz.session import GraphSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/graph")


# ============================================================================
# Request / Response Models
# ============================================================================


class FilterRequest(BaseModel):
    """Search and type filter inputs."""

    search_term: str = ""
    types: list[str] = Field(default_factory=list)


class FilterResponse(BaseModel):
    """Visible subset after filtering."""

    visible_nodes: list[str]
    visible_edges: list[int]


class SelectionRequest(BaseModel):
    """Node to select; null clears the selection."""

    node_id: str | None = None


class PointerEvent(BaseModel):
    """A pointer event in screen coordinates."""

    model_config = ConfigDict(allow_inf_nan=False)

    kind: Literal["down", "move", "up", "leave", "wheel", "dblclick"]
    x: float = 0.0
    y: float = 0.0
    delta_y: float = 0.0
    delta_mode: int = Field(default=0, ge=0, le=2)


class TickResponse(BaseModel):
    """Simulation status after ticking."""

    ticks: int
    alpha: float
    running: bool


class ViewResponse(BaseModel):
    """Viewport transform."""

    scale: float
    tx: float
    ty: float


def get_session(request: Request) -> GraphSession:
    """Get graph session from app state."""
    return request.app.state.session


def _view(session: GraphSession) -> ViewResponse:
    t = session.viewport.snapshot()
    return ViewResponse(scale=t.scale, tx=t.tx, ty=t.ty)


# ============================================================================
# Endpoints
# ============================================================================


@router.put("/snapshot")
async def load_snapshot(request: Request, payload: dict) -> JSONResponse:
    """Replace the graph with a new snapshot.

    Malformed snapshots answer 422 and leave the current graph in place.
    """
    session = get_session(request)
    result = session.load_snapshot(payload)
    status_code = 200 if result.ok else 422
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.post("/tick", response_model=TickResponse)
async def tick(request: Request, count: int = Query(default=1, ge=1, le=1000)) -> TickResponse:
    """Advance the layout by up to `count` ticks."""
    session = get_session(request)
    session.tick(count)
    state = session.simulation.state
    return TickResponse(ticks=state.ticks, alpha=state.alpha, running=state.running)


@router.get("/frame")
async def get_frame(request: Request) -> dict:
    """Current drawable frame in screen coordinates."""
    return get_session(request).frame.to_dict()


@router.post("/view/zoom-in", response_model=ViewResponse)
async def zoom_in(request: Request) -> ViewResponse:
    session = get_session(request)
    session.zoom_in()
    return _view(session)


@router.post("/view/zoom-out", response_model=ViewResponse)
async def zoom_out(request: Request) -> ViewResponse:
    session = get_session(request)
    session.zoom_out()
    return _view(session)


@router.post("/view/reset", response_model=ViewResponse)
async def reset_view(request: Request) -> ViewResponse:
    session = get_session(request)
    session.reset_view()
    return _view(session)


@router.put("/filter", response_model=FilterResponse)
async def set_filter(request: Request, body: FilterRequest) -> FilterResponse:
    session = get_session(request)
    session.set_search_term(body.search_term)
    result = session.set_type_filter(body.types)
    return FilterResponse(
        visible_nodes=sorted(result.node_ids),
        visible_edges=sorted(result.edge_indices),
    )


@router.put("/selection")
async def set_selection(request: Request, body: SelectionRequest) -> dict:
    session = get_session(request)
    session.select_node(body.node_id)
    return {"selected": session.selected_details()}


@router.get("/selection")
async def get_selection(request: Request) -> dict:
    return {"selected": get_session(request).selected_details()}


@router.post("/pointer")
async def pointer(request: Request, event: PointerEvent) -> dict:
    """Feed one pointer event to the interaction controller."""
    session = get_session(request)
    point = (event.x, event.y)
    if event.kind == "down":
        session.pointer_down(point)
    elif event.kind == "move":
        session.pointer_move(point)
    elif event.kind == "up":
        session.pointer_up(point)
    elif event.kind == "leave":
        session.pointer_leave()
    elif event.kind == "wheel":
        session.wheel(point, event.delta_y, event.delta_mode)
    elif event.kind == "dblclick":
        session.double_click(point)
    else:
        raise HTTPException(status_code=400, detail=f"Unknown pointer event: {event.kind}")

    controller = session.controller
    return {
        "gesture": controller.gesture.value,
        "dragging": controller.dragging_node,
        "hovered": controller.hovered_node,
        "selected": controller.selected_node_id,
        "view": _view(session).model_dump(),
    }


@router.get("/legend")
async def get_legend(request: Request) -> list[dict]:
    return [entry.to_dict() for entry in get_session(request).legend()]


@router.get("/stats")
async def get_stats(request: Request) -> dict:
    return get_session(request).stats().to_dict()


@router.get("/export.svg")
async def export_image(request: Request) -> Response:
    """Static SVG of the current view."""
    svg = get_session(request).export_image()
    return Response(
        content=svg,
        media_type="image/svg+xml",
        headers={"Content-Disposition": 'attachment; filename="knowledge-graph.svg"'},
    )
