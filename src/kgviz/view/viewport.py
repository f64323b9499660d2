"""Pan/zoom state and model <-> screen coordinate mapping.

screen = model * scale + (tx, ty)
model  = (screen - (tx, ty)) / scale
"""

import logging
import math
from dataclasses import dataclass

from kgviz.config import settings

logger = logging.getLogger(__name__)

Point = tuple[float, float]


@dataclass(frozen=True)
class TransformSnapshot:
    """Immutable copy of a transform, safe to hand to renderers."""

    scale: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    def to_screen(self, point: Point) -> Point:
        x, y = point
        return x * self.scale + self.tx, y * self.scale + self.ty

    def to_model(self, point: Point) -> Point:
        x, y = point
        return (x - self.tx) / self.scale, (y - self.ty) / self.scale

    def svg_transform(self) -> str:
        return f"translate({self.tx:g},{self.ty:g}) scale({self.scale:g})"


class ViewportTransform:
    """
    Mutable viewport: scale clamped to [min_scale, max_scale], translation
    unbounded. Misuse (non-positive or non-finite factors) is clamped or
    ignored, never raised.
    """

    def __init__(
        self,
        min_scale: float | None = None,
        max_scale: float | None = None,
        scale: float = 1.0,
        tx: float = 0.0,
        ty: float = 0.0,
    ) -> None:
        self.min_scale = min_scale if min_scale is not None else settings.min_scale
        self.max_scale = max_scale if max_scale is not None else settings.max_scale
        if self.min_scale > self.max_scale:
            self.min_scale, self.max_scale = self.max_scale, self.min_scale
        self.scale = self._clamp(scale)
        self.tx = tx
        self.ty = ty

    def _clamp(self, scale: float) -> float:
        if math.isnan(scale):
            return self.min_scale
        return min(max(scale, self.min_scale), self.max_scale)

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.tx == 0.0 and self.ty == 0.0

    def snapshot(self) -> TransformSnapshot:
        return TransformSnapshot(scale=self.scale, tx=self.tx, ty=self.ty)

    def to_screen(self, point: Point) -> Point:
        x, y = point
        return x * self.scale + self.tx, y * self.scale + self.ty

    def to_model(self, point: Point) -> Point:
        x, y = point
        return (x - self.tx) / self.scale, (y - self.ty) / self.scale

    def zoom_to(self, scale: float, around: Point = (0.0, 0.0)) -> float:
        """Set the scale keeping the model point under `around` fixed on screen.

        Non-finite anchors are ignored.
        """
        ax, ay = around
        if not (math.isfinite(ax) and math.isfinite(ay)):
            logger.debug(f"Ignoring zoom around non-finite anchor ({ax!r}, {ay!r})")
            return self.scale
        new_scale = self._clamp(scale)
        mx, my = self.to_model(around)
        self.scale = new_scale
        self.tx = ax - mx * new_scale
        self.ty = ay - my * new_scale
        return new_scale

    def zoom_by(self, factor: float, around: Point = (0.0, 0.0)) -> float:
        """Multiply the scale by factor, anchored at a screen point.

        Non-finite factors and anchors are ignored; factors <= 0 clamp to
        min_scale.
        """
        if not math.isfinite(factor):
            logger.debug(f"Ignoring non-finite zoom factor {factor!r}")
            return self.scale
        if factor <= 0:
            return self.zoom_to(self.min_scale, around)
        return self.zoom_to(self.scale * factor, around)

    def pan_by(self, dx: float, dy: float) -> None:
        if not (math.isfinite(dx) and math.isfinite(dy)):
            logger.debug(f"Ignoring non-finite pan ({dx!r}, {dy!r})")
            return
        self.tx += dx
        self.ty += dy

    def reset(self) -> None:
        self.scale = self._clamp(1.0)
        self.tx = 0.0
        self.ty = 0.0

    def __repr__(self) -> str:
        return f"ViewportTransform(scale={self.scale:.4g}, tx={self.tx:.4g}, ty={self.ty:.4g})"
