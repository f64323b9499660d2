"""Node type -> fill color lookup shared with UI legends."""

from dataclasses import dataclass, field
from typing import Iterable

DEFAULT_COLOR = "#6B7280"  # gray

TYPE_COLORS: dict[str, str] = {
    "Technology": "#3B82F6",
    "Data Structure": "#10B981",
    "Concept": "#F59E0B",
    "Person": "#EF4444",
    "Organization": "#8B5CF6",
    "Document": "#06B6D4",
    "Unknown": DEFAULT_COLOR,
}


@dataclass(frozen=True)
class LegendEntry:
    """One swatch of the color legend."""

    type: str
    color: str
    mapped: bool  # False when the type fell back to the default color

    def to_dict(self) -> dict:
        return {"type": self.type, "color": self.color, "mapped": self.mapped}


@dataclass(frozen=True)
class Palette:
    """Fixed color table; unmapped types get the default gray."""

    colors: dict[str, str] = field(default_factory=lambda: dict(TYPE_COLORS), hash=False)
    default: str = DEFAULT_COLOR

    def color_for(self, node_type: str | None) -> str:
        if node_type is None:
            return self.default
        return self.colors.get(node_type, self.default)

    def legend(self, types: Iterable[str]) -> list[LegendEntry]:
        """Legend entries for the given types, in the given order."""
        return [
            LegendEntry(type=t, color=self.color_for(t), mapped=t in self.colors)
            for t in types
        ]
