from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Point:
    """A map coordinate expressed as percentages (0-100) of the map frame."""

    x: float
    y: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Path point ({self.x}, {self.y}) must have finite coordinates")

    def to_dict(self) -> dict[str, float]:
        return {"x": float(self.x), "y": float(self.y)}

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Point":
        return cls(x=float(row["x"]), y=float(row["y"]))
