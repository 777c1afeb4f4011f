"""Policy constants for clipping and simplification."""

from __future__ import annotations

from dataclasses import dataclass, field

from polytiles.models.geometry import WORLD, Rect


@dataclass
class TilingConfig:
    """Controls tile geometry and per-level simplification."""

    # Full coordinate extent covered by tile (0, 0, 0)
    extent: Rect = field(default_factory=lambda: WORLD)

    # Fraction of a tile's own width/height added around it (split over both sides)
    overlap: float = 0.01

    # Effective-area tolerance = tile area / simplify_divisor
    simplify_divisor: float = 1024.0 * 512.0

    # Below this tolerance tiles keep full detail
    simplify_floor: float = 1e-5

    # Rings with fewer points cannot enclose an area
    min_ring_points: int = 4
