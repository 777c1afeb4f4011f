"""Geometry value types shared by the decoder, the clipper and the tiler.

A ring is an Nx2 float64 array of (x, y) rows. Rings are never mutated in
place: clipping either returns the input array unchanged or builds a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

Ring = NDArray[np.float64]


def empty_ring() -> Ring:
    return np.empty((0, 2), dtype=np.float64)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in lon/lat degrees."""

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def area(self) -> float:
        return self.width * self.height

    def ring(self) -> Ring:
        """Closed counter-clockwise ring tracing the rectangle."""
        return np.array(
            [
                [self.xmin, self.ymin],
                [self.xmax, self.ymin],
                [self.xmax, self.ymax],
                [self.xmin, self.ymax],
                [self.xmin, self.ymin],
            ],
            dtype=np.float64,
        )


WORLD = Rect(-180.0, -90.0, 180.0, 90.0)


@dataclass
class Polygon:
    """One exterior ring plus zero or more holes."""

    exterior: Ring = field(default_factory=empty_ring)
    interiors: list[Ring] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.exterior) == 0


MultiPolygon = list[Polygon]


class TileCoord(NamedTuple):
    z: int
    x: int
    y: int

    def children(self) -> tuple[TileCoord, TileCoord, TileCoord, TileCoord]:
        z, x, y = self.z + 1, 2 * self.x, 2 * self.y
        return (
            TileCoord(z, x, y),
            TileCoord(z, x + 1, y),
            TileCoord(z, x, y + 1),
            TileCoord(z, x + 1, y + 1),
        )
