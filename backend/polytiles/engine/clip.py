"""Axis-aligned polygon clipping.

A polygon is clipped against a rectangle by clipping each ring twice: first
against the X interval, then the result against the Y interval. Each pass is a
single walk over the ring's edges that keeps vertices inside the interval and
synthesizes intersection points on edges crossing a bound.

Known edge cases, kept as they are:
- Vertices are tested against the open interval ``(k1, k2)`` for the
  accept/reject shortcuts, but the ring's last vertex is kept when it lies in
  the closed interval ``[k1, k2]``. Vertices exactly on a bound may therefore
  be duplicated or dropped.
- When a tile lies entirely inside a polygon the tile rectangle is returned as
  the exterior, without subtracting any holes that fall inside the tile.
"""

from __future__ import annotations

import enum

import numpy as np

from polytiles.models.geometry import Polygon, Rect, Ring, empty_ring
from polytiles.utils.geometry import contains_rect


class Axis(enum.IntEnum):
    X = 0
    Y = 1


def _intersect(a: np.ndarray, b: np.ndarray, axis: int, k: float) -> np.ndarray:
    t = (k - a[axis]) / (b[axis] - a[axis])
    return a + t * (b - a)


def clip_ring(ring: Ring, axis: Axis, k1: float, k2: float) -> Ring:
    """Clip a ring to the slab ``k1 < c < k2`` on one axis.

    Returns the input array itself when every vertex is strictly inside the
    slab, and an empty ring when none is.
    """
    if k1 > k2:
        raise ValueError(f"clip bounds out of order: {k1} > {k2}")

    coords = ring[:, axis]
    inside = (coords > k1) & (coords < k2)
    if not inside.any():
        return empty_ring()
    if inside.all():
        return ring

    result: list[np.ndarray] = []
    for i in range(len(ring) - 1):
        p, q = ring[i], ring[i + 1]
        a, b = coords[i], coords[i + 1]

        if a < k1:
            # enters from below
            if b > k1:
                result.append(_intersect(p, q, axis, k1))
        elif a > k2:
            # enters from above
            if b < k2:
                result.append(_intersect(p, q, axis, k2))
        else:
            result.append(p)

        # exits below / above
        if b < k1 <= a:
            result.append(_intersect(p, q, axis, k1))
        if b > k2 >= a:
            result.append(_intersect(p, q, axis, k2))

    last = coords[-1]
    if k1 <= last <= k2:
        result.append(ring[-1])

    if result and not np.array_equal(result[0], result[-1]):
        result.append(result[0])

    if not result:
        return empty_ring()
    return np.array(result, dtype=np.float64)


def _clip_to_rect(ring: Ring, rect: Rect) -> Ring:
    clipped = clip_ring(ring, Axis.X, rect.xmin, rect.xmax)
    return clip_ring(clipped, Axis.Y, rect.ymin, rect.ymax)


def clip_polygon(polygon: Polygon, rect: Rect) -> Polygon:
    """Clip a polygon with holes to an axis-aligned rectangle."""
    exterior = _clip_to_rect(polygon.exterior, rect)

    # The exterior ring misses the rectangle entirely; the rectangle may still
    # lie completely inside the polygon.
    if len(exterior) == 0 and contains_rect(polygon, rect):
        exterior = rect.ring()

    interiors = [_clip_to_rect(ring, rect) for ring in polygon.interiors]
    return Polygon(exterior=exterior, interiors=interiors)
