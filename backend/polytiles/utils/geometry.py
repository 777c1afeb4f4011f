"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import LinearRing, LineString, Point
from shapely.geometry import MultiPolygon as ShapelyMultiPolygon
from shapely.geometry import Polygon as ShapelyPolygon

from polytiles.models.geometry import MultiPolygon, Polygon, Rect


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def bbox_area(points: NDArray[np.float64]) -> float:
    """Area of the bounding box; 0 for an empty ring."""
    xmin, ymin, xmax, ymax = bbox(points)
    return (xmax - xmin) * (ymax - ymin)


def to_shapely(polygon: Polygon) -> ShapelyPolygon:
    """Build a shapely polygon; rings under 4 points are left out."""
    if len(polygon.exterior) < 4:
        return ShapelyPolygon()
    holes = [r for r in polygon.interiors if len(r) >= 4]
    return ShapelyPolygon(polygon.exterior, holes)


def to_shapely_multi(polygons: MultiPolygon) -> ShapelyMultiPolygon:
    parts = [to_shapely(p) for p in polygons]
    return ShapelyMultiPolygon([p for p in parts if not p.is_empty])


def contains_rect(polygon: Polygon, rect: Rect) -> bool:
    """True if the rectangle lies inside the polygon.

    Every corner must be strictly inside the exterior and outside every hole,
    and no rectangle edge may touch the exterior or a hole. A hole lying wholly
    inside the rectangle therefore does not prevent containment.

    Rings are tested as given; self-intersecting input is not repaired.
    """
    if len(polygon.exterior) < 4:
        return False

    outline_pts = rect.ring()
    outline = LineString(outline_pts)
    corners = [Point(p) for p in outline_pts[:4]]

    outer = ShapelyPolygon(polygon.exterior)
    if not all(outer.contains(c) for c in corners):
        return False
    if outline.intersects(LinearRing(polygon.exterior)):
        return False

    for ring in polygon.interiors:
        if len(ring) < 4:
            continue
        if outline.intersects(LinearRing(ring)):
            return False
        hole = ShapelyPolygon(ring)
        if any(hole.contains(c) for c in corners):
            return False
    return True
