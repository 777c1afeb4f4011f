"""Turn decoded shape records into polygons with holes.

Rings are classified by bounding-box area alone: the ring with the largest
box is the exterior, every other ring is a hole. Records holding several
disjoint outer rings come out with all but one of them as holes.
"""

from __future__ import annotations

from collections.abc import Iterable

from polytiles.models.geometry import MultiPolygon, Polygon
from polytiles.shapefile.decoder import ShapeRecord
from polytiles.utils.geometry import bbox_area


def record_to_polygon(record: ShapeRecord) -> Polygon:
    rings = record.rings()
    if not rings:
        return Polygon()
    if len(rings) == 1:
        return Polygon(exterior=rings[0])

    # Stable sort, so among equal boxes the later ring wins.
    rings = sorted(rings, key=bbox_area)
    return Polygon(exterior=rings[-1], interiors=rings[:-1])


def records_to_multipolygon(records: Iterable[ShapeRecord]) -> MultiPolygon:
    return [record_to_polygon(r) for r in records]
