"""Tests for geometry helpers."""

from __future__ import annotations

import numpy as np
import pytest

from polytiles.models.geometry import Polygon, Rect
from polytiles.utils.geometry import bbox, bbox_area, contains_rect, to_shapely
from tests.conftest import OUTER_SQUARE, polygon, ring


def test_bbox_and_area():
    assert bbox(ring(OUTER_SQUARE)) == (-20.0, -20.0, 20.0, 20.0)
    assert bbox_area(ring(OUTER_SQUARE)) == pytest.approx(1600.0)
    assert bbox_area(np.empty((0, 2))) == 0.0


def test_rect_ring_is_closed():
    r = Rect(0.0, 0.0, 2.0, 1.0).ring()
    assert len(r) == 5
    np.testing.assert_array_equal(r[0], r[-1])
    shape = to_shapely(Polygon(exterior=r))
    assert shape.exterior.is_ccw
    assert shape.area == pytest.approx(2.0)


def test_contains_rect(holed_polygon):
    assert contains_rect(polygon(OUTER_SQUARE), Rect(-1.0, -1.0, 1.0, 1.0))
    assert not contains_rect(holed_polygon, Rect(-1.0, -1.0, 1.0, 1.0))
    assert contains_rect(holed_polygon, Rect(10.0, 10.0, 15.0, 15.0))
    assert not contains_rect(Polygon(), Rect(0.0, 0.0, 1.0, 1.0))


def test_contains_rect_ignores_hole_inside_rect(holed_polygon):
    assert contains_rect(holed_polygon, Rect(-10.0, -10.0, 10.0, 10.0))


def test_contains_rect_rejects_crossing_rings(holed_polygon):
    # Hole boundary crosses the rectangle edges
    assert not contains_rect(holed_polygon, Rect(0.0, 0.0, 10.0, 10.0))
    # Rectangle pokes out of the exterior
    assert not contains_rect(holed_polygon, Rect(10.0, 10.0, 25.0, 15.0))
    # Rectangle edge lies on the exterior
    assert not contains_rect(polygon(OUTER_SQUARE), Rect(10.0, 10.0, 20.0, 15.0))


def test_to_shapely_skips_degenerate_holes():
    poly = polygon(OUTER_SQUARE, [(0.0, 0.0), (1.0, 0.0), (0.0, 0.0)])
    shape = to_shapely(poly)
    assert len(shape.interiors) == 0
    assert shape.area == pytest.approx(1600.0)
