"""Shared test fixtures."""

from __future__ import annotations

import struct

import numpy as np
import pytest

from polytiles.models.geometry import Polygon
from polytiles.models.sources import LocalSource, TileOptions


# Rings as (x, y) lists, closed

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)]

# 40x40 degree square centered on the origin with a 10x10 hole
OUTER_SQUARE = [(-20.0, -20.0), (20.0, -20.0), (20.0, 20.0), (-20.0, 20.0), (-20.0, -20.0)]
INNER_SQUARE = [(-5.0, -5.0), (-5.0, 5.0), (5.0, 5.0), (5.0, -5.0), (-5.0, -5.0)]

# Covers the whole world with room to spare
HUGE_SQUARE = [(-200.0, -100.0), (200.0, -100.0), (200.0, 100.0), (-200.0, 100.0), (-200.0, -100.0)]


def ring(points: list[tuple[float, float]]) -> np.ndarray:
    return np.array(points, dtype=np.float64)


def polygon(exterior: list[tuple[float, float]], *holes: list[tuple[float, float]]) -> Polygon:
    return Polygon(exterior=ring(exterior), interiors=[ring(h) for h in holes])


def shp_record(parts: list[list[tuple[float, float]]], shape_type: int = 5) -> bytes:
    """Record content (without the 8-byte record header)."""
    points = [p for part in parts for p in part]
    offsets = []
    n = 0
    for part in parts:
        offsets.append(n)
        n += len(part)
    xs = [p[0] for p in points] or [0.0]
    ys = [p[1] for p in points] or [0.0]
    content = struct.pack("<i4d2i", shape_type, min(xs), min(ys), max(xs), max(ys), len(parts), len(points))
    content += struct.pack(f"<{len(offsets)}i", *offsets)
    for x, y in points:
        content += struct.pack("<2d", x, y)
    return content


def build_shp(
    records: list[list[list[tuple[float, float]]]],
    *,
    file_code: int = 9994,
    version: int = 1000,
    shape_type: int = 5,
) -> bytes:
    """Assemble a Polygon shapefile from a list of records, each a list of parts."""
    body = b""
    for i, parts in enumerate(records, start=1):
        content = shp_record(parts)
        body += struct.pack(">2i", i, len(content) // 2) + content
    file_len_words = (100 + len(body)) // 2
    header = struct.pack(">7i", file_code, 0, 0, 0, 0, 0, file_len_words)
    header += struct.pack("<2i", version, shape_type)
    header += struct.pack("<8d", -180.0, -90.0, 180.0, 90.0, 0.0, 0.0, 0.0, 0.0)
    return header + body


def tile_options(max_level: int = 1, output: str = "out") -> TileOptions:
    return TileOptions(
        source=LocalSource(kind="local", path="test.shp"),
        max_level=max_level,
        output=output,
    )


@pytest.fixture
def square_shp() -> bytes:
    return build_shp([[UNIT_SQUARE]])


@pytest.fixture
def holed_shp() -> bytes:
    return build_shp([[INNER_SQUARE, OUTER_SQUARE]])


@pytest.fixture
def holed_polygon() -> Polygon:
    return polygon(OUTER_SQUARE, INNER_SQUARE)
