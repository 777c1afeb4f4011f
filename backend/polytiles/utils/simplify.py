"""Effective-area (Visvalingam-Whyatt) simplification."""

from __future__ import annotations

import heapq

import numpy as np
from numpy.typing import NDArray

from polytiles.models.geometry import Polygon


def _triangle_area(points: NDArray[np.float64], a: int, b: int, c: int) -> float:
    ax, ay = points[a]
    bx, by = points[b]
    cx, cy = points[c]
    return abs((bx - ax) * (cy - ay) - (cx - ax) * (by - ay)) / 2.0


def visvalingam(points: NDArray[np.float64], epsilon: float) -> NDArray[np.float64]:
    """Visvalingam-Whyatt line simplification.

    Repeatedly removes the interior vertex whose triangle with its two current
    neighbours has the smallest area, as long as that area is below
    ``epsilon``. The first and last vertices are always kept, so a closed ring
    stays closed.
    """
    n = len(points)
    if n < 3:
        return points

    prev = list(range(-1, n - 1))
    nxt = list(range(1, n + 1))
    removed = [False] * n

    # Heap entries carry the neighbours they were computed with; an entry is
    # stale once either neighbour has changed.
    heap: list[tuple[float, int, int, int]] = []
    for i in range(1, n - 1):
        heap.append((_triangle_area(points, i - 1, i, i + 1), i, i - 1, i + 1))
    heapq.heapify(heap)

    while heap:
        area, i, left, right = heapq.heappop(heap)
        if removed[i] or prev[i] != left or nxt[i] != right:
            continue
        if area >= epsilon:
            break

        removed[i] = True
        nxt[left] = right
        prev[right] = left

        if left > 0:
            heapq.heappush(
                heap, (_triangle_area(points, prev[left], left, right), left, prev[left], right)
            )
        if right < n - 1:
            heapq.heappush(
                heap, (_triangle_area(points, left, right, nxt[right]), right, left, nxt[right])
            )

    keep = [i for i in range(n) if not removed[i]]
    if len(keep) == n:
        return points
    return points[keep]


def simplify_polygon(polygon: Polygon, epsilon: float) -> Polygon:
    """Simplify the exterior and every hole independently."""
    return Polygon(
        exterior=visvalingam(polygon.exterior, epsilon),
        interiors=[visvalingam(ring, epsilon) for ring in polygon.interiors],
    )
