"""Quadtree tile generation: recursive clip, simplify and emit.

Tile (z, x, y) covers cell (x, y) of a 2^z x 2^z grid over the configured
extent. Each node clips its parent's already-clipped polygons, hands the
result to its four children, and only once all four have finished simplifies
its own geometry and emits it. Nodes run on a shared thread pool; a node never
blocks waiting for its children. Instead a fan-in counter schedules the
parent's remaining work when the last child completes.

Results go to a single unbounded queue: one TileResult per tile, in no
particular order, followed by one SourceDone per source.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from concurrent.futures import Executor
from dataclasses import dataclass, field
from functools import partial

from polytiles.engine.clip import clip_polygon
from polytiles.engine.config import TilingConfig
from polytiles.models.geometry import WORLD, MultiPolygon, Polygon, Rect, TileCoord
from polytiles.models.sources import TileOptions
from polytiles.utils.simplify import simplify_polygon

logger = logging.getLogger(__name__)

ROOT = TileCoord(0, 0, 0)


def tiles_for_z(z: int) -> int:
    """Number of tiles in a quadtree with levels 0..z."""
    return sum(4**k for k in range(z + 1))


def tile_rect(x: int, y: int, zoom: int, overlap: float, extent: Rect = WORLD) -> Rect:
    """Rectangle of cell (x, y) at scale 2^zoom of the extent.

    ``zoom`` is the scale exponent, so quadtree level z uses ``-z``. Each side
    grows by ``overlap / 2`` of the cell's own size.
    """
    width = extent.width * 2.0**zoom
    height = extent.height * 2.0**zoom
    xmin = extent.xmin + x * width
    ymin = extent.ymin + y * height
    dx = width * overlap / 2.0
    dy = height * overlap / 2.0
    return Rect(xmin - dx, ymin - dy, xmin + width + dx, ymin + height + dy)


def _drop_small_rings(polygon: Polygon, min_points: int) -> Polygon | None:
    if len(polygon.exterior) < min_points:
        return None
    holes = [r for r in polygon.interiors if len(r) >= min_points]
    if len(holes) == len(polygon.interiors):
        return polygon
    return Polygon(exterior=polygon.exterior, interiors=holes)


def create_tile(polygons: MultiPolygon, rect: Rect, min_points: int = 4) -> MultiPolygon:
    """Clip every polygon to the rectangle, dropping degenerate rings."""
    out: MultiPolygon = []
    for poly in polygons:
        kept = _drop_small_rings(clip_polygon(poly, rect), min_points)
        if kept is not None:
            out.append(kept)
    return out


@dataclass
class TileResult:
    tile: TileCoord
    polygons: MultiPolygon
    options: TileOptions


@dataclass
class SourceDone:
    """Last message of a source: every tile was emitted, or it failed."""

    options: TileOptions
    tiles: int = 0
    error: BaseException | None = None


class _Join:
    """Runs ``on_done`` once ``count`` children have called ``done``."""

    def __init__(self, count: int, on_done: Callable[[], None]) -> None:
        self._count = count
        self._on_done = on_done
        self._lock = threading.Lock()

    def done(self) -> None:
        with self._lock:
            self._count -= 1
            last = self._count == 0
        if last:
            self._on_done()


@dataclass
class _SourceRun:
    options: TileOptions
    results: queue.Queue
    started: float = field(default_factory=time.perf_counter)
    emitted: int = 0
    finished: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock)

    def emit(self, tile: TileCoord, polygons: MultiPolygon) -> None:
        self.results.put(TileResult(tile=tile, polygons=polygons, options=self.options))
        with self.lock:
            self.emitted += 1

    def finish(self, error: BaseException | None = None) -> None:
        with self.lock:
            if self.finished:
                return
            self.finished = True
            emitted = self.emitted
        elapsed = (time.perf_counter() - self.started) * 1000
        if error is None:
            logger.info(
                "Tiled %s: %d tiles in %.0fms", self.options.source.describe(), emitted, elapsed
            )
        else:
            logger.error("Tiling %s failed: %s", self.options.source.describe(), error)
        self.results.put(SourceDone(options=self.options, tiles=emitted, error=error))


class TileGenerator:
    """Schedules quadtrees on a worker pool and streams their tiles to a queue."""

    def __init__(
        self,
        node_pool: Executor,
        simplify_pool: Executor,
        results: queue.Queue,
        config: TilingConfig | None = None,
    ) -> None:
        self.node_pool = node_pool
        self.simplify_pool = simplify_pool
        self.results = results
        self.config = config or TilingConfig()

    def start(self, polygons: MultiPolygon, options: TileOptions) -> None:
        """Schedule the full quadtree of one source; returns immediately."""
        run = _SourceRun(options=options, results=self.results)
        logger.info(
            "Tiling %s: %d polygons, levels 0..%d",
            options.source.describe(),
            len(polygons),
            options.max_level,
        )
        self._submit(run, polygons, ROOT, None)

    def _submit(
        self, run: _SourceRun, polygons: MultiPolygon, tile: TileCoord, parent: _Join | None
    ) -> None:
        self.node_pool.submit(self._guarded, run, self._process, run, polygons, tile, parent)

    def _guarded(self, run: _SourceRun, fn: Callable[..., None], *args) -> None:
        try:
            fn(*args)
        except Exception as e:
            run.finish(error=e)

    def _process(
        self, run: _SourceRun, polygons: MultiPolygon, tile: TileCoord, parent: _Join | None
    ) -> None:
        cfg = self.config
        rect = tile_rect(tile.x, tile.y, -tile.z, cfg.overlap, cfg.extent)
        clipped = create_tile(polygons, rect, cfg.min_ring_points)

        if tile.z >= run.options.max_level:
            self._complete(run, clipped, tile, rect, parent)
            return

        def resume() -> None:
            self.node_pool.submit(
                self._guarded, run, self._complete, run, clipped, tile, rect, parent
            )

        join = _Join(4, resume)
        for child in tile.children():
            self._submit(run, clipped, child, join)

    def _complete(
        self,
        run: _SourceRun,
        polygons: MultiPolygon,
        tile: TileCoord,
        rect: Rect,
        parent: _Join | None,
    ) -> None:
        run.emit(tile, self.simplify(polygons, rect))
        logger.debug("Tile %d/%d/%d: %d polygons", tile.z, tile.x, tile.y, len(polygons))
        if parent is None:
            run.finish()
        else:
            parent.done()

    def simplify(self, polygons: MultiPolygon, rect: Rect) -> MultiPolygon:
        """Simplify a tile's polygons for its zoom level.

        Tiles whose tolerance falls below the configured floor keep full detail.
        """
        cfg = self.config
        min_area = rect.area / cfg.simplify_divisor
        if min_area <= cfg.simplify_floor:
            return polygons

        simplified = self.simplify_pool.map(partial(simplify_polygon, epsilon=min_area), polygons)
        out: MultiPolygon = []
        for poly in simplified:
            kept = _drop_small_rings(poly, cfg.min_ring_points)
            if kept is not None:
                out.append(kept)
        return out
