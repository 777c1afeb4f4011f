"""Pipeline orchestrator: loads every source, tiles it, drains tiles to the writer."""

from __future__ import annotations

import logging
import queue
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import httpx
from tqdm import tqdm

from polytiles.engine.config import TilingConfig
from polytiles.engine.quadtree import SourceDone, TileGenerator, TileResult, tiles_for_z
from polytiles.io.acquire import SourceError, load_source
from polytiles.io.geojson import ensure_output_dir, write_tile
from polytiles.models.geometry import MultiPolygon
from polytiles.models.sources import TileOptions
from polytiles.shapefile import ShapefileError, decode_shp, records_to_multipolygon

logger = logging.getLogger(__name__)


class TilingError(RuntimeError):
    """A tile node failed; the whole run is aborted."""


@dataclass
class RunReport:
    """Outcome of one run over all configured sources."""

    tiles_written: int = 0
    completed: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def write_tile_file(result: TileResult) -> None:
    """Store a tile as ``<output>/<prefix><z>.<x>.<y>.json``."""
    z, x, y = result.tile
    path = Path(result.options.output) / result.options.tile_filename(z, x, y)
    write_tile(path, result.polygons)


class TilingPipeline:
    """Runs all tiling jobs on shared worker pools with a single tile consumer."""

    def __init__(
        self,
        config: TilingConfig | None = None,
        workers: int = 1,
        writer: Callable[[TileResult], None] | None = None,
        progress: bool = True,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or TilingConfig()
        self.workers = max(1, workers)
        self.writer = writer or write_tile_file
        self.progress = progress
        self.client = client

    def load_polygons(self, options: TileOptions) -> MultiPolygon:
        """Acquire, decode and assemble one source."""
        t0 = time.perf_counter()
        data = load_source(options.source, client=self.client, progress=self.progress)
        records = decode_shp(data)
        polygons = records_to_multipolygon(records)
        logger.info(
            "Loaded %s: %d polygons in %.0fms",
            options.source.describe(),
            len(polygons),
            (time.perf_counter() - t0) * 1000,
        )
        return polygons

    def run(self, jobs: list[TileOptions]) -> RunReport:
        """Tile every job. Sources that fail to load are reported and skipped."""
        report = RunReport()
        results: queue.Queue = queue.Queue()

        # Simplification gets its own pool: tile nodes wait on it.
        with (
            ThreadPoolExecutor(self.workers, thread_name_prefix="tile") as node_pool,
            ThreadPoolExecutor(self.workers, thread_name_prefix="simplify") as simplify_pool,
        ):
            generator = TileGenerator(node_pool, simplify_pool, results, self.config)

            started = 0
            total = 0
            for options in jobs:
                name = options.source.describe()
                ensure_output_dir(options.output)
                try:
                    polygons = self.load_polygons(options)
                except (SourceError, ShapefileError) as e:
                    report.errors[name] = str(e)
                    logger.warning("Skipping %s: %s", name, e)
                    continue
                generator.start(polygons, options)
                started += 1
                total += tiles_for_z(options.max_level)

            try:
                self._drain(results, started, total, report)
            except TilingError:
                node_pool.shutdown(wait=False, cancel_futures=True)
                raise

        logger.info(
            "Run complete: %d tiles from %d/%d sources",
            report.tiles_written,
            len(report.completed),
            len(jobs),
        )
        return report

    def _drain(self, results: queue.Queue, sources: int, total: int, report: RunReport) -> None:
        """Hand each tile to the writer until every started source is done."""
        with tqdm(total=total, desc="Generating tiles", disable=not self.progress) as bar:
            pending = sources
            while pending:
                item = results.get()
                if isinstance(item, SourceDone):
                    pending -= 1
                    name = item.options.source.describe()
                    if item.error is not None:
                        raise TilingError(f"tiling {name} failed: {item.error}") from item.error
                    report.completed.append(name)
                    continue
                self.writer(item)
                report.tiles_written += 1
                bar.update(1)
