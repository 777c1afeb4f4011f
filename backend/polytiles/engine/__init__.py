"""polytiles tiling engine."""

from polytiles.engine.clip import Axis, clip_polygon, clip_ring
from polytiles.engine.config import TilingConfig
from polytiles.engine.pipeline import RunReport, TilingError, TilingPipeline
from polytiles.engine.quadtree import (
    SourceDone,
    TileGenerator,
    TileResult,
    create_tile,
    tile_rect,
    tiles_for_z,
)

__all__ = [
    "Axis",
    "clip_ring",
    "clip_polygon",
    "TilingConfig",
    "TileGenerator",
    "TileResult",
    "SourceDone",
    "create_tile",
    "tile_rect",
    "tiles_for_z",
    "TilingPipeline",
    "RunReport",
    "TilingError",
]
