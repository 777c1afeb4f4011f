"""GeoJSON output for finished tiles."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shapely.geometry import mapping

from polytiles.models.geometry import MultiPolygon
from polytiles.utils.geometry import to_shapely_multi


def tile_feature(polygons: MultiPolygon) -> dict[str, Any]:
    """A Feature with one MultiPolygon geometry and no properties."""
    return {
        "type": "Feature",
        "geometry": mapping(to_shapely_multi(polygons)),
        "properties": None,
    }


def ensure_output_dir(path: str | Path) -> Path:
    out = Path(path)
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_tile(path: str | Path, polygons: MultiPolygon) -> None:
    Path(path).write_text(json.dumps(tile_feature(polygons)), encoding="utf-8")
