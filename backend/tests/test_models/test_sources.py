"""Tests for tiling job configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from polytiles.config import Settings, load_configuration
from polytiles.models.sources import Configuration, Encoding, LocalSource, OnlineSource, TileOptions


def test_bare_string_is_local_path():
    opts = TileOptions.model_validate({"source": "land.shp", "max_level": 3, "output": "out"})
    assert isinstance(opts.source, LocalSource)
    assert opts.source.path == "land.shp"
    assert opts.source.encoding is None
    assert opts.tile_prefix == "tile_"


def test_tagged_online_source():
    opts = TileOptions.model_validate(
        {
            "source": {"kind": "online", "url": "https://example.com/land.zip", "encoding": "zip"},
            "max_level": 2,
            "output": "out",
        }
    )
    assert isinstance(opts.source, OnlineSource)
    assert opts.source.encoding is Encoding.ZIP


def test_untagged_source_rejected():
    with pytest.raises(ValidationError):
        TileOptions.model_validate({"source": {"path": "land.shp"}, "max_level": 1, "output": "out"})


def test_unknown_encoding_rejected():
    with pytest.raises(ValidationError):
        TileOptions.model_validate(
            {"source": {"kind": "local", "path": "a.shp", "encoding": "gzip"}, "max_level": 1, "output": "o"}
        )


def test_negative_level_rejected():
    with pytest.raises(ValidationError):
        TileOptions.model_validate({"source": "a.shp", "max_level": -1, "output": "out"})


def test_tile_filename():
    opts = TileOptions.model_validate(
        {"source": "a.shp", "max_level": 1, "output": "out", "tile_prefix": "land_"}
    )
    assert opts.tile_filename(3, 5, 2) == "land_3.5.2.json"


def test_load_configuration(tmp_path):
    path = tmp_path / "Settings.yaml"
    path.write_text(
        """
tiles:
  - source: data/land.shp
    max_level: 4
    output: tiles/land
  - source:
      kind: online
      url: https://example.com/lakes.zip
      encoding: zip
    max_level: 2
    output: tiles/lakes
    tile_prefix: lake_
""",
        encoding="utf-8",
    )
    conf = load_configuration(path)
    assert isinstance(conf, Configuration)
    assert len(conf.tiles) == 2
    assert conf.tiles[0].source.describe() == "data/land.shp"
    assert conf.tiles[1].source.describe() == "https://example.com/lakes.zip"
    assert conf.tiles[1].tile_prefix == "lake_"


def test_empty_configuration(tmp_path):
    path = tmp_path / "Settings.yaml"
    path.write_text("", encoding="utf-8")
    assert load_configuration(path).tiles == []


def test_settings_workers(monkeypatch):
    monkeypatch.setenv("POLYTILES_WORKERS", "3")
    assert Settings().workers == 3
    monkeypatch.setenv("POLYTILES_WORKERS", "0")
    assert Settings().workers >= 1
