"""Tiling job models, validated from the YAML configuration."""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator


class Encoding(str, enum.Enum):
    ZIP = "zip"


class LocalSource(BaseModel):
    kind: Literal["local"]
    path: str = Field(..., description="Path to a .shp file (or archive)")
    encoding: Encoding | None = Field(default=None, description="Container format, if any")

    def describe(self) -> str:
        return self.path


class OnlineSource(BaseModel):
    kind: Literal["online"]
    url: str = Field(..., description="HTTP(S) URL of a .shp file (or archive)")
    encoding: Encoding | None = Field(default=None, description="Container format, if any")

    def describe(self) -> str:
        return self.url


Source = Annotated[Union[LocalSource, OnlineSource], Field(discriminator="kind")]


class TileOptions(BaseModel):
    source: Source
    max_level: int = Field(..., ge=0, description="Deepest zoom level generated")
    output: str = Field(..., description="Output directory for this job's tiles")
    tile_prefix: str = Field(default="tile_", description="Tile filename prefix")

    @field_validator("source", mode="before")
    @classmethod
    def _path_shorthand(cls, value: Any) -> Any:
        # A bare string is a local path without encoding.
        if isinstance(value, str):
            return {"kind": "local", "path": value}
        return value

    def tile_filename(self, z: int, x: int, y: int) -> str:
        return f"{self.tile_prefix}{z}.{x}.{y}.json"


class Configuration(BaseModel):
    tiles: list[TileOptions] = Field(default_factory=list)
