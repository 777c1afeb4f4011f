"""Polygon shapefile reading: binary decoding and ring assembly."""

from polytiles.shapefile.assembler import record_to_polygon, records_to_multipolygon
from polytiles.shapefile.decoder import ShapefileError, ShapeRecord, decode_shp

__all__ = [
    "ShapeRecord",
    "ShapefileError",
    "decode_shp",
    "record_to_polygon",
    "records_to_multipolygon",
]
