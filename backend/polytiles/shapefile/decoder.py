"""ESRI Shapefile (.shp) decoder for Polygon files.

Layout (all offsets in bytes):

    file header, 100 bytes
      0   int32 BE   file code, 9994
      4   5 x int32  unused
      24  int32 BE   file length in 16-bit words
      28  int32 LE   version, 1000
      32  int32 LE   shape type, 5 (Polygon)
      36  8 x f64 LE bounding box (x, y, z, m ranges)

    record header, 8 bytes
      0   int32 BE   record number
      4   int32 BE   content length in 16-bit words

    polygon record content
      0   int32 LE   shape type, 5
      4   4 x f64 LE bounding box
      36  int32 LE   number of parts
      40  int32 LE   number of points
      44  int32 LE x num_parts      start index of each part
      ..  2 x f64 LE x num_points   points

Every field is decoded explicitly into owned values; nothing keeps a
reference to the input buffer. Decoding is all-or-nothing.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from polytiles.models.geometry import Rect, Ring

logger = logging.getLogger(__name__)

FILE_CODE = 9994
VERSION = 1000
SHAPE_POLYGON = 5

_MAGIC = struct.Struct(">I24x")
_VERSION_AND_TYPE = struct.Struct("<II64x")
_RECORD_HEADER = struct.Struct(">4xi")
_POLYGON_HEADER = struct.Struct("<I4dII")


class ShapefileError(ValueError):
    """The buffer is not a valid Polygon shapefile."""


@dataclass
class ShapeRecord:
    """One decoded polygon record."""

    bbox: Rect
    # Start index into ``points`` of each part
    parts: NDArray[np.uint32]
    # Nx2 array of (x, y)
    points: NDArray[np.float64]

    @property
    def num_parts(self) -> int:
        return len(self.parts)

    def part(self, index: int) -> Ring:
        start = int(self.parts[index])
        end = int(self.parts[index + 1]) if index + 1 < len(self.parts) else len(self.points)
        return self.points[start:end]

    def rings(self) -> list[Ring]:
        return [self.part(i) for i in range(len(self.parts))]


class _Cursor:
    """Bounds-checked sequential reader over a byte buffer."""

    def __init__(self, data: bytes, offset: int = 0, end: int | None = None) -> None:
        self.data = data
        self.offset = offset
        self.end = len(data) if end is None else end

    @property
    def remaining(self) -> int:
        return self.end - self.offset

    def unpack(self, fmt: struct.Struct, what: str) -> tuple:
        if fmt.size > self.remaining:
            raise ShapefileError(
                f"truncated {what} at byte {self.offset}: "
                f"need {fmt.size} bytes, {self.remaining} left"
            )
        values = fmt.unpack_from(self.data, self.offset)
        self.offset += fmt.size
        return values

    def array(self, dtype: str, count: int, what: str) -> NDArray:
        """Read ``count`` little-endian values into an owned native-order array."""
        dt = np.dtype(dtype)
        size = dt.itemsize * count
        if size > self.remaining:
            raise ShapefileError(
                f"truncated {what} at byte {self.offset}: "
                f"need {size} bytes, {self.remaining} left"
            )
        if count == 0:
            return np.empty(0, dtype=dt.newbyteorder("="))
        values = np.frombuffer(self.data, dtype=dt, count=count, offset=self.offset)
        self.offset += size
        return values.astype(dt.newbyteorder("="))

    def sub(self, length: int, what: str) -> _Cursor:
        if length < 0 or length > self.remaining:
            raise ShapefileError(
                f"truncated {what} at byte {self.offset}: "
                f"declared {length} bytes, {self.remaining} left"
            )
        cursor = _Cursor(self.data, self.offset, self.offset + length)
        self.offset += length
        return cursor


def _decode_header(cursor: _Cursor) -> None:
    (code,) = cursor.unpack(_MAGIC, "file header")
    if code != FILE_CODE:
        raise ShapefileError(f"bad file code {code}, expected {FILE_CODE}")
    version, shape_type = cursor.unpack(_VERSION_AND_TYPE, "file header")
    if version != VERSION:
        raise ShapefileError(f"unsupported version {version}, expected {VERSION}")
    if shape_type != SHAPE_POLYGON:
        raise ShapefileError(f"unsupported shape type {shape_type}, only Polygon ({SHAPE_POLYGON})")


def _decode_record(cursor: _Cursor, index: int) -> ShapeRecord:
    (length_words,) = cursor.unpack(_RECORD_HEADER, f"record {index} header")
    content = cursor.sub(length_words * 2, f"record {index}")

    shape_type, xmin, ymin, xmax, ymax, num_parts, num_points = content.unpack(
        _POLYGON_HEADER, f"record {index} content"
    )
    if shape_type != SHAPE_POLYGON:
        raise ShapefileError(f"record {index}: shape type {shape_type}, expected Polygon")

    parts = content.array("<u4", num_parts, f"record {index} parts")
    points = content.array("<f8", 2 * num_points, f"record {index} points").reshape(num_points, 2)

    if num_parts:
        if int(parts[0]) != 0:
            raise ShapefileError(f"record {index}: first part starts at {parts[0]}, expected 0")
        if np.any(np.diff(parts.astype(np.int64)) <= 0):
            raise ShapefileError(f"record {index}: part offsets not strictly increasing")
        if int(parts[-1]) >= num_points:
            raise ShapefileError(
                f"record {index}: part offset {parts[-1]} beyond {num_points} points"
            )

    return ShapeRecord(bbox=Rect(xmin, ymin, xmax, ymax), parts=parts, points=points)


def decode_shp(data: bytes) -> list[ShapeRecord]:
    """Decode a complete Polygon shapefile.

    Raises ShapefileError on a bad header, a non-polygon record, or a
    truncated buffer. A file without records is rejected as well.
    """
    cursor = _Cursor(data)
    _decode_header(cursor)

    records: list[ShapeRecord] = []
    while cursor.remaining > 0:
        records.append(_decode_record(cursor, len(records)))

    if not records:
        raise ShapefileError("shapefile contains no records")

    logger.debug(
        "Decoded %d records, %d points",
        len(records),
        sum(len(r.points) for r in records),
    )
    return records
