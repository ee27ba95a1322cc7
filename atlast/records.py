"""
Atlas metadata: normalized placement records and their binary layout.

``atlas.data`` layout, all integers and floats little-endian::

    b"ATLD"  u32 version          header, omitted in legacy blobs
    u64 record count
    per record:
        f32 x, f32 y, f32 width, f32 height
        u64 name length, UTF-8 name bytes

The body matches bincode's default encoding of a sequence of
``{x, y, width, height, name}`` structs, so legacy blobs can be read by
consumers that expect that format.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .errors import RecordFormatError
from .layout import PackingResult

MAGIC = b"ATLD"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<4sI")
_COUNT = struct.Struct("<Q")
_COORDS = struct.Struct("<4f")
_NAME_LEN = struct.Struct("<Q")


@dataclass(frozen=True)
class AtlasRecord:
    """Placement normalized to [0, 1] texture coordinates (float32 values)."""
    x: float
    y: float
    width: float
    height: float
    name: str


def normalize(value: int, extent: int) -> float:
    """Single precision ``value / extent``."""
    return float(np.float32(value) / np.float32(extent))


def build_records(result: PackingResult) -> List[AtlasRecord]:
    """Normalize each placement against the final canvas, in placement order."""
    width, height = result.canvas_width, result.canvas_height
    if width <= 0 or height <= 0:
        raise ValueError(f"Cannot normalize against an empty canvas ({width}x{height})")

    return [
        AtlasRecord(
            x=normalize(pl.rect.x, width),
            y=normalize(pl.rect.y, height),
            width=normalize(pl.rect.width, width),
            height=normalize(pl.rect.height, height),
            name=pl.image.name,
        )
        for pl in result.placements
    ]


def encode_records(records: Sequence[AtlasRecord], legacy: bool = False) -> bytes:
    """Serialize records; ``legacy`` drops the magic/version header."""
    parts = [] if legacy else [_HEADER.pack(MAGIC, FORMAT_VERSION)]
    parts.append(_COUNT.pack(len(records)))
    for record in records:
        name = record.name.encode("utf-8")
        parts.append(_COORDS.pack(record.x, record.y, record.width, record.height))
        parts.append(_NAME_LEN.pack(len(name)))
        parts.append(name)
    return b"".join(parts)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    def take(self, size: int, what: str) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise RecordFormatError(f"Truncated atlas data: need {size} bytes for {what} "
                                    f"at offset {self.offset}, have {len(self.data) - self.offset}")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, fmt: struct.Struct, what: str) -> tuple:
        return fmt.unpack(self.take(fmt.size, what))


def decode_records(data: bytes) -> List[AtlasRecord]:
    """Parse headered or legacy ``atlas.data`` bytes back into records."""
    reader = _Reader(data)

    if data[:len(MAGIC)] == MAGIC:
        _, version = reader.unpack(_HEADER, "header")
        if version != FORMAT_VERSION:
            raise RecordFormatError(f"Unsupported atlas data version {version} (expected {FORMAT_VERSION})")

    (count,) = reader.unpack(_COUNT, "record count")
    records = []
    for i in range(count):
        x, y, width, height = reader.unpack(_COORDS, f"record {i} coordinates")
        (name_len,) = reader.unpack(_NAME_LEN, f"record {i} name length")
        raw_name = reader.take(name_len, f"record {i} name")
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RecordFormatError(f"Record {i} name is not valid UTF-8: {e}") from e
        records.append(AtlasRecord(x, y, width, height, name))

    if reader.offset != len(data):
        raise RecordFormatError(f"{len(data) - reader.offset} trailing bytes after {count} records")
    return records
