"""The 'head' font header table."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .binary import BinaryReader, BinaryWriter, FontError
from .fixed import Fixed16_16

HEAD_SIZE = 54
HEAD_MAGIC = 0x5F0F3CF5


class MacStyle(enum.IntFlag):
    BOLD = 0x0001
    ITALIC = 0x0002
    UNDERLINE = 0x0004
    OUTLINE = 0x0008
    SHADOW = 0x0010
    CONDENSED = 0x0020
    EXTENDED = 0x0040


@dataclass
class Head:
    major_version: int = 1
    minor_version: int = 0
    font_revision: Fixed16_16 = field(default_factory=Fixed16_16)
    checksum_adjustment: int = 0
    magic_number: int = HEAD_MAGIC
    flags: int = 0
    units_per_em: int = 0
    created: int = 0
    modified: int = 0
    x_min: int = 0
    y_min: int = 0
    x_max: int = 0
    y_max: int = 0
    mac_style: int = 0
    lowest_rec_ppem: int = 0
    font_direction_hint: int = 0
    index_to_loc_format: int = 0
    glyph_data_format: int = 0


def parse_head(data):
    """Parse a 'head' table."""
    if len(data) < HEAD_SIZE:
        raise FontError("head table too small")
    r = BinaryReader(data)
    return Head(
        major_version=r.u16(),
        minor_version=r.u16(),
        font_revision=r.fixed16_16(),
        checksum_adjustment=r.u32(),
        magic_number=r.u32(),
        flags=r.u16(),
        units_per_em=r.u16(),
        created=r.i64(),
        modified=r.i64(),
        x_min=r.i16(),
        y_min=r.i16(),
        x_max=r.i16(),
        y_max=r.i16(),
        mac_style=r.u16(),
        lowest_rec_ppem=r.u16(),
        font_direction_hint=r.i16(),
        index_to_loc_format=r.i16(),
        glyph_data_format=r.i16(),
    )


def write_head(head):
    """Serialize a 'head' table to its 54-byte form."""
    w = BinaryWriter()
    w.put_u16(head.major_version)
    w.put_u16(head.minor_version)
    w.put_fixed16_16(head.font_revision)
    w.put_u32(head.checksum_adjustment)
    w.put_u32(head.magic_number)
    w.put_u16(head.flags)
    w.put_u16(head.units_per_em)
    w.put_u64(head.created)
    w.put_u64(head.modified)
    for value in (head.x_min, head.y_min, head.x_max, head.y_max):
        w.put_u16(value)
    w.put_u16(head.mac_style)
    w.put_u16(head.lowest_rec_ppem)
    w.put_u16(head.font_direction_hint)
    w.put_u16(head.index_to_loc_format)
    w.put_u16(head.glyph_data_format)
    return w.getvalue()