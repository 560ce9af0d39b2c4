"""The 'hhea' horizontal header table."""

from __future__ import annotations

from dataclasses import dataclass

from .binary import BinaryReader, BinaryWriter, FontError

HHEA_SIZE = 36


@dataclass
class Hhea:
    version: int = 0x00010000
    ascent: int = 0
    descent: int = 0
    line_gap: int = 0
    advance_width_max: int = 0
    min_left_side_bearing: int = 0
    min_right_side_bearing: int = 0
    x_max_extent: int = 0
    caret_slope_rise: int = 0
    caret_slope_run: int = 0
    caret_offset: int = 0
    reserved1: int = 0
    reserved2: int = 0
    reserved3: int = 0
    reserved4: int = 0
    metric_data_format: int = 0
    number_of_h_metrics: int = 0


def parse_hhea(data):
    """Parse an 'hhea' table."""
    if len(data) < HHEA_SIZE:
        raise FontError("hhea table too small")
    r = BinaryReader(data)
    return Hhea(
        version=r.u32(),
        ascent=r.i16(),
        descent=r.i16(),
        line_gap=r.i16(),
        advance_width_max=r.u16(),
        min_left_side_bearing=r.i16(),
        min_right_side_bearing=r.i16(),
        x_max_extent=r.i16(),
        caret_slope_rise=r.i16(),
        caret_slope_run=r.i16(),
        caret_offset=r.i16(),
        reserved1=r.i16(),
        reserved2=r.i16(),
        reserved3=r.i16(),
        reserved4=r.i16(),
        metric_data_format=r.i16(),
        number_of_h_metrics=r.u16(),
    )


def write_hhea(hhea):
    """Serialize an 'hhea' table to its 36-byte form."""
    w = BinaryWriter()
    w.put_u32(hhea.version)
    for value in (
        hhea.ascent,
        hhea.descent,
        hhea.line_gap,
        hhea.advance_width_max,
        hhea.min_left_side_bearing,
        hhea.min_right_side_bearing,
        hhea.x_max_extent,
        hhea.caret_slope_rise,
        hhea.caret_slope_run,
        hhea.caret_offset,
        hhea.reserved1,
        hhea.reserved2,
        hhea.reserved3,
        hhea.reserved4,
        hhea.metric_data_format,
        hhea.number_of_h_metrics,
    ):
        w.put_u16(value)
    return w.getvalue()