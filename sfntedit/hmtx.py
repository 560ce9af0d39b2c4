"""The 'hmtx' horizontal metrics table."""

from __future__ import annotations

from dataclasses import dataclass, field

from .binary import BinaryReader, BinaryWriter, FontError


@dataclass
class LongHorMetric:
    advance_width: int = 0
    lsb: int = 0


@dataclass
class Hmtx:
    h_metrics: list = field(default_factory=list)
    left_side_bearing: list = field(default_factory=list)


def parse_hmtx(data, num_h_metrics, num_glyphs):
    """Parse an 'hmtx' table given counts from 'hhea' and 'maxp'."""
    if num_glyphs < num_h_metrics:
        raise FontError("numGlyphs must be >= numHMetrics")
    extra = num_glyphs - num_h_metrics
    if len(data) < num_h_metrics * 4 + extra * 2:
        raise FontError("hmtx table too small")
    r = BinaryReader(data)
    metrics = [LongHorMetric(r.u16(), r.i16()) for _ in range(num_h_metrics)]
    bearings = [r.i16() for _ in range(extra)]
    return Hmtx(metrics, bearings)


def write_hmtx(hmtx):
    """Serialize an 'hmtx' table."""
    w = BinaryWriter()
    for metric in hmtx.h_metrics:
        w.put_u16(metric.advance_width)
        w.put_u16(metric.lsb)
    for lsb in hmtx.left_side_bearing:
        w.put_u16(lsb)
    return w.getvalue()