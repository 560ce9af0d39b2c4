import struct

import pytest

from sfntedit.binary import FontError
from sfntedit.hmtx import Hmtx, LongHorMetric, parse_hmtx, write_hmtx


def _raw_hmtx():
    pairs = [(429, 50)] + [(500 + i, i - 20) for i in range(1, 42)] + [(1354, 8)]
    return b"".join(struct.pack(">Hh", aw, lsb) for aw, lsb in pairs)


def test_parse_hmtx():
    hmtx = parse_hmtx(_raw_hmtx(), 43, 43)
    assert len(hmtx.h_metrics) == 43
    assert hmtx.left_side_bearing == []
    assert hmtx.h_metrics[0].advance_width == 429
    assert hmtx.h_metrics[0].lsb == 50
    assert hmtx.h_metrics[42].advance_width == 1354
    assert hmtx.h_metrics[42].lsb == 8


def test_round_trip_hmtx():
    hmtx = parse_hmtx(_raw_hmtx(), 43, 43)
    written = write_hmtx(hmtx)
    hmtx2 = parse_hmtx(
        written,
        len(hmtx.h_metrics),
        len(hmtx.h_metrics) + len(hmtx.left_side_bearing),
    )
    assert hmtx2.h_metrics == hmtx.h_metrics
    assert hmtx2.left_side_bearing == hmtx.left_side_bearing
    assert written == _raw_hmtx()


def test_round_trip_with_trailing_bearings():
    hmtx = Hmtx(
        [LongHorMetric(600, -10), LongHorMetric(700, 20)],
        [-5, 0, 33],
    )
    data = write_hmtx(hmtx)
    assert len(data) == 2 * 4 + 3 * 2
    parsed = parse_hmtx(data, 2, 5)
    assert parsed == hmtx


def test_parse_hmtx_glyph_count_below_metrics():
    with pytest.raises(FontError):
        parse_hmtx(_raw_hmtx(), 43, 42)


def test_parse_hmtx_too_small():
    with pytest.raises(FontError):
        parse_hmtx(_raw_hmtx()[:-1], 43, 43)


def test_parse_hmtx_missing_bearings():
    with pytest.raises(FontError):
        parse_hmtx(_raw_hmtx(), 43, 44)