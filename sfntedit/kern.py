"""The 'kern' kerning table."""

from __future__ import annotations

from dataclasses import dataclass, field

from .binary import BinaryReader, BinaryWriter, FontError

_SUBTABLE_HEADER = 6
_FORMAT0_HEADER = 8
_PAIR_SIZE = 6


@dataclass(frozen=True)
class KernPair:
    left: int
    right: int
    value: int


@dataclass
class KernSubtable:
    """A kern subtable; format 0 keeps its pairs, others keep raw bytes."""

    version: int = 0
    length: int = 0
    coverage: int = 0
    pairs: list = field(default_factory=list)
    raw_data: bytes = b""

    @property
    def format(self):
        return (self.coverage >> 8) & 0xFF


@dataclass
class Kern:
    version: int = 0
    subtables: list = field(default_factory=list)


def _search_params(n):
    if n == 0:
        return 0, 0, 0
    power = 1
    entry_selector = 0
    while power * 2 <= n:
        power *= 2
        entry_selector += 1
    return power, entry_selector, n - power


def parse_kern(data):
    """Parse a 'kern' table."""
    data = bytes(data)
    if len(data) < 4:
        raise FontError("kern table too small")
    r = BinaryReader(data)
    kern = Kern(version=r.u16())
    count = r.u16()

    for _ in range(count):
        start = r.offset
        if start + _SUBTABLE_HEADER > len(data):
            raise FontError("kern subtable header out of bounds")
        sub = KernSubtable(version=r.u16(), length=r.u16(), coverage=r.u16())
        body_len = sub.length - _SUBTABLE_HEADER
        if body_len < 0 or start + body_len > len(data):
            raise FontError("kern subtable data out of bounds")

        if sub.format == 0:
            if body_len < _FORMAT0_HEADER:
                raise FontError("kern format 0 subtable too small")
            n_pairs = r.u16()
            r.skip(6)  # searchRange, entrySelector, rangeShift
            sub.pairs = [KernPair(r.u16(), r.u16(), r.i16()) for _ in range(n_pairs)]
        else:
            sub.raw_data = data[r.offset:start + sub.length].ljust(body_len, b"\0")

        next_offset = min(start + sub.length, len(data))
        if r.offset < next_offset:
            r.skip(next_offset - r.offset)
        kern.subtables.append(sub)

    return kern


def write_kern(kern):
    """Serialize a 'kern' table; subtable lengths follow the written content."""
    w = BinaryWriter()
    w.put_u16(kern.version)
    w.put_u16(len(kern.subtables))
    for sub in kern.subtables:
        if sub.format == 0:
            body = BinaryWriter()
            n_pairs = len(sub.pairs)
            search_range, entry_selector, range_shift = _search_params(n_pairs)
            body.put_u16(n_pairs)
            body.put_u16(search_range * _PAIR_SIZE)
            body.put_u16(entry_selector)
            body.put_u16(range_shift * _PAIR_SIZE)
            for pair in sub.pairs:
                body.put_u16(pair.left)
                body.put_u16(pair.right)
                body.put_u16(pair.value)
            payload = body.getvalue()
        else:
            payload = bytes(sub.raw_data)
        w.put_u16(sub.version)
        w.put_u16(_SUBTABLE_HEADER + len(payload))
        w.put_u16(sub.coverage)
        w.append(payload)
    return w.getvalue()