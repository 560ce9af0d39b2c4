"""The 'cmap' character-to-glyph mapping table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .binary import BinaryReader, BinaryWriter, FontError


def _to_i16(value):
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass
class EncodingRecord:
    platform_id: int = 0
    encoding_id: int = 0
    subtable_offset: int = 0


@dataclass
class CMapFormat0:
    """Byte encoding table: 256 one-byte glyph ids."""

    format: ClassVar[int] = 0

    language: int = 0
    glyph_id_array: list = field(default_factory=lambda: [0] * 256)

    def map(self, code):
        if code < 0 or code > 255:
            return 0
        return self.glyph_id_array[code]

    def enumerate(self):
        """Yield ``(code, glyph_id)`` for every non-zero mapping."""
        for code, gid in enumerate(self.glyph_id_array[:256]):
            if gid != 0:
                yield code, gid

    def _encode(self):
        w = BinaryWriter()
        w.put_u16(0)
        w.put_u16(262)
        w.put_u16(self.language)
        w.append(bytes(self.glyph_id_array[:256]).ljust(256, b"\0"))
        return w.getvalue()


@dataclass
class CMapFormat4:
    """Segment mapping to delta values (Unicode BMP)."""

    format: ClassVar[int] = 4

    language: int = 0
    end_code: list = field(default_factory=list)
    start_code: list = field(default_factory=list)
    id_delta: list = field(default_factory=list)
    id_range_offset: list = field(default_factory=list)
    glyph_id_array: list = field(default_factory=list)

    @property
    def seg_count(self):
        return len(self.end_code)

    def _segments(self):
        return enumerate(
            zip(self.start_code, self.end_code, self.id_delta, self.id_range_offset)
        )

    def _glyph_in_segment(self, index, code, start, delta, range_offset):
        if range_offset == 0:
            return (code + delta) & 0xFFFF
        position = (range_offset + (code - start) * 2) // 2 - (self.seg_count - index)
        if 0 <= position < len(self.glyph_id_array):
            gid = self.glyph_id_array[position]
            if gid != 0:
                return (gid + delta) & 0xFFFF
        return 0

    def map(self, code):
        code &= 0xFFFF
        for index, (start, end, delta, range_offset) in self._segments():
            if code <= end:
                if code < start:
                    return 0
                return self._glyph_in_segment(index, code, start, delta, range_offset)
        return 0

    def enumerate(self):
        """Yield ``(code, glyph_id)`` for every non-zero mapping."""
        for index, (start, end, delta, range_offset) in self._segments():
            for code in range(start, end + 1):
                gid = self._glyph_in_segment(index, code, start, delta, range_offset)
                if gid != 0:
                    yield code, gid

    def _encode(self):
        seg_count = self.seg_count
        length = 16 + seg_count * 8 + len(self.glyph_id_array) * 2
        search_range, entry_selector, range_shift = _search_params4(seg_count)
        w = BinaryWriter()
        for value in (
            4,
            length,
            self.language,
            seg_count * 2,
            search_range,
            entry_selector,
            range_shift,
        ):
            w.put_u16(value)
        for value in self.end_code:
            w.put_u16(value)
        w.put_u16(0)
        for array in (self.start_code, self.id_delta, self.id_range_offset, self.glyph_id_array):
            for value in array:
                w.put_u16(value)
        return w.getvalue()


@dataclass
class CMapFormat6:
    """Trimmed table mapping: a dense run of glyph ids from ``first_code``."""

    format: ClassVar[int] = 6

    language: int = 0
    first_code: int = 0
    glyph_id_array: list = field(default_factory=list)

    @property
    def entry_count(self):
        return len(self.glyph_id_array)

    def map(self, code):
        code &= 0xFFFF
        limit = (self.first_code + self.entry_count) & 0xFFFF
        if code < self.first_code or code >= limit:
            return 0
        return self.glyph_id_array[code - self.first_code]

    def enumerate(self):
        """Yield ``(code, glyph_id)`` for every non-zero mapping."""
        for i, gid in enumerate(self.glyph_id_array):
            if gid != 0:
                yield (self.first_code + i) & 0xFFFF, gid

    def _encode(self):
        w = BinaryWriter()
        w.put_u16(6)
        w.put_u16(10 + self.entry_count * 2)
        w.put_u16(self.language)
        w.put_u16(self.first_code)
        w.put_u16(self.entry_count)
        for gid in self.glyph_id_array:
            w.put_u16(gid)
        return w.getvalue()


@dataclass
class SequentialMapGroup:
    start_char_code: int = 0
    end_char_code: int = 0
    start_glyph_id: int = 0


@dataclass
class CMapFormat12:
    """Segmented coverage over the full 32-bit code space."""

    format: ClassVar[int] = 12

    language: int = 0
    groups: list = field(default_factory=list)

    @property
    def num_groups(self):
        return len(self.groups)

    def map(self, code):
        code &= 0xFFFFFFFF
        for group in self.groups:
            if group.start_char_code <= code <= group.end_char_code:
                return (group.start_glyph_id + code - group.start_char_code) & 0xFFFF
        return 0

    def enumerate(self):
        """Yield ``(code, glyph_id)`` for every non-zero mapping."""
        for group in self.groups:
            for code in range(group.start_char_code, group.end_char_code + 1):
                gid = (group.start_glyph_id + code - group.start_char_code) & 0xFFFF
                if gid != 0:
                    yield code, gid

    def _encode(self):
        length = 16 + self.num_groups * 12
        w = BinaryWriter()
        w.put_u16(12)
        w.put_u16(0)
        w.put_u32(length)
        w.put_u32(self.language)
        w.put_u32(self.num_groups)
        for group in self.groups:
            w.put_u32(group.start_char_code)
            w.put_u32(group.end_char_code)
            w.put_u32(group.start_glyph_id)
        return w.getvalue()


@dataclass
class CMap:
    """Encoding records paired by position with their parsed subtables."""

    version: int = 0
    encoding_records: list = field(default_factory=list)
    subtables: list = field(default_factory=list)

    @property
    def num_tables(self):
        return len(self.encoding_records)


def _search_params4(seg_count):
    power = 1
    entry_selector = 0
    while power * 2 <= seg_count:
        power *= 2
        entry_selector += 1
    search_range = (power * 2) & 0xFFFF
    range_shift = (seg_count * 2 - search_range) & 0xFFFF
    return search_range, entry_selector, range_shift


def _parse_format0(r):
    r.skip(2)  # length
    language = r.u16()
    return CMapFormat0(language, list(r.read(256)))


def _parse_format4(r):
    length = r.u16()
    language = r.u16()
    seg_count = r.u16() // 2
    r.skip(6)  # searchRange, entrySelector, rangeShift
    end_code = [r.u16() for _ in range(seg_count)]
    r.skip(2)  # reservedPad
    start_code = [r.u16() for _ in range(seg_count)]
    id_delta = [r.i16() for _ in range(seg_count)]
    id_range_offset = [r.u16() for _ in range(seg_count)]
    table_end = min(length, len(r))
    count = max(0, table_end - r.offset) // 2
    glyph_ids = [r.u16() for _ in range(count)]
    return CMapFormat4(language, end_code, start_code, id_delta, id_range_offset, glyph_ids)


def _parse_format6(r):
    r.skip(2)  # length
    language = r.u16()
    first_code = r.u16()
    entry_count = r.u16()
    return CMapFormat6(language, first_code, [r.u16() for _ in range(entry_count)])


def _parse_format12(r):
    r.skip(2)  # reserved
    r.skip(4)  # length
    language = r.u32()
    num_groups = r.u32()
    groups = [SequentialMapGroup(r.u32(), r.u32(), r.u32()) for _ in range(num_groups)]
    return CMapFormat12(language, groups)


_PARSERS = {
    0: _parse_format0,
    4: _parse_format4,
    6: _parse_format6,
    12: _parse_format12,
}


def parse_cmap(data):
    """Parse a 'cmap' table; subtables of unknown formats are skipped."""
    if len(data) < 4:
        raise FontError("cmap table too small")
    r = BinaryReader(data)
    version = r.u16()
    num_tables = r.u16()
    records = [EncodingRecord(r.u16(), r.u16(), r.u32()) for _ in range(num_tables)]

    subtables = []
    for record in records:
        if record.subtable_offset >= len(data):
            continue
        sub = BinaryReader(data[record.subtable_offset:])
        parser = _PARSERS.get(sub.u16())
        if parser is not None:
            subtables.append(parser(sub))
    return CMap(version, records, subtables)


def write_cmap(cmap):
    """Serialize a 'cmap' table; identical subtables are stored once."""
    blobs = [subtable._encode() for subtable in cmap.subtables]
    header_size = 4 + len(cmap.encoding_records) * 8

    placed = {}
    body = bytearray()
    offsets = []
    for index in range(len(cmap.encoding_records)):
        if index >= len(blobs):
            offsets.append(0)
            continue
        blob = blobs[index]
        if blob not in placed:
            placed[blob] = header_size + len(body)
            body += blob
        offsets.append(placed[blob])

    w = BinaryWriter()
    w.put_u16(cmap.version)
    w.put_u16(cmap.num_tables)
    for record, offset in zip(cmap.encoding_records, offsets):
        w.put_u16(record.platform_id)
        w.put_u16(record.encoding_id)
        w.put_u32(offset)
    w.append(body)
    return w.getvalue()


def _runs(pairs, mask):
    """Split sorted pairs into runs of consecutive codes with consecutive glyphs."""
    run = []
    for code, gid in pairs:
        if run:
            prev_code, prev_gid = run[-1]
            if code & mask == (prev_code + 1) & mask and gid == (prev_gid + 1) & 0xFFFF:
                run.append((code, gid))
                continue
            yield run
        run = [(code, gid)]
    if run:
        yield run


def build_format4(pairs):
    """Build a format 4 subtable from ``(code, glyph_id)`` pairs sorted by code."""
    table = CMapFormat4()
    for run in _runs(pairs, 0xFFFF):
        start_code = run[0][0] & 0xFFFF
        table.start_code.append(start_code)
        table.end_code.append(run[-1][0] & 0xFFFF)
        table.id_delta.append(_to_i16(_to_i16(run[0][1]) - _to_i16(start_code)))
        table.id_range_offset.append(0)
    table.start_code.append(0xFFFF)
    table.end_code.append(0xFFFF)
    table.id_delta.append(1)
    table.id_range_offset.append(0)
    return table


def build_format12(pairs):
    """Build a format 12 subtable from ``(code, glyph_id)`` pairs sorted by code."""
    groups = [
        SequentialMapGroup(run[0][0], run[-1][0], run[0][1])
        for run in _runs(pairs, 0xFFFFFFFF)
    ]
    return CMapFormat12(0, groups)


def rebuild_cmap(rune_to_glyph, original):
    """Build a new cmap from a code-point map, keeping the original's records."""
    if not rune_to_glyph or original is None:
        return original
    pairs = sorted((code, gid) for code, gid in rune_to_glyph.items() if gid != 0)
    if not pairs:
        return original

    need_format12 = pairs[-1][0] > 0xFFFF
    bmp_pairs = [p for p in pairs if p[0] <= 0xFFFF] if need_format12 else pairs
    format4 = build_format4(bmp_pairs)
    format12 = build_format12(pairs) if need_format12 else None

    records = []
    subtables = []
    for record in original.encoding_records:
        is_unicode_full = record.platform_id == 0 and record.encoding_id in (3, 4)
        records.append(EncodingRecord(record.platform_id, record.encoding_id, 0))
        subtables.append(format12 if is_unicode_full and need_format12 else format4)

    if not records:
        records = [EncodingRecord(3, 1, 0)]
        subtables = [format4]

    return CMap(original.version, records, subtables)