"""The 'glyf' table: simple and composite TrueType glyph outlines."""

from __future__ import annotations

from dataclasses import dataclass, field

from .binary import BinaryReader, BinaryWriter, FontError

ON_CURVE = 0x01
X_SHORT = 0x02
Y_SHORT = 0x04
REPEAT = 0x08
X_SAME = 0x10  # positive if X_SHORT, unchanged otherwise
Y_SAME = 0x20  # positive if Y_SHORT, unchanged otherwise

ARG_1_AND_2_ARE_WORDS = 0x0001
ARGS_ARE_XY_VALUES = 0x0002
ROUND_XY_TO_GRID = 0x0004
WE_HAVE_A_SCALE = 0x0008
MORE_COMPONENTS = 0x0020
WE_HAVE_AN_X_AND_Y_SCALE = 0x0040
WE_HAVE_A_TWO_BY_TWO = 0x0080

_MAX_FLAG_RUN = 256


def _to_i16(value):
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass
class GlyphHeader:
    number_of_contours: int = 0
    x_min: int = 0
    y_min: int = 0
    x_max: int = 0
    y_max: int = 0


@dataclass
class SimpleGlyph:
    end_pts_of_contours: list = field(default_factory=list)
    instructions: bytes = b""
    flags: list = field(default_factory=list)
    x_coordinates: list = field(default_factory=list)
    y_coordinates: list = field(default_factory=list)


@dataclass
class GlyphComponent:
    """One component of a composite glyph.

    ``transform`` holds up to four F2Dot14 values: a uniform scale uses
    index 0, an x/y scale uses indices 0 and 3, a 2x2 matrix uses all four.
    """

    flags: int = 0
    glyph_index: int = 0
    arg1: int = 0
    arg2: int = 0
    transform: list = field(default_factory=lambda: [0, 0, 0, 0])
    has_scale: bool = False
    has_xy_scale: bool = False
    has_2x2: bool = False


@dataclass
class CompositeGlyph:
    components: list = field(default_factory=list)


@dataclass
class Glyph:
    header: GlyphHeader = field(default_factory=GlyphHeader)
    simple_glyph: SimpleGlyph | None = None
    composite_glyph: CompositeGlyph | None = None

    def is_empty(self):
        """True for a glyph with no outline data at all."""
        return (
            self.header.number_of_contours == 0
            and self.simple_glyph is None
            and self.composite_glyph is None
        )


def _read_coordinates(r, flags, short_bit, same_bit):
    value = 0
    coords = []
    for flag in flags:
        if flag & short_bit:
            delta = r.u8()
            if not flag & same_bit:
                delta = -delta
            value = _to_i16(value + delta)
        elif not flag & same_bit:
            value = _to_i16(value + r.i16())
        coords.append(value)
    return coords


def _parse_simple(r, num_contours):
    if num_contours == 0:
        return SimpleGlyph()
    end_pts = [r.u16() for _ in range(num_contours)]
    num_points = end_pts[-1] + 1
    instructions = r.read(r.u16())

    flags = []
    while len(flags) < num_points:
        flag = r.u8()
        flags.append(flag)
        if flag & REPEAT:
            count = r.u8()
            flags.extend([flag] * min(count, num_points - len(flags)))

    xs = _read_coordinates(r, flags, X_SHORT, X_SAME)
    ys = _read_coordinates(r, flags, Y_SHORT, Y_SAME)
    return SimpleGlyph(end_pts, instructions, flags, xs, ys)


def _parse_composite(r):
    components = []
    while True:
        comp = GlyphComponent(flags=r.u16(), glyph_index=r.u16())
        if comp.flags & ARG_1_AND_2_ARE_WORDS:
            comp.arg1 = r.i16()
            comp.arg2 = r.i16()
        else:
            comp.arg1 = r.u8()
            comp.arg2 = r.u8()

        if comp.flags & WE_HAVE_A_SCALE:
            comp.has_scale = True
            comp.transform[0] = r.i16()
        elif comp.flags & WE_HAVE_AN_X_AND_Y_SCALE:
            comp.has_xy_scale = True
            comp.transform[0] = r.i16()
            comp.transform[3] = r.i16()
        elif comp.flags & WE_HAVE_A_TWO_BY_TWO:
            comp.has_2x2 = True
            comp.transform = [r.i16() for _ in range(4)]

        components.append(comp)
        if not comp.flags & MORE_COMPONENTS:
            return CompositeGlyph(components)


def parse_glyph(data):
    """Parse one glyph record."""
    if len(data) < 10:
        raise FontError("glyph data too small")
    r = BinaryReader(data)
    header = GlyphHeader(r.i16(), r.i16(), r.i16(), r.i16(), r.i16())
    if header.number_of_contours >= 0:
        return Glyph(header, simple_glyph=_parse_simple(r, header.number_of_contours))
    return Glyph(header, composite_glyph=_parse_composite(r))


def parse_glyf(glyf_data, loca_offsets):
    """Parse every glyph of a 'glyf' table using the 'loca' offsets."""
    glyphs = []
    for start, end in zip(loca_offsets, loca_offsets[1:]):
        if end == start:
            glyphs.append(Glyph())
            continue
        if end < start:
            raise FontError("glyph offsets are not ascending")
        if end > len(glyf_data):
            raise FontError("glyph offset out of bounds")
        glyphs.append(parse_glyph(glyf_data[start:end]))
    return glyphs


def _point_flag(on_curve, delta, short_bit, same_bit):
    if delta == 0:
        return same_bit
    if -255 <= delta <= 255:
        return short_bit | same_bit if delta > 0 else short_bit
    return 0


def _write_simple(w, sg):
    for end in sg.end_pts_of_contours:
        w.put_u16(end)
    w.put_u16(len(sg.instructions))
    w.append(sg.instructions)

    points = list(zip(sg.x_coordinates, sg.y_coordinates))
    deltas = []
    flags = []
    prev_x = prev_y = 0
    for i, (x, y) in enumerate(points):
        dx = _to_i16(x - prev_x)
        dy = _to_i16(y - prev_y)
        prev_x, prev_y = x, y
        original = sg.flags[i] if i < len(sg.flags) else ON_CURVE
        flag = (original & ON_CURVE) | _point_flag(original, dx, X_SHORT, X_SAME)
        flag |= _point_flag(original, dy, Y_SHORT, Y_SAME)
        deltas.append((dx, dy))
        flags.append(flag)

    i = 0
    while i < len(flags):
        flag = flags[i]
        run = 1
        while i + run < len(flags) and flags[i + run] == flag and run < _MAX_FLAG_RUN:
            run += 1
        if run >= 2:
            w.put_u8(flag | REPEAT)
            w.put_u8(run - 1)
        else:
            w.put_u8(flag)
        i += run

    for axis, short_bit, same_bit in ((0, X_SHORT, X_SAME), (1, Y_SHORT, Y_SAME)):
        for flag, delta in zip(flags, deltas):
            d = delta[axis]
            if flag & short_bit:
                w.put_u8(abs(d))
            elif not flag & same_bit:
                w.put_u16(d)


def _write_composite(w, cg):
    for comp in cg.components:
        w.put_u16(comp.flags)
        w.put_u16(comp.glyph_index)
        if comp.flags & ARG_1_AND_2_ARE_WORDS:
            w.put_u16(comp.arg1)
            w.put_u16(comp.arg2)
        else:
            w.put_u8(comp.arg1)
            w.put_u8(comp.arg2)
        if comp.has_scale:
            w.put_u16(comp.transform[0])
        elif comp.has_xy_scale:
            w.put_u16(comp.transform[0])
            w.put_u16(comp.transform[3])
        elif comp.has_2x2:
            for value in comp.transform:
                w.put_u16(value)


def encode_glyph(glyph):
    """Serialize one glyph; empty or missing glyphs encode to no bytes."""
    if glyph is None or glyph.is_empty():
        return b""
    w = BinaryWriter()
    h = glyph.header
    for value in (h.number_of_contours, h.x_min, h.y_min, h.x_max, h.y_max):
        w.put_u16(value)
    if glyph.simple_glyph is not None:
        _write_simple(w, glyph.simple_glyph)
    elif glyph.composite_glyph is not None:
        _write_composite(w, glyph.composite_glyph)
    return w.getvalue()


def write_glyf(glyphs):
    """Serialize glyphs; return the table bytes and the ``len + 1`` loca offsets.

    Each glyph is padded to an even length so short loca offsets stay valid.
    """
    buf = bytearray()
    offsets = []
    for glyph in glyphs:
        offsets.append(len(buf))
        encoded = encode_glyph(glyph)
        buf += encoded
        if len(encoded) % 2:
            buf.append(0)
    offsets.append(len(buf))
    return bytes(buf), offsets