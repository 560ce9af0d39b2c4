"""Cursor-based reading and writing of fixed-width binary values."""

from __future__ import annotations

import struct

from .fixed import Fixed16_16


class FontError(ValueError):
    """Raised when font data is malformed or a font edit is invalid."""


class BinaryReader:
    """Reads integers and byte runs from a buffer, advancing an offset."""

    def __init__(self, data, little_endian=False):
        self._data = bytes(data)
        self._order = "<" if little_endian else ">"
        self.little_endian = bool(little_endian)
        self.offset = 0

    def __len__(self):
        return len(self._data)

    @property
    def remaining(self):
        """Number of bytes left after the current offset."""
        return len(self._data) - self.offset

    def _check(self, n):
        if n < 0:
            raise FontError(f"negative length {n}")
        if self.offset + n > len(self._data):
            raise FontError(
                f"read of {n} bytes at offset {self.offset} runs past end "
                f"of {len(self._data)}-byte buffer"
            )

    def _unpack(self, fmt, size):
        self._check(size)
        (value,) = struct.unpack_from(self._order + fmt, self._data, self.offset)
        self.offset += size
        return value

    def u8(self):
        return self._unpack("B", 1)

    def i8(self):
        return self._unpack("b", 1)

    def u16(self):
        return self._unpack("H", 2)

    def i16(self):
        return self._unpack("h", 2)

    def u32(self):
        return self._unpack("I", 4)

    def i32(self):
        return self._unpack("i", 4)

    def u64(self):
        return self._unpack("Q", 8)

    def i64(self):
        return self._unpack("q", 8)

    def fixed16_16(self):
        """Read a 16.16 fixed-point value: signed integer part, then fraction."""
        self._check(4)
        integer = self.i16()
        fraction = self.u16()
        return Fixed16_16(integer, fraction)

    def peek(self, n):
        """Return the next ``n`` bytes without advancing."""
        self._check(n)
        return self._data[self.offset:self.offset + n]

    def read(self, n):
        """Return the next ``n`` bytes and advance past them."""
        chunk = self.peek(n)
        self.offset += n
        return chunk

    def slice(self, n):
        """Consume ``n`` bytes and return a new reader over them."""
        return BinaryReader(self.read(n), self.little_endian)

    def skip(self, n):
        """Advance past ``n`` bytes."""
        self._check(n)
        self.offset += n


class BinaryWriter:
    """Appends fixed-width values to a growing buffer.

    Values are truncated to their field width, so signed values may be
    passed to the unsigned writers.
    """

    def __init__(self, little_endian=False):
        self._buf = bytearray()
        self._order = "<" if little_endian else ">"
        self.little_endian = bool(little_endian)

    def __len__(self):
        return len(self._buf)

    @property
    def offset(self):
        return len(self._buf)

    def put_u8(self, value):
        self._buf.append(value & 0xFF)

    def put_u16(self, value):
        self._buf += struct.pack(self._order + "H", value & 0xFFFF)

    def put_u32(self, value):
        self._buf += struct.pack(self._order + "I", value & 0xFFFFFFFF)

    def put_u64(self, value):
        self._buf += struct.pack(self._order + "Q", value & 0xFFFFFFFFFFFFFFFF)

    def put_fixed16_16(self, value):
        self.put_u16(value.integer)
        self.put_u16(value.fraction)

    def append(self, data):
        self._buf += data

    def getvalue(self):
        return bytes(self._buf)