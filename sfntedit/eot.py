"""Embedded OpenType (EOT) containers around TrueType font data."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .binary import BinaryWriter, FontError

EOT_MAGIC = 0x504C
FLAG_COMPRESSED = 0x00000004  # MTX compression, not supported
FLAG_XOR_ENCRYPT = 0x10000000

VERSION_1_0 = 0x00010000
VERSION_2_1 = 0x00020001
VERSION_2_2 = 0x00020002
_SUPPORTED_VERSIONS = (VERSION_1_0, VERSION_2_1, VERSION_2_2)

_FIXED_HEADER_SIZE = 82
_XOR_KEY = 0x50


@dataclass
class EOTInfo:
    """Descriptive fields carried in an EOT header.

    ``version`` and ``flags`` report what was parsed; ``build_eot`` always
    writes a version 1.0 header with no compression and no encryption.
    """

    family_name: str = ""
    style_name: str = ""
    version_name: str = ""
    full_name: str = ""
    root_string: str = ""
    panose: bytes = bytes(10)
    charset: int = 1
    italic: bool = False
    weight: int = 0
    fs_type: int = 0
    unicode_range: tuple = (0, 0, 0, 0)
    code_page_range: tuple = (0, 0)
    checksum_adjustment: int = 0
    version: int = VERSION_1_0
    flags: int = 0


def _encode_utf16le(text):
    """Encode BMP characters as UTF-16LE; characters above U+FFFF are dropped."""
    return b"".join(
        ch.encode("utf-16-le", errors="surrogatepass") for ch in text if ord(ch) <= 0xFFFF
    )


def _decode_utf16le(raw):
    return raw.decode("utf-16-le", errors="replace")


def _xor(data):
    return bytes(b ^ _XOR_KEY for b in data)


class _Cursor:
    """Bounds-checked little-endian reads with caller-supplied error messages."""

    def __init__(self, data, offset):
        self.data = data
        self.offset = offset

    def require(self, n, message):
        if self.offset + n > len(self.data):
            raise FontError(message)

    def u16(self):
        (value,) = struct.unpack_from("<H", self.data, self.offset)
        self.offset += 2
        return value

    def u32(self):
        (value,) = struct.unpack_from("<I", self.data, self.offset)
        self.offset += 4
        return value

    def take(self, n):
        chunk = self.data[self.offset:self.offset + n]
        self.offset += n
        return chunk


def _read_name(cursor):
    cursor.require(2, "EOT: name size out of bounds")
    size = cursor.u16()
    cursor.require(size, "EOT: name data out of bounds")
    raw = cursor.take(size)
    cursor.require(2, "EOT: padding out of bounds")
    cursor.offset += 2
    return _decode_utf16le(raw)


def parse_eot(data):
    """Parse an EOT file; return ``(font_data, info)``.

    The returned font data is the embedded TrueType file, decrypted when
    the XOR flag is set.
    """
    data = bytes(data)
    if len(data) < _FIXED_HEADER_SIZE:
        raise FontError("EOT file too small")

    eot_size, font_data_size, version, flags = struct.unpack_from("<IIII", data, 0)
    (magic,) = struct.unpack_from("<H", data, 34)

    if magic != EOT_MAGIC:
        raise FontError("invalid EOT magic number")
    if version not in _SUPPORTED_VERSIONS:
        raise FontError("unsupported EOT version")
    if flags & FLAG_COMPRESSED:
        raise FontError("EOT MTX compression not supported")

    (weight,) = struct.unpack_from("<I", data, 28)
    (fs_type,) = struct.unpack_from("<H", data, 32)
    ranges = struct.unpack_from("<IIIIII", data, 36)
    (checksum_adjustment,) = struct.unpack_from("<I", data, 60)

    cursor = _Cursor(data, _FIXED_HEADER_SIZE)
    family_name = _read_name(cursor)
    style_name = _read_name(cursor)
    version_name = _read_name(cursor)
    full_name = _read_name(cursor)
    root_string = _read_name(cursor)

    if version >= VERSION_2_1:
        cursor.require(12, "EOT: extended fields out of bounds")
        # RootStringCheckSum, EUDCCodePage, Padding, then SignatureSize.
        cursor.offset += 10
        signature_size = cursor.u16()
        cursor.require(signature_size, "EOT: signature data out of bounds")
        cursor.offset += signature_size
        cursor.require(8, "EOT: EUDC fields out of bounds")
        cursor.u32()  # EUDCFlags
        cursor.offset += cursor.u32()  # EUDC font data

    # EOTSize - FontDataSize is authoritative for where the font data starts.
    start = eot_size - font_data_size
    if start < 0 or start + font_data_size > len(data):
        raise FontError("EOT: font data out of bounds")
    font_data = data[start:start + font_data_size]
    if flags & FLAG_XOR_ENCRYPT:
        font_data = _xor(font_data)

    info = EOTInfo(
        family_name=family_name,
        style_name=style_name,
        version_name=version_name,
        full_name=full_name,
        root_string=root_string,
        panose=data[16:26],
        charset=data[26],
        italic=data[27] != 0,
        weight=weight,
        fs_type=fs_type,
        unicode_range=tuple(ranges[:4]),
        code_page_range=tuple(ranges[4:]),
        checksum_adjustment=checksum_adjustment,
        version=version,
        flags=flags,
    )
    return font_data, info


def build_eot(font_data, info):
    """Wrap TrueType font bytes in a version 1.0 EOT container."""
    font_data = bytes(font_data)
    if len(info.unicode_range) != 4:
        raise FontError("unicode_range must hold 4 values")
    if len(info.code_page_range) != 2:
        raise FontError("code_page_range must hold 2 values")

    names = [
        _encode_utf16le(text)
        for text in (
            info.family_name,
            info.style_name,
            info.version_name,
            info.full_name,
            info.root_string,
        )
    ]
    for encoded in names:
        if len(encoded) > 0xFFFF:
            raise FontError("EOT name field too long")

    names_size = sum(2 + len(encoded) + 2 for encoded in names)
    eot_size = _FIXED_HEADER_SIZE + names_size + len(font_data)

    w = BinaryWriter(little_endian=True)
    w.put_u32(eot_size)
    w.put_u32(len(font_data))
    w.put_u32(VERSION_1_0)
    w.put_u32(0)  # no compression, no encryption
    w.append(bytes(info.panose)[:10].ljust(10, b"\0"))
    w.put_u8(info.charset)
    w.put_u8(1 if info.italic else 0)
    w.put_u32(info.weight)
    w.put_u16(info.fs_type)
    w.put_u16(EOT_MAGIC)
    for value in info.unicode_range:
        w.put_u32(value)
    for value in info.code_page_range:
        w.put_u32(value)
    w.put_u32(info.checksum_adjustment)
    w.append(bytes(16))  # reserved
    w.put_u16(0)  # padding
    for encoded in names:
        w.put_u16(len(encoded))
        w.append(encoded)
        w.put_u16(0)
    w.append(font_data)
    return w.getvalue()