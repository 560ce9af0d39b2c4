# sfntedit

A pure-Python toolkit for parsing, editing and writing individual
TrueType font tables, and for wrapping TrueType font bytes in Embedded
OpenType (EOT) containers. It uses only the standard library.

## Modules

| Module              | Contents                                                     |
|---------------------|--------------------------------------------------------------|
| `sfntedit.binary`   | `BinaryReader` and `BinaryWriter` for big- or little-endian values, and the `FontError` exception |
| `sfntedit.fixed`    | `Fixed16_16` and `Fixed2_14` fixed-point numbers              |
| `sfntedit.head`     | The `head` table: `Head`, `MacStyle`, `parse_head`, `write_head` |
| `sfntedit.hhea`     | The `hhea` table: `Hhea`, `parse_hhea`, `write_hhea`          |
| `sfntedit.hmtx`     | The `hmtx` table: `Hmtx`, `LongHorMetric`, `parse_hmtx`, `write_hmtx` |
| `sfntedit.cmap`     | Character maps in formats 0, 4, 6 and 12: `parse_cmap`, `write_cmap`, `build_format4`, `build_format12`, `rebuild_cmap` |
| `sfntedit.glyf`     | Simple and composite glyph outlines: `Glyph`, `parse_glyph`, `parse_glyf`, `encode_glyph`, `write_glyf` |
| `sfntedit.kern`     | The `kern` table: `Kern`, `KernSubtable`, `KernPair`, `parse_kern`, `write_kern` |
| `sfntedit.edit`     | `Font`, an editable model over the parsed tables, and `MaxProfile` |
| `sfntedit.eot`      | EOT containers: `parse_eot`, `build_eot`, `EOTInfo`           |

Malformed or truncated input, and invalid edits, raise
`sfntedit.binary.FontError` (a subclass of `ValueError`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Reading and writing raw values:

```python
from sfntedit.binary import BinaryReader, BinaryWriter

reader = BinaryReader(b"\x00\x01\xff\xfe", little_endian=False)
assert reader.u16() == 1
assert reader.i16() == -2

writer = BinaryWriter(little_endian=True)
writer.put_u16(0x1234)
assert writer.getvalue() == b"\x34\x12"
```

Round-tripping a table:

```python
from sfntedit.head import parse_head, write_head

head = parse_head(head_table_bytes)
assert parse_head(write_head(head)) == head
```

Each cmap subtable class (`CMapFormat0`, `CMapFormat4`, `CMapFormat6`,
`CMapFormat12`) offers `map(code)` to look up one code point and
`enumerate()`, a generator of `(code point, glyph id)` pairs with a
non-zero glyph id. `write_cmap` stores identical subtables only once.

Editing a font assembled from its tables:

```python
from sfntedit.cmap import CMap, EncodingRecord, build_format4, write_cmap
from sfntedit.edit import Font
from sfntedit.glyf import Glyph
from sfntedit.hmtx import Hmtx, LongHorMetric

cmap = CMap(
    encoding_records=[EncodingRecord(3, 1)],
    subtables=[build_format4([(0x41, 1)])],
)
font = Font(
    glyphs=[Glyph(), Glyph()],
    hmtx=Hmtx([LongHorMetric(500, 0), LongHorMetric(600, 10)]),
    cmap=cmap,
)
assert font.rune_to_glyph_id(0x41) == 1
assert font.advance_width_for_rune(0x41) == 600

font.set_rune_mapping(0x42, 1)
cmap_bytes = write_cmap(font.build_cmap())
```

`Font` also offers `remove_glyphs` (returning an old → new index map;
glyph 0 cannot be removed), `subset`, `append_glyph`, `set_glyph_at`,
`copy_glyph`, `set_advance_width`, `set_left_side_bearing`,
`translate_glyph`, `scale_glyph`, `recalc_head_bbox`, and `max_profile`,
which recomputes point, contour and component-depth statistics.

Wrapping font bytes in an EOT container and unwrapping them:

```python
from sfntedit.eot import EOTInfo, build_eot, parse_eot

eot_bytes = build_eot(ttf_bytes, EOTInfo(family_name="Sample"))
font_bytes, info = parse_eot(eot_bytes)
assert font_bytes == ttf_bytes
assert info.family_name == "Sample"
```

`build_eot` always writes a version 1.0 header with no compression and no
encryption. `parse_eot` accepts versions 1.0, 2.1 and 2.2 and removes XOR
encryption.

## What it does not do

- It does not read or write whole font files: there is no table
  directory handling, no table checksums and no `checksumAdjustment`
  computation. Tables are parsed and written one at a time, and a `Font`
  is built from tables you supply.
- The `loca`, `maxp`, `name`, `post` and `OS/2` tables are not parsed;
  `parse_glyf` takes loca offsets as a list, and `MaxProfile` only holds
  the statistics that editing keeps current.
- `GPOS` and `GSUB` are not handled.
- MTX-compressed EOT files are rejected with `FontError`.
- There is no command-line program.