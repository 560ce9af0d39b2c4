import pytest

from sfntedit.binary import FontError
from sfntedit.cmap import CMap, EncodingRecord, build_format4, parse_cmap, write_cmap
from sfntedit.edit import Font, MaxProfile
from sfntedit.glyf import (
    ARGS_ARE_XY_VALUES,
    MORE_COMPONENTS,
    CompositeGlyph,
    Glyph,
    GlyphComponent,
    GlyphHeader,
    SimpleGlyph,
)
from sfntedit.head import Head
from sfntedit.hhea import Hhea
from sfntedit.hmtx import Hmtx, LongHorMetric


def simple(points, ends, bbox):
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    sg = SimpleGlyph(list(ends), b"", [1] * len(points), xs, ys)
    return Glyph(GlyphHeader(len(ends), *bbox), simple_glyph=sg)


def composite(indices, bbox):
    comps = []
    for i, gid in enumerate(indices):
        flags = ARGS_ARE_XY_VALUES
        if i < len(indices) - 1:
            flags |= MORE_COMPONENTS
        comps.append(GlyphComponent(flags=flags, glyph_index=gid))
    return Glyph(GlyphHeader(-1, *bbox), composite_glyph=CompositeGlyph(comps))


def make_font():
    glyphs = [
        simple(
            [(0, 0), (0, 100), (100, 100), (100, 0), (10, 10), (10, 90), (90, 90), (90, 10)],
            [3, 7],
            (0, 0, 100, 100),
        ),
        simple([(10, 0), (50, 200), (90, 0)], [2], (10, 0, 90, 200)),
        simple([(-20, -50), (-20, 30), (40, 30), (40, -50)], [3], (-20, -50, 40, 30)),
        Glyph(),
        simple([(0, 0), (0, 300), (150, 400), (300, 300), (300, 0)], [4], (0, 0, 300, 400)),
        composite([1, 4], (0, 0, 300, 400)),
    ]
    pairs = [(0x41, 1), (0x42, 2), (0x43, 4), (0x44, 5)]
    cmap = CMap(0, [EncodingRecord(3, 1, 0)], [build_format4(pairs)])
    return Font(
        glyphs=glyphs,
        head=Head(units_per_em=1000, x_min=0, y_min=0, x_max=1, y_max=1),
        hhea=Hhea(ascent=800, descent=-200, number_of_h_metrics=4),
        hmtx=Hmtx(
            [LongHorMetric(500, 0), LongHorMetric(600, 10), LongHorMetric(700, -20), LongHorMetric(0, 0)],
            [5, 7],
        ),
        maxp=MaxProfile(num_glyphs=6),
        cmap=cmap,
    )


def test_rune_to_glyph_id():
    font = make_font()
    assert font.rune_to_glyph_id(0x41) == 1
    assert font.rune_to_glyph_id(0x42) == 2
    assert font.rune_to_glyph_id(0x44) == 5
    assert font.rune_to_glyph_id(0x30) == 0


def test_glyph_for_rune():
    font = make_font()
    glyph = font.glyph_for_rune(0x41)
    assert glyph is font.glyphs[1]
    assert glyph.simple_glyph is not None
    assert font.glyph_for_rune(0x30) is None


def test_set_rune_mapping():
    font = make_font()
    font.set_rune_mapping(0x30, 1)
    assert font.rune_to_glyph_id(0x30) == 1
    font.set_rune_mapping(0x41, 5)
    assert font.rune_to_glyph_id(0x41) == 5
    with pytest.raises(FontError):
        font.set_rune_mapping(0x31, 100)


def test_set_rune_mappings_is_all_or_nothing():
    font = make_font()
    with pytest.raises(FontError):
        font.set_rune_mappings({0x50: 1, 0x51: 99})
    assert font.rune_to_glyph_id(0x50) == 0
    font.set_rune_mappings({0x50: 1, 0x51: 2})
    assert font.rune_to_glyph_id(0x51) == 2


def test_remove_rune_mapping():
    font = make_font()
    assert font.rune_to_glyph_id(0x41) == 1
    font.remove_rune_mapping(0x41)
    assert font.rune_to_glyph_id(0x41) == 0
    font.remove_rune_mapping(0x99)
    assert font.mapped_runes() == [0x42, 0x43, 0x44]


def test_num_glyphs_and_glyph_at():
    font = make_font()
    assert font.num_glyphs() == 6
    assert font.glyph_at(0).header.number_of_contours == 2
    assert font.glyph_at(-1) is None
    assert font.glyph_at(100) is None


def test_set_glyph_at():
    font = make_font()
    replacement = simple([(0, 0), (1, 1)], [1], (0, 0, 1, 1))
    font.set_glyph_at(1, replacement)
    assert font.glyph_at(1) is replacement
    assert font.contour_count(1) == 1
    with pytest.raises(FontError):
        font.set_glyph_at(100, replacement)


def test_copy_glyph():
    font = make_font()
    font.copy_glyph(0, 2)
    assert font.point_count(2) == 8
    with pytest.raises(FontError):
        font.copy_glyph(50, 1)


def test_remove_glyphs_remap_and_tables():
    font = make_font()
    remap = font.remove_glyphs([2, 3])
    assert remap == {0: 0, 1: 1, 4: 2, 5: 3}
    assert font.num_glyphs() == 4
    assert font.maxp.num_glyphs == 4
    assert font.hhea.number_of_h_metrics == 2
    assert [m.advance_width for m in font.hmtx.h_metrics] == [500, 600]
    assert font.hmtx.left_side_bearing == [5, 7]
    assert [c.glyph_index for c in font.glyphs[3].composite_glyph.components] == [1, 2]
    assert font.rune_mappings() == [(0x41, 1), (0x43, 2), (0x44, 3)]
    for _, gid in font.rune_mappings():
        assert gid < font.num_glyphs()
    assert font.font_bbox() == (0, 0, 300, 400)


def test_remove_glyphs_errors():
    font = make_font()
    with pytest.raises(FontError):
        font.remove_glyphs([0])
    with pytest.raises(FontError):
        font.remove_glyphs([6])
    assert font.remove_glyphs([]) == {}
    assert font.num_glyphs() == 6


def test_remove_glyphs_then_cmap_round_trip():
    font = make_font()
    font.remove_glyphs([2])
    parsed = parse_cmap(write_cmap(font.build_cmap()))
    f4 = next(s for s in parsed.subtables if s.format == 4)
    assert f4.map(0x41) == 1
    assert f4.map(0x42) == 0
    assert f4.map(0x43) == 3


def test_set_rune_mapping_cmap_round_trip():
    font = make_font()
    font.set_rune_mapping(0x30, 1)
    parsed = parse_cmap(write_cmap(font.build_cmap()))
    reloaded = Font(glyphs=list(font.glyphs), cmap=parsed)
    assert reloaded.rune_to_glyph_id(0x30) == 1
    assert reloaded.rune_to_glyph_id(0x41) == 1


def test_remove_rune_mapping_cmap_round_trip():
    font = make_font()
    font.remove_rune_mapping(0x41)
    parsed = parse_cmap(write_cmap(font.build_cmap()))
    reloaded = Font(glyphs=list(font.glyphs), cmap=parsed)
    assert reloaded.rune_to_glyph_id(0x41) == 0
    assert reloaded.rune_to_glyph_id(0x42) == 2


def test_rune_mappings_sorted():
    font = make_font()
    font.set_rune_mapping(0x20, 3)
    codes = [code for code, _ in font.rune_mappings()]
    assert codes == sorted(codes)
    assert codes[0] == 0x20


def test_enumerate_matches_map():
    font = make_font()
    sub = font.build_cmap().subtables[0]
    entries = list(sub.enumerate())
    assert len(entries) == 4
    for code, gid in entries:
        assert sub.map(code) == gid


def test_metrics_queries():
    font = make_font()
    assert font.units_per_em() == 1000
    assert font.ascent() == 800
    assert font.descent() == -200
    assert font.advance_width(1) == 600
    assert font.advance_width(5) == 0  # shares last long metric
    assert font.left_side_bearing(2) == -20
    assert font.left_side_bearing(5) == 7
    assert font.advance_width(99) == 0
    assert font.advance_width_for_rune(0x41) == 600
    assert font.advance_width_for_rune(0x30) == 0


def test_empty_font_queries():
    font = Font()
    assert font.units_per_em() == 0
    assert font.font_bbox() == (0, 0, 0, 0)
    assert font.ascent() == 0
    assert font.advance_width(0) == 0


def test_set_advance_width_and_lsb():
    font = make_font()
    font.set_advance_width(1, 650)
    assert font.advance_width(1) == 650
    font.set_advance_width(5, 900)
    assert font.hmtx.h_metrics[-1].advance_width == 900
    font.set_left_side_bearing(4, -3)
    assert font.left_side_bearing(4) == -3
    with pytest.raises(FontError):
        font.set_advance_width(10, 1)
    font.hmtx.left_side_bearing.pop()
    with pytest.raises(FontError):
        font.set_left_side_bearing(5, 1)


def test_glyph_kind_queries():
    font = make_font()
    assert font.is_simple_glyph(0)
    assert not font.is_simple_glyph(5)
    assert font.is_composite_glyph(5)
    assert not font.is_composite_glyph(99)
    assert font.glyph_bbox(2) == (-20, -50, 40, 30)
    assert font.glyph_bbox(42) is None
    assert font.point_count(1) == 3
    assert font.point_count(5) == 0
    assert font.contour_count(0) == 2


def test_translate_glyph():
    font = make_font()
    font.translate_glyph(1, 5, -10)
    assert font.glyph_bbox(1) == (15, -10, 95, 190)
    assert font.glyphs[1].simple_glyph.x_coordinates == [15, 55, 95]
    assert font.glyphs[1].simple_glyph.y_coordinates == [-10, 190, -10]
    with pytest.raises(FontError):
        font.translate_glyph(10, 1, 1)


def test_scale_glyph_truncates_after_half():
    font = make_font()
    font.scale_glyph(2, 0.5, 0.5)
    assert font.glyphs[2].simple_glyph.x_coordinates == [-9, -9, 20, 20]
    assert font.glyphs[2].simple_glyph.y_coordinates == [-24, 15, 15, -24]
    assert font.glyph_bbox(2) == (-9, -24, 20, 15)
    with pytest.raises(FontError):
        font.scale_glyph(-1, 2.0, 2.0)


def test_append_glyph():
    font = make_font()
    index = font.append_glyph(composite([5], (0, 0, 300, 400)))
    assert index == 6
    assert font.num_glyphs() == 7
    assert font.maxp.num_glyphs == 7
    assert font.hmtx.left_side_bearing == [5, 7, 0]
    assert font.maxp.max_component_depth == 1
    with pytest.raises(FontError):
        font.append_glyph(None)


def test_max_profile():
    font = make_font()
    profile = font.max_profile()
    assert profile is font.maxp
    assert profile.max_points == 8
    assert profile.max_contours == 2
    assert profile.max_composite_points == 8
    assert profile.max_composite_contours == 2
    assert profile.max_component_depth == 0


def test_recalc_head_bbox():
    font = make_font()
    font.recalc_head_bbox()
    assert font.font_bbox() == (-20, -50, 300, 400)


def test_subset_keeps_composite_dependencies():
    font = make_font()
    font.subset([0x44])
    assert font.num_glyphs() == 4
    assert font.rune_to_glyph_id(0x44) == 3
    assert font.rune_to_glyph_id(0x41) == 1
    assert font.rune_to_glyph_id(0x43) == 2
    assert font.rune_to_glyph_id(0x42) == 0
    assert [c.glyph_index for c in font.glyphs[3].composite_glyph.components] == [1, 2]


def test_subset_to_notdef_only():
    font = make_font()
    font.subset([])
    assert font.num_glyphs() == 1
    assert font.mapped_runes() == []