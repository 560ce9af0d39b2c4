"""An editable TrueType font model built from parsed tables."""

from __future__ import annotations

from dataclasses import dataclass, field

from .binary import FontError
from .cmap import CMap, rebuild_cmap
from .glyf import Glyph
from .head import Head
from .hhea import Hhea
from .hmtx import Hmtx

_MAX_COMPOSITE_NESTING = 32


def _to_i16(value):
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass
class MaxProfile:
    """The glyph statistics of the 'maxp' table that editing keeps current."""

    version: int = 0x00010000
    num_glyphs: int = 0
    max_points: int = 0
    max_contours: int = 0
    max_composite_points: int = 0
    max_composite_contours: int = 0
    max_component_depth: int = 0


def _composite_depth(glyphs, glyph_index, visited=0):
    if visited > _MAX_COMPOSITE_NESTING or glyph_index >= len(glyphs):
        return 0
    glyph = glyphs[glyph_index]
    if glyph is None or glyph.composite_glyph is None:
        return 0
    deepest = max(
        (
            _composite_depth(glyphs, comp.glyph_index, visited + 1)
            for comp in glyph.composite_glyph.components
        ),
        default=0,
    )
    return 1 + deepest


@dataclass
class Font:
    """A font's glyphs and metric tables, with editing operations."""

    glyphs: list = field(default_factory=list)
    head: Head | None = None
    hhea: Hhea | None = None
    hmtx: Hmtx | None = None
    maxp: MaxProfile | None = None
    cmap: CMap | None = None
    _rune_map: dict | None = field(default=None, init=False, repr=False, compare=False)

    # --- character mapping ---

    def _runes(self):
        if self._rune_map is None:
            self._rune_map = {}
            if self.cmap is not None:
                for subtable in self.cmap.subtables:
                    self._rune_map.update(subtable.enumerate())
        return self._rune_map

    def rune_to_glyph_id(self, code):
        """Glyph id mapped to a code point, or 0 when unmapped."""
        return self._runes().get(code, 0)

    def glyph_for_rune(self, code):
        """The glyph mapped to a code point, or None."""
        gid = self.rune_to_glyph_id(code)
        if gid == 0 or gid >= len(self.glyphs):
            return None
        return self.glyphs[gid]

    def _check_glyph_id(self, glyph_id):
        if not 0 <= glyph_id < len(self.glyphs):
            raise FontError(f"glyph ID {glyph_id} out of range")

    def set_rune_mapping(self, code, glyph_id):
        """Map a code point to an existing glyph id."""
        runes = self._runes()
        self._check_glyph_id(glyph_id)
        runes[code] = glyph_id

    def set_rune_mappings(self, mappings):
        """Apply several mappings; nothing changes if any glyph id is invalid."""
        runes = self._runes()
        for code, gid in mappings.items():
            if not 0 <= gid < len(self.glyphs):
                raise FontError(f"glyph ID {gid} out of range for rune U+{code:04X}")
        runes.update(mappings)

    def remove_rune_mapping(self, code):
        """Remove a code point's mapping if there is one."""
        self._runes().pop(code, None)

    def rune_mappings(self):
        """All ``(code, glyph_id)`` pairs sorted by code point."""
        return sorted(self._runes().items())

    def mapped_runes(self):
        """All mapped code points in ascending order."""
        return sorted(self._runes())

    def build_cmap(self):
        """A cmap rebuilt from the current code-point mappings."""
        return rebuild_cmap(self._runes(), self.cmap)

    # --- glyph access ---

    def num_glyphs(self):
        return len(self.glyphs)

    def _valid_index(self, index):
        return 0 <= index < len(self.glyphs)

    def glyph_at(self, index):
        """The glyph at ``index``, or None when out of range."""
        if not self._valid_index(index):
            return None
        return self.glyphs[index]

    def set_glyph_at(self, index, glyph):
        """Replace the glyph at ``index``."""
        if not self._valid_index(index):
            raise FontError("glyph index out of range")
        self.glyphs[index] = glyph
        self.max_profile()

    def copy_glyph(self, src_index, dst_index):
        """Make ``dst_index`` refer to the glyph at ``src_index``."""
        source = self.glyph_at(src_index)
        if source is None:
            raise FontError("source glyph index out of range")
        self.set_glyph_at(dst_index, source)

    def append_glyph(self, glyph):
        """Add a glyph at the end and return its index."""
        if glyph is None:
            raise FontError("glyph cannot be None")
        index = len(self.glyphs)
        self.glyphs.append(glyph)
        if self.hmtx is not None and self.hmtx.h_metrics:
            self.hmtx.left_side_bearing.append(0)
        if self.maxp is not None:
            self.maxp.num_glyphs = len(self.glyphs)
        self.max_profile()
        return index

    def remove_glyphs(self, indices):
        """Remove glyphs and compact related tables.

        Returns a map from old to new index; removed indices are absent.
        Glyph 0 cannot be removed.
        """
        if not indices:
            return {}
        remove = set()
        for index in indices:
            if index == 0:
                raise FontError("cannot remove glyph 0 (.notdef)")
            if not self._valid_index(index):
                raise FontError("glyph index out of range")
            remove.add(index)

        kept = [i for i in range(len(self.glyphs)) if i not in remove]
        remap = {old: new for new, old in enumerate(kept)}
        new_glyphs = [self.glyphs[i] for i in kept]

        new_hmtx = Hmtx()
        if self.hmtx is not None:
            num_h_metrics = len(self.hmtx.h_metrics)
            bearings = self.hmtx.left_side_bearing
            for old in kept:
                if old < num_h_metrics:
                    new_hmtx.h_metrics.append(self.hmtx.h_metrics[old])
                else:
                    extra = old - num_h_metrics
                    new_hmtx.left_side_bearing.append(
                        bearings[extra] if extra < len(bearings) else 0
                    )

        for glyph in new_glyphs:
            if glyph is not None and glyph.composite_glyph is not None:
                for comp in glyph.composite_glyph.components:
                    if comp.glyph_index in remap:
                        comp.glyph_index = remap[comp.glyph_index]

        self.glyphs = new_glyphs
        self.hmtx = new_hmtx
        if self.maxp is not None:
            self.maxp.num_glyphs = len(new_glyphs)
        if self.hhea is not None:
            self.hhea.number_of_h_metrics = len(new_hmtx.h_metrics)

        runes = self._runes()
        self._rune_map = {
            code: remap[gid] for code, gid in runes.items() if gid in remap
        }

        self.recalc_head_bbox()
        self.max_profile()
        return remap

    def _collect_composite_deps(self, glyph_index, seen):
        stack = [glyph_index]
        while stack:
            index = stack.pop()
            if index in seen or not self._valid_index(index):
                continue
            seen.add(index)
            glyph = self.glyphs[index]
            if glyph is not None and glyph.composite_glyph is not None:
                stack.extend(c.glyph_index for c in glyph.composite_glyph.components)

    def subset(self, keep_runes):
        """Keep only glyph 0, the glyphs of ``keep_runes`` and their components."""
        runes = self._runes()
        keep = {0}
        for code in keep_runes:
            gid = runes.get(code, 0)
            if gid != 0:
                keep.add(gid)
        expanded = set()
        for gid in keep:
            self._collect_composite_deps(gid, expanded)
        keep |= expanded
        self.remove_glyphs([i for i in range(len(self.glyphs)) if i not in keep])

    # --- metrics ---

    def units_per_em(self):
        return self.head.units_per_em if self.head is not None else 0

    def font_bbox(self):
        """``(x_min, y_min, x_max, y_max)`` from the head table."""
        if self.head is None:
            return 0, 0, 0, 0
        h = self.head
        return h.x_min, h.y_min, h.x_max, h.y_max

    def ascent(self):
        return self.hhea.ascent if self.hhea is not None else 0

    def descent(self):
        return self.hhea.descent if self.hhea is not None else 0

    def advance_width(self, glyph_id):
        """Advance width; glyphs past the long metrics share the last one."""
        if self.hmtx is None or not 0 <= glyph_id < len(self.glyphs):
            return 0
        metrics = self.hmtx.h_metrics
        if glyph_id < len(metrics):
            return metrics[glyph_id].advance_width
        return metrics[-1].advance_width if metrics else 0

    def left_side_bearing(self, glyph_id):
        if self.hmtx is None or not 0 <= glyph_id < len(self.glyphs):
            return 0
        metrics = self.hmtx.h_metrics
        if glyph_id < len(metrics):
            return metrics[glyph_id].lsb
        extra = glyph_id - len(metrics)
        bearings = self.hmtx.left_side_bearing
        return bearings[extra] if extra < len(bearings) else 0

    def advance_width_for_rune(self, code):
        gid = self.rune_to_glyph_id(code)
        return self.advance_width(gid) if gid != 0 else 0

    def set_advance_width(self, glyph_id, width):
        """Set an advance width; past the long metrics this sets the shared last one."""
        if self.hmtx is None or not 0 <= glyph_id < len(self.glyphs):
            raise FontError("glyph ID out of range")
        metrics = self.hmtx.h_metrics
        if glyph_id < len(metrics):
            metrics[glyph_id].advance_width = width
        elif metrics:
            metrics[-1].advance_width = width
        else:
            raise FontError("font has no horizontal metrics")

    def set_left_side_bearing(self, glyph_id, lsb):
        if self.hmtx is None or not 0 <= glyph_id < len(self.glyphs):
            raise FontError("glyph ID out of range")
        metrics = self.hmtx.h_metrics
        if glyph_id < len(metrics):
            metrics[glyph_id].lsb = lsb
            return
        extra = glyph_id - len(metrics)
        if extra >= len(self.hmtx.left_side_bearing):
            raise FontError("leftSideBearing index out of range")
        self.hmtx.left_side_bearing[extra] = lsb

    # --- glyph queries ---

    def _glyph_or_none(self, index):
        return self.glyphs[index] if self._valid_index(index) else None

    def is_simple_glyph(self, index):
        glyph = self._glyph_or_none(index)
        return glyph is not None and glyph.simple_glyph is not None

    def is_composite_glyph(self, index):
        glyph = self._glyph_or_none(index)
        return glyph is not None and glyph.composite_glyph is not None

    def glyph_bbox(self, index):
        """``(x_min, y_min, x_max, y_max)`` of a glyph, or None when out of range."""
        glyph = self._glyph_or_none(index)
        if glyph is None:
            return None
        h = glyph.header
        return h.x_min, h.y_min, h.x_max, h.y_max

    def point_count(self, index):
        glyph = self._glyph_or_none(index)
        if glyph is None or glyph.simple_glyph is None:
            return 0
        return len(glyph.simple_glyph.x_coordinates)

    def contour_count(self, index):
        glyph = self._glyph_or_none(index)
        if glyph is None or glyph.simple_glyph is None:
            return 0
        return len(glyph.simple_glyph.end_pts_of_contours)

    # --- outline edits ---

    def _editable_glyph(self, index):
        glyph = self._glyph_or_none(index)
        if glyph is None:
            raise FontError("glyph index out of range")
        return glyph

    def translate_glyph(self, index, dx, dy):
        """Shift a glyph's outline and bounding box."""
        glyph = self._editable_glyph(index)
        h = glyph.header
        h.x_min = _to_i16(h.x_min + dx)
        h.y_min = _to_i16(h.y_min + dy)
        h.x_max = _to_i16(h.x_max + dx)
        h.y_max = _to_i16(h.y_max + dy)
        sg = glyph.simple_glyph
        if sg is not None:
            sg.x_coordinates = [_to_i16(x + dx) for x in sg.x_coordinates]
            sg.y_coordinates = [_to_i16(y + dy) for y in sg.y_coordinates]

    def scale_glyph(self, index, sx, sy):
        """Scale a glyph's outline and bounding box, adding 0.5 and truncating."""
        glyph = self._editable_glyph(index)

        def scale(value, factor):
            return _to_i16(int(value * factor + 0.5))

        h = glyph.header
        h.x_min = scale(h.x_min, sx)
        h.y_min = scale(h.y_min, sy)
        h.x_max = scale(h.x_max, sx)
        h.y_max = scale(h.y_max, sy)
        sg = glyph.simple_glyph
        if sg is not None:
            sg.x_coordinates = [scale(x, sx) for x in sg.x_coordinates]
            sg.y_coordinates = [scale(y, sy) for y in sg.y_coordinates]
        self.max_profile()

    # --- derived tables ---

    def max_profile(self):
        """Recompute outline statistics; updates ``maxp`` when present and returns them."""
        max_points = max_contours = 0
        max_comp_points = max_comp_contours = max_depth = 0
        for glyph in self.glyphs:
            if glyph is None:
                continue
            sg = glyph.simple_glyph
            if sg is not None:
                max_points = max(max_points, len(sg.x_coordinates) & 0xFFFF)
                max_contours = max(max_contours, len(sg.end_pts_of_contours) & 0xFFFF)
            cg = glyph.composite_glyph
            if cg is not None:
                points = contours = 0
                for comp in cg.components:
                    if comp.glyph_index < len(self.glyphs):
                        child = self.glyphs[comp.glyph_index]
                        if child is not None and child.simple_glyph is not None:
                            points += len(child.simple_glyph.x_coordinates)
                            contours += len(child.simple_glyph.end_pts_of_contours)
                max_comp_points = max(max_comp_points, points & 0xFFFF)
                max_comp_contours = max(max_comp_contours, contours & 0xFFFF)
                for comp in cg.components:
                    max_depth = max(max_depth, _composite_depth(self.glyphs, comp.glyph_index))

        profile = self.maxp if self.maxp is not None else MaxProfile(num_glyphs=len(self.glyphs))
        profile.max_points = max_points
        profile.max_contours = max_contours
        profile.max_composite_points = max_comp_points
        profile.max_composite_contours = max_comp_contours
        profile.max_component_depth = max_depth
        return profile

    def recalc_head_bbox(self):
        """Set the head bounding box to the union of all non-empty glyph boxes."""
        if self.head is None or not self.glyphs:
            return
        boxes = [
            g.header for g in self.glyphs if g is not None and not g.is_empty()
        ]
        if not boxes:
            return
        self.head.x_min = min(h.x_min for h in boxes)
        self.head.y_min = min(h.y_min for h in boxes)
        self.head.x_max = max(h.x_max for h in boxes)
        self.head.y_max = max(h.y_max for h in boxes)


__all__ = ["Font", "MaxProfile", "Glyph"]