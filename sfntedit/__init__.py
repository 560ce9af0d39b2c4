"""Parse, edit and write TrueType font tables and Embedded OpenType containers."""

__version__ = "0.1.0"

__all__ = [
    "binary",
    "cmap",
    "edit",
    "eot",
    "fixed",
    "glyf",
    "head",
    "hhea",
    "hmtx",
    "kern",
]