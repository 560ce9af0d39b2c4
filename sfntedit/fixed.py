"""Fixed-point number types used in font tables."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Fixed16_16:
    """A 16.16 fixed-point number: signed integer part and unsigned fraction."""

    integer: int = 0
    fraction: int = 0

    def to_float(self):
        return self.integer + self.fraction / 65536

    def __str__(self):
        return f"{self.integer}.{self.fraction}"


@dataclass(frozen=True)
class Fixed2_14:
    """A signed 16-bit number whose low 14 bits are the fraction."""

    value: int = 0

    def to_float(self):
        return self.value / (1 << 14)

    def __str__(self):
        return str(self.value)