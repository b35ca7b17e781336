"""Core value types shared across the package: points, pixel depths and clamping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["Point", "Depth", "clamp", "black", "white"]


@dataclass(frozen=True, order=True)
class Point:
    """A point in two-dimensional pixel space."""

    x: int
    y: int

    def __add__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y)

    def __iter__(self):
        yield self.x
        yield self.y


class Depth(Enum):
    """The storage type of a single pixel channel."""

    U8 = "u8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"

    @property
    def is_float(self) -> bool:
        return self in (Depth.F32, Depth.F64)

    @property
    def min(self) -> int | float:
        if self.is_float:
            return float("-inf")
        return _INTEGER_RANGES[self][0]

    @property
    def max(self) -> int | float:
        if self.is_float:
            return float("inf")
        return _INTEGER_RANGES[self][1]


_INTEGER_RANGES = {
    Depth.U8: (0, 2**8 - 1),
    Depth.U16: (0, 2**16 - 1),
    Depth.I16: (-(2**15), 2**15 - 1),
    Depth.U32: (0, 2**32 - 1),
    Depth.I32: (-(2**31), 2**31 - 1),
    Depth.U64: (0, 2**64 - 1),
    Depth.I64: (-(2**63), 2**63 - 1),
}


def clamp(value: int | float, depth: Depth) -> int | float:
    """Clamp ``value`` into the range representable by ``depth``.

    Values strictly inside the range are converted to the depth's type,
    truncating toward zero for integer depths. NaN is not handled specially.
    """
    if depth.is_float:
        return float(value)
    low, high = _INTEGER_RANGES[depth]
    if value < high:
        if value > low:
            return int(value)
        return low
    return high


_PIXEL_DEPTHS = (Depth.U8, Depth.U16)
_PIXEL_CHANNELS = (1, 2, 3, 4)


def _check_pixel_kind(channels: int, depth: Depth) -> int:
    if channels not in _PIXEL_CHANNELS:
        raise ValueError(f"unsupported channel count: {channels}")
    if depth not in _PIXEL_DEPTHS:
        raise ValueError(f"unsupported pixel depth: {depth.value}")
    return _INTEGER_RANGES[depth][1]


def _with_alpha(channels: int, colour: int, opaque: int) -> tuple[int, ...]:
    if channels in (2, 4):
        return (colour,) * (channels - 1) + (opaque,)
    return (colour,) * channels


def black(channels: int, depth: Depth = Depth.U8) -> tuple[int, ...]:
    """A black pixel with the given channel count; any alpha channel is opaque."""
    top = _check_pixel_kind(channels, depth)
    return _with_alpha(channels, 0, top)


def white(channels: int, depth: Depth = Depth.U8) -> tuple[int, ...]:
    """A white pixel with the given channel count; any alpha channel is opaque."""
    top = _check_pixel_kind(channels, depth)
    return _with_alpha(channels, top, top)