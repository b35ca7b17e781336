"""FAST corner detection on 8-bit grayscale images.

Images are two-dimensional arrays indexed as ``image[y, x]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from visiontools.definitions import Point

__all__ = [
    "Corner",
    "Fast",
    "corners_fast12",
    "corners_fast9",
    "fast_corner_score",
    "is_corner_fast9",
    "is_corner_fast12",
]


@dataclass(frozen=True)
class Corner:
    """A detected corner location and its detector-specific score."""

    x: int
    y: int
    score: float

    def to_point(self) -> Point:
        """The corner's location as a point."""
        return Point(self.x, self.y)


class Fast(Enum):
    """FAST variants, valued by the contiguous arc length they require.

    A pixel with intensity I is a corner if a contiguous arc of at least this
    many pixels on the radius-3 Bresenham circle around it are all brighter
    than I + t or all darker than I - t. The score of a corner is the largest
    threshold t for which it still qualifies.
    """

    NINE = 9
    TWELVE = 12


# Circle positions 0..15, clockwise from straight above the centre:
#
#          15 00 01
#       14          02
#     13              03
#     12       p      04
#     11              05
#       10          06
#          09 08 07
_CIRCLE = (
    (0, -3), (1, -3), (2, -2), (3, -1),
    (3, 0), (3, 1), (2, 2), (1, 3),
    (0, 3), (-1, 3), (-2, 2), (-3, 1),
    (-3, 0), (-3, -1), (-2, -2), (-1, -3),
)


def _rows(image) -> list[list[int]]:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    return pixels.astype(np.int64).tolist()


def _inside(rows: list[list[int]], x: int, y: int) -> bool:
    height = len(rows)
    width = len(rows[0]) if height else 0
    return 3 <= x and 3 <= y and x + 3 < width and y + 3 < height


def _circle(rows: list[list[int]], x: int, y: int) -> list[int]:
    return [rows[y + dy][x + dx] for dx, dy in _CIRCLE]


def _search_span(circle: list[int], length: int, predicate) -> bool:
    """True if the circle holds a contiguous (wrapping) run of ``length`` matches."""
    if length > len(circle):
        return False
    run = 0
    leading_run = None
    for value in circle:
        if predicate(value):
            run += 1
            if run == length:
                return True
        else:
            if leading_run is None:
                leading_run = run
            run = 0
    return run + (leading_run or 0) >= length


def _has_bright_span(circle: list[int], length: int, high: int) -> bool:
    return _search_span(circle, length, lambda v: v > high)


def _has_dark_span(circle: list[int], length: int, low: int) -> bool:
    return _search_span(circle, length, lambda v: v < low)


def _fast9(rows: list[list[int]], threshold: int, x: int, y: int) -> bool:
    if not _inside(rows, x, y):
        return False
    centre = rows[y][x]
    low = centre - threshold
    high = centre + threshold

    p0 = rows[y - 3][x]
    p4 = rows[y][x + 3]
    p8 = rows[y + 3][x]
    p12 = rows[y][x - 3]
    compass = (p0, p4, p8, p12, p0)
    pairs = list(zip(compass, compass[1:]))

    above = any(a > high and b > high for a, b in pairs)
    below = any(a < low and b < low for a, b in pairs)
    if not above and not below:
        return False

    circle = _circle(rows, x, y)
    return (above and _has_bright_span(circle, 9, high)) or (
        below and _has_dark_span(circle, 9, low)
    )


def _fast12(rows: list[list[int]], threshold: int, x: int, y: int) -> bool:
    if not _inside(rows, x, y):
        return False
    centre = rows[y][x]
    low = centre - threshold
    high = centre + threshold

    p0 = rows[y - 3][x]
    p8 = rows[y + 3][x]
    above = p0 > high and p8 > high
    below = p0 < low and p8 < low
    if not above and not below:
        return False

    p4 = rows[y][x + 3]
    p12 = rows[y][x - 3]
    above = above and (p4 > high or p12 > high)
    below = below and (p4 < low or p12 < low)
    if not above and not below:
        return False

    circle = _circle(rows, x, y)
    if above:
        return _has_bright_span(circle, 12, high)
    return _has_dark_span(circle, 12, low)


_DETECTORS = {Fast.NINE: _fast9, Fast.TWELVE: _fast12}


def _score(rows: list[list[int]], threshold: int, x: int, y: int, variant: Fast) -> int:
    detect = _DETECTORS[variant]
    high = 255
    low = threshold
    while high != low:
        probe = high if high == low + 1 else (high + low) // 2
        if detect(rows, probe, x, y):
            low = probe
        else:
            high = probe - 1
    return high


def is_corner_fast9(image, threshold: int, x: int, y: int) -> bool:
    """Whether pixel (x, y) is a FAST-9 corner at the given threshold."""
    return _fast9(_rows(image), threshold, x, y)


def is_corner_fast12(image, threshold: int, x: int, y: int) -> bool:
    """Whether pixel (x, y) is a FAST-12 corner at the given threshold."""
    return _fast12(_rows(image), threshold, x, y)


def fast_corner_score(image, threshold: int, x: int, y: int, variant: Fast) -> int:
    """The largest threshold at which (x, y) is still a corner.

    ``threshold`` is a lower bound for the search, normally the threshold at
    which the corner was detected. As the corner test uses strict inequality,
    a smallest intensity difference of n gives a score of n - 1.
    """
    return _score(_rows(image), threshold, x, y, variant)


def _detect(image, threshold: int, variant: Fast) -> list[Corner]:
    rows = _rows(image)
    detect = _DETECTORS[variant]
    height = len(rows)
    width = len(rows[0]) if height else 0
    return [
        Corner(x, y, float(_score(rows, threshold, x, y, variant)))
        for y in range(height)
        for x in range(width)
        if detect(rows, threshold, x, y)
    ]


def corners_fast12(image, threshold: int) -> list[Corner]:
    """Find all FAST-12 corners, in row-major order."""
    return _detect(image, threshold, Fast.TWELVE)


def corners_fast9(image, threshold: int) -> list[Corner]:
    """Find all FAST-9 corners, in row-major order."""
    return _detect(image, threshold, Fast.NINE)