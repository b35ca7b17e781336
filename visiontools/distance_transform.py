"""Distance transforms: how far each pixel lies from the nearest pixel of interest.

Images are two-dimensional arrays indexed as ``image[y, x]``. Functions ending
in ``_mut`` modify their argument in place and return ``None``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import Enum

import numpy as np

__all__ = [
    "Norm",
    "DistanceFrom",
    "distance_transform",
    "distance_transform_mut",
    "distance_transform_impl",
    "distance_transform_1d",
    "euclidean_squared_distance_transform",
]

_INF = math.inf


class Norm(Enum):
    """How to measure distance between pixel coordinates."""

    L1 = "l1"
    """|x1 - x2| + |y1 - y2|, the Manhattan or city block norm."""
    LINF = "linf"
    """max(|x1 - x2|, |y1 - y2|), the chessboard norm."""


class DistanceFrom(Enum):
    """Which pixels distances are measured from."""

    FOREGROUND = "foreground"
    """Non-zero pixels."""
    BACKGROUND = "background"
    """Zero pixels."""


def _gray(image) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    return pixels


def _gray_in_place(image) -> np.ndarray:
    if not isinstance(image, np.ndarray):
        raise TypeError("in-place operations need a numpy array")
    if image.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    if image.dtype != np.uint8:
        raise TypeError("in-place operations need a uint8 image")
    return image


def distance_transform(image, norm: Norm) -> np.ndarray:
    """Distance of each pixel from the nearest non-zero pixel, saturating at 255."""
    out = _gray(image).astype(np.uint8, copy=True)
    distance_transform_mut(out, norm)
    return out


def distance_transform_mut(image, norm: Norm) -> None:
    """Replace each pixel by its distance from the nearest non-zero pixel.

    Distances saturate at 255.
    """
    distance_transform_impl(image, norm, DistanceFrom.FOREGROUND)


def distance_transform_impl(image, norm: Norm, source: DistanceFrom) -> None:
    """Two-pass chamfer distance transform, in place, from ``source`` pixels."""
    pixels = _gray_in_place(image)
    height, width = pixels.shape
    if height == 0 or width == 0:
        return
    max_distance = min(width + height, 255)
    rows = pixels.astype(np.int64).tolist()
    diagonals = norm is Norm.LINF

    def relax(x: int, y: int, cx: int, cy: int) -> None:
        candidate = rows[cy][cx] + 1
        if candidate < rows[y][x]:
            rows[y][x] = candidate

    # Top-left to bottom-right.
    for y, row in enumerate(rows):
        for x, value in enumerate(row):
            is_source = value > 0 if source is DistanceFrom.FOREGROUND else value == 0
            if is_source:
                row[x] = 0
                continue
            row[x] = max_distance
            if x > 0:
                relax(x, y, x - 1, y)
            if y > 0:
                relax(x, y, x, y - 1)
                if diagonals:
                    if x > 0:
                        relax(x, y, x - 1, y - 1)
                    if x < width - 1:
                        relax(x, y, x + 1, y - 1)

    # Bottom-right to top-left.
    for y in reversed(range(height)):
        for x in reversed(range(width)):
            if x < width - 1:
                relax(x, y, x + 1, y)
            if y < height - 1:
                relax(x, y, x, y + 1)
                if diagonals:
                    if x < width - 1:
                        relax(x, y, x + 1, y + 1)
                    if x > 0:
                        relax(x, y, x - 1, y + 1)

    pixels[...] = np.array(rows, dtype=np.uint8)


def _intersection(f: Sequence[float], p: int, q: int) -> float:
    """Abscissa where the parabolas f[p] + (x - p)^2 and f[q] + (x - q)^2 meet."""
    return ((f[q] + q * q) - (f[p] + p * p)) / (2.0 * q - 2.0 * p)


def _transform_1d(f: Sequence[float]) -> list[float]:
    n = len(f)
    if n == 0:
        return []

    # locations[i] is the centre of the i-th parabola of the lower envelope;
    # it is lowest on [boundaries[i], boundaries[i + 1]).
    locations = [0] * n
    boundaries = [math.nan] * (n + 1)
    k = 0
    boundaries[0] = -_INF
    boundaries[1] = _INF

    for q in range(1, n):
        if f[q] == _INF:
            continue
        if k == 0 and f[locations[0]] == _INF:
            locations[0] = q
            boundaries[0] = -_INF
            boundaries[1] = _INF
            continue

        s = _intersection(f, locations[k], q)
        while s <= boundaries[k]:
            k -= 1
            s = _intersection(f, locations[k], q)

        k += 1
        locations[k] = q
        boundaries[k] = s
        boundaries[k + 1] = _INF

    result = []
    k = 0
    for q in range(n):
        while boundaries[k + 1] < q:
            k += 1
        dist = float(q - locations[k])
        result.append(dist * dist + f[locations[k]])
    return result


def distance_transform_1d(values: Sequence[float]) -> list[float]:
    """One-dimensional squared distance transform of a sampled function.

    Entry q of the result is min over p of ``values[p] + (q - p) ** 2``.
    Infinite entries never act as sources.
    """
    return _transform_1d([float(v) for v in values])


def euclidean_squared_distance_transform(image) -> np.ndarray:
    """Squared Euclidean distance of each pixel to the nearest non-zero pixel.

    Runs in time linear in the image size. Pixels in an image with no
    non-zero pixels get infinite distance.
    """
    pixels = _gray(image)
    height, width = pixels.shape
    result = np.zeros((height, width), dtype=np.float64)
    if height == 0 or width == 0:
        return result

    rows = pixels.tolist()
    columns = [
        _transform_1d([0.0 if row[x] > 0 else _INF for row in rows])
        for x in range(width)
    ]
    for y in range(height):
        row_values = [column[y] for column in columns]
        result[y, :] = _transform_1d(row_values)
    return result