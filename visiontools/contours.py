"""Border following for binary images (Suzuki and Abe)."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from visiontools.definitions import Point

__all__ = ["BorderType", "Contour", "find_contours", "find_contours_with_threshold"]


class BorderType(Enum):
    """Whether a border encloses a region or lines a hole inside one."""

    OUTER = "outer"
    HOLE = "hole"


@dataclass
class Contour:
    """A border of an 8-connected foreground region.

    ``parent`` is the index of the enclosing border in the list returned by
    :func:`find_contours`, or ``None`` for a top-level border.
    """

    points: list[Point] = field(default_factory=list)
    border_type: BorderType = BorderType.OUTER
    parent: int | None = None


# West, north-west, north, north-east, east, south-east, south, south-west.
_NEIGHBOUR_OFFSETS = (
    Point(-1, 0),
    Point(-1, -1),
    Point(0, -1),
    Point(1, -1),
    Point(1, 0),
    Point(1, 1),
    Point(0, 1),
    Point(-1, 1),
)
_EAST = Point(1, 0)


def find_contours(image) -> list[Contour]:
    """Find all borders of foreground regions; non-zero pixels are foreground."""
    return find_contours_with_threshold(image, 0)


def find_contours_with_threshold(image, threshold: int) -> list[Contour]:
    """Find all borders of regions whose pixels are strictly above ``threshold``.

    ``image`` is a two-dimensional array indexed as ``image[y, x]``.
    """
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    height, width = pixels.shape
    values = [1 if v > threshold else 0 for v in pixels.ravel().tolist()]

    def at(p: Point) -> int:
        return p.x + width * p.y

    def foreground(p: Point) -> bool:
        return 0 <= p.x < width and 0 <= p.y < height and values[at(p)] != 0

    diffs = deque(_NEIGHBOUR_OFFSETS)

    def rotate_to(offset: Point) -> None:
        diffs.rotate(-diffs.index(offset))

    contours: list[Contour] = []
    border_num = 1

    for y in range(height):
        parent_border_num = 1
        for x in range(width):
            curr = Point(x, y)
            value = values[at(curr)]
            if value == 0:
                continue

            start = None
            if value == 1 and x > 0 and values[at(curr) - 1] == 0:
                start = (Point(x - 1, y), BorderType.OUTER)
            elif value > 0 and x + 1 < width and values[at(curr) + 1] == 0:
                if value > 1:
                    parent_border_num = value
                start = (Point(x + 1, y), BorderType.HOLE)

            if start is not None:
                adj, border_type = start
                border_num += 1
                contours.append(
                    _follow_border(
                        curr, adj, border_type, border_num, parent_border_num,
                        contours, values, width, at, foreground, diffs, rotate_to,
                    )
                )

            value = values[at(curr)]
            if value != 1:
                parent_border_num = abs(value)

    return contours


def _follow_border(
    curr, adj, border_type, border_num, parent_border_num,
    contours, values, width, at, foreground, diffs, rotate_to,
) -> Contour:
    parent = None
    if parent_border_num > 1:
        parent_index = parent_border_num - 2
        parent_contour = contours[parent_index]
        if (border_type is BorderType.OUTER) != (
            parent_contour.border_type is BorderType.OUTER
        ):
            parent = parent_index
        else:
            parent = parent_contour.parent

    points: list[Point] = []
    rotate_to(adj - curr)
    pos1 = next((curr + d for d in diffs if foreground(curr + d)), None)

    if pos1 is None:
        points.append(curr)
        values[at(curr)] = -border_num
        return Contour(points, border_type, parent)

    pos2, pos3 = pos1, curr
    while True:
        points.append(pos3)
        rotate_to(pos2 - pos3)
        pos4 = next(pos3 + d for d in reversed(diffs) if foreground(pos3 + d))

        step = pos4 - pos3
        is_right_edge = False
        for d in reversed(diffs):
            if d == step:
                break
            if d == _EAST:
                is_right_edge = True
                break

        if pos3.x + 1 == width or is_right_edge:
            values[at(pos3)] = -border_num
        elif values[at(pos3)] == 1:
            values[at(pos3)] = border_num

        if pos4 == curr and pos3 == pos1:
            break
        pos2, pos3 = pos3, pos4

    return Contour(points, border_type, parent)