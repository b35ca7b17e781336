"""Matching binary descriptors by Hamming distance with locality-sensitive hashing."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence

__all__ = ["match_binary_descriptors"]

_TABLES = 3


def match_binary_descriptors(d1: Sequence, d2: Sequence, threshold: int, seed: int | None = None) -> list[tuple]:
    """Pair each descriptor in ``d1`` with its probable nearest neighbour in ``d2``.

    A pair is kept only when its Hamming distance is below ``threshold``.
    Descriptors in ``d2`` may be matched more than once. Candidates come from
    three hash tables, each keyed on a random subset of bits whose size grows
    with the log of the larger input. Each result is ``(from_d1, from_d2)``.
    """
    if not d1 or not d2:
        return []

    rng = random.Random(seed)
    swapped = len(d1) > len(d2)
    queries, database = (d2, d1) if swapped else (d1, d2)

    k = int(math.log2(len(database)))
    size = queries[0].size()
    tables = []
    for _ in range(_TABLES):
        bits = [rng.randrange(size) for _ in range(k)]
        table: dict[int, list] = {}
        for descriptor in database:
            table.setdefault(descriptor.bit_subset(bits), []).append(descriptor)
        tables.append((bits, table))

    matches = []
    for query in queries:
        best_score = math.inf
        best = None
        for bits, table in tables:
            for candidate in table.get(query.bit_subset(bits), ()):
                distance = query.hamming_distance(candidate)
                if distance < best_score:
                    best_score = distance
                    best = candidate
        if best is not None and best_score < threshold:
            matches.append((best, query) if swapped else (query, best))
    return matches