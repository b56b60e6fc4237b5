# src/geocolumns/vector/iterators.py

"""
This module provides the range adapter used to walk offset-delimited buffers.
"""

from itertools import islice
from typing import Iterable, Iterator

__all__ = [
    "RangeIterator"
]

class RangeIterator:
    """
    Lazily pairs each value of an ordered sequence with its successor and yields
    the half-open range between them.

    A sequence of N values yields N - 1 ranges. Sequences with fewer than two
    values yield nothing. Nothing is copied: the adapter advances two views over
    the same iterable in lockstep, so the source must be restartable (a list,
    tuple or numpy array, not a one-shot generator).

    Args:
        values (Iterable[int]): Sorted offsets, e.g. a feature offset table.
    """
    def __init__(self, values: Iterable[int]):
        self._pairs = zip(iter(values), islice(iter(values), 1, None))

    def __iter__(self) -> Iterator[range]:
        return self

    def __next__(self) -> range:
        start, end = next(self._pairs)
        return range(int(start), int(end))
