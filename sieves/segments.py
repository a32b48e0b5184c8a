"""
Segment partitioning and segment-local sieving.

Responsibility: split (marker_limit, n] into disjoint contiguous segments
and clear multiples of the markers inside one segment. Segments never
overlap, so tasks sieving different segments may write the same table
concurrently without locks.
"""

import numpy as np
from numba import njit
from typing import List, Tuple

Segment = Tuple[int, int]


def partition_segments(marker_limit: int, n: int, num_threads: int) -> List[Segment]:
    """
    Divide (marker_limit, n] into exactly num_threads segments.

    Parameters
    ----------
    marker_limit : int
        Last index handled by the marker phase.
    n : int
        Upper bound (inclusive).
    num_threads : int
        Number of segments (>= 1).

    Returns
    -------
    list
        Inclusive (start, end) pairs in ascending order. A segment with
        start > end is empty; when n <= marker_limit every segment is empty.
        The last non-empty segment is clamped to n and may be shorter.
    """
    size = (n - marker_limit) // num_threads + 1

    segments = []
    for k in range(num_threads):
        start = marker_limit + k * size + 1
        end = min(marker_limit + (k + 1) * size, n)
        segments.append((start, end))
    return segments


def segment_length(segment: Segment) -> int:
    """Number of indices in an inclusive segment (0 if empty)."""
    start, end = segment
    return max(0, end - start + 1)


@njit(nogil=True, cache=True)
def _clear_multiples(table, markers, start, end):
    for i in range(markers.shape[0]):
        m = markers[i]
        # First multiple of m that is >= start
        first = start + (m - start % m) % m
        for j in range(first, end + 1, m):
            table[j] = False


def sieve_segment(table: np.ndarray, markers: np.ndarray, start: int, end: int) -> None:
    """
    Clear every multiple of every marker inside [start, end].

    Parameters
    ----------
    table : np.ndarray
        Boolean primality table, len(table) > end.
    markers : np.ndarray
        Ascending int64 primes <= marker_limit, with marker_limit < start.
    start, end : int
        Inclusive segment bounds. Nothing is done when start > end.
    """
    if start > end or len(markers) == 0:
        return
    _clear_multiples(table, markers, start, end)


def compile_segment_kernel() -> None:
    """Compile the segment kernel on a tiny input so later calls skip the JIT."""
    _clear_multiples(np.ones(4, dtype=bool), np.array([2], dtype=np.int64), 3, 3)
