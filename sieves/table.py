"""
Primality table utilities.

Responsibility: allocation, validation and scanning of the boolean
primality table. No sieve logic.
"""

import numbers

import numpy as np

from .errors import InvalidBound


def check_bound(n: int) -> int:
    """Validate the sieve bound and return it as a plain int."""
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidBound(f"n must be an integer, got {n!r}")
    if n < 0:
        raise InvalidBound(f"n must be >= 0, got {n}")
    return int(n)


def check_threads(num_threads: int) -> int:
    """Validate the worker count and return it as a plain int."""
    if isinstance(num_threads, bool) or not isinstance(num_threads, numbers.Integral):
        raise InvalidBound(f"num_threads must be an integer, got {num_threads!r}")
    if num_threads < 1:
        raise InvalidBound(f"num_threads must be >= 1, got {num_threads}")
    return int(num_threads)


def new_table(n: int) -> np.ndarray:
    """
    Allocate a primality table for [0, n].

    Parameters
    ----------
    n : int
        Upper bound (inclusive), already validated.

    Returns
    -------
    np.ndarray
        Boolean array of length n+1 with entries 2..n set to True.
    """
    table = np.ones(n + 1, dtype=bool)
    table[:2] = False
    return table


def to_primes_list(table: np.ndarray, start: int = 2, end: int = None) -> np.ndarray:
    """
    Collect indices i in [start, end) with table[i] True.

    Parameters
    ----------
    table : np.ndarray
        Boolean primality table.
    start : int
        First index scanned (default 2).
    end : int, optional
        One past the last index scanned. Defaults to len(table).

    Returns
    -------
    np.ndarray
        Ascending int64 array of primes.
    """
    if end is None:
        end = len(table)
    start = max(start, 2)
    if end <= start:
        return np.array([], dtype=np.int64)
    return (np.flatnonzero(table[start:end]) + start).astype(np.int64)


def count_primes(table: np.ndarray) -> int:
    """Count True entries at indices >= 2."""
    return int(np.count_nonzero(table[2:]))
