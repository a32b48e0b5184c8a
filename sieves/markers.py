"""
Marker generation: sequential sieving of the prefix [2, limit].

Responsibility: produce the ascending primes <= limit ("markers") and leave
the primality table correct for every index <= limit. Never parallelized.

Two constructions:
- Eratosthenes: strided elimination of multiples of each surviving p.
- Euler (linear): every composite is marked exactly once, by its smallest
  prime factor, so construction is O(limit).
"""

import math

import numpy as np
from numba import njit
from typing import Tuple

from .errors import InvalidBound

# Algorithm labels
ERATOSTHENES = 'eratosthenes'
EULER = 'euler'

ALGORITHMS = [ERATOSTHENES, EULER]


def marker_limit(n: int) -> int:
    """
    Return ceil(sqrt(n)), clamped to n.

    Exact integer arithmetic, so perfect squares are not rounded up.
    """
    if n <= 0:
        return 0
    r = math.isqrt(n)
    if r * r < n:
        r += 1
    return min(r, n)


def prime_capacity(limit: int) -> int:
    """Upper bound on pi(limit), used to preallocate the prime buffer."""
    if limit < 2:
        return 1
    # pi(x) < 1.25506 x / ln x for x > 1 (Rosser & Schoenfeld)
    return int(1.26 * limit / math.log(limit)) + 100


def eratosthenes_markers(table: np.ndarray, limit: int) -> np.ndarray:
    """
    Sieve [2, limit] of table in place with the Sieve of Eratosthenes.

    Parameters
    ----------
    table : np.ndarray
        Boolean primality table, len(table) > limit, entries 2..limit True.
    limit : int
        Upper bound (inclusive) of the prefix.

    Returns
    -------
    np.ndarray
        Ascending int64 array of primes <= limit.
    """
    if limit < 2:
        return np.array([], dtype=np.int64)

    # Multiples below p*p were already cleared by a smaller prime
    for p in range(2, math.isqrt(limit) + 1):
        if table[p]:
            table[p*p:limit + 1:p] = False

    return np.flatnonzero(table[:limit + 1]).astype(np.int64)


@njit(nogil=True, cache=True)
def _linear_sieve(table, limit, capacity):
    composite = np.zeros(limit + 1, dtype=np.bool_)
    primes = np.empty(capacity, dtype=np.int64)
    count = 0
    marks = 0

    for i in range(2, limit + 1):
        if not composite[i]:
            primes[count] = i
            count += 1

        for k in range(count):
            p = primes[k]
            c = i * p
            if c > limit:
                break
            composite[c] = True
            table[c] = False
            marks += 1
            # p is the smallest prime factor of i: larger primes would
            # mark i*q through a factor other than its smallest
            if i % p == 0:
                break

    return primes[:count].copy(), marks


def euler_markers(table: np.ndarray, limit: int) -> Tuple[np.ndarray, int]:
    """
    Sieve [2, limit] of table in place with the linear Sieve of Euler.

    Parameters
    ----------
    table : np.ndarray
        Boolean primality table, len(table) > limit, entries 2..limit True.
    limit : int
        Upper bound (inclusive) of the prefix.

    Returns
    -------
    tuple
        (primes, marks): ascending int64 array of primes <= limit and the
        number of marking operations performed. marks equals the number of
        composites in [2, limit].
    """
    if limit < 2:
        return np.array([], dtype=np.int64), 0

    primes, marks = _linear_sieve(table, limit, prime_capacity(limit))
    return primes, int(marks)


def check_algorithm(algorithm: str) -> str:
    if algorithm not in ALGORITHMS:
        raise InvalidBound(f"unknown algorithm {algorithm!r}, expected one of {ALGORITHMS}")
    return algorithm


def generate_markers(table: np.ndarray, limit: int, algorithm: str) -> np.ndarray:
    """
    Run the sequential marker phase for the given algorithm.

    Returns the ascending markers; table is correct for indices <= limit.
    """
    if check_algorithm(algorithm) == EULER:
        primes, _ = euler_markers(table, limit)
        return primes
    return eratosthenes_markers(table, limit)
