"""
Sieve result with timing.

Responsibility: wrap the final primality table (or a materialized prime
list) with elapsed times. Built once at the end of a sieve call and
read-only afterwards.
"""

import time

import numpy as np

from .table import count_primes, to_primes_list


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class Result:
    """
    Primes up to n plus execution times.

    Use Result.from_table or Result.from_primes rather than the constructor.

    Attributes
    ----------
    algorithm_time : float
        Seconds spent in the sieving phases only.
    total_time : float
        Seconds for the whole call, including allocation and setup.
    """

    def __init__(self, n: int, is_prime: np.ndarray = None, primes: np.ndarray = None,
                 algorithm_time: float = 0.0, total_time: float = 0.0):
        if is_prime is None and primes is None:
            raise ValueError("Result needs a primality table or a prime list")
        self._n = n
        self._is_prime = None if is_prime is None else _frozen(is_prime)
        self._primes = None if primes is None else _frozen(np.asarray(primes, dtype=np.int64))
        self._materialized = primes is not None
        self._algorithm_time = algorithm_time
        self._total_time = total_time

    @classmethod
    def from_table(cls, table: np.ndarray, total_start: float,
                   algorithm_time: float) -> 'Result':
        """
        Wrap a finished primality table.

        total_start is the time.perf_counter() value taken at the start of
        the call; total_time is measured up to now.
        """
        return cls(len(table) - 1, is_prime=table,
                   algorithm_time=algorithm_time,
                   total_time=time.perf_counter() - total_start)

    @classmethod
    def from_primes(cls, primes: np.ndarray, n: int, total_start: float,
                    algorithm_time: float) -> 'Result':
        """Wrap an already materialized ascending prime list for bound n."""
        return cls(n, primes=primes,
                   algorithm_time=algorithm_time,
                   total_time=time.perf_counter() - total_start)

    @property
    def n(self) -> int:
        return self._n

    @property
    def primes(self) -> np.ndarray:
        """Ascending int64 array of all primes <= n."""
        if self._primes is None:
            self._primes = _frozen(to_primes_list(self._is_prime))
        return self._primes

    @property
    def is_prime(self) -> np.ndarray:
        """Boolean table of length n+1."""
        if self._is_prime is None:
            table = np.zeros(self._n + 1, dtype=bool)
            table[self._primes] = True
            self._is_prime = _frozen(table)
        return self._is_prime

    @property
    def prime_count(self) -> int:
        if self._materialized:
            return len(self._primes)
        return count_primes(self._is_prime)

    @property
    def algorithm_time(self) -> float:
        return self._algorithm_time

    @property
    def total_time(self) -> float:
        return self._total_time

    def __repr__(self):
        return (f"Result(n={self._n}, prime_count={self.prime_count}, "
                f"algorithm_time={self._algorithm_time:.6f}, "
                f"total_time={self._total_time:.6f})")
