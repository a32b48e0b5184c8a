"""
Prime generation: sequential and segmented parallel sieves.

Responsibility: the public sieve entry points. Each call validates its
input before allocating, runs the marker phase (over [2, n] for the
sequential forms, over [2, ceil(sqrt(n))] for the parallel ones), sieves
the remaining segments on a per-call pool, and returns a Result.
"""

import time

from .markers import (
    ERATOSTHENES, EULER, check_algorithm, marker_limit,
    eratosthenes_markers, euler_markers, generate_markers,
)
from .parallel_sieve import (
    JOIN_TIMEOUT, DEFAULT_BACKEND, check_backend, check_timeout, run_segments,
)
from .result import Result
from .segments import partition_segments
from .table import check_bound, check_threads, new_table


def sieve_eratosthenes(n: int) -> Result:
    """
    Sequential Sieve of Eratosthenes over [2, n].

    Parameters
    ----------
    n : int
        Upper bound (inclusive), n >= 0.

    Returns
    -------
    Result
        Table-backed result.
    """
    n = check_bound(n)
    total_start = time.perf_counter()
    table = new_table(n)

    start = time.perf_counter()
    eratosthenes_markers(table, n)
    algorithm_time = time.perf_counter() - start

    return Result.from_table(table, total_start, algorithm_time)


def sieve_euler(n: int) -> Result:
    """
    Sequential linear Sieve of Euler over [2, n].

    Every composite is marked once by its smallest prime factor. The
    returned Result carries the materialized prime list.
    """
    n = check_bound(n)
    total_start = time.perf_counter()
    table = new_table(n)

    start = time.perf_counter()
    primes, _ = euler_markers(table, n)
    algorithm_time = time.perf_counter() - start

    return Result.from_primes(primes, n, total_start, algorithm_time)


def _sieve_parallel(n: int, num_threads: int, algorithm: str, timeout: float,
                    backend: str, verbose: bool) -> Result:
    n = check_bound(n)
    num_threads = check_threads(num_threads)
    check_algorithm(algorithm)
    check_backend(backend)
    check_timeout(timeout)

    total_start = time.perf_counter()
    limit = marker_limit(n)
    table = new_table(n)

    # Step 1: markers up to ceil(sqrt(n)), sequentially
    start = time.perf_counter()
    markers = generate_markers(table, limit, algorithm)
    algorithm_time = time.perf_counter() - start

    if verbose:
        print(f"    Found {len(markers)} markers up to {limit}")

    # Step 2: split (limit, n] into one segment per worker
    segments = partition_segments(limit, n, num_threads)

    # Step 3: sieve segments concurrently, join before reading the table
    start = time.perf_counter()
    run_segments(table, markers, segments, num_threads,
                 timeout=timeout, backend=backend, verbose=verbose)
    algorithm_time += time.perf_counter() - start

    return Result.from_table(table, total_start, algorithm_time)


def sieve_eratosthenes_parallel(n: int, num_threads: int, timeout: float = JOIN_TIMEOUT,
                                backend: str = DEFAULT_BACKEND,
                                verbose: bool = False) -> Result:
    """
    Segmented parallel Sieve of Eratosthenes.

    Parameters
    ----------
    n : int
        Upper bound (inclusive), n >= 0.
    num_threads : int
        Number of workers and of segments, >= 1.
    timeout : float
        Upper bound on the join, in seconds.
    backend : str
        'thread' or 'process'.
    verbose : bool
        Print progress.

    Raises
    ------
    InvalidBound
        On invalid input, before any allocation.
    JoinTimeout
        If the segments do not finish in time.
    """
    return _sieve_parallel(n, num_threads, ERATOSTHENES, timeout, backend, verbose)


def sieve_euler_parallel(n: int, num_threads: int, timeout: float = JOIN_TIMEOUT,
                         backend: str = DEFAULT_BACKEND,
                         verbose: bool = False) -> Result:
    """
    Segmented parallel sieve with a linear (Euler) marker phase.

    The segments are sieved by plain multiple clearing, as in
    sieve_eratosthenes_parallel; only the marker construction differs.
    """
    return _sieve_parallel(n, num_threads, EULER, timeout, backend, verbose)


def sieve(n: int, algorithm: str = ERATOSTHENES, num_threads: int = None,
          timeout: float = JOIN_TIMEOUT, backend: str = DEFAULT_BACKEND,
          verbose: bool = False) -> Result:
    """
    Dispatch to one of the four sieves.

    num_threads=None selects the sequential form.
    """
    check_algorithm(algorithm)
    if num_threads is None:
        if algorithm == EULER:
            return sieve_euler(n)
        return sieve_eratosthenes(n)
    return _sieve_parallel(n, num_threads, algorithm, timeout, backend, verbose)

