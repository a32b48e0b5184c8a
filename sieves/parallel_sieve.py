"""
Parallel segment orchestration.

Runs one segment-sieve task per segment on a worker pool created for the
call and torn down before it returns. The primality table is the only
shared resource; segments are disjoint, so no locks are used.

Two backends:
- 'thread': ThreadPoolExecutor writing the table directly. The segment
  kernel is compiled with nogil=True, so threads run concurrently.
- 'process': multiprocessing Pool over a shared memory copy of the table,
  copied back after the join.
"""

import numbers
import time
import multiprocessing
from concurrent.futures import ThreadPoolExecutor, wait
from multiprocessing import Pool, shared_memory
from typing import List

import numpy as np

from .errors import InvalidBound, JoinTimeout
from .segments import Segment, compile_segment_kernel, sieve_segment, segment_length

# Upper bound on the join, in seconds
JOIN_TIMEOUT = 100.0

THREAD = 'thread'
PROCESS = 'process'

BACKENDS = [THREAD, PROCESS]
DEFAULT_BACKEND = THREAD

# Global variables for worker processes (set via initializer)
_worker_table = None
_worker_shm = None
_worker_markers = None


def check_backend(backend: str) -> str:
    if backend not in BACKENDS:
        raise InvalidBound(f"unknown backend {backend!r}, expected one of {BACKENDS}")
    return backend


def check_timeout(timeout: float) -> float:
    if isinstance(timeout, bool) or not isinstance(timeout, numbers.Real) or not timeout > 0:
        raise InvalidBound(f"timeout must be > 0, got {timeout!r}")
    return float(timeout)


def _run_threads(table: np.ndarray, markers: np.ndarray, segments: List[Segment],
                 num_threads: int, timeout: float) -> None:
    """Sieve segments on a thread pool, writing table in place."""
    # No with-block: its exit waits for running tasks
    executor = ThreadPoolExecutor(max_workers=num_threads,
                                  thread_name_prefix='sieve-segment')
    try:
        futures = [executor.submit(sieve_segment, table, markers, start, end)
                   for start, end in segments]
        done, not_done = wait(futures, timeout=timeout)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    if not_done:
        raise JoinTimeout(timeout, len(not_done))

    for future in done:
        future.result()


def _init_worker_shm(shm_name: str, shape: tuple, markers: np.ndarray):
    """Initialize worker with the shared memory primality table."""
    global _worker_table, _worker_shm, _worker_markers
    _worker_shm = shared_memory.SharedMemory(name=shm_name)
    _worker_table = np.ndarray(shape, dtype=bool, buffer=_worker_shm.buf)
    _worker_markers = markers


def _sieve_segment_shm(segment: Segment) -> int:
    """Sieve one segment of the shared table. Returns its length."""
    start, end = segment
    sieve_segment(_worker_table, _worker_markers, start, end)
    return segment_length(segment)


def _dispatch_processes(shm: shared_memory.SharedMemory, shape: tuple,
                        markers: np.ndarray, segments: List[Segment],
                        num_threads: int, timeout: float) -> None:
    # Leaving the with-block terminates the pool, also on timeout
    with Pool(num_threads, initializer=_init_worker_shm,
              initargs=(shm.name, shape, markers)) as pool:
        pending = [pool.apply_async(_sieve_segment_shm, (segment,))
                   for segment in segments]
        pool.close()

        deadline = time.monotonic() + timeout
        for result in pending:
            result.wait(max(0.0, deadline - time.monotonic()))

        unfinished = sum(1 for result in pending if not result.ready())
        if unfinished:
            raise JoinTimeout(timeout, unfinished)

        for result in pending:
            result.get()


def _run_processes(table: np.ndarray, markers: np.ndarray, segments: List[Segment],
                   num_threads: int, timeout: float) -> None:
    """Sieve segments on a process pool through shared memory."""
    # Fills the on-disk kernel cache once; workers load it instead of compiling
    compile_segment_kernel()

    shm = shared_memory.SharedMemory(create=True, size=table.nbytes)
    try:
        shm_table = np.ndarray(table.shape, dtype=table.dtype, buffer=shm.buf)
        try:
            shm_table[:] = table[:]
            _dispatch_processes(shm, table.shape, markers, segments,
                                num_threads, timeout)
            table[:] = shm_table[:]
        finally:
            # Views must be released before the block can be closed
            del shm_table
    finally:
        shm.close()
        shm.unlink()


def run_segments(table: np.ndarray, markers: np.ndarray, segments: List[Segment],
                 num_threads: int, timeout: float = JOIN_TIMEOUT,
                 backend: str = DEFAULT_BACKEND, verbose: bool = False) -> None:
    """
    Sieve all segments of table concurrently and wait for every one.

    Parameters
    ----------
    table : np.ndarray
        Boolean primality table, already correct up to the marker limit.
    markers : np.ndarray
        Ascending int64 primes up to the marker limit. Shared read-only.
    segments : list
        Disjoint inclusive (start, end) pairs from partition_segments.
    num_threads : int
        Pool size. One task is submitted per segment.
    timeout : float
        Upper bound on the join, in seconds.
    backend : str
        'thread' or 'process'.
    verbose : bool
        Print progress.

    Raises
    ------
    JoinTimeout
        If any segment is unfinished when the timeout elapses. table is
        then in an undefined state and must be discarded.
    """
    backend = check_backend(backend)
    timeout = check_timeout(timeout)

    if verbose:
        print(f"    Processing {len(segments)} segments with {num_threads} "
              f"{backend} workers...")

    if backend == THREAD:
        _run_threads(table, markers, segments, num_threads, timeout)
    else:
        _run_processes(table, markers, segments, num_threads, timeout)


def default_workers() -> int:
    """Number of CPU cores, used when no worker count is configured."""
    return multiprocessing.cpu_count()
