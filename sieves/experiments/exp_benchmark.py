"""
Experiment: sequential vs parallel sieve timings.

Runs the sequential form of each algorithm and its parallel form for every
configured thread count, over a geometric range of limits. Outputs a CSV
benchmark log.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Iterator, List, Optional

from ..markers import ALGORITHMS, check_algorithm
from ..parallel_sieve import JOIN_TIMEOUT, DEFAULT_BACKEND
from ..primes import sieve
from ..reporting import exponent_of, print_result

COLUMNS = ['limit', 'algorithm', 'parallel', 'threads', 'found', 'expected',
           'match', 'algorithm_ms', 'total_ms']


def limits_range(start: int, stop: int, factor: int) -> Iterator[int]:
    """
    Yield start, start*factor, ... while <= stop.

    Parameters
    ----------
    start : int
        First limit (>= 1).
    stop : int
        Largest limit allowed (inclusive).
    factor : int
        Growth factor (>= 2).
    """
    if start < 1 or factor < 2:
        raise ValueError(f"need start >= 1 and factor >= 2, got {start}, {factor}")
    limit = start
    while limit <= stop:
        yield limit
        limit *= factor


def _row(limit: int, algorithm: str, num_threads: Optional[int], result, expected: int,
         algorithm_ms: List[float], total_ms: List[float]) -> dict:
    return {
        'limit': limit,
        'algorithm': algorithm,
        'parallel': num_threads is not None,
        'threads': 1 if num_threads is None else num_threads,
        'found': result.prime_count,
        'expected': expected,
        'match': result.prime_count == expected,
        'algorithm_ms': float(np.median(algorithm_ms)),
        'total_ms': float(np.median(total_ms)),
    }


def _warm_up(algorithms: List[str], threads: List[int], timeout: float,
             backend: str) -> None:
    """Run every configured form once on a tiny bound so timed runs exclude the JIT."""
    for algorithm in algorithms:
        sieve(100, algorithm)
        for num_threads in threads:
            sieve(100, algorithm, num_threads=num_threads,
                  timeout=timeout, backend=backend)


def _timed(limit: int, algorithm: str, num_threads: Optional[int], repeats: int,
           timeout: float, backend: str):
    """Run one configuration `repeats` times; keep the last result."""
    algorithm_ms = []
    total_ms = []
    result = None
    for _ in range(repeats):
        result = sieve(limit, algorithm, num_threads=num_threads,
                       timeout=timeout, backend=backend)
        algorithm_ms.append(result.algorithm_time * 1000)
        total_ms.append(result.total_time * 1000)
    return result, algorithm_ms, total_ms


def run_benchmark_experiment(limits: List[int], threads: List[int],
                             output_dir: Optional[Path] = None,
                             algorithms: List[str] = None,
                             repeats: int = 1,
                             timeout: float = JOIN_TIMEOUT,
                             backend: str = DEFAULT_BACKEND,
                             verbose: bool = True) -> pd.DataFrame:
    """
    Run the full benchmark.

    Parameters
    ----------
    limits : list
        Values of N.
    threads : list
        Thread counts for the parallel forms.
    output_dir : Path, optional
        If provided, write benchmark.csv there.
    algorithms : list, optional
        Algorithm labels. Defaults to all.
    repeats : int
        Runs per configuration; times are medians.
    timeout : float
        Join timeout for the parallel forms, in seconds.
    backend : str
        Parallel backend, 'thread' or 'process'.
    verbose : bool
        Print a report block per run.

    Returns
    -------
    pd.DataFrame
        One row per (limit, algorithm, form) with columns COLUMNS.
    """
    if algorithms is None:
        algorithms = list(ALGORITHMS)
    for algorithm in algorithms:
        check_algorithm(algorithm)
    if repeats < 1:
        raise ValueError(f"repeats must be >= 1, got {repeats}")

    _warm_up(algorithms, threads, timeout, backend)

    rows = []
    for algorithm in algorithms:
        if verbose:
            print(f"Alg = {algorithm}")

        for limit in limits:
            if verbose:
                print(f"====== Limit (N) = 10^{exponent_of(limit)} ======")

            seq, algorithm_ms, total_ms = _timed(limit, algorithm, None, repeats,
                                                 timeout, backend)
            expected = seq.prime_count
            rows.append(_row(limit, algorithm, None, seq, expected,
                             algorithm_ms, total_ms))
            if verbose:
                print_result(seq, parallel=False, expected=expected)

            for num_threads in threads:
                par, algorithm_ms, total_ms = _timed(limit, algorithm, num_threads,
                                                     repeats, timeout, backend)
                rows.append(_row(limit, algorithm, num_threads, par, expected,
                                 algorithm_ms, total_ms))
                if verbose:
                    print_result(par, parallel=True, expected=expected,
                                 num_threads=num_threads)
                    if par.prime_count != expected:
                        print(f"  MISMATCH: {par.prime_count} != {expected}")

    df = pd.DataFrame(rows, columns=COLUMNS)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_dir / 'benchmark.csv', index=False)
        if verbose:
            print(f"  Results saved to {output_dir}")

    return df


def run_from_config(config: dict) -> pd.DataFrame:
    """Run the benchmark with every setting taken from a loaded config."""
    return run_benchmark_experiment(
        list(limits_range(**config['limits'])),
        config['threads'],
        Path(config['output_dir']),
        algorithms=config['algorithms'],
        repeats=config.get('repeats', 1),
        timeout=config.get('timeout', JOIN_TIMEOUT),
        backend=config.get('backend', DEFAULT_BACKEND),
    )


if __name__ == '__main__':
    import yaml

    with open('config/default.yaml') as f:
        config = yaml.safe_load(f)

    df = run_from_config(config)
    print("\nSummary:")
    print(df.to_string(index=False))
