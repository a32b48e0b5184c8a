"""
Console reporting for sieve results.

Responsibility: formatting only. No computation beyond reading a Result.
"""

from .result import Result


def exponent_of(limit: int) -> int:
    """Decimal exponent of limit, i.e. number of digits minus one."""
    return len(str(abs(int(limit)))) - 1


def format_result(result: Result, parallel: bool, expected: int = None,
                  num_threads: int = 1, include_total: bool = False) -> str:
    """
    Format one result block.

    Parameters
    ----------
    result : Result
        Sieve result.
    parallel : bool
        Whether the result came from a parallel sieve.
    expected : int, optional
        Reference prime count. Defaults to result.prime_count.
    num_threads : int
        Worker count, shown for parallel results.
    include_total : bool
        Also show the total time including setup.

    Returns
    -------
    str
        Multi-line report, times in milliseconds.
    """
    if expected is None:
        expected = result.prime_count

    lines = ["Parallel" if parallel else "Sequential"]
    if parallel:
        lines.append(f"Threads: {num_threads}")
    if include_total:
        lines.append(f"Total time taken: {result.total_time * 1000:.0f} ms.")
    lines.append(f"Algorithm execution time: {result.algorithm_time * 1000:.0f} ms.")
    lines.append(f"Found: {result.prime_count} out of: {expected}")
    return "\n".join(lines) + "\n"


def print_result(result: Result, parallel: bool, expected: int = None,
                 num_threads: int = 1, include_total: bool = False) -> None:
    print(format_result(result, parallel, expected, num_threads, include_total))
