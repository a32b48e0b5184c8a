"""
Exceptions raised by the sieves.

Responsibility: error taxonomy only. Allocation failures are not wrapped:
numpy's MemoryError propagates as-is.
"""


class SieveError(Exception):
    """Base class for sieve errors."""


class InvalidBound(SieveError, ValueError):
    """Rejected input (negative bound, thread count < 1, unknown option)."""


class JoinTimeout(SieveError, TimeoutError):
    """
    Parallel join did not finish within the timeout.

    The primality table of the failed call is in an undefined, partially
    sieved state and is never returned.
    """

    def __init__(self, timeout: float, unfinished: int):
        self.timeout = timeout
        self.unfinished = unfinished
        super().__init__(
            f"{unfinished} segment(s) still running after {timeout:g}s"
        )
