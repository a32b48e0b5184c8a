#!/usr/bin/env python3
"""
Verify all four sieves produce identical prime tables.

Compares:
1. sieve_eratosthenes vs sieve_euler
2. each parallel sieve vs its sequential form, for several thread counts

Run at small N first to verify correctness before benchmarking large N.

Usage:
    python -m sieves.experiments.verify_sieves --N 1e6 --threads 1 2 3 4 8
"""

import sys
import time
import numpy as np
from typing import List

from ..parallel_sieve import BACKENDS, DEFAULT_BACKEND
from ..primes import (
    sieve_eratosthenes,
    sieve_eratosthenes_parallel,
    sieve_euler,
    sieve_euler_parallel,
)


def verify_sequential(N: int, verbose: bool = True) -> bool:
    """Verify Eratosthenes and Euler agree on [0, N]."""
    if verbose:
        print(f"\n=== Verifying sequential sieves for N={N:,} ===")

    t0 = time.time()
    erat = sieve_eratosthenes(N)
    t_erat = time.time() - t0

    t0 = time.time()
    euler = sieve_euler(N)
    t_euler = time.time() - t0

    ok = np.array_equal(erat.is_prime, euler.is_prime)

    if verbose:
        print(f"  Eratosthenes: {t_erat:.2f}s, {erat.prime_count:,} primes")
        print(f"  Euler:        {t_euler:.2f}s, {euler.prime_count:,} primes")
        print(f"  {'✓' if ok else '✗'} Tables {'match' if ok else 'differ'}")

    return ok


def verify_parallel(N: int, threads: List[int], backend: str = DEFAULT_BACKEND,
                    verbose: bool = True) -> bool:
    """Verify each parallel sieve against its sequential form."""
    if verbose:
        print(f"\n=== Verifying parallel sieves for N={N:,} ({backend}) ===")

    pairs = [
        ('eratosthenes', sieve_eratosthenes(N), sieve_eratosthenes_parallel),
        ('euler', sieve_euler(N), sieve_euler_parallel),
    ]

    all_match = True
    for name, reference, parallel in pairs:
        for num_threads in threads:
            result = parallel(N, num_threads, backend=backend)
            ok = np.array_equal(reference.is_prime, result.is_prime)
            all_match = all_match and ok

            if verbose:
                mark = '✓' if ok else '✗'
                print(f"  {mark} {name:<12} threads={num_threads:<3} "
                      f"{result.prime_count:>10,} primes "
                      f"{result.algorithm_time * 1000:>8.1f} ms")

                if not ok:
                    diff = np.flatnonzero(reference.is_prime != result.is_prime)
                    print(f"    First differing indices: {diff[:10].tolist()}")

    return all_match


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Verify sieve correctness')
    parser.add_argument('--N', type=float, default=1e6, help='Upper bound (default: 1e6)')
    parser.add_argument('--threads', type=int, nargs='+', default=[1, 2, 3, 4, 8],
                        help='Thread counts to check')
    parser.add_argument('--backend', choices=BACKENDS, default=DEFAULT_BACKEND)
    args = parser.parse_args()

    N = int(args.N)

    print(f"Sieve Verification")
    print(f"N = {N:,}")
    print("=" * 50)

    seq_ok = verify_sequential(N)
    par_ok = verify_parallel(N, args.threads, args.backend)

    print("\n" + "=" * 50)
    if seq_ok and par_ok:
        print("✓ All verifications passed!")
    else:
        print("✗ Some verifications failed!")
        sys.exit(1)
