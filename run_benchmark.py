#!/usr/bin/env python3
"""
Benchmark script.

Runs sequential and parallel sieves over the configured limits, writes the
CSV benchmark log and the timing figures.

Usage:
    python run_benchmark.py
    python run_benchmark.py --config config/custom.yaml
"""

import argparse
import yaml
from pathlib import Path
import time

from sieves.experiments.exp_benchmark import run_benchmark_experiment, limits_range
from sieves.parallel_sieve import JOIN_TIMEOUT, DEFAULT_BACKEND, default_workers
from sieves.plotting import plot_execution_times, plot_speedup


def main():
    parser = argparse.ArgumentParser(description='Benchmark prime sieves')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    args = parser.parse_args()

    # Load config
    with open(args.config) as f:
        config = yaml.safe_load(f)

    limits = list(limits_range(**config['limits']))
    threads = config.get('threads') or [default_workers()]
    backend = config.get('backend', DEFAULT_BACKEND)

    print("=" * 60)
    print("Prime Sieves - Benchmark")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  limits = {limits[0]:,} .. {limits[-1]:,}" if limits else "  limits = (none)")
    print(f"  threads = {threads}")
    print(f"  algorithms = {config['algorithms']}")
    print(f"  backend = {backend}")
    print(f"  repeats = {config.get('repeats', 1)}")
    print()

    output_dir = Path(config.get('output_dir', 'data/results'))
    output_dir.mkdir(parents=True, exist_ok=True)

    total_start = time.time()

    print("-" * 60)
    print("1. Timing runs")
    print("-" * 60)
    df = run_benchmark_experiment(
        limits,
        threads,
        output_dir,
        algorithms=config['algorithms'],
        repeats=config.get('repeats', 1),
        timeout=config.get('timeout', JOIN_TIMEOUT),
        backend=backend,
    )
    print()

    print("-" * 60)
    print("2. Generating Figures")
    print("-" * 60)

    figures_dir = output_dir / 'figures'
    figures_dir.mkdir(exist_ok=True)

    print("  - Execution times...")
    plot_execution_times(df, figures_dir / 'execution_times.png')

    print("  - Speedup...")
    plot_speedup(df, figures_dir / 'speedup.png')

    print()

    total_time = time.time() - total_start
    print("=" * 60)
    print("COMPLETE")
    print("=" * 60)
    print(f"\nTotal runtime: {total_time:.1f}s")
    print(f"\nOutputs saved to: {output_dir.absolute()}")

    mismatches = df[~df['match']]
    if len(mismatches):
        print("\nMISMATCHED RUNS:")
        print(mismatches.to_string(index=False))

    print("\n" + "=" * 60)
    print("KEY RESULTS")
    print("=" * 60)
    print(df[['limit', 'algorithm', 'parallel', 'threads', 'found', 'algorithm_ms']]
          .to_string(index=False))


if __name__ == '__main__':
    main()
