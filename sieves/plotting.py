"""
Visualization utilities.

Responsibility: plots only. No logic, no computation.
"""

import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional


def _label(algorithm: str, parallel: bool, threads) -> str:
    if not parallel:
        return f'{algorithm} (sequential)'
    return f'{algorithm} ({int(threads)} threads)'


def plot_execution_times(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot algorithm execution time against the limit.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from run_benchmark_experiment with columns:
        limit, algorithm, parallel, threads, algorithm_ms.
    output_path : Path, optional
        If provided, save figure to this path.

    Returns
    -------
    matplotlib.Figure
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    for (algorithm, parallel, threads), group in df.groupby(['algorithm', 'parallel', 'threads']):
        group = group.sort_values('limit')
        marker = 's-' if parallel else 'o--'
        ax.plot(group['limit'], group['algorithm_ms'], marker,
                label=_label(algorithm, parallel, threads))

    ax.set_xscale('log')
    ax.set_yscale('symlog')
    ax.set_xlabel('N (limit)')
    ax.set_ylabel('Algorithm time (ms)')
    ax.set_title('Sieve execution time')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig


def plot_speedup(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot parallel speedup over the sequential form, per thread count.

    Speedup is sequential algorithm_ms / parallel algorithm_ms for the same
    limit and algorithm. Zero-time rows are skipped.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from run_benchmark_experiment.
    output_path : Path, optional
        If provided, save figure.

    Returns
    -------
    matplotlib.Figure
    """
    fig, axes = plt.subplots(1, 2, figsize=(12, 5), squeeze=False)

    algorithms = sorted(df['algorithm'].unique())
    for idx, algorithm in enumerate(algorithms[:2]):
        ax = axes[0, idx]
        alg_df = df[df['algorithm'] == algorithm]
        seq = alg_df[~alg_df['parallel']].set_index('limit')['algorithm_ms']
        par = alg_df[alg_df['parallel']]

        for threads, group in par.groupby('threads'):
            group = group.sort_values('limit')
            base = seq.reindex(group['limit']).values
            times = group['algorithm_ms'].values
            valid = (times > 0) & (base > 0)
            ax.plot(group['limit'].values[valid], base[valid] / times[valid],
                    'o-', label=f'{int(threads)} threads')

        ax.axhline(1.0, color='gray', linestyle=':')
        ax.set_xscale('log')
        ax.set_xlabel('N (limit)')
        ax.set_ylabel('Speedup')
        ax.set_title(f'{algorithm}')
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig
