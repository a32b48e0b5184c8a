"""
Tests for the benchmark experiment, CSV log, plots and config loading.
"""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
import pytest
import yaml

from sieves.experiments import exp_benchmark
from sieves.experiments.exp_benchmark import (
    COLUMNS, limits_range, run_benchmark_experiment, run_from_config,
)
from sieves.experiments.verify_sieves import verify_parallel, verify_sequential
from sieves.plotting import plot_execution_times, plot_speedup

CONFIG_PATH = Path(__file__).parent.parent / "config" / "default.yaml"


@pytest.fixture
def small_benchmark(tmp_path):
    return run_benchmark_experiment([100, 1000], [2, 3], tmp_path, verbose=False)


class TestLimitsRange:

    def test_powers_of_ten(self):
        assert list(limits_range(100, 100_000, 10)) == [100, 1000, 10_000, 100_000]

    def test_stop_not_on_grid(self):
        assert list(limits_range(10, 500, 3)) == [10, 30, 90, 270]

    def test_invalid(self):
        with pytest.raises(ValueError):
            list(limits_range(0, 100, 10))
        with pytest.raises(ValueError):
            list(limits_range(10, 100, 1))


class TestBenchmarkExperiment:

    def test_rows_and_columns(self, small_benchmark):
        df = small_benchmark
        assert list(df.columns) == COLUMNS
        # 2 algorithms x 2 limits x (sequential + 2 thread counts)
        assert len(df) == 12

    def test_counts_match(self, small_benchmark):
        df = small_benchmark
        assert df['match'].all()
        assert set(df[df['limit'] == 100]['found']) == {25}
        assert set(df[df['limit'] == 1000]['found']) == {168}

    def test_sequential_rows(self, small_benchmark):
        seq = small_benchmark[~small_benchmark['parallel']]
        assert len(seq) == 4
        assert (seq['threads'] == 1).all()

    def test_csv_written(self, small_benchmark, tmp_path):
        csv = pd.read_csv(tmp_path / 'benchmark.csv')
        assert list(csv.columns) == COLUMNS
        assert len(csv) == len(small_benchmark)

    def test_single_algorithm(self, tmp_path):
        df = run_benchmark_experiment([100], [2], None, algorithms=['euler'],
                                      repeats=2, verbose=False)
        assert set(df['algorithm']) == {'euler'}
        assert len(df) == 2

    def test_verbose_report(self, capsys):
        run_benchmark_experiment([100], [2], None, algorithms=['eratosthenes'])
        out = capsys.readouterr().out
        assert "====== Limit (N) = 10^2 ======" in out
        assert "Found: 25 out of: 25" in out
        assert "Threads: 2" in out

    def test_bad_repeats(self):
        with pytest.raises(ValueError):
            run_benchmark_experiment([100], [2], None, repeats=0, verbose=False)


class TestWarmUp:
    """Kernel compilation happens before the first timed run."""

    def test_warm_up_precedes_timed_runs(self, monkeypatch):
        calls = []
        real = exp_benchmark.sieve

        def recording(n, algorithm, num_threads=None, **kwargs):
            calls.append((n, algorithm, num_threads))
            return real(n, algorithm, num_threads=num_threads, **kwargs)

        monkeypatch.setattr(exp_benchmark, 'sieve', recording)
        run_benchmark_experiment([1000], [2, 3], None, verbose=False)

        assert calls[:6] == [
            (100, 'eratosthenes', None), (100, 'eratosthenes', 2),
            (100, 'eratosthenes', 3), (100, 'euler', None),
            (100, 'euler', 2), (100, 'euler', 3),
        ]
        assert all(n == 1000 for n, _, _ in calls[6:])

    def test_first_row_same_order_as_repeat(self):
        # Same configuration twice: rows 0 and 2 are sequential euler at N=100
        df = run_benchmark_experiment([100, 100], [2], None, algorithms=['euler'],
                                      verbose=False)
        first = df.iloc[0]['algorithm_ms']
        repeat = df.iloc[2]['algorithm_ms']
        assert first < 10 * repeat + 5.0, \
            f"first run {first:.3f} ms vs repeat {repeat:.3f} ms"


class TestRunFromConfig:

    def test_every_setting_forwarded(self, monkeypatch, tmp_path):
        seen = {}

        def recording(limits, threads, output_dir, **kwargs):
            seen.update(limits=limits, threads=threads, output_dir=output_dir, **kwargs)
            return pd.DataFrame(columns=COLUMNS)

        monkeypatch.setattr(exp_benchmark, 'run_benchmark_experiment', recording)
        run_from_config({
            'limits': {'start': 10, 'stop': 1000, 'factor': 10},
            'threads': [2],
            'algorithms': ['euler'],
            'backend': 'process',
            'timeout': 7,
            'repeats': 4,
            'output_dir': str(tmp_path),
        })

        assert seen['limits'] == [10, 100, 1000]
        assert seen['output_dir'] == tmp_path
        assert seen['backend'] == 'process'
        assert seen['timeout'] == 7
        assert seen['repeats'] == 4

    def test_defaults_when_absent(self, monkeypatch, tmp_path):
        seen = {}

        def recording(limits, threads, output_dir, **kwargs):
            seen.update(kwargs)
            return pd.DataFrame(columns=COLUMNS)

        monkeypatch.setattr(exp_benchmark, 'run_benchmark_experiment', recording)
        run_from_config({
            'limits': {'start': 100, 'stop': 100, 'factor': 10},
            'threads': [2],
            'algorithms': ['eratosthenes'],
            'output_dir': str(tmp_path),
        })

        assert seen['repeats'] == 1
        assert seen['timeout'] == exp_benchmark.JOIN_TIMEOUT
        assert seen['backend'] == exp_benchmark.DEFAULT_BACKEND


class TestPlotting:

    def test_execution_times_saved(self, small_benchmark, tmp_path):
        path = tmp_path / 'times.png'
        fig = plot_execution_times(small_benchmark, path)
        assert path.exists()
        plt.close(fig)

    def test_speedup_saved(self, small_benchmark, tmp_path):
        path = tmp_path / 'speedup.png'
        fig = plot_speedup(small_benchmark, path)
        assert path.exists()
        plt.close(fig)


class TestVerifyScript:

    def test_sequential(self):
        assert verify_sequential(5000, verbose=False)

    def test_parallel(self):
        assert verify_parallel(5000, [1, 2, 3], verbose=False)


class TestConfig:

    def test_default_config_loads(self):
        with open(CONFIG_PATH) as f:
            config = yaml.safe_load(f)

        limits = list(limits_range(**config['limits']))
        assert limits[0] == 100
        assert all(t >= 1 for t in config['threads'])
        assert set(config['algorithms']) <= {'eratosthenes', 'euler'}
        assert config['backend'] in ('thread', 'process')
        assert config['timeout'] > 0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
