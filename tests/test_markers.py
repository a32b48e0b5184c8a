"""
Tests for the sequential marker phase.
"""

import numpy as np
import pytest
from sympy import primerange

from sieves.errors import InvalidBound
from sieves.markers import (
    ERATOSTHENES, EULER,
    marker_limit, prime_capacity,
    eratosthenes_markers, euler_markers, generate_markers,
)
from sieves.table import new_table


class TestMarkerLimit:
    """marker_limit is ceil(sqrt(n)), computed exactly."""

    @pytest.mark.parametrize("n, expected", [
        (0, 0), (1, 1), (2, 2), (3, 2), (4, 2), (5, 3), (9, 3), (10, 4),
        (30, 6), (100, 10), (101, 11), (10_000, 100), (10**12, 10**6),
        (10**12 + 1, 10**6 + 1),
    ])
    def test_values(self, n, expected):
        assert marker_limit(n) == expected

    def test_never_exceeds_n(self):
        for n in range(0, 100):
            assert marker_limit(n) <= n


class TestEratosthenesMarkers:

    @pytest.mark.parametrize("limit", [0, 1, 2, 3, 10, 31, 100, 1000])
    def test_matches_oracle(self, limit):
        table = new_table(limit)
        markers = eratosthenes_markers(table, limit)
        assert markers.tolist() == list(primerange(0, limit + 1))

    def test_limit_inclusive(self):
        """A prime equal to the limit is a marker."""
        table = new_table(50)
        assert eratosthenes_markers(table, 7).tolist() == [2, 3, 5, 7]

    def test_leaves_beyond_limit_untouched(self):
        table = new_table(100)
        eratosthenes_markers(table, 10)
        assert table[11:].all()

    def test_dtype(self):
        markers = eratosthenes_markers(new_table(20), 20)
        assert markers.dtype == np.int64


class TestEulerMarkers:
    """Linear sieve: every composite marked once, by its smallest prime factor."""

    @pytest.mark.parametrize("limit", [0, 1, 2, 3, 10, 31, 100, 1000, 10_000])
    def test_matches_oracle(self, limit):
        table = new_table(limit)
        markers, _ = euler_markers(table, limit)
        assert markers.tolist() == list(primerange(0, limit + 1))

    @pytest.mark.parametrize("limit", [2, 3, 4, 10, 97, 100, 1000, 65_536])
    def test_marks_equal_composite_count(self, limit):
        """
        Marks == number of composites in [2, limit].

        Together with the table being correct (every composite marked at
        least once), this means no composite is marked twice.
        """
        table = new_table(limit)
        markers, marks = euler_markers(table, limit)
        composites = (limit - 1) - len(markers)

        assert marks == composites
        assert np.count_nonzero(~table[2:limit + 1]) == composites

    def test_table_matches_eratosthenes(self):
        limit = 5000
        erat = new_table(limit)
        euler = new_table(limit)
        eratosthenes_markers(erat, limit)
        euler_markers(euler, limit)
        assert np.array_equal(erat, euler)

    def test_leaves_beyond_limit_untouched(self):
        table = new_table(100)
        euler_markers(table, 10)
        assert table[11:].all()

    def test_no_marks_below_two(self):
        for limit in [0, 1]:
            markers, marks = euler_markers(new_table(limit), limit)
            assert len(markers) == 0
            assert marks == 0


class TestPrimeCapacity:

    def test_bounds_prime_count(self):
        for limit in [2, 3, 10, 100, 1000, 10**5]:
            assert prime_capacity(limit) >= len(list(primerange(0, limit + 1)))


class TestGenerateMarkers:

    @pytest.mark.parametrize("algorithm", [ERATOSTHENES, EULER])
    def test_dispatch(self, algorithm):
        table = new_table(100)
        assert generate_markers(table, 10, algorithm).tolist() == [2, 3, 5, 7]

    def test_unknown_algorithm(self):
        with pytest.raises(InvalidBound):
            generate_markers(new_table(10), 3, 'sundaram')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
