"""Tests for distribution metrics module."""

import random

import pytest

from holder_metrics.calculator.metrics import (
    DISTRIBUTION_BRACKETS,
    MetricsCalculator,
    calc_distribution,
    calc_gini,
    calc_std_dev,
    calc_top_n,
    format_percentage,
)

FRACTIONAL_EQUAL = [
    [0.1] * 3,
    [1234.56] * 10,
    [3.3] * 11,
    [1000.01] * 250,
]


class TestGini:
    """Tests for the Gini coefficient formula."""

    def test_empty_list(self):
        """Test empty input gives zero."""
        assert calc_gini([]) == 0

    def test_zero_total(self):
        """Test all-zero balances give zero."""
        assert calc_gini([0, 0, 0]) == 0

    def test_equal_balances(self):
        """Test equal integer balances give exactly zero."""
        assert calc_gini([5, 5, 5, 5]) == 0
        assert calc_gini([1_000_000.0] * 7) == 0

    @pytest.mark.parametrize("values", FRACTIONAL_EQUAL)
    def test_equal_fractional_balances(self, values):
        """Test equal fractional balances give exactly zero, not rounding noise."""
        assert calc_gini(values) == 0.0

    def test_known_values(self):
        """Test Gini against hand-computed values."""
        # v = [1, 2, 3, 4]: Σ(n-i+1)v_i = 4+6+6+4 = 20, G = (5 - 2*20/10) / 4
        assert calc_gini([1, 2, 3, 4]) == pytest.approx(0.25)
        # One holder owns everything among four
        assert calc_gini([0, 0, 0, 100]) == pytest.approx(0.75)

    def test_order_independent(self):
        """Test input order does not change the result."""
        assert calc_gini([4, 1, 3, 2]) == calc_gini([1, 2, 3, 4])

    def test_bounded(self):
        """Test Gini stays in [0, 1) for a skewed list."""
        values = [float(v * v) for v in range(1, 200)]
        gini = calc_gini(values)
        assert 0 <= gini < 1

    def test_bounded_random_fractional(self):
        """Test Gini stays in [0, 1) for random fractional balances."""
        rng = random.Random(20260115)
        for _ in range(50):
            values = [round(rng.uniform(1_000, 5_000_000), 6) for _ in range(rng.randint(1, 40))]
            gini = calc_gini(values)
            assert 0 <= gini < 1

    def test_single_holder(self):
        """Test a single holder gives zero."""
        assert calc_gini([42]) == 0


class TestStdDev:
    """Tests for population standard deviation."""

    def test_empty_list(self):
        """Test empty input gives zero."""
        assert calc_std_dev([]) == 0

    def test_single_value(self):
        """Test a single value gives zero."""
        assert calc_std_dev([123.0]) == 0

    def test_equal_values(self):
        """Test equal integer values give zero."""
        assert calc_std_dev([7, 7, 7]) == 0

    @pytest.mark.parametrize("values", FRACTIONAL_EQUAL)
    def test_equal_fractional_values(self, values):
        """Test equal fractional values give exactly zero."""
        assert calc_std_dev(values) == 0.0

    def test_population_formula(self):
        """Test the divisor is n, not n - 1."""
        # mean 5, Σ(v-mean)² = 32, n = 8 -> sqrt(4)
        assert calc_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_unequal_values_nonzero(self):
        """Test unequal values give a positive deviation."""
        assert calc_std_dev([1, 2]) == pytest.approx(0.5)
        assert calc_std_dev([0.1, 0.1, 0.2]) > 0

    def test_returns_float(self):
        """Test integer input still yields a float."""
        assert isinstance(calc_std_dev([1, 3]), float)


class TestTopN:
    """Tests for top-N share calculation."""

    def test_fewer_holders_than_n(self):
        """Test count is capped at the number of holders."""
        share = calc_top_n([100, 50, 0], 10, 150)
        assert share.count == 3
        assert share.balance == 150
        assert share.percentage == "100.00"

    def test_takes_first_n_without_resorting(self):
        """Test the input order is trusted as-is."""
        share = calc_top_n([10, 90, 50], 1, 150)
        assert share.balance == 10
        assert share.percentage == "6.67"

    def test_zero_supply(self):
        """Test zero supply gives a zero percentage."""
        share = calc_top_n([10, 5], 10, 0)
        assert share.percentage == "0.00"

    def test_negative_supply(self):
        """Test negative supply gives a zero percentage."""
        assert calc_top_n([10], 10, -5).percentage == "0.00"

    def test_empty(self):
        """Test an empty list gives an empty share."""
        share = calc_top_n([], 25, 0)
        assert share.count == 0
        assert share.balance == 0
        assert share.percentage == "0.00"

    def test_format_percentage(self):
        """Test two-decimal rounding."""
        assert format_percentage(1, 3) == "33.33"
        assert format_percentage(2, 3) == "66.67"
        assert format_percentage(5, 0) == "0.00"


class TestDistribution:
    """Tests for the fixed bracket histogram."""

    def test_bracket_labels(self):
        """Test every bracket is present and empty for no input."""
        buckets = calc_distribution([])
        assert [b.label for b in buckets] == [
            "1K-10K",
            "10K-100K",
            "100K-1M",
            "1M-10M",
            "10M-100M",
            "100M+",
        ]
        assert all(b.count == 0 and b.total_balance == 0 for b in buckets)

    def test_half_open_boundaries(self):
        """Test lower bounds are inclusive and upper bounds exclusive."""
        buckets = {b.label: b for b in calc_distribution([1_000, 9_999.99, 10_000, 100_000_000])}
        assert buckets["1K-10K"].count == 2
        assert buckets["10K-100K"].count == 1
        assert buckets["10K-100K"].total_balance == 10_000
        assert buckets["100M+"].count == 1

    def test_below_floor_excluded(self):
        """Test balances under 1,000 land in no bracket."""
        buckets = calc_distribution([0, 50, 999.99])
        assert sum(b.count for b in buckets) == 0

    def test_last_bracket_unbounded(self):
        """Test the top bracket has no upper limit."""
        buckets = calc_distribution([5_000_000_000])
        assert buckets[-1].count == 1
        assert buckets[-1].total_balance == 5_000_000_000

    def test_bucket_sum_bounded_by_total(self):
        """Test bucket totals never exceed the input total."""
        values = [10, 500, 2_000, 75_000, 3_000_000, 250_000_000]
        buckets = calc_distribution(values)
        assert sum(b.total_balance for b in buckets) <= sum(values)
        assert sum(b.total_balance for b in buckets) == sum(values) - 510

    def test_brackets_are_contiguous(self):
        """Test each bracket starts where the previous one ends."""
        for (_, high, _), (low, _, _) in zip(DISTRIBUTION_BRACKETS, DISTRIBUTION_BRACKETS[1:]):
            assert high == low


class TestMetricsCalculator:
    """Tests for MetricsCalculator class."""

    def test_scenario_small_balances(self, make_holders):
        """Test a three-holder list below the histogram floor."""
        holders = make_holders([100, 50, 0])
        report = MetricsCalculator().compute(holders, 150)

        assert sorted(report.top_n) == [10, 25, 50, 100]
        assert report.top_n[10].balance == 150
        assert report.top_n[10].percentage == "100.00"
        assert all(b.count == 0 for b in report.distribution)

    def test_top_n_counts_and_monotonic(self, make_holders):
        """Test top-N balances grow with N."""
        holders = make_holders(range(1, 121))
        total = sum(h.balance for h in holders)
        report = MetricsCalculator().compute(holders, total)

        assert [report.top_n[n].count for n in (10, 25, 50, 100)] == [10, 25, 50, 100]
        balances = [report.top_n[n].balance for n in (10, 25, 50, 100)]
        assert balances == sorted(balances)
        # Largest ten of 1..120
        assert report.top_n[10].balance == sum(range(111, 121))

    def test_empty_holders(self):
        """Test an empty holder list gives an all-zero report."""
        report = MetricsCalculator().compute([], 0)

        assert report.gini == 0
        assert report.std_dev == 0
        assert all(share.count == 0 for share in report.top_n.values())
        assert all(share.percentage == "0.00" for share in report.top_n.values())
        assert len(report.distribution) == len(DISTRIBUTION_BRACKETS)

    def test_equal_fractional_holders(self, make_holders):
        """Test a report over equal fractional balances is perfectly even."""
        holders = make_holders([1234.56] * 10)
        report = MetricsCalculator().compute(holders, sum(h.balance for h in holders))

        assert report.gini == 0.0
        assert report.std_dev == 0.0

    def test_custom_sizes(self, make_holders):
        """Test custom top-N sizes."""
        report = MetricsCalculator(top_n_sizes=(1, 3)).compute(make_holders([3, 2, 1]), 6)
        assert report.top_n[1].percentage == "50.00"
        assert report.top_n[3].count == 3
