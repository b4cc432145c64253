"""
Tests for relative comparison of measurements.
"""

from querybench.benchmark.comparison import ComparisonReporter, percent_change, row_multiplier
from querybench.benchmark.metrics import Measurement


def m(strategy, elapsed_ms=10.0, memory=1024, round_trips=1, raw_rows=None):
    return Measurement(
        strategy=strategy,
        elapsed_ms=elapsed_ms,
        memory_delta_bytes=memory,
        round_trip_count=round_trips,
        raw_row_count=raw_rows,
    )


class TestComparison:

    def test_slower_reference_is_negative(self):
        c = ComparisonReporter().compare(m("a", elapsed_ms=100), m("b", elapsed_ms=150))

        assert c.time_pct == -50.0
        assert c.time_label == "slower"
        assert "50.0% slower" in c.describe()[0]

    def test_faster_reference_is_positive(self):
        c = ComparisonReporter().compare(m("a", elapsed_ms=200), m("b", elapsed_ms=50))

        assert c.time_pct == 75.0
        assert c.time_label == "faster"

    def test_zero_baseline(self):
        c = ComparisonReporter().compare(
            m("a", elapsed_ms=0, memory=0), m("b", elapsed_ms=42, memory=100)
        )

        assert c.time_pct == 0.0
        assert c.memory_pct == 0.0
        assert c.time_label == "same"

    def test_memory_and_round_trips(self):
        c = ComparisonReporter().compare(
            m("a", memory=4000, round_trips=5), m("b", memory=5000, round_trips=1)
        )

        assert c.memory_pct == -25.0
        assert c.memory_label == "more"
        assert c.round_trips_saved == 4
        assert c.round_trips_label == "fewer"

    def test_row_multiplier(self):
        c = ComparisonReporter().compare(m("a", raw_rows=150), m("b", raw_rows=10))

        assert c.row_multiplier == 15
        assert c.describe()[-1].startswith("Rows:    x15")

    def test_to_dict(self):
        data = ComparisonReporter().compare(m("a"), m("b", elapsed_ms=5)).to_dict()

        assert data["baseline"] == "a"
        assert data["reference"] == "b"
        assert data["time_pct"] == 50.0
        assert data["row_multiplier"] is None


def test_percent_change_rounding():
    assert percent_change(3, 1) == 66.7
    assert percent_change(-1, 5) == 0.0


def test_row_multiplier_unknown_and_empty():
    assert row_multiplier(None, 10) is None
    assert row_multiplier(10, None) is None
    assert row_multiplier(0, 10) == 1
    assert row_multiplier(10, 10) == 1


def test_compare_to_baseline_and_all_pairs():
    reporter = ComparisonReporter()
    ms = [m("a"), m("b"), m("c")]

    baseline = reporter.compare_to_baseline(ms)
    pairs = reporter.compare_all(ms)

    assert [(c.baseline.strategy, c.reference.strategy) for c in baseline] == [("a", "b"), ("a", "c")]
    assert [(c.baseline.strategy, c.reference.strategy) for c in pairs] == [
        ("a", "b"), ("a", "c"), ("b", "c"),
    ]
    assert reporter.compare_to_baseline([]) == []


def test_summarize_prefers_first_on_ties():
    ms = [
        m("a", elapsed_ms=5, memory=300, round_trips=1),
        m("b", elapsed_ms=5, memory=100, round_trips=1),
        m("c", elapsed_ms=9, memory=100, round_trips=4),
    ]

    summary = ComparisonReporter().summarize(ms)

    assert summary == {"fastest": "a", "leanest": "b", "fewest_round_trips": "a"}


def test_summarize_empty():
    assert ComparisonReporter().summarize([])["fastest"] is None
