"""
Tests for the benchmark runner with in-process fake strategies.
"""

import pytest

from querybench.benchmark.runner import BenchmarkAbortedError, BenchmarkConfig, BenchmarkRunner
from querybench.store.counter import QueryCounter
from querybench.strategies.base import BaseStrategy, ReturnKind, StrategyResult

from conftest import make_row


class FakeStore:

    def __init__(self):
        self.counter = QueryCounter()
        self.clears = 0

    def clear(self):
        self.clears += 1


class RecordingStrategy(BaseStrategy):
    return_kind = ReturnKind.FLAT_ROWS

    def __init__(self, name, calls, fail_on_call=None, round_trips=1, warmup=True):
        self.name = name
        self.display_name = name.title()
        self.calls = calls
        self.fail_on_call = fail_on_call
        self.round_trips = round_trips
        self.warmup = warmup
        self.invocations = 0

    def fetch(self, store, limit):
        self.invocations += 1
        self.calls.append((self.name, limit))
        if self.fail_on_call == self.invocations:
            raise RuntimeError(f"{self.name} exploded")
        for _ in range(self.round_trips):
            store.counter.increment()
        rows = [make_row(pid, image_id=pid) for pid in range(1, min(limit, 3) + 1)]
        return StrategyResult(records=rows, raw_row_count=len(rows))


def test_config_clamping():
    assert BenchmarkConfig(limit=5000, warmup_rounds=-2).clamped() == BenchmarkConfig(2000, 0)
    assert BenchmarkConfig(limit=0).clamped().limit == 1
    assert BenchmarkConfig(limit=-10).clamped().limit == 1
    assert BenchmarkConfig(limit=750).clamped().limit == 750


def test_runs_in_declared_order_with_clamped_limit():
    calls = []
    strategies = [
        RecordingStrategy("first", calls, round_trips=5),
        RecordingStrategy("second", calls, round_trips=1),
        RecordingStrategy("third", calls, round_trips=2, warmup=False),
    ]

    report = BenchmarkRunner(FakeStore(), strategies=strategies).run(limit=5000, warmup_rounds=2)

    assert report.limit == 2000
    assert report.warmup_rounds == 2
    # two warmup rounds skip the cold strategy, then one measured pass each
    assert [name for name, _ in calls] == [
        "first", "second",
        "first", "second",
        "first", "second", "third",
    ]
    assert all(limit == 2000 for _, limit in calls)
    assert [m.strategy for m in report.measurements] == ["first", "second", "third"]
    assert [m.round_trip_count for m in report.measurements] == [5, 1, 2]
    assert report.baseline.strategy == "first"
    assert [c.reference.strategy for c in report.baseline_comparisons] == ["second", "third"]
    assert len(report.comparisons) == 3
    assert report.summary["fewest_round_trips"] == "second"


def test_warmup_failure_aborts_without_measuring():
    calls = []
    strategies = [
        RecordingStrategy("first", calls),
        RecordingStrategy("second", calls, fail_on_call=1),
    ]
    runner = BenchmarkRunner(FakeStore(), strategies=strategies)

    with pytest.raises(BenchmarkAbortedError) as excinfo:
        runner.run(limit=10, warmup_rounds=1)

    assert excinfo.value.stage == "warmup"
    assert excinfo.value.strategy == "second"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert calls == [("first", 10), ("second", 10)]


def test_measured_failure_aborts():
    calls = []
    strategies = [
        RecordingStrategy("first", calls),
        RecordingStrategy("second", calls, fail_on_call=1, warmup=False),
    ]

    with pytest.raises(BenchmarkAbortedError) as excinfo:
        BenchmarkRunner(FakeStore(), strategies=strategies).run(limit=10, warmup_rounds=1)

    assert excinfo.value.stage == "measured"
    assert excinfo.value.strategy == "second"


def test_zero_warmup_rounds():
    calls = []
    store = FakeStore()
    strategies = [RecordingStrategy("only", calls)]

    report = BenchmarkRunner(store, strategies=strategies).run(limit=3, warmup_rounds=0)

    assert calls == [("only", 3)]
    assert report.baseline_comparisons == []
    assert report.comparisons == []
    # executor clears before and after the measured run
    assert store.clears == 2


def test_progress_callback():
    seen = []
    calls = []
    strategies = [RecordingStrategy("a", calls), RecordingStrategy("b", calls, warmup=False)]
    runner = BenchmarkRunner(FakeStore(), strategies=strategies)
    runner.on_progress(lambda stage, strategy: seen.append((stage, strategy.name)))

    runner.run(limit=2, warmup_rounds=1)

    assert seen == [("warmup", "a"), ("measure", "a"), ("measure", "b")]


def test_report_to_dict():
    calls = []
    report = BenchmarkRunner(
        FakeStore(), strategies=[RecordingStrategy("a", calls), RecordingStrategy("b", calls)]
    ).run(limit=2, warmup_rounds=0)

    data = report.to_dict()

    assert data["baseline"] == "a"
    assert [m["strategy"] for m in data["measurements"]] == ["a", "b"]
    assert data["measurements"][0]["raw_row_count"] == 2
    assert data["metadata"] == {}
