"""
Tests for report generation.
"""

import json

import pytest
from rich.console import Console

from querybench.benchmark.comparison import ComparisonReporter
from querybench.benchmark.metrics import Measurement
from querybench.benchmark.reporter import Reporter, verdict
from querybench.benchmark.runner import ComparisonReport


def make_report():
    measurements = [
        Measurement("traditional", 120.0, 40960, 81920, 5, 10, None, "Traditional ORM"),
        Measurement("simple_join", 30.0, 20480, 30720, 1, 150, 150, "Simple JOIN (raw rows)"),
        Measurement("aggregated", 20.0, 10240, 20480, 1, 10, 10, "Aggregated Query"),
    ]
    reporter = ComparisonReporter()
    return ComparisonReport(
        limit=10,
        warmup_rounds=1,
        measurements=measurements,
        baseline_comparisons=reporter.compare_to_baseline(measurements),
        comparisons=reporter.compare_all(measurements),
        summary=reporter.summarize(measurements),
    )


@pytest.mark.parametrize("elapsed, expected", [
    (20.0, "EXCELLENT"),
    (40.0, "GREAT"),
    (90.0, "Good improvement"),
    (100.0, "No measurable difference"),
    (150.0, "Regression: 50.0% slower"),
])
def test_verdict(elapsed, expected):
    comparison = ComparisonReporter().compare(
        Measurement("a", elapsed_ms=100.0), Measurement("b", elapsed_ms=elapsed)
    )
    assert verdict(comparison).startswith(expected)


def test_markdown_report(tmp_path):
    path = Reporter(output_dir=tmp_path).generate_markdown(make_report(), "out.md")

    content = open(path, encoding="utf-8").read()
    assert "## Improvement vs Traditional ORM" in content
    assert "### Aggregated Query" in content
    assert "| Simple JOIN (raw rows) | Aggregated Query |" in content
    assert "x15" in content
    assert "- **Fastest:** Aggregated Query (20.00ms)" in content


def test_json_report(tmp_path):
    path = Reporter(output_dir=tmp_path).generate_json(make_report())

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    assert data["baseline"] == "traditional"
    assert data["summary"]["fewest_round_trips"] == "simple_join"
    assert len(data["comparisons"]) == 3
    assert "sqlalchemy" in data["test_environment"]


def test_print_summary():
    console = Console(record=True, width=140)

    Reporter(console=console).print_summary(make_report())

    text = console.export_text()
    assert "PRODUCTS PERFORMANCE TEST" in text
    assert "83.3% faster" in text
    assert "Fewest queries: Simple JOIN (raw rows) (1)" in text
