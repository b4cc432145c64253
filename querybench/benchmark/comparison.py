"""
Relative comparison of strategy measurements.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence

from .metrics import Measurement


def percent_change(baseline: float, reference: float) -> float:
    """
    Percentage by which ``reference`` improves on ``baseline``.

    Positive means the reference is smaller (faster / leaner), negative means
    it is larger. A non-positive baseline yields 0.0.
    """
    if baseline <= 0:
        return 0.0
    return round((baseline - reference) / baseline * 100, 1)


def row_multiplier(baseline_rows: Optional[int], reference_rows: Optional[int]) -> Optional[int]:
    """
    Duplication factor between two raw row counts.

    Returns the larger count divided by the smaller, rounded, never below 1;
    None unless both counts are known.
    """
    if baseline_rows is None or reference_rows is None:
        return None
    smaller = min(baseline_rows, reference_rows)
    larger = max(baseline_rows, reference_rows)
    if smaller <= 0:
        return 1
    return max(1, round(larger / smaller))


def direction(value: float, positive: str, negative: str, neutral: str = "same") -> str:
    """Word for the sign of a delta."""
    if value > 0:
        return positive
    if value < 0:
        return negative
    return neutral


@dataclass
class Comparison:
    """
    Deltas of a reference strategy against a baseline strategy.

    Attributes:
        baseline: Baseline measurement
        reference: Measurement compared with the baseline
        time_pct: Percent faster (positive) or slower (negative)
        memory_pct: Percent less (positive) or more (negative) memory
        round_trips_saved: Baseline round-trips minus reference round-trips
        row_multiplier: Raw row duplication factor, when both sides know it
    """
    baseline: Measurement
    reference: Measurement
    time_pct: float
    memory_pct: float
    round_trips_saved: int
    row_multiplier: Optional[int] = None

    @property
    def time_label(self) -> str:
        return direction(self.time_pct, "faster", "slower")

    @property
    def memory_label(self) -> str:
        return direction(self.memory_pct, "less", "more")

    @property
    def round_trips_label(self) -> str:
        return direction(self.round_trips_saved, "fewer", "more")

    def describe(self) -> List[str]:
        """Human-readable lines, wording derived from the sign of each delta."""
        b, r = self.baseline, self.reference
        lines = [
            f"Speed:   {abs(self.time_pct):.1f}% {self.time_label} "
            f"({b.elapsed_ms:.2f}ms → {r.elapsed_ms:.2f}ms)",
            f"Memory:  {abs(self.memory_pct):.1f}% {self.memory_label} "
            f"({b.memory_kb:.1f} KB → {r.memory_kb:.1f} KB)",
            f"Queries: {abs(self.round_trips_saved)} {self.round_trips_label} "
            f"({b.round_trip_count} → {r.round_trip_count})",
        ]
        if self.row_multiplier is not None:
            lines.append(
                f"Rows:    x{self.row_multiplier} "
                f"({b.raw_row_count} → {r.raw_row_count})"
            )
        return lines

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "baseline": self.baseline.strategy,
            "reference": self.reference.strategy,
            "time_pct": self.time_pct,
            "time_label": self.time_label,
            "memory_pct": self.memory_pct,
            "memory_label": self.memory_label,
            "round_trips_saved": self.round_trips_saved,
            "round_trips_label": self.round_trips_label,
            "row_multiplier": self.row_multiplier,
        }


class ComparisonReporter:
    """
    Compute relative deltas between strategy measurements.

    Example:
        reporter = ComparisonReporter()
        comparison = reporter.compare(traditional, aggregated)
        print(comparison.time_pct, comparison.time_label)
    """

    def compare(self, baseline: Measurement, reference: Measurement) -> Comparison:
        """
        Compare ``reference`` against ``baseline``.

        Args:
            baseline: Measurement to compare against
            reference: Measurement being judged

        Returns:
            Comparison with signed deltas
        """
        return Comparison(
            baseline=baseline,
            reference=reference,
            time_pct=percent_change(baseline.elapsed_ms, reference.elapsed_ms),
            memory_pct=percent_change(baseline.memory_delta_bytes, reference.memory_delta_bytes),
            round_trips_saved=baseline.round_trip_count - reference.round_trip_count,
            row_multiplier=row_multiplier(baseline.raw_row_count, reference.raw_row_count),
        )

    def compare_to_baseline(self, measurements: Sequence[Measurement]) -> List[Comparison]:
        """Compare the first measurement with each of the others."""
        if not measurements:
            return []
        baseline = measurements[0]
        return [self.compare(baseline, m) for m in measurements[1:]]

    def compare_all(self, measurements: Sequence[Measurement]) -> List[Comparison]:
        """Compare every pair, the earlier-declared strategy as baseline."""
        return [self.compare(a, b) for a, b in combinations(measurements, 2)]

    def summarize(self, measurements: Sequence[Measurement]) -> Dict[str, Optional[str]]:
        """
        Pick the best strategy per dimension.

        Ties go to the strategy declared first.

        Returns:
            Dictionary with 'fastest', 'leanest' and 'fewest_round_trips'
            strategy names (None when there are no measurements)
        """
        if not measurements:
            return {"fastest": None, "leanest": None, "fewest_round_trips": None}
        return {
            "fastest": min(measurements, key=lambda m: m.elapsed_ms).strategy,
            "leanest": min(measurements, key=lambda m: m.memory_delta_bytes).strategy,
            "fewest_round_trips": min(measurements, key=lambda m: m.round_trip_count).strategy,
        }
