"""
Benchmark runner for executing the strategy comparison.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import Config
from ..data.aggregator import Aggregator
from ..data.records import ParentAggregate
from ..store.database import Store
from ..strategies import default_strategies
from ..strategies.base import BaseStrategy, ReturnKind, StrategyResult
from .comparison import Comparison, ComparisonReporter
from .executor import InstrumentedExecutor
from .metrics import Measurement

logger = logging.getLogger(__name__)


class BenchmarkAbortedError(RuntimeError):
    """Raised when a warmup or measured run fails; no report is produced."""

    def __init__(self, stage: str, strategy: str, cause: BaseException):
        self.stage = stage
        self.strategy = strategy
        super().__init__(f"{stage} run of '{strategy}' failed: {cause}")


@dataclass
class BenchmarkConfig:
    """Configuration for a benchmark run."""
    limit: int = 500
    warmup_rounds: int = 1

    def clamped(self) -> "BenchmarkConfig":
        """Copy with limit in [1, MAX_LIMIT] and warmup_rounds >= 0."""
        return BenchmarkConfig(
            limit=Config.clamp_limit(self.limit),
            warmup_rounds=max(0, int(self.warmup_rounds)),
        )


@dataclass
class ComparisonReport:
    """Result of a complete benchmark run."""
    limit: int
    warmup_rounds: int
    measurements: List[Measurement] = field(default_factory=list)
    baseline_comparisons: List[Comparison] = field(default_factory=list)
    comparisons: List[Comparison] = field(default_factory=list)
    summary: Dict[str, Optional[str]] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=datetime.now)
    metadata: Optional[Dict[str, Any]] = None

    @property
    def baseline(self) -> Optional[Measurement]:
        return self.measurements[0] if self.measurements else None

    def get(self, strategy: str) -> Optional[Measurement]:
        """Measurement for a strategy name, if it ran."""
        for measurement in self.measurements:
            if measurement.strategy == strategy:
                return measurement
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "limit": self.limit,
            "warmup_rounds": self.warmup_rounds,
            "generated_at": self.generated_at.isoformat(),
            "baseline": self.baseline.strategy if self.baseline else None,
            "measurements": [m.to_dict() for m in self.measurements],
            "baseline_comparisons": [c.to_dict() for c in self.baseline_comparisons],
            "comparisons": [c.to_dict() for c in self.comparisons],
            "summary": self.summary,
            "metadata": self.metadata or {},
        }


class BenchmarkRunner:
    """
    Executes the strategy comparison against one store.

    Features:
        - Unmeasured warmup passes
        - Strategies measured one at a time, in declared order
        - Store state and round-trip counter reset around every run
        - Deltas against the baseline (first strategy) and across all pairs

    Example:
        runner = BenchmarkRunner(Store())
        report = runner.run(limit=500, warmup_rounds=1)
    """

    def __init__(
        self,
        store: Store,
        strategies: Optional[Sequence[BaseStrategy]] = None,
        executor: Optional[InstrumentedExecutor] = None,
        comparison_reporter: Optional[ComparisonReporter] = None,
    ):
        """
        Initialize benchmark runner.

        Args:
            store: Store every strategy queries
            strategies: Strategies in execution order (default: the registry)
            executor: Instrumented executor (default: bound to the store)
            comparison_reporter: Delta calculator
        """
        self.store = store
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.executor = executor or InstrumentedExecutor(
            store.counter,
            clear_state=store.clear,
        )
        self.comparison_reporter = comparison_reporter or ComparisonReporter()

        # Callbacks
        self._on_progress: Optional[Callable[[str, BaseStrategy], None]] = None

    def on_progress(self, callback: Callable[[str, BaseStrategy], None]) -> "BenchmarkRunner":
        """
        Set progress callback.

        Args:
            callback: Function(stage, strategy) called before each run
        """
        self._on_progress = callback
        return self

    def run(
        self,
        limit: int = Config.DEFAULT_LIMIT,
        warmup_rounds: int = Config.DEFAULT_WARMUP,
    ) -> ComparisonReport:
        """
        Run the benchmark.

        Args:
            limit: Number of products per strategy, clamped to [1, MAX_LIMIT]
            warmup_rounds: Unmeasured passes before measuring, at least 0

        Returns:
            ComparisonReport with one measurement per strategy

        Raises:
            BenchmarkAbortedError: If any warmup or measured run fails
        """
        config = BenchmarkConfig(limit=limit, warmup_rounds=warmup_rounds).clamped()
        if config.limit != limit:
            logger.debug(f"Limit {limit} clamped to {config.limit}")

        self._warmup(config)

        measurements: List[Measurement] = []
        for strategy in self.strategies:
            self._notify("measure", strategy)
            logger.info(f"Measuring {strategy.display_name} ({config.limit} records)")
            try:
                measurement = self.executor.measure(
                    strategy.name,
                    self._bind(strategy, config.limit),
                    display_name=strategy.display_name,
                )
            except Exception as e:
                logger.error(f"Measured run of {strategy.name} failed: {e}")
                raise BenchmarkAbortedError("measured", strategy.name, e) from e
            measurements.append(measurement)

        return ComparisonReport(
            limit=config.limit,
            warmup_rounds=config.warmup_rounds,
            measurements=measurements,
            baseline_comparisons=self.comparison_reporter.compare_to_baseline(measurements),
            comparisons=self.comparison_reporter.compare_all(measurements),
            summary=self.comparison_reporter.summarize(measurements),
        )

    def _warmup(self, config: BenchmarkConfig) -> None:
        warm = [s for s in self.strategies if s.warmup]
        for round_no in range(1, config.warmup_rounds + 1):
            logger.info(f"Warmup {round_no}/{config.warmup_rounds}: {len(warm)} strategies")
            for strategy in warm:
                self._notify("warmup", strategy)
                try:
                    self._bind(strategy, config.limit)()
                except Exception as e:
                    logger.error(f"Warmup of {strategy.name} failed: {e}")
                    raise BenchmarkAbortedError("warmup", strategy.name, e) from e
                finally:
                    self.store.clear()

    def verify(self, limit: int = Config.DEFAULT_LIMIT) -> List[str]:
        """
        Check that every strategy loads the same products.

        Each strategy runs once, unmeasured. Entities are converted to
        aggregates and raw flat rows are aggregated, then everything is
        compared with the first strategy's output.

        Args:
            limit: Number of products, clamped to [1, MAX_LIMIT]

        Returns:
            Names of strategies whose output differs (empty when all agree)
        """
        limit = Config.clamp_limit(limit)
        expected: Optional[List[ParentAggregate]] = None
        mismatched: List[str] = []

        for strategy in self.strategies:
            self._notify("verify", strategy)
            try:
                aggregates = to_aggregates(strategy, strategy.fetch(self.store, limit))
            finally:
                self.store.clear()

            if expected is None:
                expected = aggregates
                continue
            if aggregates != expected:
                logger.warning(f"{strategy.name} differs from {self.strategies[0].name}")
                mismatched.append(strategy.name)

        return mismatched

    def _bind(self, strategy: BaseStrategy, limit: int) -> Callable[[], StrategyResult]:
        return lambda: strategy.fetch(self.store, limit)

    def _notify(self, stage: str, strategy: BaseStrategy) -> None:
        if self._on_progress:
            self._on_progress(stage, strategy)


def to_aggregates(strategy: BaseStrategy, result: StrategyResult) -> List[ParentAggregate]:
    """Normalize any strategy's records to ParentAggregate."""
    if strategy.return_kind == ReturnKind.ENTITIES:
        return [ParentAggregate.from_entity(p) for p in result.records]
    if strategy.return_kind == ReturnKind.FLAT_ROWS:
        return Aggregator().aggregate(result.records)
    return list(result.records)
