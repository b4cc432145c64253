"""
Instrumented execution of a single strategy run.
"""

import gc
import logging
import time
import tracemalloc
from typing import Callable, Optional

from ..store.counter import QueryCounter
from ..strategies.base import StrategyResult
from .metrics import Measurement

logger = logging.getLogger(__name__)


class InstrumentedExecutor:
    """
    Measure time, memory and round-trips of one strategy invocation.

    Around every measured region the executor clears store-side state (the
    ORM identity map), resets the round-trip counter and collects garbage,
    both before and after the run, so no measurement carries residue from
    the one before it. Memory is tracked with tracemalloc.

    Example:
        executor = InstrumentedExecutor(store.counter, clear_state=store.clear)
        measurement = executor.measure("aggregated", lambda: strategy.fetch(store, 500))
    """

    def __init__(
        self,
        counter: QueryCounter,
        clear_state: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Initialize executor.

        Args:
            counter: Round-trip counter owned by the store layer
            clear_state: Callable dropping store caches / identity map
            clock: Monotonic clock returning seconds
        """
        self.counter = counter
        self.clear_state = clear_state
        self.clock = clock

    def measure(
        self,
        strategy_name: str,
        run_fn: Callable[[], StrategyResult],
        display_name: str = "",
    ) -> Measurement:
        """
        Run ``run_fn`` once inside the measured region.

        Args:
            strategy_name: Name recorded on the measurement
            run_fn: Zero-argument callable performing the strategy
            display_name: Human-readable label (optional)

        Returns:
            Measurement of the run

        Raises:
            Exception: Whatever ``run_fn`` raises; state is still reset
        """
        self._reset()

        started_tracing = not tracemalloc.is_tracing()
        if started_tracing:
            tracemalloc.start()
        tracemalloc.reset_peak()

        try:
            memory_before, _ = tracemalloc.get_traced_memory()
            start = self.clock()

            result = run_fn()

            elapsed = self.clock() - start
            memory_after, memory_peak = tracemalloc.get_traced_memory()
            round_trips = self.counter.get_count()

            measurement = Measurement(
                strategy=strategy_name,
                display_name=display_name,
                elapsed_ms=round(elapsed * 1000, 2),
                memory_delta_bytes=max(0, memory_after - memory_before),
                peak_memory_bytes=max(0, memory_peak - memory_before),
                round_trip_count=round_trips,
                result_count=len(result.records),
                raw_row_count=result.raw_row_count,
            )
            del result
        finally:
            self._reset()
            if started_tracing:
                tracemalloc.stop()

        logger.info(
            f"{strategy_name}: {measurement.elapsed_ms:.2f}ms, "
            f"{measurement.memory_kb:.1f}KB, "
            f"{measurement.round_trip_count} queries, "
            f"{measurement.result_count} records"
        )
        return measurement

    def _reset(self) -> None:
        if self.clear_state is not None:
            self.clear_state()
        self.counter.reset()
        gc.collect()
