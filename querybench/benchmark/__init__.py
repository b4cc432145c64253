"""
Benchmark execution and reporting package.
"""

from .metrics import Measurement
from .executor import InstrumentedExecutor
from .comparison import Comparison, ComparisonReporter
from .runner import BenchmarkAbortedError, BenchmarkConfig, BenchmarkRunner, ComparisonReport
from .reporter import Reporter

__all__ = [
    "Measurement",
    "InstrumentedExecutor",
    "Comparison",
    "ComparisonReporter",
    "BenchmarkAbortedError",
    "BenchmarkConfig",
    "BenchmarkRunner",
    "ComparisonReport",
    "Reporter",
]
