"""
Measurement records for benchmark runs.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Measurement:
    """
    Resource usage of one measured strategy invocation.

    Attributes:
        strategy: Strategy name
        elapsed_ms: Wall-clock duration in milliseconds
        memory_delta_bytes: Memory still allocated after the run, relative to
            before it (never negative)
        peak_memory_bytes: Highest allocation above the starting point during
            the run
        round_trip_count: Statements sent to the store
        result_count: Records the strategy returned
        raw_row_count: Rows the store returned, when known
    """
    strategy: str
    elapsed_ms: float = 0.0
    memory_delta_bytes: int = 0
    peak_memory_bytes: Optional[int] = None
    round_trip_count: int = 0
    result_count: int = 0
    raw_row_count: Optional[int] = None
    display_name: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.strategy

    @property
    def memory_kb(self) -> float:
        return self.memory_delta_bytes / 1024

    @property
    def memory_mb(self) -> float:
        return self.memory_delta_bytes / 1024 / 1024

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "strategy": self.strategy,
            "display_name": self.label,
            "elapsed_ms": self.elapsed_ms,
            "memory_delta_bytes": self.memory_delta_bytes,
            "peak_memory_bytes": self.peak_memory_bytes,
            "round_trip_count": self.round_trip_count,
            "result_count": self.result_count,
            "raw_row_count": self.raw_row_count,
        }
