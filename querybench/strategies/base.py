"""
Base strategy interface for the product listing query.
All strategies must implement this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from ..store.database import Store


class ReturnKind(Enum):
    """What a strategy hands back."""
    ENTITIES = "entities"       # Hydrated ORM entities
    FLAT_ROWS = "flat_rows"     # Raw Cartesian-product rows
    AGGREGATES = "aggregates"   # Nested ParentAggregate records


@dataclass
class StrategyResult:
    """
    Output of a single strategy invocation.

    Attributes:
        records: Entities, flat rows or aggregates, per the strategy's ReturnKind
        raw_row_count: Rows the store returned, when the strategy can tell
    """
    records: List[Any] = field(default_factory=list)
    raw_row_count: Optional[int] = None

    def __len__(self) -> int:
        return len(self.records)


class BaseStrategy(ABC):
    """
    Abstract base class for query strategies.

    A strategy answers "list ``limit`` products with category, brand, images,
    reviews and counts" in its own way. Strategies are stateless; the store
    passed to ``fetch`` carries the session and round-trip counter.

    Example:
        class MyStrategy(BaseStrategy):
            name = "mine"
            return_kind = ReturnKind.AGGREGATES

            def fetch(self, store, limit):
                ...
    """

    # Strategy identification
    name: str = "base"
    display_name: str = "Base Strategy"
    description: str = ""

    return_kind: ReturnKind = ReturnKind.AGGREGATES

    # Include in unmeasured warmup passes
    warmup: bool = True

    @abstractmethod
    def fetch(self, store: Store, limit: int) -> StrategyResult:
        """
        Load ``limit`` products ordered by id.

        Args:
            store: Store to query
            limit: Number of products, already clamped by the caller

        Returns:
            StrategyResult holding the loaded records
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


class StrategyError(ValueError):
    """Raised when a strategy cannot be resolved."""
    pass
