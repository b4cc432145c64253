"""
Query strategies package.
Each strategy implements the BaseStrategy interface.
"""

from typing import List

from .base import BaseStrategy, ReturnKind, StrategyError, StrategyResult
from .traditional import TraditionalStrategy
from .fetch_join import FetchJoinStrategy
from .simple_join import SimpleJoinStrategy, SimpleJoinAggregatedStrategy
from .aggregated import AggregatedStrategy

# Registry of available strategies, in execution order.
# The first entry is the comparison baseline.
STRATEGIES = {
    "traditional": TraditionalStrategy,
    "fetch_join": FetchJoinStrategy,
    "simple_join": SimpleJoinStrategy,
    "simple_join_aggregated": SimpleJoinAggregatedStrategy,
    "aggregated": AggregatedStrategy,
}


def get_strategy(name: str) -> BaseStrategy:
    """
    Get a strategy instance by name.

    Args:
        name: Strategy name (e.g., 'traditional', 'aggregated')

    Returns:
        Strategy instance

    Raises:
        StrategyError: If strategy is not found
    """
    strategy_class = STRATEGIES.get(name.lower())
    if not strategy_class:
        available = ", ".join(STRATEGIES.keys())
        raise StrategyError(f"Unknown strategy: {name}. Available: {available}")

    return strategy_class()


def list_strategies() -> List[str]:
    """List all available strategy names in execution order."""
    return list(STRATEGIES.keys())


def default_strategies() -> List[BaseStrategy]:
    """Instantiate every registered strategy in execution order."""
    return [strategy_class() for strategy_class in STRATEGIES.values()]


__all__ = [
    "BaseStrategy",
    "ReturnKind",
    "StrategyError",
    "StrategyResult",
    "TraditionalStrategy",
    "FetchJoinStrategy",
    "SimpleJoinStrategy",
    "SimpleJoinAggregatedStrategy",
    "AggregatedStrategy",
    "STRATEGIES",
    "get_strategy",
    "list_strategies",
    "default_strategies",
]
