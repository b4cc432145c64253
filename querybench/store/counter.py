"""
Round-trip counting for the store connection.
"""

import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class QueryCounter:
    """
    Counts statements sent to the store.

    The counter is owned by the store layer and handed to whoever measures;
    nothing here is global.
    """

    def __init__(self):
        self._count = 0

    def reset(self) -> None:
        self._count = 0

    def increment(self) -> None:
        self._count += 1

    def get_count(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"<QueryCounter(count={self._count})>"


def instrument_engine(engine: Engine, counter: QueryCounter) -> None:
    """
    Increment ``counter`` before every statement the engine executes.

    Covers plain executions, prepared statements with parameters and
    executemany batches alike: each cursor execution is one round-trip.

    Args:
        engine: SQLAlchemy engine to instrument
        counter: Counter to increment
    """

    def _count_statement(conn, cursor, statement, parameters, context, executemany):
        counter.increment()

    event.listen(engine, "before_cursor_execute", _count_statement)
    logger.debug(f"Query counter installed on {engine.url!r}")
