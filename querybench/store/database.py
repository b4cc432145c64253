"""
Store access: engine, ORM session and round-trip counter.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ..config import Config
from .counter import QueryCounter, instrument_engine
from .models import Base, Product

logger = logging.getLogger(__name__)


class Store:
    """
    Owns the connection to the benchmark database.

    Holds one ORM session at a time; ``clear()`` closes it so the identity
    map built by a previous run is gone before the next one starts. Every
    statement executed through the engine is counted by ``counter``.

    Example:
        store = Store("sqlite:///var/products.sqlite")
        store.create_schema()
        products = store.session.scalars(select(Product)).all()
        print(store.counter.get_count())
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: Optional[bool] = None,
        counter: Optional[QueryCounter] = None,
    ):
        """
        Initialize the store.

        Args:
            database_url: SQLAlchemy URL (default: Config.DATABASE_URL)
            echo: Log emitted SQL (default: Config.SQL_ECHO)
            counter: Counter to install on the engine (created if omitted)
        """
        self.database_url = database_url or Config.DATABASE_URL
        self.engine: Engine = create_engine(
            self.database_url,
            echo=Config.SQL_ECHO if echo is None else echo,
        )
        # First connect runs dialect initialization; keep it out of the counts
        with self.engine.connect():
            pass

        self.counter = counter or QueryCounter()
        instrument_engine(self.engine, self.counter)

        self._session: Optional[Session] = None
        logger.info(f"Store initialized: {self.engine.url!r}")

    @property
    def session(self) -> Session:
        """Current ORM session, opened on first use after ``clear()``."""
        if self._session is None:
            self._session = Session(self.engine, expire_on_commit=False)
        return self._session

    def clear(self) -> None:
        """Drop the current session and its identity map."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def create_schema(self, drop_existing: bool = False) -> None:
        """Create all tables, optionally dropping existing ones first."""
        self.clear()
        if drop_existing:
            Base.metadata.drop_all(self.engine)
        Base.metadata.create_all(self.engine)

    def product_count(self) -> int:
        """Number of products currently stored."""
        with Session(self.engine) as session:
            return session.scalar(select(func.count(Product.id))) or 0

    def dispose(self) -> None:
        """Close the session and release pooled connections."""
        self.clear()
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"<Store(url={self.engine.url!r})>"
