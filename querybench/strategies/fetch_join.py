"""
Fetch-join strategy: hydrate entities from one wide join.
"""

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from ..store.database import Store
from ..store.models import Product
from .base import BaseStrategy, ReturnKind, StrategyResult


class FetchJoinStrategy(BaseStrategy):
    """
    The "just join everything" approach.

    Returns fully hydrated entities, but joining both collections at once still
    produces images x reviews rows per product at the SQL level. A LIMIT on
    that join would cut products short, so the ids are selected first and the
    relations fetch-joined for those ids.
    """

    name = "fetch_join"
    display_name = "ORM Fetch Join"
    description = "Id pre-select, then entities fetch-joined with every relation"
    return_kind = ReturnKind.ENTITIES

    def fetch(self, store: Store, limit: int) -> StrategyResult:
        session = store.session

        product_ids = list(session.scalars(
            select(Product.id).order_by(Product.id).limit(limit)
        ).all())
        if not product_ids:
            return StrategyResult()

        stmt = (
            select(Product)
            .options(
                joinedload(Product.category),
                joinedload(Product.brand),
                joinedload(Product.images),
                joinedload(Product.reviews),
            )
            .where(Product.id.in_(product_ids))
            .order_by(Product.id)
        )
        products = list(session.execute(stmt).unique().scalars().all())
        return StrategyResult(records=products)
