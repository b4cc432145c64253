"""
Entity-mapped strategy: the everyday ORM approach.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from ..store.database import Store
from ..store.models import Product, ProductImage, ProductReview
from .base import BaseStrategy, ReturnKind, StrategyResult

logger = logging.getLogger(__name__)


class TraditionalStrategy(BaseStrategy):
    """
    Load Product entities through the mapping.

    Category and brand are joined into the product query; images and reviews
    come from the mapping's eager ``selectin`` loaders, one extra query per
    collection (per batch of ids). Image and review counts are then queried
    with two ``COUNT ... GROUP BY`` statements. Their results are only paid
    for, never merged: the entity collections already carry the counts.
    """

    name = "traditional"
    display_name = "Traditional ORM"
    description = "Entities with eager-loaded collections plus count queries"
    return_kind = ReturnKind.ENTITIES

    def fetch(self, store: Store, limit: int) -> StrategyResult:
        session = store.session

        stmt = (
            select(Product)
            .options(joinedload(Product.category), joinedload(Product.brand))
            .order_by(Product.id)
            .limit(limit)
        )
        products = list(session.scalars(stmt).all())

        product_ids = [p.id for p in products if p.id is not None]
        if not product_ids:
            return StrategyResult(records=products)

        session.execute(
            select(ProductImage.product_id, func.count(ProductImage.id).label("images_count"))
            .where(ProductImage.product_id.in_(product_ids))
            .group_by(ProductImage.product_id)
        ).all()

        session.execute(
            select(ProductReview.product_id, func.count(ProductReview.id).label("reviews_count"))
            .where(ProductReview.product_id.in_(product_ids))
            .group_by(ProductReview.product_id)
        ).all()

        return StrategyResult(records=products)
