"""
Flat join strategies: one raw SQL join over every relation.

For a product with 3 images and 5 reviews the store returns 15 rows (3 x 5).
The naive variant hands those rows back as they are; the aggregated variant
collapses them on the host with the Aggregator.
"""

import logging
from typing import List, Optional

from sqlalchemy import text

from ..data.aggregator import Aggregator
from ..data.records import FlatRow
from ..store.database import Store
from .base import BaseStrategy, ReturnKind, StrategyResult

logger = logging.getLogger(__name__)

FLAT_JOIN_SQL = text("""
    SELECT
        p.id AS product_id,
        p.name AS product_name,
        p.description AS product_description,
        p.price AS product_price,
        p.stock AS product_stock,
        p.created_at AS product_created_at,
        p.updated_at AS product_updated_at,

        c.id AS category_id,
        c.name AS category_name,
        c.slug AS category_slug,

        b.id AS brand_id,
        b.name AS brand_name,
        b.country AS brand_country,

        i.id AS image_id,
        i.url AS image_url,
        i.position AS image_position,

        r.id AS review_id,
        r.author AS review_author,
        r.rating AS review_rating,
        r.comment AS review_comment
    FROM products p
    LEFT JOIN categories c ON p.category_id = c.id
    LEFT JOIN brands b ON p.brand_id = b.id
    LEFT JOIN product_images i ON i.product_id = p.id
    LEFT JOIN product_reviews r ON r.product_id = p.id
    WHERE p.id IN (
        SELECT id FROM products ORDER BY id ASC LIMIT :limit
    )
    ORDER BY p.id ASC, i.position ASC, i.id ASC, r.created_at DESC, r.id ASC
""")


def fetch_flat_rows(store: Store, limit: int) -> List[FlatRow]:
    """
    Run the flat join and validate every row.

    Args:
        store: Store to query
        limit: Number of products

    Returns:
        FlatRow list in query order
    """
    result = store.session.execute(FLAT_JOIN_SQL, {"limit": limit})
    return [FlatRow.from_mapping(row) for row in result.mappings()]


class SimpleJoinStrategy(BaseStrategy):
    """Naive flat join: the Cartesian product, undeduplicated."""

    name = "simple_join"
    display_name = "Simple JOIN (raw rows)"
    description = "One flat join, rows returned as-is"
    return_kind = ReturnKind.FLAT_ROWS

    # Same statement as the aggregated variant, which is warmed up
    warmup = False

    def fetch(self, store: Store, limit: int) -> StrategyResult:
        rows = fetch_flat_rows(store, limit)
        return StrategyResult(records=rows, raw_row_count=len(rows))


class SimpleJoinAggregatedStrategy(BaseStrategy):
    """Flat join deduplicated and grouped on the host."""

    name = "simple_join_aggregated"
    display_name = "Simple JOIN + Aggregator"
    description = "One flat join, rows grouped into nested products in Python"
    return_kind = ReturnKind.AGGREGATES

    def __init__(self, aggregator: Optional[Aggregator] = None):
        self.aggregator = aggregator or Aggregator()

    def fetch(self, store: Store, limit: int) -> StrategyResult:
        rows = fetch_flat_rows(store, limit)
        raw_row_count = len(rows)
        products = self.aggregator.aggregate(rows)
        logger.debug(f"Flat join returned {raw_row_count} rows for {len(products)} products")
        return StrategyResult(records=products, raw_row_count=raw_row_count)
