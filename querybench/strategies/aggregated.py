"""
Native aggregation strategy: let the store build the nested documents.
"""

from sqlalchemy import text

from ..data.records import ParentAggregate
from ..store.database import Store
from .base import BaseStrategy, ReturnKind, StrategyResult

# Child collections are aggregated from ordered derived tables so that
# json_group_array keeps position / newest-first order.
AGGREGATED_SQL = text("""
    SELECT
        p.id AS id,
        p.name AS name,
        p.description AS description,
        p.price AS price,
        p.stock AS stock,
        p.created_at AS created_at,
        p.updated_at AS updated_at,
        CASE WHEN c.id IS NULL THEN NULL
             ELSE json_object('id', c.id, 'name', c.name, 'slug', c.slug)
        END AS category,
        CASE WHEN b.id IS NULL THEN NULL
             ELSE json_object('id', b.id, 'name', b.name, 'country', b.country)
        END AS brand,
        (
            SELECT json_group_array(json_object('id', i.id, 'url', i.url, 'position', i.position))
            FROM (
                SELECT id, url, position
                FROM product_images
                WHERE product_id = p.id
                ORDER BY position ASC, id ASC
            ) AS i
        ) AS images,
        (
            SELECT json_group_array(json_object(
                'id', r.id, 'author', r.author, 'rating', r.rating, 'comment', r.comment
            ))
            FROM (
                SELECT id, author, rating, comment
                FROM product_reviews
                WHERE product_id = p.id
                ORDER BY created_at DESC, id ASC
            ) AS r
        ) AS reviews,
        (SELECT COUNT(*) FROM product_images WHERE product_id = p.id) AS images_count,
        (SELECT COUNT(*) FROM product_reviews WHERE product_id = p.id) AS reviews_count
    FROM products p
    LEFT JOIN categories c ON p.category_id = c.id
    LEFT JOIN brands b ON p.brand_id = b.id
    ORDER BY p.id ASC
    LIMIT :limit
""")


class AggregatedStrategy(BaseStrategy):
    """
    One statement returning one row per product.

    Lookups come back as JSON objects, collections as JSON arrays and the
    counts as correlated sub-selects. Rows are decoded into ParentAggregate.
    """

    name = "aggregated"
    display_name = "Aggregated Query"
    description = "Store-side JSON aggregation, one row per product"
    return_kind = ReturnKind.AGGREGATES

    def fetch(self, store: Store, limit: int) -> StrategyResult:
        result = store.session.execute(AGGREGATED_SQL, {"limit": limit})
        products = [ParentAggregate.from_json_row(row) for row in result.mappings()]
        return StrategyResult(records=products, raw_row_count=len(products))
