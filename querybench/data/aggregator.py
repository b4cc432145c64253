"""
Host-side aggregation of flat join rows.

Rebuilds the nested, deduplicated and counted product records that a
store-side JSON aggregation returns directly, from the Cartesian product of
a products x images x reviews join.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from .records import FlatRow, ImageRef, ParentAggregate, ReviewRef

logger = logging.getLogger(__name__)


@dataclass
class _ParentBuilder:
    """In-progress aggregate for one product key."""
    head: FlatRow
    images: List[ImageRef] = field(default_factory=list)
    reviews: List[ReviewRef] = field(default_factory=list)

    def freeze(self) -> ParentAggregate:
        head = self.head
        return ParentAggregate(
            id=head.product_id,
            name=head.name,
            description=head.description,
            price=head.price,
            stock=head.stock,
            created_at=head.created_at,
            updated_at=head.updated_at,
            category=head.category,
            brand=head.brand,
            images=tuple(self.images),
            reviews=tuple(self.reviews),
            images_count=len(self.images),
            reviews_count=len(self.reviews),
        )


class Aggregator:
    """
    Collapse flat join rows into ParentAggregate records.

    Products are emitted in the order their key first appears, images and
    reviews in the order their id first appears within the product. Rows are
    never re-sorted: ordering is whatever the producing query chose.

    Runs in O(rows) time and keeps O(products + images + reviews) state.

    Example:
        rows = [FlatRow.from_mapping(r) for r in result.mappings()]
        products = Aggregator().aggregate(rows)
    """

    def aggregate(self, rows: Iterable[FlatRow]) -> List[ParentAggregate]:
        """
        Aggregate flat rows.

        Args:
            rows: Flat join rows, grouped by product key in query order

        Returns:
            List of finalized aggregates, one per distinct product key
        """
        builders: Dict[int, _ParentBuilder] = {}
        images_seen: Dict[int, Set[int]] = {}
        reviews_seen: Dict[int, Set[int]] = {}
        row_count = 0

        for row in rows:
            row_count += 1
            key = row.product_id

            builder = builders.get(key)
            if builder is None:
                builder = builders[key] = _ParentBuilder(head=row)
                images_seen[key] = set()
                reviews_seen[key] = set()

            image = row.image
            if image is not None and image.id not in images_seen[key]:
                builder.images.append(image)
                images_seen[key].add(image.id)

            review = row.review
            if review is not None and review.id not in reviews_seen[key]:
                builder.reviews.append(review)
                reviews_seen[key].add(review.id)

        logger.debug(f"Aggregated {row_count} rows into {len(builders)} products")
        return [builder.freeze() for builder in builders.values()]
