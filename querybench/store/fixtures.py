"""
Fixture generation for the benchmark database.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import insert

from .database import Store
from .models import Brand, Category, Product, ProductImage, ProductReview

logger = logging.getLogger(__name__)

FIXTURE_EPOCH = datetime(2024, 1, 1, 9, 0, 0)


@dataclass
class FixtureSummary:
    """Row counts written by a fixture load."""
    categories: int = 0
    brands: int = 0
    products: int = 0
    images: int = 0
    reviews: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "categories": self.categories,
            "brands": self.brands,
            "products": self.products,
            "images": self.images,
            "reviews": self.reviews,
        }


class FixtureGenerator:
    """
    Populate the store with categories, brands and products.

    Every product gets a random category and brand, ``images_per_product``
    images at positions 1..n and ``reviews_per_product`` reviews with random
    authors, ratings and creation times. Rows are written with explicit ids in
    batches of ``batch_size`` so the generated catalogue is reproducible for a
    given ``seed``.

    Example:
        generator = FixtureGenerator(store, products=1000, seed=42)
        generator.on_progress(lambda stage, done, total: ...)
        summary = generator.load(reset=True)
    """

    def __init__(
        self,
        store: Store,
        categories: int = 500,
        brands: int = 1000,
        products: int = 10000,
        images_per_product: int = 3,
        reviews_per_product: int = 5,
        batch_size: int = 500,
        seed: Optional[int] = None,
    ):
        if min(categories, brands) < 1:
            raise ValueError("At least one category and one brand are required")
        if products < 0 or images_per_product < 0 or reviews_per_product < 0:
            raise ValueError("Fixture counts must not be negative")

        self.store = store
        self.categories = categories
        self.brands = brands
        self.products = products
        self.images_per_product = images_per_product
        self.reviews_per_product = reviews_per_product
        self.batch_size = max(1, batch_size)
        self._random = random.Random(seed)

        self._on_progress: Optional[Callable[[str, int, int], None]] = None

    def on_progress(self, callback: Callable[[str, int, int], None]) -> "FixtureGenerator":
        """
        Set progress callback.

        Args:
            callback: Function(stage, completed, total) called after each batch
        """
        self._on_progress = callback
        return self

    def load(self, reset: bool = True) -> FixtureSummary:
        """
        Write the fixtures.

        Args:
            reset: Drop and recreate the schema first

        Returns:
            FixtureSummary with the number of rows written per table
        """
        self.store.create_schema(drop_existing=reset)
        summary = FixtureSummary()

        logger.info("Creating categories...")
        summary.categories = self._write_batches(
            "categories", Category, self.categories, self._category_row
        )

        logger.info("Creating brands...")
        summary.brands = self._write_batches(
            "brands", Brand, self.brands, self._brand_row
        )

        logger.info("Creating products (+ images + reviews)...")
        self._create_products(summary)

        logger.info(f"Fixtures loaded: {summary.to_dict()}")
        return summary

    def _write_batches(
        self,
        stage: str,
        model: Any,
        total: int,
        make_row: Callable[[int], Dict[str, Any]],
    ) -> int:
        written = 0
        with self.store.engine.begin() as conn:
            for start in range(1, total + 1, self.batch_size):
                stop = min(start + self.batch_size, total + 1)
                conn.execute(insert(model), [make_row(i) for i in range(start, stop)])
                written += stop - start
                self._report(stage, written, total)
        return written

    def _category_row(self, i: int) -> Dict[str, Any]:
        return {
            "id": i,
            "name": f"Category {i}",
            "slug": f"category-{i}",
            "description": f"Description for category {i}",
        }

    def _brand_row(self, i: int) -> Dict[str, Any]:
        return {"id": i, "name": f"Brand {i}", "slug": f"brand-{i}", "country": "US"}

    def _create_products(self, summary: FixtureSummary) -> None:
        image_id = 0
        review_id = 0

        with self.store.engine.begin() as conn:
            for start in range(1, self.products + 1, self.batch_size):
                stop = min(start + self.batch_size, self.products + 1)
                products: List[Dict[str, Any]] = []
                images: List[Dict[str, Any]] = []
                reviews: List[Dict[str, Any]] = []

                for i in range(start, stop):
                    created = FIXTURE_EPOCH + timedelta(minutes=i)
                    products.append({
                        "id": i,
                        "name": f"Product {i}",
                        "description": f"Description for product {i}",
                        "price": self._random.randint(100, 100000) / 100,
                        "stock": self._random.randint(0, 1000),
                        "created_at": created,
                        "updated_at": created,
                        "category_id": self._random.randint(1, self.categories),
                        "brand_id": self._random.randint(1, self.brands),
                    })

                    for j in range(1, self.images_per_product + 1):
                        image_id += 1
                        images.append({
                            "id": image_id,
                            "product_id": i,
                            "url": f"https://cdn.example.test/products/{i}/{j}.jpg",
                            "position": j,
                        })

                    for j in range(1, self.reviews_per_product + 1):
                        review_id += 1
                        reviewed = created + timedelta(hours=self._random.randint(1, 24 * 90))
                        reviews.append({
                            "id": review_id,
                            "product_id": i,
                            "author": f"User {self._random.randint(1, 1000000)}",
                            "rating": self._random.randint(1, 5),
                            "comment": f"Review {j} for product {i}",
                            "created_at": reviewed,
                            "updated_at": reviewed,
                        })

                conn.execute(insert(Product), products)
                if images:
                    conn.execute(insert(ProductImage), images)
                if reviews:
                    conn.execute(insert(ProductReview), reviews)

                summary.products += len(products)
                summary.images += len(images)
                summary.reviews += len(reviews)
                self._report("products", summary.products, self.products)

    def _report(self, stage: str, completed: int, total: int) -> None:
        if self._on_progress:
            self._on_progress(stage, completed, total)
