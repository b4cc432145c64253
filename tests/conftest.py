"""
Shared pytest fixtures.
"""

from datetime import datetime

import pytest

from querybench.data import BrandRef, CategoryRef, FlatRow, ImageRef, ReviewRef
from querybench.store import FixtureGenerator, Store

SEEDED_PRODUCTS = 12
SEEDED_IMAGES = 3
SEEDED_REVIEWS = 5


@pytest.fixture
def store():
    """Empty in-memory store with the schema created."""
    s = Store("sqlite://", echo=False)
    s.create_schema()
    yield s
    s.dispose()


@pytest.fixture
def seeded_store():
    """In-memory store holding a small, reproducible catalogue."""
    s = Store("sqlite://", echo=False)
    FixtureGenerator(
        s,
        categories=4,
        brands=6,
        products=SEEDED_PRODUCTS,
        images_per_product=SEEDED_IMAGES,
        reviews_per_product=SEEDED_REVIEWS,
        batch_size=5,
        seed=42,
    ).load(reset=True)
    s.counter.reset()
    yield s
    s.dispose()


def make_row(
    product_id,
    image_id=None,
    review_id=None,
    category_id=1,
    brand_id=1,
):
    """Build a FlatRow for product ``product_id`` with the given child ids."""
    return FlatRow(
        product_id=product_id,
        name=f"Product {product_id}",
        description=None,
        price=9.99,
        stock=3,
        created_at=datetime(2024, 1, 1, 9, product_id % 60),
        updated_at=datetime(2024, 1, 1, 9, product_id % 60),
        category=(
            CategoryRef(id=category_id, name=f"Category {category_id}", slug=f"category-{category_id}")
            if category_id is not None else None
        ),
        brand=(
            BrandRef(id=brand_id, name=f"Brand {brand_id}", country="US")
            if brand_id is not None else None
        ),
        image=(
            ImageRef(id=image_id, url=f"https://cdn.example.test/{image_id}.jpg", position=image_id)
            if image_id is not None else None
        ),
        review=(
            ReviewRef(id=review_id, author=f"User {review_id}", rating=5)
            if review_id is not None else None
        ),
    )


@pytest.fixture
def row_factory():
    return make_row
