"""
Store access package: ORM mapping, engine/session ownership, round-trip
counting and fixture generation.
"""

from .counter import QueryCounter, instrument_engine
from .database import Store
from .fixtures import FixtureGenerator, FixtureSummary
from .models import Base, Brand, Category, Product, ProductImage, ProductReview

__all__ = [
    "QueryCounter",
    "instrument_engine",
    "Store",
    "FixtureGenerator",
    "FixtureSummary",
    "Base",
    "Brand",
    "Category",
    "Product",
    "ProductImage",
    "ProductReview",
]
