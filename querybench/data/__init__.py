"""
Row-set records and host-side aggregation.
"""

from .records import (
    BrandRef,
    CategoryRef,
    FlatRow,
    ImageRef,
    MalformedRowError,
    ParentAggregate,
    ReviewRef,
    flatten_aggregates,
    parse_timestamp,
)
from .aggregator import Aggregator

__all__ = [
    "Aggregator",
    "BrandRef",
    "CategoryRef",
    "FlatRow",
    "ImageRef",
    "MalformedRowError",
    "ParentAggregate",
    "ReviewRef",
    "flatten_aggregates",
    "parse_timestamp",
]
