"""
Tests for row validation at the store boundary.
"""

import json
from datetime import datetime

import pytest

from querybench.data import ImageRef, MalformedRowError, ParentAggregate, parse_timestamp
from querybench.data.records import FlatRow


def flat_mapping(**overrides):
    row = {
        "product_id": 1,
        "product_name": "Product 1",
        "product_description": "Description for product 1",
        "product_price": 12,
        "product_stock": 4,
        "product_created_at": "2024-01-01 09:01:00.000000",
        "product_updated_at": "2024-01-01 09:01:00.000000",
        "category_id": 2,
        "category_name": "Category 2",
        "category_slug": "category-2",
        "brand_id": 3,
        "brand_name": "Brand 3",
        "brand_country": "US",
        "image_id": 10,
        "image_url": "https://cdn.example.test/products/1/1.jpg",
        "image_position": 1,
        "review_id": 20,
        "review_author": "User 7",
        "review_rating": 4,
        "review_comment": None,
    }
    row.update(overrides)
    return row


class TestFlatRow:

    def test_from_mapping(self):
        row = FlatRow.from_mapping(flat_mapping())

        assert row.product_id == 1
        assert row.price == 12.0
        assert isinstance(row.price, float)
        assert row.created_at == datetime(2024, 1, 1, 9, 1)
        assert row.category.name == "Category 2"
        assert row.brand.country == "US"
        assert row.image == ImageRef(id=10, url="https://cdn.example.test/products/1/1.jpg", position=1)
        assert row.review.comment is None

    def test_absent_children_and_lookups(self):
        row = FlatRow.from_mapping(flat_mapping(
            category_id=None, category_name=None, category_slug=None,
            brand_id=None, brand_name=None, brand_country=None,
            image_id=None, image_url=None, image_position=None,
            review_id=None, review_author=None, review_rating=None,
        ))

        assert row.category is None
        assert row.brand is None
        assert row.image is None
        assert row.review is None

    @pytest.mark.parametrize("overrides", [
        {"image_url": None},
        {"image_position": None},
        {"review_author": None},
        {"review_rating": None},
        {"brand_name": None},
        {"category_name": None},
    ])
    def test_child_id_without_companions(self, overrides):
        with pytest.raises(MalformedRowError):
            FlatRow.from_mapping(flat_mapping(**overrides))

    def test_missing_column(self):
        row = flat_mapping()
        del row["review_rating"]

        with pytest.raises(KeyError):
            FlatRow.from_mapping(row)


class TestParentAggregate:

    def test_count_mismatch_rejected(self):
        with pytest.raises(MalformedRowError):
            ParentAggregate(
                id=1, name="p", description=None, price=1.0, stock=0,
                created_at=None, updated_at=None, category=None, brand=None,
                images=(ImageRef(id=1, url="u", position=1),),
                images_count=2,
            )

    def test_from_json_row(self):
        row = {
            "id": 7,
            "name": "Product 7",
            "description": None,
            "price": 19.5,
            "stock": 0,
            "created_at": "2024-01-01 09:07:00.000000",
            "updated_at": "2024-01-01 09:07:00.000000",
            "category": json.dumps({"id": 1, "name": "Category 1", "slug": "category-1"}),
            "brand": None,
            "images": json.dumps([
                {"id": 2, "url": "b", "position": 1},
                {"id": 1, "url": "a", "position": 2},
            ]),
            "reviews": "[]",
            "images_count": 2,
            "reviews_count": 0,
        }

        agg = ParentAggregate.from_json_row(row)

        assert agg.brand is None
        assert agg.category.slug == "category-1"
        assert [i.id for i in agg.images] == [2, 1]
        assert agg.reviews == ()
        assert agg.created_at == datetime(2024, 1, 1, 9, 7)

    def test_from_json_row_count_disagrees(self):
        row = {
            "id": 1, "name": "p", "description": None, "price": 1, "stock": 1,
            "created_at": None, "updated_at": None, "category": None, "brand": None,
            "images": "[]", "reviews": "[]", "images_count": 1, "reviews_count": 0,
        }

        with pytest.raises(MalformedRowError):
            ParentAggregate.from_json_row(row)

    def test_to_dict(self):
        agg = ParentAggregate(
            id=1, name="p", description=None, price=1.0, stock=0,
            created_at=datetime(2024, 1, 1), updated_at=None,
            category=None, brand=None,
        )

        data = agg.to_dict()

        assert data["created_at"] == "2024-01-01T00:00:00"
        assert data["images"] == []
        assert data["images_count"] == 0


def test_parse_timestamp():
    moment = datetime(2024, 1, 2, 3, 4, 5)
    assert parse_timestamp(moment) is moment
    assert parse_timestamp(None) is None
    assert parse_timestamp("2024-01-02 03:04:05.000000") == moment
