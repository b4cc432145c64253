"""
Typed records for the product listing query shape.

FlatRow is one row of the products x images x reviews Cartesian product,
ParentAggregate is the nested, deduplicated and counted product record.
Raw store output is validated here, at the boundary, so the aggregator can
trust every row it receives.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union


class MalformedRowError(ValueError):
    """Raised when a raw row does not have the expected shape."""
    pass


Timestamp = Optional[datetime]


def parse_timestamp(value: Union[str, datetime, None]) -> Timestamp:
    """Normalize a store timestamp (ISO string or datetime) to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class CategoryRef:
    id: int
    name: str
    slug: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "slug": self.slug}


@dataclass(frozen=True)
class BrandRef:
    id: int
    name: str
    country: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "country": self.country}


@dataclass(frozen=True)
class ImageRef:
    id: int
    url: str
    position: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "url": self.url, "position": self.position}


@dataclass(frozen=True)
class ReviewRef:
    id: int
    author: str
    rating: int
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "rating": self.rating,
            "comment": self.comment,
        }


def _category_from(row: Mapping[str, Any]) -> Optional[CategoryRef]:
    if row["category_id"] is None:
        return None
    if row["category_name"] is None:
        raise MalformedRowError(
            f"category {row['category_id']} present without its name"
        )
    return CategoryRef(
        id=int(row["category_id"]),
        name=row["category_name"],
        slug=row["category_slug"],
    )


def _brand_from(row: Mapping[str, Any]) -> Optional[BrandRef]:
    if row["brand_id"] is None:
        return None
    if row["brand_name"] is None:
        raise MalformedRowError(f"brand {row['brand_id']} present without its name")
    return BrandRef(
        id=int(row["brand_id"]),
        name=row["brand_name"],
        country=row["brand_country"],
    )


def _image_from(row: Mapping[str, Any]) -> Optional[ImageRef]:
    if row["image_id"] is None:
        return None
    if row["image_url"] is None or row["image_position"] is None:
        raise MalformedRowError(
            f"image {row['image_id']} present without url/position"
        )
    return ImageRef(
        id=int(row["image_id"]),
        url=row["image_url"],
        position=int(row["image_position"]),
    )


def _review_from(row: Mapping[str, Any]) -> Optional[ReviewRef]:
    if row["review_id"] is None:
        return None
    if row["review_author"] is None or row["review_rating"] is None:
        raise MalformedRowError(
            f"review {row['review_id']} present without author/rating"
        )
    return ReviewRef(
        id=int(row["review_id"]),
        author=row["review_author"],
        rating=int(row["review_rating"]),
        comment=row["review_comment"],
    )


@dataclass(frozen=True)
class FlatRow:
    """
    One record of the flat join.

    Attributes:
        product_id: Parent key
        name, description, price, stock, created_at, updated_at: Parent columns
        category: Category lookup, None when the foreign key is NULL
        brand: Brand lookup, None when the foreign key is NULL
        image: Image child of this combination, None when the product has none
        review: Review child of this combination, None when the product has none
    """
    product_id: int
    name: str
    description: Optional[str]
    price: float
    stock: int
    created_at: Timestamp
    updated_at: Timestamp
    category: Optional[CategoryRef] = None
    brand: Optional[BrandRef] = None
    image: Optional[ImageRef] = None
    review: Optional[ReviewRef] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "FlatRow":
        """
        Build a FlatRow from a flat-join result mapping.

        Args:
            row: Mapping keyed by the flat-join column aliases
                (product_*, category_*, brand_*, image_*, review_*)

        Returns:
            Validated FlatRow

        Raises:
            KeyError: If an expected column is missing
            MalformedRowError: If a child or lookup id is present without
                its companion columns
        """
        return cls(
            product_id=int(row["product_id"]),
            name=row["product_name"],
            description=row["product_description"],
            price=float(row["product_price"]),
            stock=int(row["product_stock"]),
            created_at=parse_timestamp(row["product_created_at"]),
            updated_at=parse_timestamp(row["product_updated_at"]),
            category=_category_from(row),
            brand=_brand_from(row),
            image=_image_from(row),
            review=_review_from(row),
        )


@dataclass(frozen=True)
class ParentAggregate:
    """
    A product with its lookups, ordered child collections and counts.

    The counts always equal the collection lengths; construction fails
    otherwise.
    """
    id: int
    name: str
    description: Optional[str]
    price: float
    stock: int
    created_at: Timestamp
    updated_at: Timestamp
    category: Optional[CategoryRef]
    brand: Optional[BrandRef]
    images: Tuple[ImageRef, ...] = field(default_factory=tuple)
    reviews: Tuple[ReviewRef, ...] = field(default_factory=tuple)
    images_count: int = 0
    reviews_count: int = 0

    def __post_init__(self):
        if self.images_count != len(self.images):
            raise MalformedRowError(
                f"product {self.id}: images_count={self.images_count} "
                f"but {len(self.images)} images"
            )
        if self.reviews_count != len(self.reviews):
            raise MalformedRowError(
                f"product {self.id}: reviews_count={self.reviews_count} "
                f"but {len(self.reviews)} reviews"
            )

    @classmethod
    def from_json_row(cls, row: Mapping[str, Any]) -> "ParentAggregate":
        """
        Build an aggregate from a row of the native JSON aggregation query.

        The category, brand, images and reviews columns hold JSON documents
        (or NULL for absent lookups).
        """
        category = _load_json(row["category"])
        brand = _load_json(row["brand"])
        images = tuple(
            ImageRef(id=int(i["id"]), url=i["url"], position=int(i["position"]))
            for i in _load_json(row["images"]) or ()
        )
        reviews = tuple(
            ReviewRef(
                id=int(r["id"]),
                author=r["author"],
                rating=int(r["rating"]),
                comment=r.get("comment"),
            )
            for r in _load_json(row["reviews"]) or ()
        )
        return cls(
            id=int(row["id"]),
            name=row["name"],
            description=row["description"],
            price=float(row["price"]),
            stock=int(row["stock"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
            category=CategoryRef(**category) if category else None,
            brand=BrandRef(**brand) if brand else None,
            images=images,
            reviews=reviews,
            images_count=int(row["images_count"]),
            reviews_count=int(row["reviews_count"]),
        )

    @classmethod
    def from_entity(cls, product: Any) -> "ParentAggregate":
        """Build an aggregate from a hydrated Product entity."""
        images = tuple(
            ImageRef(id=i.id, url=i.url, position=i.position) for i in product.images
        )
        reviews = tuple(
            ReviewRef(id=r.id, author=r.author, rating=r.rating, comment=r.comment)
            for r in product.reviews
        )
        category = product.category
        brand = product.brand
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=float(product.price),
            stock=product.stock,
            created_at=product.created_at,
            updated_at=product.updated_at,
            category=(
                CategoryRef(id=category.id, name=category.name, slug=category.slug)
                if category is not None else None
            ),
            brand=(
                BrandRef(id=brand.id, name=brand.name, country=brand.country)
                if brand is not None else None
            ),
            images=images,
            reviews=reviews,
            images_count=len(images),
            reviews_count=len(reviews),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "category": self.category.to_dict() if self.category else None,
            "brand": self.brand.to_dict() if self.brand else None,
            "images": [i.to_dict() for i in self.images],
            "reviews": [r.to_dict() for r in self.reviews],
            "images_count": self.images_count,
            "reviews_count": self.reviews_count,
        }


def _load_json(value: Any) -> Any:
    if value is None or isinstance(value, (list, dict)):
        return value
    return json.loads(value)


def flatten_aggregates(aggregates: Iterable[ParentAggregate]) -> List[FlatRow]:
    """
    Expand aggregates back into the flat join they would come from.

    Each product yields one row per (image, review) combination, image-major,
    or a single row with the missing side set to None.
    """
    rows: List[FlatRow] = []
    for agg in aggregates:
        images = agg.images or (None,)
        reviews = agg.reviews or (None,)
        for image in images:
            for review in reviews:
                rows.append(FlatRow(
                    product_id=agg.id,
                    name=agg.name,
                    description=agg.description,
                    price=agg.price,
                    stock=agg.stock,
                    created_at=agg.created_at,
                    updated_at=agg.updated_at,
                    category=agg.category,
                    brand=agg.brand,
                    image=image,
                    review=review,
                ))
    return rows
