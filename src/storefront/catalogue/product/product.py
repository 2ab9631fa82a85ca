"""Product aggregate root with Variant and Image entities.

Price and stock are read through ``price_for`` / ``stock_for`` so every caller
agrees on the authoritative value: a selected variant's own price and stock
when it has them, the product's otherwise.
"""

import json
import re
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from storefront.catalogue.product.events import (
    ProductCreated,
    ProductDeactivated,
    ProductDetailsUpdated,
    StockAdjusted,
    VariantAdded,
)
from storefront.domain import storefront

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

RATING_VALUES = (1, 2, 3, 4, 5)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug


def _empty_distribution() -> dict:
    return {str(r): 0 for r in RATING_VALUES}


@storefront.entity(part_of="Product")
class Variant:
    name: String(required=True, max_length=100)
    sku: String(max_length=50)
    price: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    attributes: Text()
    is_active: Boolean(default=True)


@storefront.entity(part_of="Product")
class Image:
    url: String(required=True, max_length=500)
    alt_text: String(max_length=255)
    is_primary: Boolean(default=False)
    sort_order: Integer(default=0)


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    description: Text()
    short_description: String(max_length=500)
    price: Float(required=True, min_value=0.0)
    compare_price: Float(min_value=0.0)
    cost_price: Float(min_value=0.0)
    sku: String(max_length=50)
    stock: Integer(default=0, min_value=0)
    weight: Float(min_value=0.0)
    category_id: Identifier()
    brand: String(max_length=100)
    tags: Text()  # JSON array of strings
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    sold_count: Integer(default=0, min_value=0)
    rating_avg: Float(default=0.0)
    rating_count: Integer(default=0, min_value=0)
    rating_distribution: Text()  # JSON: {"1": n, ..., "5": n}
    search_text: Text()  # lower-cased name/description/brand for text search
    variants: HasMany(Variant)
    images: HasMany(Image)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if not _SLUG_PATTERN.match(self.slug or ""):
            raise ValidationError({"slug": ["Slug must contain only lowercase letters, digits and single hyphens"]})

    @invariant.post
    def stock_cannot_be_negative(self):
        if (self.stock or 0) < 0 or any((v.stock or 0) < 0 for v in self.variants):
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def exactly_one_primary_image_when_images_exist(self):
        if not self.images:
            return
        if len([i for i in self.images if i.is_primary]) != 1:
            raise ValidationError({"images": ["Exactly one image must be marked as primary"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        price,
        slug=None,
        description=None,
        short_description=None,
        compare_price=None,
        cost_price=None,
        sku=None,
        stock=0,
        weight=None,
        category_id=None,
        brand=None,
        tags=None,
        is_featured=False,
        images=None,
    ):
        """Build a product; the first of ``images`` (dicts with url/alt_text) becomes primary."""
        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug or slugify(name),
            description=description,
            short_description=short_description,
            price=price,
            compare_price=compare_price,
            cost_price=cost_price,
            sku=sku,
            stock=stock or 0,
            weight=weight,
            category_id=category_id,
            brand=brand,
            tags=json.dumps(sorted(set(tags or []))),
            is_featured=bool(is_featured),
            rating_distribution=json.dumps(_empty_distribution()),
            created_at=now,
            updated_at=now,
        )
        product._refresh_search_text()

        for image in images or []:
            product.add_image(image["url"], alt_text=image.get("alt_text") or name)

        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                slug=product.slug,
                price=price,
                category_id=category_id,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Authoritative price and stock
    # -------------------------------------------------------------------
    def variant_for(self, variant_id):
        """Return the active variant with ``variant_id``, or None."""
        if not variant_id:
            return None
        return next(
            (v for v in self.variants if str(v.id) == str(variant_id) and v.is_active),
            None,
        )

    def price_for(self, variant=None) -> float:
        if variant is not None and variant.price:
            return variant.price
        return self.price

    def stock_for(self, variant=None) -> int:
        if variant is not None:
            return variant.stock or 0
        return self.stock or 0

    @property
    def primary_image_url(self):
        primary = next((i for i in self.images if i.is_primary), None)
        return primary.url if primary else None

    @property
    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    @property
    def distribution(self) -> dict:
        return json.loads(self.rating_distribution) if self.rating_distribution else _empty_distribution()

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def sell(self, quantity, variant_id=None):
        """Take ``quantity`` units out of authoritative stock and count them as sold."""
        variant = self._require_variant(variant_id)
        available = self.stock_for(variant)
        if quantity > available:
            raise ValidationError({"stock": [f'Insufficient stock for "{self.name}" (available: {available})']})

        if variant is not None:
            variant.stock = available - quantity
        else:
            self.stock = available - quantity
        self.sold_count = (self.sold_count or 0) + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockAdjusted(
                product_id=self.id,
                variant_id=variant.id if variant is not None else None,
                delta=-quantity,
                stock_after=self.stock_for(variant),
                reason="sale",
            )
        )

    def restock(self, quantity, variant_id=None, reason="cancellation"):
        """Put ``quantity`` units back. Inactive variants still take their stock back."""
        variant = None
        if variant_id:
            variant = next((v for v in self.variants if str(v.id) == str(variant_id)), None)

        if variant is not None:
            variant.stock = (variant.stock or 0) + quantity
        else:
            self.stock = (self.stock or 0) + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockAdjusted(
                product_id=self.id,
                variant_id=variant.id if variant is not None else None,
                delta=quantity,
                stock_after=self.stock_for(variant),
                reason=reason,
            )
        )

    def _require_variant(self, variant_id):
        if not variant_id:
            return None
        variant = self.variant_for(variant_id)
        if variant is None:
            raise ValidationError({"variant_id": [f'Variant of "{self.name}" is no longer available']})
        return variant

    # -------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------
    def record_rating(self, rating):
        distribution = self.distribution
        distribution[str(rating)] = distribution.get(str(rating), 0) + 1
        self._apply_distribution(distribution)

    def withdraw_rating(self, rating):
        distribution = self.distribution
        distribution[str(rating)] = max(distribution.get(str(rating), 0) - 1, 0)
        self._apply_distribution(distribution)

    def _apply_distribution(self, distribution):
        count = sum(distribution.values())
        total = sum(int(r) * n for r, n in distribution.items())
        self.rating_distribution = json.dumps(distribution)
        self.rating_count = count
        self.rating_avg = round(total / count, 2) if count else 0.0

    # -------------------------------------------------------------------
    # Catalogue maintenance
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Apply admin edits. Only keys passed with a non-None value are changed."""
        editable = (
            "name",
            "slug",
            "description",
            "short_description",
            "price",
            "compare_price",
            "cost_price",
            "sku",
            "stock",
            "weight",
            "category_id",
            "brand",
            "is_featured",
            "is_active",
        )
        for field_name in editable:
            value = changes.get(field_name)
            if value is not None:
                setattr(self, field_name, value)
        if changes.get("tags") is not None:
            self.tags = json.dumps(sorted(set(changes["tags"])))

        self._refresh_search_text()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                is_active=self.is_active,
            )
        )

    def deactivate(self):
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=now))

    def add_variant(self, name, price=None, stock=0, sku=None, attributes=None):
        variant = Variant(
            name=name,
            sku=sku,
            price=price,
            stock=stock or 0,
            attributes=json.dumps(attributes) if attributes else None,
        )
        self.add_variants(variant)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantAdded(
                product_id=self.id,
                variant_id=variant.id,
                name=name,
                price=price,
                stock=variant.stock,
            )
        )
        return variant

    def add_image(self, url, alt_text=None, is_primary=False):
        with atomic_change(self):
            if not self.images:
                is_primary = True
            if is_primary:
                for img in self.images:
                    img.is_primary = False

            image = Image(
                url=url,
                alt_text=alt_text,
                is_primary=is_primary,
                sort_order=len(self.images),
            )
            self.add_images(image)
        self.updated_at = datetime.now(UTC)
        return image

    def _refresh_search_text(self):
        parts = (self.name, self.description, self.brand)
        self.search_text = " ".join(p for p in parts if p).lower()
