"""CreateProduct: admin adds a product to the catalogue."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product, slugify
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(max_length=255)
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
    is_featured: Boolean(default=False)
    images: Text()  # JSON array of {url, alt_text}


def _loads(value, default):
    if not value:
        return default
    return json.loads(value) if isinstance(value, str) else value


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        slug = command.slug or slugify(command.name)
        if repo.find_by_slug(slug, active_only=False) is not None:
            raise ValidationError({"slug": [f"Product slug '{slug}' is already in use"]})
        if command.category_id:
            current_domain.repository_for(Category).get(command.category_id)

        product = Product.create(
            name=command.name,
            slug=slug,
            description=command.description,
            short_description=command.short_description,
            price=command.price,
            compare_price=command.compare_price,
            cost_price=command.cost_price,
            sku=command.sku,
            stock=command.stock,
            weight=command.weight,
            category_id=command.category_id,
            brand=command.brand,
            tags=_loads(command.tags, []),
            is_featured=command.is_featured,
            images=_loads(command.images, []),
        )
        repo.add(product)
        logger.info("Product created", product_id=str(product.id), slug=slug)
        return str(product.id)
