"""Admin maintenance of existing products: edits, variants, soft delete."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=255)
    description: Text()
    short_description: String(max_length=500)
    price: Float(min_value=0.0)
    compare_price: Float(min_value=0.0)
    cost_price: Float(min_value=0.0)
    sku: String(max_length=50)
    stock: Integer(min_value=0)
    weight: Float(min_value=0.0)
    category_id: Identifier()
    brand: String(max_length=100)
    tags: Text()  # JSON array of strings
    is_featured: Boolean()
    is_active: Boolean()


@storefront.command(part_of="Product")
class AddVariant:
    product_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    sku: String(max_length=50)
    price: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    attributes: Text()  # JSON object


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.slug and command.slug != product.slug:
            existing = repo.find_by_slug(command.slug, active_only=False)
            if existing is not None:
                raise ValidationError({"slug": [f"Product slug '{command.slug}' is already in use"]})

        product.update_details(
            name=command.name,
            slug=command.slug,
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
            tags=json.loads(command.tags) if command.tags else None,
            is_featured=command.is_featured,
            is_active=command.is_active,
        )
        repo.add(product)

    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        variant = product.add_variant(
            name=command.name,
            sku=command.sku,
            price=command.price,
            stock=command.stock,
            attributes=json.loads(command.attributes) if command.attributes else None,
        )
        repo.add(product)
        return str(variant.id)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
        logger.info("Product deactivated", product_id=str(product.id))
