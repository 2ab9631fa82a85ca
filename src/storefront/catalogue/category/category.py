"""Category aggregate: the storefront's product groupings."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.catalogue.product.product import slugify
from storefront.domain import storefront


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    description: Text()
    image_url: String(max_length=500)
    parent_id: Identifier()
    sort_order: Integer(default=0)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, slug=None, description=None, image_url=None, parent_id=None, sort_order=0):
        now = datetime.now(UTC)
        return cls(
            name=name,
            slug=slug or slugify(name),
            description=description,
            image_url=image_url,
            parent_id=parent_id,
            sort_order=sort_order or 0,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, name=None, slug=None, description=None, image_url=None, parent_id=None, sort_order=None):
        if parent_id is not None and str(parent_id) == str(self.id):
            raise ValidationError({"parent_id": ["A category cannot be its own parent"]})
        if name is not None:
            self.name = name
        if slug is not None:
            self.slug = slug
        if description is not None:
            self.description = description
        if image_url is not None:
            self.image_url = image_url
        if parent_id is not None:
            self.parent_id = parent_id
        if sort_order is not None:
            self.sort_order = sort_order
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)
