"""Category management (admin) and read helpers."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import slugify
from storefront.domain import storefront


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    slug: String(max_length=120)
    description: Text()
    image_url: String(max_length=500)
    parent_id: Identifier()
    sort_order: Integer(default=0)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    slug: String(max_length=120)
    description: Text()
    image_url: String(max_length=500)
    parent_id: Identifier()
    sort_order: Integer()


@storefront.command(part_of="Category")
class DeactivateCategory:
    category_id: Identifier(required=True)


def _slug_taken(slug, exclude_id=None) -> bool:
    matches = current_domain.repository_for(Category)._dao.query.filter(slug=slug).all().items
    return any(str(c.id) != str(exclude_id) for c in matches)


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        slug = command.slug or slugify(command.name)
        if _slug_taken(slug):
            raise ValidationError({"slug": [f"Category slug '{slug}' is already in use"]})
        if command.parent_id:
            current_domain.repository_for(Category).get(command.parent_id)

        category = Category.create(
            name=command.name,
            slug=slug,
            description=command.description,
            image_url=command.image_url,
            parent_id=command.parent_id,
            sort_order=command.sort_order,
        )
        current_domain.repository_for(Category).add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        if command.slug and _slug_taken(command.slug, exclude_id=category.id):
            raise ValidationError({"slug": [f"Category slug '{command.slug}' is already in use"]})

        category.update_details(
            name=command.name,
            slug=command.slug,
            description=command.description,
            image_url=command.image_url,
            parent_id=command.parent_id,
            sort_order=command.sort_order,
        )
        repo.add(category)

    @handle(DeactivateCategory)
    def deactivate_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        category.deactivate()
        repo.add(category)


def list_active_categories():
    query = current_domain.repository_for(Category)._dao.query.filter(is_active=True).order_by("sort_order")
    return query.all().items


def find_category_by_slug(slug, active_only=True):
    filters = {"slug": slug}
    if active_only:
        filters["is_active"] = True
    matches = current_domain.repository_for(Category)._dao.query.filter(**filters).all().items
    if not matches:
        raise ObjectNotFoundError(f"Category with slug `{slug}` does not exist")
    return matches[0]
