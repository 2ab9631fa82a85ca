"""Catalogue queries over the Product aggregate."""

import json
from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.paging import Page, fetch_page

SORTABLE_FIELDS = ("price", "created_at", "sold_count", "rating_avg", "name")
DEFAULT_SORT = "created_at"


@dataclass(frozen=True)
class ProductSearch:
    category: str | None = None  # category slug
    search: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    brand: str | None = None
    featured: bool = False
    tag: str | None = None
    sort: str = DEFAULT_SORT
    order: str = "desc"

    @property
    def ordering(self) -> str:
        field = self.sort if self.sort in SORTABLE_FIELDS else DEFAULT_SORT
        return field if self.order == "asc" else f"-{field}"


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_slug(self, slug, active_only=True):
        filters = {"slug": slug}
        if active_only:
            filters["is_active"] = True
        items = self._dao.query.filter(**filters).limit(1).all().items
        return items[0] if items else None

    def search(self, criteria: ProductSearch, page: Page):
        """Active products matching ``criteria``; returns (ResultSet, pagination meta)."""
        query = self._dao.query.filter(is_active=True)

        if criteria.category:
            categories = (
                current_domain.repository_for(Category)._dao.query.filter(slug=criteria.category).limit(1).all().items
            )
            # An unknown category slug leaves the listing unfiltered
            if categories:
                query = query.filter(category_id=str(categories[0].id))
        if criteria.search:
            query = query.filter(search_text__contains=criteria.search.strip().lower())
        if criteria.min_price is not None:
            query = query.filter(price__gte=criteria.min_price)
        if criteria.max_price is not None:
            query = query.filter(price__lte=criteria.max_price)
        if criteria.brand:
            query = query.filter(brand=criteria.brand)
        if criteria.featured:
            query = query.filter(is_featured=True)
        if criteria.tag:
            query = query.filter(tags__contains=json.dumps(criteria.tag))

        result = fetch_page(query.order_by(criteria.ordering), page)
        return result, page.meta(result.total)

    def featured(self, limit=8):
        return self._dao.query.filter(is_active=True, is_featured=True).order_by("-created_at").limit(limit).all().items

    def bestsellers(self, limit=8):
        return self._dao.query.filter(is_active=True).order_by("-sold_count").limit(limit).all().items

    def related(self, product, limit=4):
        if not product.category_id:
            return []
        candidates = (
            self._dao.query.filter(is_active=True, category_id=str(product.category_id))
            .order_by("-sold_count")
            .limit(limit + 1)
            .all()
            .items
        )
        return [p for p in candidates if str(p.id) != str(product.id)][:limit]
