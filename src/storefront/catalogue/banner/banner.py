"""Promotional banners shown on the storefront home page."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import Boolean, DateTime, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront


@storefront.aggregate
class Banner:
    title: String(required=True, max_length=150)
    subtitle: String(max_length=255)
    image_url: String(required=True, max_length=500)
    link_url: String(max_length=500)
    sort_order: Integer(default=0)
    is_active: Boolean(default=True)
    created_at: DateTime()


@storefront.command(part_of="Banner")
class CreateBanner:
    title: String(required=True, max_length=150)
    subtitle: String(max_length=255)
    image_url: String(required=True, max_length=500)
    link_url: String(max_length=500)
    sort_order: Integer(default=0)


@storefront.command_handler(part_of=Banner)
class BannerHandler:
    @handle(CreateBanner)
    def create_banner(self, command):
        banner = Banner(
            title=command.title,
            subtitle=command.subtitle,
            image_url=command.image_url,
            link_url=command.link_url,
            sort_order=command.sort_order or 0,
            created_at=datetime.now(UTC),
        )
        current_domain.repository_for(Banner).add(banner)
        return str(banner.id)


def list_active_banners():
    query = current_domain.repository_for(Banner)._dao.query.filter(is_active=True).order_by("sort_order")
    return query.all().items
