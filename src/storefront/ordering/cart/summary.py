"""Cart read model: cart lines joined with live product and variant data."""

from dataclasses import dataclass, field
from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.ordering.cart.items import load_cart
from storefront.ordering.pricing import shipping_cost_for


@dataclass
class CartLine:
    item_id: str
    product: Product
    variant: object | None
    variant_id: str | None
    quantity: int
    added_at: datetime | None

    @property
    def unit_price(self) -> float:
        return self.product.price_for(self.variant)

    @property
    def available_stock(self) -> int:
        # A line whose variant has gone away has nothing left to sell
        if self.variant_id and self.variant is None:
            return 0
        return self.product.stock_for(self.variant)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@dataclass
class CartSummary:
    subtotal: float = 0
    shipping: int = 0
    total: float = 0
    item_count: int = 0


@dataclass
class CartView:
    user_id: str
    lines: list[CartLine] = field(default_factory=list)
    summary: CartSummary = field(default_factory=CartSummary)


def cart_lines(user_id) -> list[CartLine]:
    """The user's cart lines, newest first, each joined with its product and variant."""
    cart = load_cart(user_id)
    if cart is None:
        return []

    repo = current_domain.repository_for(Product)
    products: dict[str, Product] = {}
    lines = []
    for item in cart.items:
        key = str(item.product_id)
        if key not in products:
            try:
                products[key] = repo.get(key)
            except ObjectNotFoundError:
                continue
        product = products[key]
        lines.append(
            CartLine(
                item_id=str(item.id),
                product=product,
                variant=product.variant_for(item.variant_id),
                variant_id=str(item.variant_id) if item.variant_id else None,
                quantity=item.quantity,
                added_at=item.added_at,
            )
        )
    lines.sort(key=lambda line: line.added_at.timestamp() if line.added_at else 0, reverse=True)
    return lines


def summarize(lines) -> CartSummary:
    subtotal = sum(line.line_total for line in lines)
    shipping = shipping_cost_for(subtotal)
    return CartSummary(
        subtotal=subtotal,
        shipping=shipping,
        total=subtotal + shipping,
        item_count=sum(line.quantity for line in lines),
    )


def build_cart_view(user_id) -> CartView:
    lines = cart_lines(user_id)
    return CartView(user_id=str(user_id), lines=lines, summary=summarize(lines))
