"""Order pricing rules: flat-rate shipping with a free threshold, VAT on the discounted subtotal.

Amounts are whole rupiah. The constants can be overridden through the
environment (FREE_SHIPPING_THRESHOLD, FLAT_SHIPPING_FEE, TAX_RATE,
DEFAULT_PAYMENT_METHOD).
"""

import os
from dataclasses import dataclass
from decimal import Decimal

from storefront.shared.money import round_half_up

FREE_SHIPPING_THRESHOLD = int(os.getenv("FREE_SHIPPING_THRESHOLD", "100000"))
FLAT_SHIPPING_FEE = int(os.getenv("FLAT_SHIPPING_FEE", "15000"))
TAX_RATE = float(os.getenv("TAX_RATE", "0.11"))
DEFAULT_PAYMENT_METHOD = os.getenv("DEFAULT_PAYMENT_METHOD", "transfer")


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    discount: float
    shipping_cost: int
    tax: int
    total: float


def shipping_cost_for(subtotal) -> int:
    return 0 if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def tax_for(taxable) -> int:
    return round_half_up(Decimal(str(taxable)) * Decimal(str(TAX_RATE)))


def price_order(subtotal, discount=0) -> OrderTotals:
    """Shipping is judged on the pre-discount subtotal; tax on subtotal minus discount."""
    shipping_cost = shipping_cost_for(subtotal)
    tax = tax_for(subtotal - discount)
    return OrderTotals(
        subtotal=subtotal,
        discount=discount,
        shipping_cost=shipping_cost,
        tax=tax,
        total=subtotal - discount + shipping_cost + tax,
    )
