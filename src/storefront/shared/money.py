"""Rupiah amounts: half-up rounding and display formatting."""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(amount) -> int:
    """Round to the nearest whole rupiah, halves away from zero.

    Python's ``round`` uses banker's rounding (``round(0.5) == 0``), which
    disagrees with how tax is rounded on invoices.
    """
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount) -> str:
    """``150000 -> "Rp 150.000"``; fractional amounts are rounded first."""
    grouped = f"{round_half_up(amount):,}".replace(",", ".")
    return f"Rp {grouped}"
