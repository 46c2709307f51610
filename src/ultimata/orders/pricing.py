"""Order pricing calculations.

All amounts are Decimal and rounded with banker's rounding
(ROUND_HALF_EVEN) to two places.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN

ZERO = Decimal("0")


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round a monetary amount using banker's rounding."""
    quantize_str = "0." + "0" * places
    return amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class PricedLine:
    """One order line priced at the product's live price."""

    product_id: int
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal


def calculate_totals(
    lines: list[PricedLine],
    discount_percentage: Decimal = ZERO,
    discounted_product_ids: set | None = None,
    tax_rate: Decimal = ZERO,
) -> OrderTotals:
    """Compute order totals.

    The discount applies to the lines whose product is in
    ``discounted_product_ids`` (every line when None). Tax is charged on
    the discounted subtotal.

    Args:
        lines: Priced order lines
        discount_percentage: Percentage off, 0-100
        discounted_product_ids: Products the discount covers
        tax_rate: Fractional tax rate (0.12 for 12%)

    Returns:
        OrderTotals with every amount rounded to cents
    """
    subtotal = sum((line.line_total for line in lines), ZERO)
    eligible = sum(
        (
            line.line_total
            for line in lines
            if discounted_product_ids is None or line.product_id in discounted_product_ids
        ),
        ZERO,
    )

    discount = round_money(eligible * discount_percentage / Decimal("100"))
    taxable = subtotal - discount
    tax = round_money(taxable * tax_rate)

    return OrderTotals(
        subtotal=round_money(subtotal),
        discount=discount,
        tax=tax,
        total=round_money(taxable + tax),
    )
