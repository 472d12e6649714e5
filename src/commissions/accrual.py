"""Commission accrual for sales-order line items.

The amounts are computed once, when an order line is priced, and stored on
the line. ``commission_amount`` is exact: a whole quantity times a two-decimal
price times a two-decimal percentage, divided by 100, never needs more than
six decimal places.
"""
from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple

from core.exceptions import InvalidInput
from core.money import CENT, COMMISSION_UNIT, MAX_COMMISSION, ensure_within, parse_decimal, parse_quantity

HUNDRED = Decimal("100")
# Column limits of SalesOrderItem.quantity and SalesOrderItem.unit_price.
MAX_QUANTITY = 2_147_483_647
MAX_UNIT_PRICE = Decimal("9999999999.99")


class CommissionAccrual(NamedTuple):
    line_total: Decimal
    commission_amount: Decimal


def validate_commission_inputs(quantity, unit_price, commission_percentage) -> None:
    """Raise :class:`InvalidInput` listing every rule the inputs break."""
    errors = []
    if quantity is None or quantity <= 0:
        errors.append("quantity must be positive")
    elif quantity > MAX_QUANTITY:
        errors.append("quantity is too large")
    if unit_price is None or unit_price < 0:
        errors.append("unit price cannot be negative")
    elif unit_price > MAX_UNIT_PRICE:
        errors.append("unit price is too large")
    if (
        commission_percentage is None
        or commission_percentage < 0
        or commission_percentage > HUNDRED
    ):
        errors.append("commission percentage out of range")
    if errors:
        raise InvalidInput("; ".join(errors))


def calculate_commission(quantity, unit_price, commission_percentage) -> CommissionAccrual:
    """Return the line total and accrued commission for one order line.

    Parameters
    ----------
    quantity : int | str
        Whole number of units, strictly positive.
    unit_price : Decimal | str | int | float
        Price per unit, at most two decimal places, not negative.
    commission_percentage : Decimal | str | int | float
        Rate between 0 and 100 inclusive, at most two decimal places.

    Returns
    -------
    CommissionAccrual
        ``line_total`` at cent precision and ``commission_amount`` at the
        six-decimal storage precision, both exact.
    """
    qty = parse_quantity(quantity)
    price = parse_decimal(unit_price, field="unit_price")
    pct = parse_decimal(commission_percentage, field="commission_percentage")

    validate_commission_inputs(qty, price, pct)
    if price != price.quantize(CENT):
        raise InvalidInput("unit price cannot have more than two decimal places", field="unit_price")
    if pct != pct.quantize(CENT):
        raise InvalidInput(
            "commission percentage cannot have more than two decimal places",
            field="commission_percentage",
        )

    line_total = ensure_within(qty * price, field="line_total").quantize(CENT)
    commission_amount = ensure_within(
        line_total * pct / HUNDRED, field="commission_amount", limit=MAX_COMMISSION,
    ).quantize(COMMISSION_UNIT)
    return CommissionAccrual(line_total=line_total, commission_amount=commission_amount)
