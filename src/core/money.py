"""Fixed-point decimal helpers used at the service boundary."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from core.exceptions import InvalidInput

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# quantity x price (2 dp) x percentage (2 dp) / 100 fits exactly in 6 dp.
COMMISSION_UNIT = Decimal("0.000001")
# Largest values the (14, 2) money and (18, 6) commission columns hold.
MAX_MONEY = Decimal("999999999999.99")
MAX_COMMISSION = Decimal("999999999999.999999")


def parse_decimal(value, *, field: str, default: Decimal | None = None) -> Decimal:
    """Convert *value* to a finite ``Decimal`` or raise :class:`InvalidInput`.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Booleans are rejected even though
    they are ints.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise InvalidInput(f"{field} is required", field=field)
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number", field=field)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip().replace(",", ""))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInput(f"{field} must be a number", field=field)
    if not result.is_finite():
        raise InvalidInput(f"{field} must be a finite number", field=field)
    return result


def parse_positive_amount(value, *, field: str) -> Decimal:
    """Parse a money amount that must be strictly positive, at cent precision."""
    amount = parse_decimal(value, field=field)
    if amount <= 0:
        raise InvalidInput(f"{field} must be greater than zero", field=field)
    ensure_within(amount, field=field)
    if amount != amount.quantize(CENT):
        raise InvalidInput(f"{field} cannot have more than two decimal places", field=field)
    return amount.quantize(CENT)


def ensure_within(value: Decimal, *, field: str, limit: Decimal = MAX_MONEY) -> Decimal:
    """Return *value* unchanged, or raise :class:`InvalidInput` if it exceeds *limit*."""
    if value > limit:
        raise InvalidInput(f"{field} exceeds the maximum of {limit}", field=field)
    return value


def parse_quantity(value, *, field: str = "quantity") -> int:
    """Parse an integral quantity (sign is checked by the caller)."""
    number = parse_decimal(value, field=field)
    if number != number.to_integral_value():
        raise InvalidInput(f"{field} must be a whole number", field=field)
    return int(number)


def _as_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    """Round an aggregate coming back from the store to cents."""
    return _as_decimal(value).quantize(CENT)


def quantize_commission(value) -> Decimal:
    """Round to the storage precision of accrued commission amounts."""
    return _as_decimal(value).quantize(COMMISSION_UNIT)
