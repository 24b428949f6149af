"""Fixed-point helpers for money, ratio and cost-basis arithmetic.

Every amount in felosy is a ``Decimal``. Floats are accepted at the boundary
but converted through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` rather
than its binary approximation. Rounding is always ``ROUND_HALF_UP``.

Scales:
    money: 2 places (values, prices, P/L, zakat)
    ratio: 4 places (returns, shares of net worth, cap rate, ROI)
    cost:  6 places (running cost basis and average cost)
    qty:   6 places (metal weights after refinement)
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from felosy.core.exceptions import ValidationError
from felosy.core.types import Numeric

MONEY_PLACES = Decimal("0.01")
RATIO_PLACES = Decimal("0.0001")
COST_PLACES = Decimal("0.000001")
QUANTITY_PLACES = Decimal("0.000001")

ZERO = Decimal("0")
ONE = Decimal("1")


def to_decimal(value: Numeric, field: str = "value") -> Decimal:
    """Convert ``value`` to a finite ``Decimal``.

    Raises:
        ValidationError: for None, booleans, unparseable strings, NaN or infinity.
    """
    if value is None:
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValidationError(f"{field} must be a number, got {value!r}") from e
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")
    return result


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def quantize_ratio(value: Decimal) -> Decimal:
    return value.quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)


def quantize_cost(value: Decimal) -> Decimal:
    return value.quantize(COST_PLACES, rounding=ROUND_HALF_UP)


def quantize_quantity(value: Decimal) -> Decimal:
    return value.quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)


def money_at_scale(value: Decimal) -> Decimal:
    """Quantize to 2 places unless ``value`` already carries more precision."""
    if value.as_tuple().exponent < -2:
        return value
    return quantize_money(value)


def require_positive(value: Numeric, field: str) -> Decimal:
    """Return ``value`` as Decimal, raising ValidationError unless it is > 0."""
    result = to_decimal(value, field)
    if result <= ZERO:
        raise ValidationError(f"{field} must be positive, got {result}")
    return result


def require_non_negative(value: Numeric, field: str) -> Decimal:
    """Return ``value`` as Decimal, raising ValidationError if it is < 0."""
    result = to_decimal(value, field)
    if result < ZERO:
        raise ValidationError(f"{field} cannot be negative, got {result}")
    return result


def require_fraction(value: Numeric, field: str) -> Decimal:
    """Return ``value`` as Decimal, raising ValidationError unless 0 <= value <= 1."""
    result = to_decimal(value, field)
    if result < ZERO or result > ONE:
        raise ValidationError(f"{field} must be between 0 and 1, got {result}")
    return result
