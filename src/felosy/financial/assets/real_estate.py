"""
Real estate holdings.

A property has no market quote. Its current value is stored and changes
only through explicit commands:

    revalue()                 -> current_value = estimate_value()
    apply_appreciation(r, n)  -> current_value *= (1 + r) ** n

estimate_value():
    base         = area * BASE_RATE[property_type]
    annual_net   = rent * 12 * occupancy - (tax + maintenance + insurance)
    income_value = annual_net * 10
    value        = (base + income_value) / 2   if rent > 0 else base
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from loguru import logger

from felosy.core.exceptions import InvalidAppreciationError, ValidationError
from felosy.financial.models import AssetKind, PropertyType, ScreeningProfile, positive_money
from felosy.financial.money import (
    ONE,
    ZERO,
    quantize_money,
    quantize_ratio,
    require_fraction,
    require_non_negative,
    require_positive,
    to_decimal,
)

from .base import Asset, require_text

# Placeholder value per unit of area
BASE_RATE: dict[PropertyType, Decimal] = {
    PropertyType.SINGLE_FAMILY_RESIDENTIAL: Decimal("2000"),
    PropertyType.MULTI_FAMILY_RESIDENTIAL: Decimal("1800"),
    PropertyType.OFFICE: Decimal("2500"),
    PropertyType.INDUSTRIAL: Decimal("1200"),
    PropertyType.RETAIL: Decimal("2200"),
    PropertyType.SELF_STORAGE: Decimal("900"),
    PropertyType.LAND: Decimal("500"),
    PropertyType.HOTELS_HOSPITALS: Decimal("3000"),
    PropertyType.MIXED_USE: Decimal("2100"),
    PropertyType.OTHER: Decimal("2000"),
}

INCOME_MULTIPLIER = Decimal("10")
MONTHS_PER_YEAR = 12


def _property_type(value: PropertyType | str) -> PropertyType:
    if isinstance(value, PropertyType):
        return value
    try:
        return PropertyType(str(value).strip().lower())
    except ValueError as e:
        raise ValidationError(f"Unknown property type: {value}") from e


class Property(Asset):
    """Land or buildings, valued analytically from area, type and income."""

    kind = AssetKind.PROPERTY

    def __init__(
        self,
        asset_id: str,
        name: str,
        purchase_date: date,
        purchase_price: Decimal,
        location: str,
        area: Decimal,
        property_type: PropertyType | str = PropertyType.SINGLE_FAMILY_RESIDENTIAL,
        monthly_rental_income: Decimal = ZERO,
        occupancy_rate: Decimal = ONE,
        property_tax: Decimal = ZERO,
        maintenance_cost: Decimal = ZERO,
        insurance_cost: Decimal = ZERO,
        current_value: Decimal | None = None,
        *,
        screening: ScreeningProfile | None = None,
    ):
        super().__init__(asset_id, name, purchase_date, purchase_price, screening=screening)
        self._location = require_text(location, "location")
        self._area = require_positive(area, "area")
        self._property_type = _property_type(property_type)
        self._monthly_rent = require_non_negative(monthly_rental_income, "monthly_rental_income")
        self._occupancy = require_fraction(occupancy_rate, "occupancy_rate")
        self._property_tax = require_non_negative(property_tax, "property_tax")
        self._maintenance = require_non_negative(maintenance_cost, "maintenance_cost")
        self._insurance = require_non_negative(insurance_cost, "insurance_cost")
        if current_value is None:
            self._current_value = self.purchase_price
        else:
            self._current_value = positive_money(current_value, "current_value")

    @property
    def location(self) -> str:
        return self._location

    @property
    def area(self) -> Decimal:
        return self._area

    @property
    def property_type(self) -> PropertyType:
        return self._property_type

    @property
    def monthly_rental_income(self) -> Decimal:
        return self._monthly_rent

    @property
    def occupancy_rate(self) -> Decimal:
        return self._occupancy

    @property
    def annual_expenses(self) -> Decimal:
        return self._property_tax + self._maintenance + self._insurance

    def get_current_value(self) -> Decimal:
        return quantize_money(self._current_value)

    def annual_net_income(self) -> Decimal:
        with self._lock:
            gross = self._monthly_rent * MONTHS_PER_YEAR * self._occupancy
            return quantize_money(gross - self.annual_expenses)

    def estimate_value(self) -> Decimal:
        with self._lock:
            base = self._area * BASE_RATE[self._property_type]
            if self._monthly_rent > ZERO:
                income_value = self.annual_net_income() * INCOME_MULTIPLIER
                value = (base + income_value) / 2
            else:
                value = base
        logger.debug(f"Estimated {self.asset_id} ({self._property_type}, {self._area} @ {self._location}): {value}")
        return quantize_money(value)

    def cap_rate(self) -> Decimal:
        """Annual net income over current value."""
        with self._lock:
            return quantize_ratio(self.annual_net_income() / self._current_value)

    def roi(self) -> Decimal:
        """Annual net income over purchase price."""
        with self._lock:
            return quantize_ratio(self.annual_net_income() / self.purchase_price)

    def revalue(self) -> Decimal:
        """Store ``estimate_value()`` as the current value and return it."""
        with self._lock:
            estimate = self.estimate_value()
            if estimate <= ZERO:
                logger.warning(f"Revaluation of {self.asset_id} rejected: estimate {estimate} is not positive")
                raise ValidationError(f"Estimated value must be positive, got {estimate}")
            old = self._current_value
            self._current_value = estimate
            self._touch()
        logger.info(f"Revalued {self.asset_id}: {old} -> {estimate}")
        return estimate

    def apply_appreciation(self, rate, years) -> Decimal:
        """Compound ``rate`` over ``years`` into the current value and return it.

        Raises:
            InvalidAppreciationError: for negative ``years`` or a non-positive result.
        """
        try:
            r = to_decimal(rate, "rate")
            n = to_decimal(years, "years")
        except ValidationError as e:
            raise InvalidAppreciationError(str(e)) from e
        if n < ZERO:
            raise InvalidAppreciationError(f"Years cannot be negative, got {n}")
        if n == ZERO:
            logger.debug(f"Appreciation of {self.asset_id} over 0 years leaves the value unchanged")
            return self.get_current_value()
        factor = ONE + r
        if factor <= ZERO:
            raise InvalidAppreciationError(f"Rate {r} would leave a non-positive value")

        with self._lock:
            # Decimal ** Decimal only accepts fractional exponents for positive bases
            new_value = quantize_money(self._current_value * factor**n)
            if new_value <= ZERO:
                raise InvalidAppreciationError(f"Appreciation by {r} over {n} years leaves {new_value}")
            old = self._current_value
            self._current_value = new_value
            self._touch()
        logger.info(f"Appreciated {self.asset_id} by {r} over {n} years: {old} -> {new_value}")
        return new_value

    def update_details(
        self,
        location: str | None = None,
        area: Decimal | None = None,
        property_type: PropertyType | str | None = None,
        monthly_rental_income: Decimal | None = None,
        occupancy_rate: Decimal | None = None,
        property_tax: Decimal | None = None,
        maintenance_cost: Decimal | None = None,
        insurance_cost: Decimal | None = None,
    ) -> None:
        """Edit descriptive and income fields. All values are validated before any is applied."""
        updates = {}
        if location is not None:
            updates["_location"] = require_text(location, "location")
        if area is not None:
            updates["_area"] = require_positive(area, "area")
        if property_type is not None:
            updates["_property_type"] = _property_type(property_type)
        if monthly_rental_income is not None:
            updates["_monthly_rent"] = require_non_negative(monthly_rental_income, "monthly_rental_income")
        if occupancy_rate is not None:
            updates["_occupancy"] = require_fraction(occupancy_rate, "occupancy_rate")
        if property_tax is not None:
            updates["_property_tax"] = require_non_negative(property_tax, "property_tax")
        if maintenance_cost is not None:
            updates["_maintenance"] = require_non_negative(maintenance_cost, "maintenance_cost")
        if insurance_cost is not None:
            updates["_insurance"] = require_non_negative(insurance_cost, "insurance_cost")

        with self._lock:
            for attr, value in updates.items():
                setattr(self, attr, value)
            self._touch()
