"""
Compliance screen: Islamic-finance suitability of each holding.

Default rule set:
- No interest (riba): the instrument must not be interest-bearing
- Ethical business: no prohibited business activity
- Debt ratio: total debt / market cap must not exceed 33%
- Non-permissible income: must not exceed 5% of revenue

Rules read the ``ScreeningProfile`` carried on each ``AssetSnapshot``. A
holding passes when every active rule passes; a portfolio passes when every
holding does.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum

from loguru import logger

from felosy.core.exceptions import ValidationError
from felosy.financial.models import AssetSnapshot, PortfolioSnapshot, ScreeningProfile
from felosy.financial.money import require_fraction

DEFAULT_MAX_DEBT_RATIO = Decimal("0.33")
DEFAULT_MAX_NON_PERMISSIBLE_INCOME = Decimal("0.05")

PROHIBITED_ACTIVITIES = frozenset(
    {
        "alcohol",
        "gambling",
        "pork",
        "tobacco",
        "adult_entertainment",
        "conventional_banking",
        "conventional_insurance",
        "weapons",
    }
)


class RuleType(StrEnum):
    INTEREST_BASED = "interest_based"
    ETHICAL_BUSINESS = "ethical_business"
    DEBT_RATIO = "debt_ratio"
    NON_HALAL_INCOME = "non_halal_income"
    CUSTOM = "custom"


@dataclass
class ComplianceRule:
    """A single screening rule.

    ``threshold`` is the maximum allowed ratio for the ratio rules and is
    ignored by the yes/no rules. CUSTOM rules carry their own ``predicate``.
    """

    name: str
    description: str
    rule_type: RuleType
    threshold: Decimal = Decimal("0")
    active: bool = True
    predicate: object = None  # Callable[[ScreeningProfile], bool] for CUSTOM rules
    rule_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        self.threshold = require_fraction(self.threshold, "threshold")
        if self.rule_type is RuleType.CUSTOM and not callable(self.predicate):
            raise ValidationError(f"Custom rule {self.name!r} needs a callable predicate")

    def passes(self, profile: ScreeningProfile, prohibited: frozenset[str] = PROHIBITED_ACTIVITIES) -> bool:
        match self.rule_type:
            case RuleType.INTEREST_BASED:
                return not profile.interest_bearing
            case RuleType.ETHICAL_BUSINESS:
                return not (profile.business_activities & prohibited)
            case RuleType.DEBT_RATIO:
                return profile.debt_ratio <= self.threshold
            case RuleType.NON_HALAL_INCOME:
                return profile.non_permissible_income_ratio <= self.threshold
            case RuleType.CUSTOM:
                return bool(self.predicate(profile))

    def __str__(self) -> str:
        return f"{self.name} ({self.rule_type}): {self.description}"


def default_rules(
    max_debt_ratio: Decimal = DEFAULT_MAX_DEBT_RATIO,
    max_non_permissible_income: Decimal = DEFAULT_MAX_NON_PERMISSIBLE_INCOME,
) -> list[ComplianceRule]:
    return [
        ComplianceRule("No Interest", "Asset must not be based on interest (riba)", RuleType.INTEREST_BASED),
        ComplianceRule(
            "Ethical Business",
            "Company must not be involved in prohibited activities",
            RuleType.ETHICAL_BUSINESS,
        ),
        ComplianceRule(
            "Debt Ratio",
            f"Debt ratio must not exceed {max_debt_ratio:.0%}",
            RuleType.DEBT_RATIO,
            threshold=max_debt_ratio,
        ),
        ComplianceRule(
            "Non-Halal Income",
            f"Non-compliant income must not exceed {max_non_permissible_income:.0%} of revenue",
            RuleType.NON_HALAL_INCOME,
            threshold=max_non_permissible_income,
        ),
    ]


@dataclass
class ScreeningResult:
    """Outcome of screening one holding."""

    asset_id: str
    name: str
    compliant: bool
    failed_rules: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "asset_id": self.asset_id,
            "name": self.name,
            "compliant": self.compliant,
            "failed_rules": list(self.failed_rules),
        }


class ComplianceScreen:
    """Applies a rule set to portfolio snapshots."""

    def __init__(
        self,
        rules: list[ComplianceRule] | None = None,
        prohibited_activities: frozenset[str] | set[str] | None = None,
    ):
        self.rules = rules if rules is not None else default_rules()
        if prohibited_activities is None:
            prohibited_activities = PROHIBITED_ACTIVITIES
        self.prohibited_activities = frozenset(a.strip().lower() for a in prohibited_activities)

    @classmethod
    def from_settings(cls, settings) -> ComplianceScreen:
        """Build from a validated ``ScreeningSettings`` section."""
        return cls(default_rules(settings.max_debt_ratio, settings.max_non_permissible_income))

    @property
    def active_rules(self) -> list[ComplianceRule]:
        return [rule for rule in self.rules if rule.active]

    def add_rule(self, rule: ComplianceRule) -> None:
        self.rules.append(rule)

    def set_rule_active(self, name: str, active: bool) -> None:
        for rule in self.rules:
            if rule.name == name:
                rule.active = active
                return
        raise ValidationError(f"No rule named {name!r}")

    def evaluate(self, holding: AssetSnapshot) -> ScreeningResult:
        failed = [
            rule.name for rule in self.active_rules if not rule.passes(holding.screening, self.prohibited_activities)
        ]
        if failed:
            logger.warning(f"{holding.asset_id} ({holding.name}) failed screening: {', '.join(failed)}")
        return ScreeningResult(
            asset_id=holding.asset_id,
            name=holding.name,
            compliant=not failed,
            failed_rules=failed,
        )

    def check_compliance(self, holding: AssetSnapshot) -> bool:
        return self.evaluate(holding).compliant

    def is_compliant(self, snapshot: PortfolioSnapshot) -> bool:
        """True when every holding passes (an empty portfolio is compliant)."""
        return all(self.check_compliance(h) for h in snapshot.holdings)

    def filter_non_compliant(self, snapshot: PortfolioSnapshot) -> tuple[AssetSnapshot, ...]:
        return tuple(h for h in snapshot.holdings if not self.check_compliance(h))

    def screen(self, snapshot: PortfolioSnapshot) -> dict[str, bool]:
        """Compliance flag per asset id."""
        results = {h.asset_id: self.check_compliance(h) for h in snapshot.holdings}
        logger.debug(
            f"Screened portfolio {snapshot.portfolio_id}: "
            f"{sum(results.values())}/{len(results)} holdings compliant"
        )
        return results

    def evaluate_all(self, snapshot: PortfolioSnapshot) -> list[ScreeningResult]:
        return [self.evaluate(h) for h in snapshot.holdings]
