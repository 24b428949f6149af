"""Financial calculators: zakat and compliance screening."""

from .compliance import (
    PROHIBITED_ACTIVITIES,
    ComplianceRule,
    ComplianceScreen,
    RuleType,
    ScreeningResult,
    default_rules,
)
from .zakat import (
    BASE_ZAKAT_RATE,
    ZakatConfig,
    ZakatEngine,
    ZakatResult,
    ZakatStatus,
    calculate_zakat,
    check_nisab,
)

__all__ = [
    "BASE_ZAKAT_RATE",
    "PROHIBITED_ACTIVITIES",
    "ComplianceRule",
    "ComplianceScreen",
    "RuleType",
    "ScreeningResult",
    "ZakatConfig",
    "ZakatEngine",
    "ZakatResult",
    "ZakatStatus",
    "calculate_zakat",
    "check_nisab",
    "default_rules",
]
