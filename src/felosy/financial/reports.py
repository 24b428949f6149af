"""Plain-text and dict reports built from portfolio snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from .calculators.compliance import ComplianceScreen
from .calculators.zakat import ZakatResult
from .models import PortfolioSnapshot
from .money import ZERO, quantize_money, quantize_ratio

WIDTH = 60


def _report_id(prefix: str, portfolio_id: str) -> str:
    return f"{prefix}-{portfolio_id[:8]}"


def _fmt(value) -> str:
    if isinstance(value, Decimal):
        return f"{value:,}"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


@dataclass
class Report:
    """A titled list of (label, value) items for one portfolio."""

    report_id: str
    title: str
    owner_id: str
    generated_at: datetime = field(default_factory=datetime.now)
    items: list[tuple[str, object]] = field(default_factory=list)

    def add(self, label: str, value) -> None:
        self.items.append((label, value))

    @property
    def data(self) -> dict[str, object]:
        return dict(self.items)

    def format_text(self) -> str:
        """Format report as text table."""
        lines = []
        lines.append("=" * WIDTH)
        lines.append(f"  {self.title}")
        lines.append("=" * WIDTH)
        lines.append(f"Report: {self.report_id}")
        lines.append(f"Owner: {self.owner_id}")
        lines.append(f"Generated: {self.generated_at:%Y-%m-%d %H:%M}")
        lines.append("-" * WIDTH)
        for label, value in self.items:
            lines.append(f"{label:<36} {_fmt(value):>22}")
        lines.append("-" * WIDTH)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "title": self.title,
            "owner_id": self.owner_id,
            "generated_at": self.generated_at.isoformat(),
            "data": {label: str(value) if isinstance(value, Decimal) else value for label, value in self.items},
        }


def zakat_report(result: ZakatResult, snapshot: PortfolioSnapshot) -> Report:
    report = Report(
        report_id=_report_id("ZKT", snapshot.portfolio_id),
        title="Zakat Calculation Report",
        owner_id=snapshot.owner_id,
    )
    report.add("Holdings assessed", len(result.asset_ids))
    report.add("Zakatable wealth", result.zakatable_wealth)
    report.add("Nisab threshold", result.nisab_threshold)
    report.add("Meets nisab", result.meets_nisab)
    report.add("Zakat rate", result.zakat_rate)
    for kind, amount in result.by_kind.items():
        report.add(f"  on {kind.label}", amount)
    report.add("Zakat due", result.zakat_due)
    return report


def compliance_report(screen: ComplianceScreen, snapshot: PortfolioSnapshot) -> Report:
    report = Report(
        report_id=_report_id("HLR", snapshot.portfolio_id),
        title="Halal Compliance Report",
        owner_id=snapshot.owner_id,
    )
    results = screen.evaluate_all(snapshot)
    report.add("Holdings screened", len(results))
    report.add("Compliant holdings", sum(1 for r in results if r.compliant))
    report.add("Portfolio compliant", all(r.compliant for r in results))
    for r in results:
        report.add(r.name, "compliant" if r.compliant else "fails: " + ", ".join(r.failed_rules))
    return report


def portfolio_summary(snapshot: PortfolioSnapshot) -> Report:
    report = Report(
        report_id=_report_id("PFS", snapshot.portfolio_id),
        title="Portfolio Summary",
        owner_id=snapshot.owner_id,
    )
    net_worth = quantize_money(snapshot.net_worth)
    invested = quantize_money(snapshot.total_invested)
    report.add("Holdings", len(snapshot))
    report.add("Net worth", net_worth)
    report.add("Total invested", invested)
    report.add("Unrealized gain", quantize_money(net_worth - invested))
    for kind, value in snapshot.value_by_kind().items():
        share = quantize_ratio(value / net_worth) if net_worth > ZERO else quantize_ratio(ZERO)
        report.add(f"  {kind.label} share", share)
    return report
