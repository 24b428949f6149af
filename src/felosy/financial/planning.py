"""
Financial planning: savings goals, monthly cash flow and target allocation.

A plan tracks:
- Goals with a target amount, accumulated progress, priority and status
- Monthly income and expenses, and the savings they leave
- The portfolio's current allocation against a suggested one

Allocations are shares of net worth per asset kind (0-1, 4 places), the same
scale as ``Portfolio.get_asset_distribution()``. A suggested allocation may
sum to less than 1; the remainder is held as cash outside the portfolio.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_CEILING, Decimal
from enum import StrEnum

from loguru import logger

from felosy.core.exceptions import GoalNotFoundError, StateError, ValidationError

from .models import AssetKind, PortfolioSnapshot
from .money import ONE, ZERO, quantize_money, quantize_ratio, require_fraction, require_non_negative, require_positive
from .portfolio import owner_key

HUNDRED = Decimal("100")


class GoalPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class GoalStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


def _member(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Unknown {field_name} {value!r}; expected one of {choices}") from e


def _weights(mapping, field_name: str, check_total: bool = True) -> dict[AssetKind, Decimal]:
    """Validate a kind -> share mapping: each share in [0, 1], total at most 1.

    Measured allocations skip the total check; their rounded shares can sum
    to slightly more than 1.
    """
    weights = {
        _member(AssetKind, kind, "asset kind"): require_fraction(share, f"{field_name}[{kind}]")
        for kind, share in (mapping or {}).items()
    }
    total = sum(weights.values(), ZERO)
    if check_total and total > ONE:
        raise ValidationError(f"{field_name} shares must sum to at most 1, got {total}")
    return weights


# Stocks 50%, real estate 25%, gold 15%, crypto 5%; the last 5% stays in cash
DEFAULT_SUGGESTED_ALLOCATION = {
    AssetKind.EQUITY: Decimal("0.50"),
    AssetKind.PROPERTY: Decimal("0.25"),
    AssetKind.PRECIOUS_METAL: Decimal("0.15"),
    AssetKind.COIN: Decimal("0.05"),
}


class FinancialGoal:
    """A savings target tracked toward completion.

    Status follows progress: the first contribution moves a goal to
    ``IN_PROGRESS`` and reaching the target marks it ``COMPLETED``. A goal
    on hold keeps accumulating but stays on hold until it is complete.
    """

    def __init__(
        self,
        goal_type: str,
        target_amount,
        priority: GoalPriority | str = GoalPriority.MEDIUM,
        target_date: date | None = None,
        goal_id: str | None = None,
    ):
        if goal_type is None or not str(goal_type).strip():
            raise ValidationError("goal_type cannot be empty")
        self.goal_id = goal_id or str(uuid.uuid4())
        self.goal_type = str(goal_type).strip()
        self.target_amount = quantize_money(require_positive(target_amount, "target_amount"))
        self.created_at = datetime.now()
        self._current_amount = ZERO
        self._priority = _member(GoalPriority, priority, "priority")
        self._status = GoalStatus.NOT_STARTED
        self._target_date = self._check_target_date(target_date) if target_date is not None else None
        self._updated_at = self.created_at
        self._lock = threading.Lock()

    @property
    def current_amount(self) -> Decimal:
        return self._current_amount

    @property
    def priority(self) -> GoalPriority:
        return self._priority

    @property
    def status(self) -> GoalStatus:
        return self._status

    @property
    def target_date(self) -> date | None:
        return self._target_date

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def progress(self) -> Decimal:
        """Share of the target reached (may exceed 1 after overfunding)."""
        return quantize_ratio(self._current_amount / self.target_amount)

    @property
    def progress_percentage(self) -> Decimal:
        return quantize_money(self._current_amount / self.target_amount * HUNDRED)

    @property
    def remaining_amount(self) -> Decimal:
        return max(ZERO, quantize_money(self.target_amount - self._current_amount))

    @property
    def is_complete(self) -> bool:
        return self._current_amount >= self.target_amount

    def _check_target_date(self, target_date) -> date:
        if isinstance(target_date, datetime):
            target_date = target_date.date()
        if not isinstance(target_date, date):
            raise ValidationError(f"target_date must be a date, got {target_date!r}")
        if target_date < self.created_at.date():
            raise ValidationError(f"Target date {target_date} is before the goal was created")
        return target_date

    def update_progress(self, amount) -> Decimal:
        """Add a contribution and return the new accumulated amount."""
        try:
            contribution = quantize_money(require_positive(amount, "amount"))
        except ValidationError:
            logger.warning(f"Rejected contribution {amount!r} to goal {self.goal_type}")
            raise

        with self._lock:
            self._current_amount += contribution
            if self._current_amount >= self.target_amount:
                self._status = GoalStatus.COMPLETED
            elif self._status == GoalStatus.NOT_STARTED:
                self._status = GoalStatus.IN_PROGRESS
            self._updated_at = datetime.now()
            total = self._current_amount
        logger.info(f"Goal {self.goal_type}: +{contribution}, now {total} of {self.target_amount}")
        return total

    def update_target_date(self, target_date: date) -> None:
        checked = self._check_target_date(target_date)
        with self._lock:
            self._target_date = checked
            self._updated_at = datetime.now()
        logger.info(f"Goal {self.goal_type}: target date {checked}")

    def update_priority(self, priority: GoalPriority | str) -> None:
        new_priority = _member(GoalPriority, priority, "priority")
        with self._lock:
            self._priority = new_priority
            self._updated_at = datetime.now()
        logger.info(f"Goal {self.goal_type}: priority {new_priority}")

    def update_status(self, status: GoalStatus | str) -> None:
        """Set the status by hand.

        Raises:
            StateError: marking an unfunded goal completed, or resetting a
                funded goal to not started.
        """
        new_status = _member(GoalStatus, status, "status")
        with self._lock:
            if new_status == GoalStatus.COMPLETED and self._current_amount < self.target_amount:
                raise StateError(f"Goal {self.goal_type} is {self.remaining_amount} short of its target")
            if new_status == GoalStatus.NOT_STARTED and self._current_amount > ZERO:
                raise StateError(f"Goal {self.goal_type} already has contributions")
            self._status = new_status
            self._updated_at = datetime.now()
        logger.info(f"Goal {self.goal_type}: status {new_status}")

    def to_dict(self) -> dict:
        return {
            "goal_id": self.goal_id,
            "goal_type": self.goal_type,
            "target_amount": str(self.target_amount),
            "current_amount": str(self._current_amount),
            "remaining_amount": str(self.remaining_amount),
            "progress_percentage": str(self.progress_percentage),
            "priority": self._priority.value,
            "status": self._status.value,
            "target_date": self._target_date.isoformat() if self._target_date else None,
        }

    def __repr__(self) -> str:
        return f"FinancialGoal(goal_type={self.goal_type!r}, {self._current_amount}/{self.target_amount})"


@dataclass
class AssetAllocation:
    """Current versus suggested shares of net worth per asset kind."""

    current: dict[AssetKind, Decimal] = field(default_factory=dict)
    suggested: dict[AssetKind, Decimal] = field(default_factory=lambda: dict(DEFAULT_SUGGESTED_ALLOCATION))

    def __post_init__(self):
        self.current = _weights(self.current, "current", check_total=False)
        self.suggested = _weights(self.suggested, "suggested")

    @classmethod
    def from_portfolio(cls, portfolio, suggested: dict | None = None) -> AssetAllocation:
        current = portfolio.get_asset_distribution()
        if suggested is None:
            return cls(current=current)
        return cls(current=current, suggested=suggested)

    @property
    def cash_share(self) -> Decimal:
        """Part of the suggested allocation left outside the portfolio."""
        return ONE - sum(self.suggested.values(), ZERO)

    def compare(self) -> dict[AssetKind, Decimal]:
        """Suggested minus current share per kind; positive means underweight.

        Covers every kind in either allocation, suggested kinds first.
        """
        kinds = list(self.suggested) + [k for k in self.current if k not in self.suggested]
        return {
            kind: quantize_ratio(self.suggested.get(kind, ZERO) - self.current.get(kind, ZERO)) for kind in kinds
        }

    def rebalancing_amounts(self, net_worth) -> dict[AssetKind, Decimal]:
        """Money to move into (positive) or out of (negative) each kind."""
        worth = require_non_negative(net_worth, "net_worth")
        return {kind: quantize_money(diff * worth) for kind, diff in self.compare().items()}

    def apply_suggested(self) -> None:
        self.current = dict(self.suggested)

    def to_dict(self) -> dict:
        return {
            "current": {kind.value: str(share) for kind, share in self.current.items()},
            "suggested": {kind.value: str(share) for kind, share in self.suggested.items()},
            "differences": {kind.value: str(diff) for kind, diff in self.compare().items()},
        }


class FinancialPlan:
    """One owner's goals, monthly cash flow and allocation target."""

    def __init__(self, owner_id: str, suggested_allocation: dict | None = None, plan_id: str | None = None):
        self.owner_id = owner_key(owner_id)
        self.plan_id = plan_id or str(uuid.uuid4())
        self.created_at = datetime.now()
        self.updated_at = self.created_at
        self.total_assets = ZERO
        self.monthly_income = ZERO
        self.monthly_expenses = ZERO
        if suggested_allocation is None:
            self.allocation = AssetAllocation()
        else:
            self.allocation = AssetAllocation(suggested=suggested_allocation)
        self._goals: dict[str, FinancialGoal] = {}
        self._lock = threading.Lock()

    # --- goals --------------------------------------------------------------

    def add_goal(
        self,
        goal_type: str,
        target_amount,
        priority: GoalPriority | str = GoalPriority.MEDIUM,
        target_date: date | None = None,
    ) -> FinancialGoal:
        goal = FinancialGoal(goal_type, target_amount, priority=priority, target_date=target_date)
        with self._lock:
            self._goals[goal.goal_id] = goal
            self.updated_at = datetime.now()
        logger.info(f"Plan {self.plan_id}: added goal {goal.goal_type} with target {goal.target_amount}")
        return goal

    def get_goal(self, goal_id: str) -> FinancialGoal:
        with self._lock:
            goal = self._goals.get(goal_id)
        if goal is None:
            raise GoalNotFoundError(f"Goal {goal_id} not found in plan {self.plan_id}")
        return goal

    def remove_goal(self, goal_id: str) -> bool:
        with self._lock:
            removed = self._goals.pop(goal_id, None)
            if removed is not None:
                self.updated_at = datetime.now()
        if removed is not None:
            logger.info(f"Plan {self.plan_id}: removed goal {removed.goal_type}")
        return removed is not None

    @property
    def goals(self) -> tuple[FinancialGoal, ...]:
        with self._lock:
            return tuple(self._goals.values())

    def goals_by_priority(self) -> list[FinancialGoal]:
        """Open goals, most urgent first, then by the least remaining."""
        order = list(GoalPriority)
        open_goals = [g for g in self.goals if g.status != GoalStatus.COMPLETED]
        return sorted(open_goals, key=lambda g: (-order.index(g.priority), g.remaining_amount))

    # --- cash flow and assets -----------------------------------------------

    def update_cash_flow(self, income, expenses) -> None:
        new_income = quantize_money(require_non_negative(income, "income"))
        new_expenses = quantize_money(require_non_negative(expenses, "expenses"))
        with self._lock:
            self.monthly_income = new_income
            self.monthly_expenses = new_expenses
            self.updated_at = datetime.now()
        logger.info(f"Plan {self.plan_id}: income {new_income}, expenses {new_expenses}")

    @property
    def monthly_savings(self) -> Decimal:
        return self.monthly_income - self.monthly_expenses

    @property
    def savings_rate(self) -> Decimal:
        """Savings as a share of income; 0 without income."""
        if self.monthly_income == ZERO:
            return quantize_ratio(ZERO)
        return quantize_ratio(self.monthly_savings / self.monthly_income)

    def months_to_goal(self, goal_id: str) -> int | None:
        """Whole months of current savings needed to finish a goal.

        None when the plan saves nothing each month.
        """
        goal = self.get_goal(goal_id)
        remaining = goal.remaining_amount
        if remaining == ZERO:
            return 0
        savings = self.monthly_savings
        if savings <= ZERO:
            return None
        return int((remaining / savings).to_integral_value(rounding=ROUND_CEILING))

    def update_assets(self, snapshot: PortfolioSnapshot) -> None:
        """Take total assets and the current allocation from one snapshot."""
        total = quantize_money(snapshot.net_worth)
        current = snapshot.distribution()
        with self._lock:
            self.total_assets = total
            self.allocation.current = current
            self.updated_at = datetime.now()
        logger.info(f"Plan {self.plan_id}: total assets {total} across {len(current)} kinds")

    def apply_suggested_allocation(self) -> None:
        with self._lock:
            self.allocation.apply_suggested()
            self.updated_at = datetime.now()
        logger.info(f"Plan {self.plan_id}: applied suggested allocation")

    # --- reporting ----------------------------------------------------------

    def generate_report(self) -> dict:
        goals = self.goals
        return {
            "plan_id": self.plan_id,
            "owner_id": self.owner_id,
            "total_assets": str(self.total_assets),
            "monthly_income": str(self.monthly_income),
            "monthly_expenses": str(self.monthly_expenses),
            "monthly_savings": str(self.monthly_savings),
            "savings_rate": str(self.savings_rate),
            "allocation": self.allocation.to_dict(),
            "rebalancing": {k.value: str(v) for k, v in self.allocation.rebalancing_amounts(self.total_assets).items()},
            "goals_progress": {g.goal_type: str(g.progress_percentage) for g in goals},
            "goals": [g.to_dict() for g in goals],
        }

    def __repr__(self) -> str:
        return f"FinancialPlan(plan_id={self.plan_id!r}, owner_id={self.owner_id!r}, goals={len(self.goals)})"
