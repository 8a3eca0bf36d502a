"""
Budget and transaction aggregation.

Every function here is pure: a snapshot of one user's budgets and
transactions goes in, derived figures come out. Records are read only
through attribute access (``category``, ``amount``, ``date``), so ORM rows
and plain objects with the same attributes are both accepted.

Money is handled as ``Decimal``. Rounding for display is left to the caller.
"""
import datetime
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

ZERO = Decimal("0")
HUNDRED = Decimal("100")

DANGER_THRESHOLD = Decimal("90")
WARNING_THRESHOLD = Decimal("75")

SAFE = "safe"
WARNING = "warning"
DANGER = "danger"


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def is_expense(transaction) -> bool:
    # The amount sign is the only direction signal read here.
    return to_decimal(transaction.amount) < 0


def is_income(transaction) -> bool:
    return to_decimal(transaction.amount) > 0


@dataclass(frozen=True)
class BudgetUsage:
    category: str
    amount: Decimal
    spent: Decimal
    percentage: Decimal
    status: str

    def to_dict(self):
        return _as_json(self)


@dataclass(frozen=True)
class OverspentCategory:
    category: str
    overspent: Decimal
    percentage: Decimal

    def to_dict(self):
        return _as_json(self)


@dataclass(frozen=True)
class MonthlyStat:
    category: str
    amount: Decimal
    spent: Decimal
    remaining: Decimal

    def to_dict(self):
        return _as_json(self)


@dataclass(frozen=True)
class Totals:
    income: Decimal
    expenses: Decimal
    balance: Decimal

    def to_dict(self):
        return _as_json(self)


def _as_json(record) -> dict:
    return {key: float(value) if isinstance(value, Decimal) else value
            for key, value in asdict(record).items()}


def spent_for_category(transactions: Iterable, category: str) -> Decimal:
    """Total expense (as a positive number) recorded against ``category``."""
    return sum(
        (abs(to_decimal(t.amount)) for t in transactions
         if t.category == category and is_expense(t)),
        ZERO,
    )


def usage_percentage(spent, allotted) -> Decimal:
    """
    ``spent`` as a percentage of ``allotted``.

    A zero allotment has no meaningful percentage; it is reported as 0 so
    that nothing non-finite ever reaches display code.
    """
    allotted = to_decimal(allotted)
    if allotted == 0:
        return ZERO
    return to_decimal(spent) / allotted * HUNDRED


def classify_usage(percentage) -> str:
    percentage = to_decimal(percentage)
    if percentage >= DANGER_THRESHOLD:
        return DANGER
    if percentage >= WARNING_THRESHOLD:
        return WARNING
    return SAFE


def budget_usage(budget, transactions: Sequence) -> BudgetUsage:
    spent = spent_for_category(transactions, budget.category)
    percentage = usage_percentage(spent, budget.amount)
    return BudgetUsage(
        category=budget.category,
        amount=to_decimal(budget.amount),
        spent=spent,
        percentage=percentage,
        status=classify_usage(percentage),
    )


def budget_usage_report(budgets: Iterable, transactions: Sequence) -> List[BudgetUsage]:
    """Usage for every budget, in input order. Duplicate categories are reported separately."""
    transactions = list(transactions)
    return [budget_usage(b, transactions) for b in budgets]


def top_overspent_categories(budgets: Iterable, transactions: Sequence, limit: int = 3) -> List[OverspentCategory]:
    """
    Budgets whose spending exceeds the allotment, largest overspend first.

    Ties keep their input order. An empty result means every budget is
    within its limit.
    """
    if limit <= 0:
        return []
    transactions = list(transactions)
    overspent = []
    for budget in budgets:
        spent = spent_for_category(transactions, budget.category)
        amount = to_decimal(budget.amount)
        excess = spent - amount
        if excess > 0:
            overspent.append(OverspentCategory(
                category=budget.category,
                overspent=excess,
                percentage=usage_percentage(spent, amount),
            ))
    # sorted() is stable, reverse=True included
    overspent = sorted(overspent, key=lambda entry: entry.overspent, reverse=True)
    return overspent[:limit]


def _in_month(value, month: int, year: Optional[int]) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        value = datetime.date.fromisoformat(value[:10])
    if value.month != month:
        return False
    return year is None or value.year == year


def monthly_rollup(budgets: Iterable, transactions: Sequence, month_index: int,
                   year: Optional[int] = None, across_years: bool = False) -> List[MonthlyStat]:
    """
    Spend against each budget for one calendar month.

    ``month_index`` is zero-based (January is 0). Only ``year`` is counted,
    the current year when omitted; ``across_years=True`` matches the month
    in every year instead.
    """
    if not 0 <= month_index <= 11:
        raise ValueError(f"month_index must be between 0 and 11, got {month_index}")
    month = month_index + 1
    if across_years:
        year = None
    elif year is None:
        year = datetime.date.today().year

    monthly = [t for t in transactions if is_expense(t) and _in_month(t.date, month, year)]
    stats = []
    for budget in budgets:
        spent = spent_for_category(monthly, budget.category)
        amount = to_decimal(budget.amount)
        stats.append(MonthlyStat(
            category=budget.category,
            amount=amount,
            spent=spent,
            remaining=amount - spent,
        ))
    return stats


def totals(transactions: Iterable) -> Totals:
    income = ZERO
    expenses = ZERO
    for t in transactions:
        amount = to_decimal(t.amount)
        if amount > 0:
            income += amount
        elif amount < 0:
            expenses += -amount
    return Totals(income=income, expenses=expenses, balance=income - expenses)
