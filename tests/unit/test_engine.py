"""Unit tests for the guidance aggregator"""

from datetime import date, timedelta
from decimal import Decimal
from guidance_engine.domain.engine import RULES, check_financial_health
from guidance_engine.domain.models import (
    Account,
    BudgetCategory,
    FinancialSnapshot,
    NotificationType,
    Priority,
    RecurringTransaction,
    SavingsGoal,
)

TODAY = date(2025, 1, 1)

OVER_BUDGET = [
    BudgetCategory("1", "Food", Decimal("1000"), Decimal("1100")),
    BudgetCategory("2", "Transport", Decimal("500"), Decimal("600")),
]


def test_empty_snapshot_has_no_notifications(now):
    assert check_financial_health(FinancialSnapshot(), now=now) == []


def test_rules_registry_covers_every_rule():
    assert list(RULES) == ["cash-runway", "payment-risk", "budget-burn", "goal-delay", "community-risk"]


def test_sorted_by_priority_then_rule_order(now, make_expenses):
    """High budget burn first, then the medium signals in rule order"""
    snapshot = FinancialSnapshot(
        accounts=[Account("acc", Decimal("5000"))],
        transactions=make_expenses(1000),
        budget_categories=OVER_BUDGET,
        savings_goals=[
            SavingsGoal("g", "Phone", Decimal("3000"), Decimal("0"), TODAY + timedelta(days=30))
        ],
    )

    result = check_financial_health(snapshot, now=now)

    assert [(n.type, n.priority) for n in result] == [
        (NotificationType.BUDGET_BURN, Priority.HIGH),
        (NotificationType.CASH_RISK, Priority.MEDIUM),
        (NotificationType.GOAL_DELAY, Priority.MEDIUM),
    ]


def test_critical_sorts_before_high(now):
    snapshot = FinancialSnapshot(
        accounts=[Account("acc", Decimal("100"))],
        budget_categories=OVER_BUDGET,
        recurring_transactions=[RecurringTransaction("rent", "Rent", Decimal("1000"), TODAY)],
    )

    result = check_financial_health(snapshot, now=now)

    assert [n.priority for n in result] == [Priority.CRITICAL, Priority.HIGH]
    assert result[0].type == NotificationType.PAYMENT_RISK


def test_seen_ids_are_not_re_alerted(now):
    snapshot = FinancialSnapshot(budget_categories=OVER_BUDGET)

    first = check_financial_health(snapshot, now=now)
    second = check_financial_health(snapshot, now=now, seen_ids=[n.id for n in first])

    assert len(first) == 1
    assert second == []


def test_evaluation_is_deterministic(now, make_expenses):
    snapshot = FinancialSnapshot(
        accounts=[Account("acc", Decimal("2000"))],
        transactions=make_expenses(1000),
        budget_categories=OVER_BUDGET,
    )

    assert check_financial_health(snapshot, now=now) == check_financial_health(snapshot, now=now)


def test_ids_are_stable_within_the_same_day(now, make_expenses):
    """Re-evaluating later the same day reproduces the same ids"""
    snapshot = FinancialSnapshot(accounts=[Account("acc", Decimal("2000"))], transactions=make_expenses(1000))

    morning = check_financial_health(snapshot, now=now)
    evening = check_financial_health(snapshot, now=now + timedelta(hours=20))

    assert [n.id for n in morning] == [n.id for n in evening]
