"""Guidance rules - deterministic financial health checks over a snapshot"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from guidance_engine.config import settings
from guidance_engine.domain.models import (
    AccountType,
    CircleStatus,
    FinancialSnapshot,
    Notification,
    NotificationType,
    Priority,
    TransactionType,
)
from guidance_engine.utils.date_utils import as_date, days_until, next_monthly_occurrence


def resolve_now(now: Optional[datetime]) -> datetime:
    """Use the injected clock value, reading the wall clock only when none is given"""
    return now if now is not None else datetime.now()


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.0f} {settings.currency}"


def _plural(count: int, word: str = "day") -> str:
    return f"{count} {word}" if abs(count) == 1 else f"{count} {word}s"


# ============================================================================
# SHARED CALCULATIONS
# ============================================================================


def get_total_balance(snapshot: FinancialSnapshot) -> Decimal:
    """
    Net balance across accounts.

    Loan balances are liabilities and are subtracted. A snapshot without
    accounts falls back to the caller-supplied total_balance.
    """
    if not snapshot.accounts:
        return snapshot.total_balance

    total = Decimal("0")
    for account in snapshot.accounts:
        if account.type == AccountType.LOAN:
            total -= account.balance
        else:
            total += account.balance
    return total


def calculate_average_daily_spend(
    snapshot: FinancialSnapshot,
    now: datetime,
    lookback_days: Optional[int] = None,
) -> Decimal:
    """Average daily expense over the trailing window (today inclusive)"""
    lookback_days = lookback_days or settings.spend_lookback_days
    today = as_date(now)

    total_spent = sum(
        (
            tx.amount
            for tx in snapshot.transactions
            if tx.type == TransactionType.EXPENSE
            and 0 <= days_until(today, tx.date) < lookback_days
        ),
        Decimal("0"),
    )
    return total_spent / lookback_days


def calculate_runway_days(balance: Decimal, daily_spend: Decimal) -> Optional[int]:
    """
    Whole days the balance covers at the current spend rate.

    Returns None when there is no spending, since the runway is unbounded.
    """
    if daily_spend <= 0:
        return None
    return math.floor(balance / daily_spend)


def classify_runway(runway_days: Optional[int]) -> Optional[Priority]:
    """
    Map runway to a priority band (first match wins):
    - < runway_high_days:   high (includes zero and negative runway)
    - < runway_medium_days: medium
    - otherwise:            no signal
    """
    if runway_days is None:
        return None
    if runway_days < settings.runway_high_days:
        return Priority.HIGH
    elif runway_days < settings.runway_medium_days:
        return Priority.MEDIUM
    return None


# ============================================================================
# RULE A: CASH RUNWAY
# ============================================================================


def check_cash_runway(snapshot: FinancialSnapshot, *, now: Optional[datetime] = None) -> List[Notification]:
    """Warn when the balance covers less than a week of spending"""
    now = resolve_now(now)
    balance = get_total_balance(snapshot)
    daily_spend = calculate_average_daily_spend(snapshot, now)
    runway = calculate_runway_days(balance, daily_spend)
    priority = classify_runway(runway)

    if priority is None:
        return []

    today = as_date(now).isoformat()
    if priority == Priority.HIGH:
        if runway <= 0:
            message = (
                f"URGENT: Your balance of {format_amount(balance)} no longer covers your spending "
                f"of ~{format_amount(daily_spend)} per day."
            )
        else:
            message = (
                f"URGENT: Only {_plural(runway)} of expenses covered. "
                "Consider reducing spending immediately."
            )
        return [
            Notification(
                id=f"cash-runway-high-{today}",
                type=NotificationType.CASH_RISK,
                title="Cash Emergency",
                message=message,
                priority=Priority.HIGH,
                created_at=now,
            )
        ]

    return [
        Notification(
            id=f"cash-runway-medium-{today}",
            type=NotificationType.CASH_RISK,
            title="Low Cash Runway",
            message=f"You have approximately {_plural(runway)} of expenses covered. Time to slow down spending.",
            priority=Priority.MEDIUM,
            created_at=now,
        )
    ]


# ============================================================================
# RULE B: UPCOMING PAYMENT RISK
# ============================================================================


def check_payment_risk(snapshot: FinancialSnapshot, *, now: Optional[datetime] = None) -> List[Notification]:
    """
    Flag active bills inside the lookahead window that the balance cannot cover.

    Bills are walked in due-date order. Each one is checked against the balance
    left after projected daily spending up to its due date and after the bills
    due before it. Due today escalates to critical.
    """
    now = resolve_now(now)
    today = as_date(now)
    balance = get_total_balance(snapshot)
    daily_spend = calculate_average_daily_spend(snapshot, now)

    upcoming = []
    for bill in snapshot.recurring_transactions:
        if not bill.is_active:
            continue
        days = days_until(bill.next_due_date, today)
        if 0 <= days <= settings.payment_lookahead_days:
            upcoming.append((days, bill))
    upcoming.sort(key=lambda item: (item[0], item[1].id))

    notifications: List[Notification] = []
    emitted = set()
    committed = Decimal("0")
    for days, bill in upcoming:
        projected_balance = balance - daily_spend * days - committed
        committed += bill.amount

        if bill.amount <= projected_balance:
            continue

        notification_id = f"payment-risk-{bill.id}-{as_date(bill.next_due_date).isoformat()}"
        if notification_id in emitted:
            continue
        emitted.add(notification_id)

        shortfall = math.ceil(bill.amount - projected_balance)
        when = "today" if days == 0 else f"in {_plural(days)}"
        notifications.append(
            Notification(
                id=notification_id,
                type=NotificationType.PAYMENT_RISK,
                title=f"Cannot Cover {bill.name}",
                message=(
                    f"Your {bill.name} payment of {format_amount(bill.amount)} is due {when}. "
                    f"You'll be short by ~{format_amount(Decimal(shortfall))}."
                ),
                priority=Priority.CRITICAL if days == 0 else Priority.HIGH,
                created_at=now,
            )
        )

    return notifications


# ============================================================================
# RULE C: BUDGET BURN
# ============================================================================


def check_budget_burn(snapshot: FinancialSnapshot, *, now: Optional[datetime] = None) -> List[Notification]:
    """One combined warning when several categories are over budget at once"""
    now = resolve_now(now)
    over_budget = [cat for cat in snapshot.budget_categories if cat.spent > cat.allocated]

    if len(over_budget) < settings.budget_burn_min_categories:
        return []

    total_overage = sum((cat.spent - cat.allocated for cat in over_budget), Decimal("0"))
    names = ", ".join(cat.name for cat in over_budget)

    return [
        Notification(
            id=f"budget-burn-multiple-{as_date(now):%Y-%m}",
            type=NotificationType.BUDGET_BURN,
            title="Multiple Budgets Exceeded",
            message=(
                f"{len(over_budget)} categories are over budget by {format_amount(total_overage)} total "
                f"({names}). Consider reallocating your budget."
            ),
            priority=Priority.HIGH,
            created_at=now,
        )
    ]


# ============================================================================
# RULE D: GOAL DELAY
# ============================================================================


def check_goal_delay(snapshot: FinancialSnapshot, *, now: Optional[datetime] = None) -> List[Notification]:
    """
    Flag goals that missed their deadline or are saving too slowly.

    D1: deadline passed while under target -> high.
    D2: deadline within the pace horizon and the required daily saving exceeds
        goal_pace_factor x the recent contribution rate -> medium.
    """
    now = resolve_now(now)
    today = as_date(now)
    lookback = settings.goal_contribution_lookback_days
    notifications: List[Notification] = []

    for goal in snapshot.savings_goals:
        if goal.deadline is None or goal.current_amount >= goal.target_amount:
            continue

        days_left = days_until(goal.deadline, today)
        remaining = goal.target_amount - goal.current_amount

        if days_left < 0:
            notifications.append(
                Notification(
                    id=f"goal-delay-{goal.id}-{as_date(goal.deadline).isoformat()}",
                    type=NotificationType.GOAL_DELAY,
                    title=f"{goal.title} Deadline Passed",
                    message=(
                        f"Your goal deadline was {_plural(-days_left)} ago. "
                        f"{format_amount(remaining)} still needed."
                    ),
                    priority=Priority.HIGH,
                    created_at=now,
                )
            )
            continue

        if not 0 < days_left <= settings.goal_pace_horizon_days:
            continue

        required_daily = remaining / days_left
        recent_contributions = sum(
            (
                tx.amount
                for tx in snapshot.transactions
                if tx.goal_id == goal.id and 0 <= days_until(today, tx.date) < lookback
            ),
            Decimal("0"),
        )
        current_daily = recent_contributions / lookback

        if required_daily > current_daily * settings.goal_pace_factor:
            needed_monthly = math.ceil(required_daily * 30)
            notifications.append(
                Notification(
                    id=f"goal-pace-{goal.id}-{today.isoformat()}",
                    type=NotificationType.GOAL_DELAY,
                    title=f"{goal.title} Falling Behind",
                    message=(
                        f"To reach your goal on time, save {format_amount(Decimal(needed_monthly))}/month. "
                        f"{_plural(days_left)} remaining."
                    ),
                    priority=Priority.MEDIUM,
                    created_at=now,
                )
            )

    return notifications


# ============================================================================
# RULE E: COMMUNITY PAYMENT RISK (Iqub/Iddir)
# ============================================================================


@dataclass(frozen=True)
class CommunityPayment:
    """Upcoming contribution to an iqub or iddir"""

    kind: str  # "iqub" | "iddir"
    source_id: str
    name: str
    amount: Decimal
    due_date: date
    days: int


def collect_community_payments(snapshot: FinancialSnapshot, today: date) -> List[CommunityPayment]:
    """Active iqub/iddir payments due within the community lookahead, earliest first"""
    horizon = settings.community_lookahead_days
    payments: List[CommunityPayment] = []

    for iqub in snapshot.iqubs:
        if iqub.status != CircleStatus.ACTIVE:
            continue
        days = days_until(iqub.next_payment_date, today)
        if 0 <= days <= horizon:
            payments.append(
                CommunityPayment("iqub", iqub.id, iqub.title, iqub.amount, as_date(iqub.next_payment_date), days)
            )

    for iddir in snapshot.iddirs:
        if iddir.status != CircleStatus.ACTIVE:
            continue
        due = next_monthly_occurrence(iddir.payment_date, today)
        # already paid for this cycle
        if iddir.last_paid_date is not None:
            paid = as_date(iddir.last_paid_date)
            if (paid.year, paid.month) == (due.year, due.month):
                continue
        days = days_until(due, today)
        if days <= horizon:
            payments.append(
                CommunityPayment("iddir", iddir.id, iddir.name, iddir.monthly_contribution, due, days)
            )

    payments.sort(key=lambda p: (p.due_date, p.kind, p.source_id))
    return payments


def _first_overlap(payments: List[CommunityPayment]) -> List[CommunityPayment]:
    window = settings.community_overlap_window_days
    for index, first in enumerate(payments):
        cluster = [p for p in payments[index:] if (p.due_date - first.due_date).days < window]
        if len(cluster) >= 2:
            return cluster
    return []


def check_community_risk(snapshot: FinancialSnapshot, *, now: Optional[datetime] = None) -> List[Notification]:
    """
    Two independent checks over active community funds:

    E1 overlap: two or more payments inside one window. Medium when they take
        more than community_overlap_balance_ratio of the balance, else low.
    E2 shortage: all upcoming payments together exceed the balance (high).
        When the total is covered, single payments due within
        community_reserve_days that take more than community_reserve_ratio of
        the balance get a medium reserve-funds notice.
    """
    now = resolve_now(now)
    today = as_date(now)
    balance = get_total_balance(snapshot)
    payments = collect_community_payments(snapshot, today)
    notifications: List[Notification] = []

    if not payments:
        return notifications

    cluster = _first_overlap(payments)
    if cluster:
        cluster_total = sum((p.amount for p in cluster), Decimal("0"))
        strained = cluster_total > balance * settings.community_overlap_balance_ratio
        notifications.append(
            Notification(
                id=f"community-overlap-{cluster[0].due_date.isoformat()}",
                type=NotificationType.COMMUNITY_OVERLAP,
                title="Multiple Community Payments",
                message=(
                    f"{len(cluster)} payments ({format_amount(cluster_total)}) due within a week: "
                    f"{', '.join(p.name for p in cluster)}."
                ),
                priority=Priority.MEDIUM if strained else Priority.LOW,
                created_at=now,
            )
        )

    total_due = sum((p.amount for p in payments), Decimal("0"))
    if total_due > balance:
        notifications.append(
            Notification(
                id=f"community-shortage-{today.isoformat()}",
                type=NotificationType.COMMUNITY_SHORTAGE,
                title="Community Payments Exceed Balance",
                message=(
                    f"Upcoming community payments total {format_amount(total_due)} but your balance is "
                    f"{format_amount(balance)}. You'll be short by ~{format_amount(total_due - balance)}."
                ),
                priority=Priority.HIGH,
                created_at=now,
            )
        )
        return notifications

    for payment in payments:
        if payment.days <= settings.community_reserve_days and payment.amount > balance * settings.community_reserve_ratio:
            when = "today" if payment.days == 0 else f"in {_plural(payment.days)}"
            notifications.append(
                Notification(
                    id=f"community-reserve-{payment.kind}-{payment.source_id}-{payment.due_date.isoformat()}",
                    type=NotificationType.COMMUNITY_SHORTAGE,
                    title=f"Reserve Funds for {payment.name}",
                    message=(
                        f"{payment.name} payment of {format_amount(payment.amount)} due {when}. "
                        "Set aside funds now."
                    ),
                    priority=Priority.MEDIUM,
                    created_at=now,
                )
            )

    return notifications
