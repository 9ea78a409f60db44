"""Transaction simulation - preview a transaction's impact before it is saved"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from guidance_engine.domain.engine import check_financial_health
from guidance_engine.domain.models import (
    Account,
    AccountType,
    BudgetCategory,
    BudgetImpact,
    FinancialSnapshot,
    ProposedTransaction,
    SimulationSummary,
    TransactionType,
)
from guidance_engine.domain.rules import (
    calculate_average_daily_spend,
    calculate_runway_days,
    get_total_balance,
    resolve_now,
)


def _balance_delta(proposed: ProposedTransaction) -> Decimal:
    """Signed effect on net balance; transfers move money between own accounts"""
    if proposed.type == TransactionType.EXPENSE:
        return -proposed.amount
    if proposed.type == TransactionType.INCOME:
        return proposed.amount
    return Decimal("0")


def _target_account_index(accounts: List[Account], account_id: Optional[str]) -> int:
    """Named account, else the first non-loan account, else the first account"""
    if account_id is not None:
        for index, account in enumerate(accounts):
            if account.id == account_id:
                return index
    for index, account in enumerate(accounts):
        if account.type != AccountType.LOAN:
            return index
    return 0


def _matching_category(
    categories: List[BudgetCategory], proposed: ProposedTransaction
) -> Optional[BudgetCategory]:
    if proposed.type != TransactionType.EXPENSE or not proposed.category:
        return None
    for category in categories:
        if proposed.category in (category.name, category.id):
            return category
    return None


def project_snapshot(snapshot: FinancialSnapshot, proposed: ProposedTransaction) -> FinancialSnapshot:
    """
    Copy of the snapshot with the proposed transaction applied.

    Balances and the matching budget category move; the transaction history
    does not, so spend velocity is the same before and after.
    """
    delta = _balance_delta(proposed)

    accounts = list(snapshot.accounts)
    if delta and accounts:
        index = _target_account_index(accounts, proposed.account_id)
        target = accounts[index]
        # spending from a loan account grows the liability
        signed = -delta if target.type == AccountType.LOAN else delta
        accounts[index] = replace(target, balance=target.balance + signed)

    categories = list(snapshot.budget_categories)
    matched = _matching_category(categories, proposed)
    if matched is not None:
        index = categories.index(matched)
        categories[index] = replace(matched, spent=matched.spent + proposed.amount)

    return replace(
        snapshot,
        accounts=accounts,
        budget_categories=categories,
        total_balance=snapshot.total_balance + delta,
    )


def simulate_transaction(
    snapshot: FinancialSnapshot,
    proposed: ProposedTransaction,
    *,
    now: Optional[datetime] = None,
) -> SimulationSummary:
    """
    Before/after projection of a proposed transaction.

    Runway uses the same formula as the cash runway rule on both snapshots.
    Risks are every notification the projected snapshot triggers;
    new_risk_ids marks those the current snapshot does not already trigger.
    The caller's snapshot is never mutated.
    """
    now = resolve_now(now)
    projected = project_snapshot(snapshot, proposed)

    before_balance = get_total_balance(snapshot)
    after_balance = get_total_balance(projected)
    before_runway = calculate_runway_days(before_balance, calculate_average_daily_spend(snapshot, now))
    after_runway = calculate_runway_days(after_balance, calculate_average_daily_spend(projected, now))

    current_ids = {n.id for n in check_financial_health(snapshot, now=now)}
    risks = check_financial_health(projected, now=now)
    new_risk_ids = [n.id for n in risks if n.id not in current_ids]

    budget_impact = None
    matched = _matching_category(snapshot.budget_categories, proposed)
    if matched is not None:
        budget_impact = BudgetImpact(
            category=matched.name,
            allocated=matched.allocated,
            before_spent=matched.spent,
            after_spent=matched.spent + proposed.amount,
        )

    return SimulationSummary(
        before_balance=before_balance,
        after_balance=after_balance,
        before_runway=before_runway,
        after_runway=after_runway,
        risks=risks,
        new_risk_ids=new_risk_ids,
        budget_impact=budget_impact,
    )
