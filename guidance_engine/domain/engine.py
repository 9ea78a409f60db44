"""Guidance aggregator - runs every rule and merges the signals"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from guidance_engine.domain.models import FinancialSnapshot, Notification
from guidance_engine.domain.rules import (
    check_budget_burn,
    check_cash_runway,
    check_community_risk,
    check_goal_delay,
    check_payment_risk,
    resolve_now,
)

logger = logging.getLogger(__name__)

Rule = Callable[..., List[Notification]]

# Evaluation order doubles as the tie-break within a priority band
RULES: Dict[str, Rule] = {
    "cash-runway": check_cash_runway,
    "payment-risk": check_payment_risk,
    "budget-burn": check_budget_burn,
    "goal-delay": check_goal_delay,
    "community-risk": check_community_risk,
}


def check_financial_health(
    snapshot: FinancialSnapshot,
    *,
    now: Optional[datetime] = None,
    seen_ids: Optional[Iterable[str]] = None,
) -> List[Notification]:
    """
    Main entry point: run all guidance rules and return notifications.

    Notifications whose id is in seen_ids (the caller's "already notified"
    record) are dropped, as are repeated ids. The result is sorted by priority,
    most urgent first, keeping rule order within a band.
    """
    now = resolve_now(now)
    seen = set(seen_ids or ())

    collected: List[Notification] = []
    for rule_name, rule in RULES.items():
        for notification in rule(snapshot, now=now):
            if notification.id in seen:
                continue
            seen.add(notification.id)
            collected.append(notification)
        logger.debug("Rule evaluated", extra={"rule": rule_name, "collected": len(collected)})

    return sorted(collected, key=lambda n: n.priority.rank, reverse=True)
