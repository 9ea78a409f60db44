"""Domain models - pure Python dataclasses representing a financial state snapshot"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class AccountType(str, Enum):
    BANK = "Bank"
    MOBILE_MONEY = "MobileMoney"
    CASH = "Cash"
    LOAN = "Loan"  # liability, subtracted from net balance


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CircleStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    INACTIVE = "inactive"


class NotificationType(str, Enum):
    CASH_RISK = "cash-risk"
    PAYMENT_RISK = "payment-risk"
    BUDGET_BURN = "budget-burn"
    GOAL_DELAY = "goal-delay"
    COMMUNITY_OVERLAP = "community-overlap"
    COMMUNITY_SHORTAGE = "community-shortage"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Sort weight, higher is more urgent"""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}


@dataclass(frozen=True)
class Account:
    """Money container - bank, mobile wallet, cash or a loan"""

    id: str
    balance: Decimal
    type: AccountType = AccountType.BANK


@dataclass(frozen=True)
class Transaction:
    """Persisted transaction from the user's history"""

    id: str
    type: TransactionType
    amount: Decimal
    date: datetime
    category: str = ""
    goal_id: Optional[str] = None  # set when the transaction funds a savings goal


@dataclass(frozen=True)
class BudgetCategory:
    id: str
    name: str
    allocated: Decimal
    spent: Decimal


@dataclass(frozen=True)
class RecurringTransaction:
    """Recurring bill (rent, subscriptions, utilities)"""

    id: str
    name: str
    amount: Decimal
    next_due_date: date
    is_active: bool = True


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    title: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date] = None


@dataclass(frozen=True)
class Iqub:
    """Rotating savings circle membership"""

    id: str
    title: str
    amount: Decimal
    next_payment_date: date
    status: CircleStatus = CircleStatus.ACTIVE
    paid_rounds: int = 0
    members: int = 0
    has_won: bool = False
    payout_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class Iddir:
    """Mutual-aid fund with a fixed monthly contribution"""

    id: str
    name: str
    monthly_contribution: Decimal
    payment_date: int  # day of month, 1-31
    status: CircleStatus = CircleStatus.ACTIVE
    last_paid_date: Optional[date] = None


@dataclass(frozen=True)
class IncomeSource:
    id: str
    name: str
    amount: Decimal
    frequency: str = "Monthly"
    payday: Optional[int] = None


@dataclass(frozen=True)
class FinancialSnapshot:
    """Read-only view of the user's financial state for one evaluation pass"""

    accounts: List[Account] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    budget_categories: List[BudgetCategory] = field(default_factory=list)
    recurring_transactions: List[RecurringTransaction] = field(default_factory=list)
    savings_goals: List[SavingsGoal] = field(default_factory=list)
    iqubs: List[Iqub] = field(default_factory=list)
    iddirs: List[Iddir] = field(default_factory=list)
    income_sources: List[IncomeSource] = field(default_factory=list)
    total_balance: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")


@dataclass(frozen=True)
class ProposedTransaction:
    """Hypothetical transaction - never persisted, so it carries no id or date"""

    type: TransactionType
    amount: Decimal
    category: Optional[str] = None
    account_id: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    """Guidance signal emitted by a rule"""

    id: str  # deterministic: rule + entity + period
    type: NotificationType
    title: str
    message: str
    priority: Priority
    created_at: datetime


@dataclass(frozen=True)
class BudgetImpact:
    category: str
    allocated: Decimal
    before_spent: Decimal
    after_spent: Decimal


@dataclass(frozen=True)
class SimulationSummary:
    """Before/after projection of a proposed transaction"""

    before_balance: Decimal
    after_balance: Decimal
    before_runway: Optional[int]  # None when there is no spend velocity
    after_runway: Optional[int]
    risks: List[Notification] = field(default_factory=list)
    new_risk_ids: List[str] = field(default_factory=list)  # risks absent before the transaction
    budget_impact: Optional[BudgetImpact] = None
