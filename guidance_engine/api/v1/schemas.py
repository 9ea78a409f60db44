"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from guidance_engine.domain.models import (
    Account,
    AccountType,
    BudgetCategory,
    BudgetImpact,
    CircleStatus,
    FinancialSnapshot,
    Iddir,
    IncomeSource,
    Iqub,
    Notification,
    NotificationType,
    Priority,
    ProposedTransaction,
    RecurringTransaction,
    SavingsGoal,
    SimulationSummary,
    Transaction,
    TransactionType,
)


class AccountSchema(BaseModel):
    id: str
    balance: Decimal
    type: AccountType = AccountType.BANK

    def to_domain(self) -> Account:
        return Account(id=self.id, balance=self.balance, type=self.type)


class TransactionSchema(BaseModel):
    id: str
    type: TransactionType
    amount: Decimal = Field(..., ge=0)
    date: datetime
    category: str = ""
    goal_id: Optional[str] = None

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            type=self.type,
            amount=self.amount,
            date=self.date,
            category=self.category,
            goal_id=self.goal_id,
        )


class BudgetCategorySchema(BaseModel):
    id: str
    name: str
    allocated: Decimal
    spent: Decimal

    def to_domain(self) -> BudgetCategory:
        return BudgetCategory(id=self.id, name=self.name, allocated=self.allocated, spent=self.spent)


class RecurringTransactionSchema(BaseModel):
    id: str
    name: str
    amount: Decimal = Field(..., ge=0)
    next_due_date: date
    is_active: bool = True

    def to_domain(self) -> RecurringTransaction:
        return RecurringTransaction(
            id=self.id,
            name=self.name,
            amount=self.amount,
            next_due_date=self.next_due_date,
            is_active=self.is_active,
        )


class SavingsGoalSchema(BaseModel):
    id: str
    title: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date] = None

    def to_domain(self) -> SavingsGoal:
        return SavingsGoal(
            id=self.id,
            title=self.title,
            target_amount=self.target_amount,
            current_amount=self.current_amount,
            deadline=self.deadline,
        )


class IqubSchema(BaseModel):
    id: str
    title: str
    amount: Decimal = Field(..., ge=0)
    next_payment_date: date
    status: CircleStatus = CircleStatus.ACTIVE
    paid_rounds: int = 0
    members: int = 0
    has_won: bool = False
    payout_amount: Decimal = Decimal("0")

    def to_domain(self) -> Iqub:
        return Iqub(
            id=self.id,
            title=self.title,
            amount=self.amount,
            next_payment_date=self.next_payment_date,
            status=self.status,
            paid_rounds=self.paid_rounds,
            members=self.members,
            has_won=self.has_won,
            payout_amount=self.payout_amount,
        )


class IddirSchema(BaseModel):
    id: str
    name: str
    monthly_contribution: Decimal = Field(..., ge=0)
    payment_date: int = Field(..., ge=1, le=31, description="Day of month")
    status: CircleStatus = CircleStatus.ACTIVE
    last_paid_date: Optional[date] = None

    def to_domain(self) -> Iddir:
        return Iddir(
            id=self.id,
            name=self.name,
            monthly_contribution=self.monthly_contribution,
            payment_date=self.payment_date,
            status=self.status,
            last_paid_date=self.last_paid_date,
        )


class IncomeSourceSchema(BaseModel):
    id: str
    name: str
    amount: Decimal
    frequency: str = "Monthly"
    payday: Optional[int] = Field(None, ge=1, le=31)

    def to_domain(self) -> IncomeSource:
        return IncomeSource(
            id=self.id,
            name=self.name,
            amount=self.amount,
            frequency=self.frequency,
            payday=self.payday,
        )


class SnapshotSchema(BaseModel):
    """Point-in-time financial state supplied by the caller"""

    accounts: List[AccountSchema] = []
    transactions: List[TransactionSchema] = []
    budget_categories: List[BudgetCategorySchema] = []
    recurring_transactions: List[RecurringTransactionSchema] = []
    savings_goals: List[SavingsGoalSchema] = []
    iqubs: List[IqubSchema] = []
    iddirs: List[IddirSchema] = []
    income_sources: List[IncomeSourceSchema] = []
    total_balance: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    def to_domain(self) -> FinancialSnapshot:
        return FinancialSnapshot(
            accounts=[a.to_domain() for a in self.accounts],
            transactions=[t.to_domain() for t in self.transactions],
            budget_categories=[c.to_domain() for c in self.budget_categories],
            recurring_transactions=[r.to_domain() for r in self.recurring_transactions],
            savings_goals=[g.to_domain() for g in self.savings_goals],
            iqubs=[i.to_domain() for i in self.iqubs],
            iddirs=[i.to_domain() for i in self.iddirs],
            income_sources=[s.to_domain() for s in self.income_sources],
            total_balance=self.total_balance,
            total_income=self.total_income,
            total_expense=self.total_expense,
        )


class NotificationSchema(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    priority: Priority
    created_at: datetime

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationSchema":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            priority=notification.priority,
            created_at=notification.created_at,
        )


class GuidanceRequest(BaseModel):
    """Request body for POST /v1/guidance"""

    snapshot: SnapshotSchema
    now: Optional[datetime] = Field(None, description="Evaluation time, defaults to server clock")
    seen_ids: List[str] = Field(default_factory=list, description="Notification ids already shown")


class GuidanceResponse(BaseModel):
    """Response for POST /v1/guidance"""

    notifications: List[NotificationSchema]


class ProposedTransactionSchema(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., ge=0)
    category: Optional[str] = None
    account_id: Optional[str] = None

    def to_domain(self) -> ProposedTransaction:
        return ProposedTransaction(
            type=self.type,
            amount=self.amount,
            category=self.category,
            account_id=self.account_id,
        )


class SimulationRequest(BaseModel):
    """Request body for POST /v1/simulate"""

    snapshot: SnapshotSchema
    transaction: ProposedTransactionSchema
    now: Optional[datetime] = None


class BudgetImpactSchema(BaseModel):
    category: str
    allocated: Decimal
    before_spent: Decimal
    after_spent: Decimal


class SimulationResponse(BaseModel):
    """Response for POST /v1/simulate"""

    before_balance: Decimal
    after_balance: Decimal
    before_runway: Optional[int] = None
    after_runway: Optional[int] = None
    risks: List[NotificationSchema]
    new_risk_ids: List[str] = []
    budget_impact: Optional[BudgetImpactSchema] = None

    @classmethod
    def from_domain(cls, summary: SimulationSummary) -> "SimulationResponse":
        impact: Optional[BudgetImpact] = summary.budget_impact
        return cls(
            before_balance=summary.before_balance,
            after_balance=summary.after_balance,
            before_runway=summary.before_runway,
            after_runway=summary.after_runway,
            risks=[NotificationSchema.from_domain(n) for n in summary.risks],
            new_risk_ids=list(summary.new_risk_ids),
            budget_impact=(
                BudgetImpactSchema(
                    category=impact.category,
                    allocated=impact.allocated,
                    before_spent=impact.before_spent,
                    after_spent=impact.after_spent,
                )
                if impact is not None
                else None
            ),
        )
