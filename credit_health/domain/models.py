"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class _Rating(str, Enum):
    """Closed categorical rating with an explicit unknown arm"""

    @classmethod
    def parse(cls, value: object) -> "_Rating":
        """Case-insensitive lookup; anything unrecognised maps to UNKNOWN"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class PaymentHistoryRating(_Rating):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNKNOWN = "unknown"


class CreditMixRating(_Rating):
    EXCELLENT = "excellent"
    GOOD = "good"
    LIMITED = "limited"
    POOR = "poor"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CreditAssessment:
    """Self-reported credit profile submitted by a user"""

    current_score: int
    goal_score: int
    payment_history: PaymentHistoryRating
    total_credit_balance: float
    total_credit_limit: float
    credit_history_length: int  # months
    credit_mix: CreditMixRating
    new_credit_inquiries: int  # hard inquiries, trailing 12 months
    monthly_income: float
    has_collections: bool = False
    has_bankruptcy: bool = False
    has_foreclosure: bool = False


@dataclass(frozen=True)
class ScoreFactor:
    """One weighted contribution to the estimated score"""

    name: str
    impact: float
    max_impact: int
    percentage: int


@dataclass(frozen=True)
class DerogatorySummary:
    """Derogatory marks present and their combined penalty"""

    collections: bool
    bankruptcy: bool
    foreclosure: bool
    total_impact: int


@dataclass(frozen=True)
class ScoreFactorBreakdown:
    """Output of the factor scoring model"""

    estimated_score: int
    factors: List[ScoreFactor]
    derogatory: DerogatorySummary


@dataclass(frozen=True)
class Account:
    """Linked financial account as held in storage"""

    external_id: str
    name: str
    account_type: str  # checking, savings, credit
    balance: float
    institution_name: str = ""


@dataclass(frozen=True)
class Budget:
    """Budget allocation for a spending category"""

    category: str
    amount: float
    period: str = "monthly"


@dataclass(frozen=True)
class Transaction:
    """Posted transaction on a linked account"""

    amount: float
    date: datetime
    category: str = ""
    description: str = ""


@dataclass(frozen=True)
class FinancialContext:
    """Aggregate financial picture handed to the plan generator"""

    total_balance: float
    monthly_budget: float
    recent_spending: float
    connected_accounts: int


@dataclass(frozen=True)
class PrioritizedAction:
    """Single recommended action in an improvement plan"""

    action: str
    impact: str  # High | Medium | Low
    timeframe: str
    description: str


@dataclass(frozen=True)
class MonthlyTaskSet:
    """Tasks scheduled for one month of the plan horizon"""

    month: int
    tasks: List[str]
    expected_progress: str


@dataclass(frozen=True)
class ImprovementPlan:
    """Credit improvement plan produced by the text generation service"""

    overall_analysis: str
    current_score_analysis: str
    time_to_goal: str
    prioritized_actions: List[PrioritizedAction]
    monthly_tasks: List[MonthlyTaskSet]
    tips: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RefreshDecision:
    """Admission decision for an account refresh"""

    allowed: bool
    remaining_minutes: Optional[int] = None


@dataclass(frozen=True)
class RefreshStats:
    """Snapshot of refresh limiter state for monitoring"""

    total_tracked_users: int
    refreshes_in_last_hour: int
