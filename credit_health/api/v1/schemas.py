"""Pydantic schemas for API request/response validation"""

from dataclasses import asdict
from pydantic import BaseModel, Field
from typing import List, Optional

from credit_health.domain.models import (
    CreditAssessment,
    CreditMixRating,
    ImprovementPlan,
    PaymentHistoryRating,
    ScoreFactorBreakdown,
)


class CreditAssessmentSchema(BaseModel):
    """Self-reported credit profile; unrecognised ratings score zero"""

    current_score: int
    goal_score: int
    payment_history: str = Field(..., description="excellent | good | fair | poor")
    total_credit_balance: float
    total_credit_limit: float
    credit_history_length: int = Field(..., description="Length of credit history in months")
    credit_mix: str = Field(..., description="excellent | good | limited | poor")
    new_credit_inquiries: int = Field(..., description="Hard inquiries in the last 12 months")
    monthly_income: float
    has_collections: bool = False
    has_bankruptcy: bool = False
    has_foreclosure: bool = False

    def to_domain(self) -> CreditAssessment:
        return CreditAssessment(
            current_score=self.current_score,
            goal_score=self.goal_score,
            payment_history=PaymentHistoryRating.parse(self.payment_history),
            total_credit_balance=self.total_credit_balance,
            total_credit_limit=self.total_credit_limit,
            credit_history_length=self.credit_history_length,
            credit_mix=CreditMixRating.parse(self.credit_mix),
            new_credit_inquiries=self.new_credit_inquiries,
            monthly_income=self.monthly_income,
            has_collections=self.has_collections,
            has_bankruptcy=self.has_bankruptcy,
            has_foreclosure=self.has_foreclosure,
        )


class ScoreFactorSchema(BaseModel):
    name: str
    impact: float
    max_impact: int
    percentage: int


class DerogatorySchema(BaseModel):
    collections: bool
    bankruptcy: bool
    foreclosure: bool
    total_impact: int


class CreditFactorsResponse(BaseModel):
    """Response for POST /v1/credit/factors"""

    estimated_score: int
    factors: List[ScoreFactorSchema]
    derogatory: DerogatorySchema

    @classmethod
    def from_domain(cls, breakdown: ScoreFactorBreakdown) -> "CreditFactorsResponse":
        return cls.model_validate(asdict(breakdown))


class PlanRequest(BaseModel):
    """Request body for POST /v1/credit/plan"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    assessment: CreditAssessmentSchema


class PrioritizedActionSchema(BaseModel):
    action: str
    impact: str
    timeframe: str
    description: str


class MonthlyTaskSetSchema(BaseModel):
    month: int
    tasks: List[str]
    expected_progress: str


class ImprovementPlanResponse(BaseModel):
    """Response for POST /v1/credit/plan"""

    overall_analysis: str
    current_score_analysis: str
    time_to_goal: str
    prioritized_actions: List[PrioritizedActionSchema]
    monthly_tasks: List[MonthlyTaskSetSchema]
    tips: List[str]
    warnings: List[str]

    @classmethod
    def from_domain(cls, plan: ImprovementPlan) -> "ImprovementPlanResponse":
        return cls.model_validate(asdict(plan))


class RefreshRequest(BaseModel):
    """Request body for POST /v1/accounts/refresh"""

    user_id: str = Field(..., min_length=1, description="User identifier")


class RefreshResponse(BaseModel):
    """Response for POST /v1/accounts/refresh"""

    user_id: str
    accounts_refreshed: int


class RefreshStatusResponse(BaseModel):
    """Response for GET /v1/accounts/refresh/status"""

    user_id: str
    allowed: bool
    remaining_minutes: Optional[int] = None


class RefreshStatsResponse(BaseModel):
    """Response for GET /v1/accounts/refresh/stats"""

    total_tracked_users: int
    refreshes_in_last_hour: int
