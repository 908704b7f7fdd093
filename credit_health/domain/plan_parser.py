"""Strict parsing of generated improvement plans"""

from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from credit_health.domain.exceptions import PlanParseError
from credit_health.domain.models import ImprovementPlan, MonthlyTaskSet, PrioritizedAction
from credit_health.domain.prompts import PLAN_HORIZON_MONTHS


class _PlanPayload(BaseModel):
    """Wire shape of a generated plan; strict so wrong types are rejected"""

    model_config = ConfigDict(strict=True, extra="ignore")


class _ActionPayload(_PlanPayload):
    action: str
    impact: Literal["High", "Medium", "Low"]
    timeframe: str
    description: str


class _MonthPayload(_PlanPayload):
    month: int = Field(ge=1, le=PLAN_HORIZON_MONTHS)
    tasks: List[str]
    expected_progress: str = Field(alias="expectedProgress")


class _ImprovementPlanPayload(_PlanPayload):
    overall_analysis: str = Field(alias="overallAnalysis")
    current_score_analysis: str = Field(alias="currentScoreAnalysis")
    time_to_goal: str = Field(alias="timeToGoal")
    prioritized_actions: List[_ActionPayload] = Field(alias="prioritizedActions")
    monthly_tasks: List[_MonthPayload] = Field(alias="monthlyTasks")
    tips: List[str]
    warnings: List[str]

    @field_validator("monthly_tasks")
    @classmethod
    def months_cover_horizon(cls, value: List[_MonthPayload]) -> List[_MonthPayload]:
        months = [m.month for m in value]
        if len(months) != len(set(months)):
            raise ValueError("monthlyTasks repeats a month")
        if sorted(months) != list(range(1, PLAN_HORIZON_MONTHS + 1)):
            raise ValueError(f"monthlyTasks must cover months 1-{PLAN_HORIZON_MONTHS}")
        return value


def parse_improvement_plan(content: str | None) -> ImprovementPlan:
    """
    Parse generated text into an ImprovementPlan.

    Nothing is repaired or defaulted: invalid JSON, a missing field, a wrong
    type, an impact outside High/Medium/Low, or monthly tasks that do not
    cover each month of the plan horizon exactly once all raise
    PlanParseError.
    """
    if not content or not content.strip():
        raise PlanParseError("Text generation service returned no content")

    try:
        payload = _ImprovementPlanPayload.model_validate_json(content)
    except ValidationError as e:
        raise PlanParseError(f"Generated plan is malformed: {e.error_count()} error(s)") from e

    return ImprovementPlan(
        overall_analysis=payload.overall_analysis,
        current_score_analysis=payload.current_score_analysis,
        time_to_goal=payload.time_to_goal,
        prioritized_actions=[
            PrioritizedAction(
                action=a.action,
                impact=a.impact,
                timeframe=a.timeframe,
                description=a.description,
            )
            for a in payload.prioritized_actions
        ],
        monthly_tasks=[
            MonthlyTaskSet(
                month=m.month,
                tasks=list(m.tasks),
                expected_progress=m.expected_progress,
            )
            for m in payload.monthly_tasks
        ],
        tips=list(payload.tips),
        warnings=list(payload.warnings),
    )
