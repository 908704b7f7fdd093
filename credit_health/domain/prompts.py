"""Prompt construction for credit improvement plans"""

from credit_health.domain.models import CreditAssessment, CreditMixRating, FinancialContext, PaymentHistoryRating
from credit_health.domain.scoring import credit_utilization

PLAN_HORIZON_MONTHS = 6

SYSTEM_INSTRUCTION = (
    "You are an expert credit advisor. Always respond with valid JSON only. "
    "Be specific and actionable in your recommendations."
)

PLAN_SCHEMA_REMINDER = """{
  "overallAnalysis": "string",
  "currentScoreAnalysis": "string",
  "timeToGoal": "string",
  "prioritizedActions": [
    {
      "action": "string",
      "impact": "High|Medium|Low",
      "timeframe": "string",
      "description": "string"
    }
  ],
  "monthlyTasks": [
    {
      "month": 1,
      "tasks": ["string"],
      "expectedProgress": "string"
    }
  ],
  "tips": ["string"],
  "warnings": ["string"]
}"""


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def build_plan_prompt(assessment: CreditAssessment, context: FinancialContext) -> str:
    """
    Render the user prompt for plan generation.

    Every assessment and context field is included, zero values too, so the
    generated advice can refer to "no accounts connected" accurately.
    """
    utilization = credit_utilization(assessment.total_credit_balance, assessment.total_credit_limit)

    return f"""Analyze this user's complete financial profile and create a detailed, actionable credit improvement plan.

USER PROFILE:
- Current Credit Score: {assessment.current_score}
- Goal Credit Score: {assessment.goal_score}
- Payment History: {PaymentHistoryRating.parse(assessment.payment_history).value}
- Credit Utilization: {utilization:.1f}% (Balance: ${assessment.total_credit_balance:.2f}, Limit: ${assessment.total_credit_limit:.2f})
- Credit History Length: {assessment.credit_history_length} months
- Credit Mix: {CreditMixRating.parse(assessment.credit_mix).value}
- Hard Inquiries (12mo): {assessment.new_credit_inquiries}
- Monthly Income: ${assessment.monthly_income:.2f}
- Collections: {_yes_no(assessment.has_collections)}
- Bankruptcy: {_yes_no(assessment.has_bankruptcy)}
- Foreclosure: {_yes_no(assessment.has_foreclosure)}

FINANCIAL CONTEXT:
- Total Bank Balance: ${context.total_balance:.2f}
- Monthly Budget: ${context.monthly_budget:.2f}
- Recent 30-day Spending: ${context.recent_spending:.2f}
- Connected Accounts: {context.connected_accounts}

Create a comprehensive improvement plan with these sections:
1. Overall analysis of their credit situation
2. Current score analysis (what's helping and what's hurting)
3. Realistic timeline to reach the goal score
4. 5-7 prioritized actions, each with High, Medium or Low impact
5. Monthly tasks for the next {PLAN_HORIZON_MONTHS} months (months 1 to {PLAN_HORIZON_MONTHS}) with expected progress
6. Specific tips based on their profile
7. Important warnings or cautions

Be specific and reference their actual numbers.

Respond with ONLY a valid JSON object in exactly this format:
{PLAN_SCHEMA_REMINDER}"""
