"""POST /v1/credit/factors and /v1/credit/plan - credit health endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from credit_health.api.v1.schemas import (
    CreditAssessmentSchema,
    CreditFactorsResponse,
    ImprovementPlanResponse,
    PlanRequest,
)
from credit_health.api.dependencies import get_financial_repository, get_request_id, get_text_client
from credit_health.infrastructure.database.repositories import FinancialDataRepository
from credit_health.infrastructure.clients.text_generation import TextGenerationClient
from credit_health.domain.scoring import compute_factors
from credit_health.domain.planning import generate_plan
from credit_health.domain.exceptions import ExternalServiceError, PlanParseError
from credit_health.infrastructure.observability.metrics import estimated_score_histogram, plan_outcome_counter
from credit_health.infrastructure.observability.logging import log_plan_outcome

router = APIRouter()

SERVICE_RETRY_AFTER_SECONDS = 30


@router.post("/credit/factors", response_model=CreditFactorsResponse)
def score_factors(request_body: CreditAssessmentSchema):
    """
    Estimate a credit score and break it into weighted factors.

    Always succeeds for a well-formed body: unknown ratings and
    degenerate balances contribute zero instead of failing.
    """
    breakdown = compute_factors(request_body.to_domain())
    estimated_score_histogram.observe(breakdown.estimated_score)
    return CreditFactorsResponse.from_domain(breakdown)


@router.post("/credit/plan", response_model=ImprovementPlanResponse)
async def create_plan(
    request_body: PlanRequest,
    request: Request,
    repository: FinancialDataRepository = Depends(get_financial_repository),
    text_client: TextGenerationClient = Depends(get_text_client),
):
    """
    Generate a personalized credit improvement plan.

    Flow:
    1. Load linked accounts, budgets and transactions for the user
    2. Run the plan pipeline against the text generation service
    3. Return the parsed plan, or a retryable error
    """
    start_time = time.time()
    request_id = get_request_id(request)
    user_id = request_body.user_id

    try:
        plan = await generate_plan(
            request_body.assessment.to_domain(),
            repository.get_accounts(user_id),
            repository.get_budgets(user_id),
            repository.get_transactions(user_id),
            text_client,
        )

    except ExternalServiceError as e:
        plan_outcome_counter.labels(outcome="service_error").inc()
        log_plan_outcome(request_id, user_id, "service_error", (time.time() - start_time) * 1000)
        logging.error(f"Text generation error: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=503,
            detail={
                "error": "plan_service_unavailable",
                "message": "Plan generation service is unavailable. Please try again shortly.",
                "retryable": True,
            },
            headers={"Retry-After": str(SERVICE_RETRY_AFTER_SECONDS)},
        )

    except PlanParseError as e:
        plan_outcome_counter.labels(outcome="parse_error").inc()
        log_plan_outcome(request_id, user_id, "parse_error", (time.time() - start_time) * 1000)
        logging.warning(f"Plan parse error: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=502,
            detail={
                "error": "plan_malformed",
                "message": "The generated plan could not be read. Please try again.",
                "retryable": True,
            },
        )

    plan_outcome_counter.labels(outcome="success").inc()
    log_plan_outcome(request_id, user_id, "success", (time.time() - start_time) * 1000)

    return ImprovementPlanResponse.from_domain(plan)
