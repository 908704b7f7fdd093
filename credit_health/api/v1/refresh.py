"""Account refresh endpoints gated by the per-user cooldown"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from credit_health.api.v1.schemas import (
    RefreshRequest,
    RefreshResponse,
    RefreshStatsResponse,
    RefreshStatusResponse,
)
from credit_health.api.dependencies import get_aggregator_client, get_refresh_limiter, get_request_id
from credit_health.infrastructure.database.session import get_db
from credit_health.infrastructure.database.repositories import FinancialDataRepository
from credit_health.infrastructure.clients.aggregator import AggregatorClient
from credit_health.domain.rate_limiter import RefreshRateLimiter
from credit_health.domain.exceptions import AggregationAPIError, RateLimitedError
from credit_health.infrastructure.observability.metrics import aggregator_failures_counter, record_refresh_decision
from credit_health.infrastructure.observability.logging import log_refresh_decision

router = APIRouter()


@router.get("/accounts/refresh/status", response_model=RefreshStatusResponse)
def get_refresh_status(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    limiter: RefreshRateLimiter = Depends(get_refresh_limiter),
):
    """Whether the user may refresh now, and if not, how many minutes remain"""
    decision = limiter.can_refresh(user_id)
    return RefreshStatusResponse(
        user_id=user_id,
        allowed=decision.allowed,
        remaining_minutes=decision.remaining_minutes,
    )


@router.post("/accounts/refresh", response_model=RefreshResponse)
async def refresh_accounts(
    request_body: RefreshRequest,
    request: Request,
    db: Session = Depends(get_db),
    limiter: RefreshRateLimiter = Depends(get_refresh_limiter),
    aggregator: AggregatorClient = Depends(get_aggregator_client),
):
    """
    Pull fresh balances from the aggregation provider.

    Flow:
    1. Admit or deny under the cooldown (check and record are atomic)
    2. Call the aggregation provider
    3. Upsert refreshed accounts

    The cooldown is consumed on admission, so a failed provider call still
    counts against the user.
    """
    request_id = get_request_id(request)
    user_id = request_body.user_id

    decision = limiter.acquire(user_id)
    record_refresh_decision(decision.allowed)
    log_refresh_decision(request_id, user_id, decision.allowed, decision.remaining_minutes)

    if not decision.allowed:
        raise RateLimitedError(user_id, decision.remaining_minutes)

    try:
        accounts = await aggregator.refresh_accounts(user_id)
        refreshed = FinancialDataRepository(db).upsert_accounts(user_id, accounts)
        db.commit()

    except AggregationAPIError as e:
        aggregator_failures_counter.inc()
        db.rollback()
        logging.error(f"Aggregation API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Account aggregation service unavailable")

    return RefreshResponse(user_id=user_id, accounts_refreshed=refreshed)


@router.delete("/accounts/refresh/limits/{user_id}", status_code=204)
def clear_refresh_limit(
    user_id: str,
    limiter: RefreshRateLimiter = Depends(get_refresh_limiter),
):
    """Administrative override: make the user eligible immediately"""
    limiter.clear_limit(user_id)


@router.get("/accounts/refresh/stats", response_model=RefreshStatsResponse)
def get_refresh_stats(limiter: RefreshRateLimiter = Depends(get_refresh_limiter)):
    """Refresh limiter snapshot for monitoring"""
    stats = limiter.get_stats()
    return RefreshStatsResponse(
        total_tracked_users=stats.total_tracked_users,
        refreshes_in_last_hour=stats.refreshes_in_last_hour,
    )
