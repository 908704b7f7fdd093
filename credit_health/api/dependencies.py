"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from credit_health.domain.rate_limiter import RefreshRateLimiter
from credit_health.infrastructure.clients.aggregator import AggregatorClient
from credit_health.infrastructure.clients.text_generation import TextGenerationClient
from credit_health.infrastructure.database.repositories import FinancialDataRepository
from credit_health.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_refresh_limiter(request: Request) -> RefreshRateLimiter:
    """Application-wide refresh limiter created at startup"""
    return request.app.state.refresh_limiter


def get_financial_repository(db: Session = Depends(get_db)) -> FinancialDataRepository:
    """Provide financial record repository bound to the request session"""
    return FinancialDataRepository(db)


def get_text_client() -> TextGenerationClient:
    """Provide text generation client instance"""
    return TextGenerationClient()


def get_aggregator_client() -> AggregatorClient:
    """Provide account aggregation client instance"""
    return AggregatorClient()
