"""Pytest fixtures for testing"""

import json
import pytest
from datetime import datetime, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from credit_health.api.main import create_app
from credit_health.api.dependencies import get_text_client
from credit_health.domain.models import CreditAssessment, CreditMixRating, PaymentHistoryRating
from credit_health.domain.rate_limiter import RefreshRateLimiter
from credit_health.infrastructure.database.models import Base
from credit_health.infrastructure.database.session import get_db


# In-memory test database shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Manually advanced clock for limiter tests"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 15, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTextClient:
    """Stands in for the text generation service; records every call"""

    def __init__(self, response: str | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system_instruction: str, user_prompt: str) -> str | None:
        self.calls.append((system_instruction, user_prompt))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RefreshRateLimiter:
    """Fresh limiter per test, driven by the fake clock"""
    return RefreshRateLimiter(cooldown_minutes=60, clock=clock)


@pytest.fixture
def make_text_client():
    """Factory for fake text clients with a canned response or error"""
    return FakeTextClient


@pytest.fixture
def text_client(valid_plan_json: str) -> FakeTextClient:
    return FakeTextClient(response=valid_plan_json)


@pytest.fixture
def app(db: Session, limiter: RefreshRateLimiter, text_client: FakeTextClient):
    """Application wired to the test database, limiter and text client"""
    app = create_app(refresh_limiter=limiter)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_text_client] = lambda: text_client
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def strong_assessment() -> CreditAssessment:
    """Excellent profile at exactly 10% utilization and 10 years of history"""
    return CreditAssessment(
        current_score=720,
        goal_score=780,
        payment_history=PaymentHistoryRating.EXCELLENT,
        total_credit_balance=1000,
        total_credit_limit=10000,
        credit_history_length=120,
        credit_mix=CreditMixRating.EXCELLENT,
        new_credit_inquiries=0,
        monthly_income=5200,
    )


@pytest.fixture
def assessment_payload() -> dict:
    """JSON body equivalent of strong_assessment"""
    return {
        "current_score": 720,
        "goal_score": 780,
        "payment_history": "excellent",
        "total_credit_balance": 1000,
        "total_credit_limit": 10000,
        "credit_history_length": 120,
        "credit_mix": "excellent",
        "new_credit_inquiries": 0,
        "monthly_income": 5200,
        "has_collections": False,
        "has_bankruptcy": False,
        "has_foreclosure": False,
    }


@pytest.fixture
def valid_plan() -> dict:
    """Well-formed generated plan covering the 6 month horizon"""
    return {
        "overallAnalysis": "Solid profile with room to lower utilization.",
        "currentScoreAnalysis": "On-time payments help; card balances hold the score back.",
        "timeToGoal": "6-9 months",
        "prioritizedActions": [
            {
                "action": "Pay card balances below 10% of limits",
                "impact": "High",
                "timeframe": "1-2 months",
                "description": "Utilization is reported monthly and recovers quickly.",
            },
            {
                "action": "Keep oldest card open",
                "impact": "Medium",
                "timeframe": "Ongoing",
                "description": "Protects average account age.",
            },
            {
                "action": "Avoid new applications",
                "impact": "Low",
                "timeframe": "6 months",
                "description": "Lets recent inquiries age.",
            },
        ],
        "monthlyTasks": [
            {
                "month": month,
                "tasks": [f"Review statement for month {month}"],
                "expectedProgress": f"+{month * 5} points",
            }
            for month in range(1, 7)
        ],
        "tips": ["Set up autopay for minimum payments"],
        "warnings": ["Do not close paid-off accounts"],
    }


@pytest.fixture
def valid_plan_json(valid_plan: dict) -> str:
    return json.dumps(valid_plan)
