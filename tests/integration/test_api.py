"""Integration tests for API endpoints"""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from credit_health.domain.exceptions import AggregationAPIError, ExternalServiceError
from credit_health.domain.models import Account
from credit_health.infrastructure.database.models import BudgetRecord, LinkedAccount, TransactionRecord
from credit_health.utils.date_utils import utc_now


@pytest.fixture
def seeded_user(db: Session) -> str:
    """User with two linked accounts, one budget and recent spending"""
    user_id = "user_seeded"
    now = utc_now()
    db.add_all([
        LinkedAccount(user_id=user_id, external_id="chk", name="Checking", account_type="checking",
                      balance=1500.0, institution_name="First Bank"),
        LinkedAccount(user_id=user_id, external_id="sav", name="Savings", account_type="savings",
                      balance=500.0, institution_name="First Bank"),
        BudgetRecord(user_id=user_id, category="groceries", amount=400.0),
        TransactionRecord(user_id=user_id, amount=-75.0, date=now - timedelta(days=3), category="groceries"),
        TransactionRecord(user_id=user_id, amount=-25.0, date=now - timedelta(days=40), category="dining"),
        LinkedAccount(user_id="someone_else", external_id="chk", name="Other", account_type="checking",
                      balance=99999.0, institution_name="Other Bank"),
    ])
    db.commit()
    return user_id


@pytest.fixture
def refreshed_accounts() -> list[Account]:
    return [
        Account(external_id="chk", name="Checking", account_type="checking", balance=1810.0,
                institution_name="First Bank"),
        Account(external_id="card", name="Rewards Card", account_type="credit", balance=-420.0,
                institution_name="First Bank"),
    ]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "credit_health_refresh" in response.text
    assert "credit_health_plan" in response.text


def test_request_id_header_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


# Credit factors


def test_factors_endpoint(client: TestClient, assessment_payload: dict):
    """Test POST /v1/credit/factors for the reference assessment"""
    response = client.post("/v1/credit/factors", json=assessment_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["estimated_score"] == 600
    assert [f["name"] for f in data["factors"]] == [
        "Payment History",
        "Credit Utilization",
        "Credit History Length",
        "Credit Mix",
        "New Credit Inquiries",
    ]
    assert data["derogatory"] == {
        "collections": False,
        "bankruptcy": False,
        "foreclosure": False,
        "total_impact": 0,
    }


def test_factors_endpoint_tolerates_unknown_ratings(client: TestClient, assessment_payload: dict):
    assessment_payload.update(payment_history="spotless", credit_mix="", total_credit_limit=0)

    response = client.post("/v1/credit/factors", json=assessment_payload)

    assert response.status_code == 200
    impacts = {f["name"]: f["impact"] for f in response.json()["factors"]}
    assert impacts["Payment History"] == 0
    assert impacts["Credit Mix"] == 0
    assert impacts["Credit Utilization"] == 30


def test_factors_endpoint_rejects_missing_fields(client: TestClient):
    response = client.post("/v1/credit/factors", json={"current_score": 700})
    assert response.status_code == 422


# Improvement plan


def test_plan_endpoint_success(client: TestClient, assessment_payload: dict, seeded_user: str, text_client):
    """Test POST /v1/credit/plan uses the user's stored financial data"""
    response = client.post(
        "/v1/credit/plan",
        json={"user_id": seeded_user, "assessment": assessment_payload},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["time_to_goal"] == "6-9 months"
    assert len(data["monthly_tasks"]) == 6
    assert data["prioritized_actions"][0]["impact"] == "High"

    _, prompt = text_client.calls[0]
    assert "Total Bank Balance: $2000.00" in prompt
    assert "Monthly Budget: $400.00" in prompt
    assert "Recent 30-day Spending: $75.00" in prompt
    assert "Connected Accounts: 2" in prompt


def test_plan_endpoint_without_linked_data(client: TestClient, assessment_payload: dict, db: Session, text_client):
    response = client.post(
        "/v1/credit/plan",
        json={"user_id": "user_empty", "assessment": assessment_payload},
    )

    assert response.status_code == 200
    _, prompt = text_client.calls[0]
    assert "Connected Accounts: 0" in prompt


def test_plan_endpoint_malformed_output(client: TestClient, assessment_payload: dict, db: Session, text_client):
    """Unparseable generator output is a retryable 502, never a partial plan"""
    text_client.response = "not json"

    response = client.post(
        "/v1/credit/plan",
        json={"user_id": "user_1", "assessment": assessment_payload},
    )

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["error"] == "plan_malformed"
    assert detail["retryable"] is True


def test_plan_endpoint_service_unavailable(client: TestClient, assessment_payload: dict, db: Session, text_client):
    text_client.error = ExternalServiceError("Text generation timeout after 30.0s")

    response = client.post(
        "/v1/credit/plan",
        json={"user_id": "user_1", "assessment": assessment_payload},
    )

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "30"
    assert response.json()["detail"]["error"] == "plan_service_unavailable"


# Account refresh


@patch("credit_health.infrastructure.clients.aggregator.AggregatorClient.refresh_accounts")
def test_refresh_endpoint_then_rate_limited(
    mock_refresh: AsyncMock,
    client: TestClient,
    seeded_user: str,
    refreshed_accounts: list[Account],
    db: Session,
):
    """First refresh is admitted; the second is denied with the remaining wait"""
    mock_refresh.return_value = refreshed_accounts

    first = client.post("/v1/accounts/refresh", json={"user_id": seeded_user})
    second = client.post("/v1/accounts/refresh", json={"user_id": seeded_user})

    assert first.status_code == 200
    assert first.json() == {"user_id": seeded_user, "accounts_refreshed": 2}

    assert second.status_code == 429
    assert second.json()["remaining_minutes"] == 60
    assert second.headers["Retry-After"] == "3600"
    assert mock_refresh.await_count == 1

    balances = {
        row.external_id: row.balance
        for row in db.query(LinkedAccount).filter(LinkedAccount.user_id == seeded_user).all()
    }
    assert balances == {"chk": 1810.0, "sav": 500.0, "card": -420.0}


@patch("credit_health.infrastructure.clients.aggregator.AggregatorClient.refresh_accounts")
def test_refresh_allowed_after_cooldown(
    mock_refresh: AsyncMock,
    client: TestClient,
    clock,
    db: Session,
):
    mock_refresh.return_value = []

    assert client.post("/v1/accounts/refresh", json={"user_id": "user_1"}).status_code == 200
    clock.advance(minutes=45)
    denied = client.post("/v1/accounts/refresh", json={"user_id": "user_1"})
    clock.advance(minutes=15)
    admitted = client.post("/v1/accounts/refresh", json={"user_id": "user_1"})

    assert denied.status_code == 429
    assert denied.json()["remaining_minutes"] == 15
    assert admitted.status_code == 200


@patch("credit_health.infrastructure.clients.aggregator.AggregatorClient.refresh_accounts")
def test_refresh_provider_failure_still_consumes_cooldown(
    mock_refresh: AsyncMock,
    client: TestClient,
    db: Session,
):
    mock_refresh.side_effect = AggregationAPIError("Aggregation API error: 500")

    response = client.post("/v1/accounts/refresh", json={"user_id": "user_1"})

    assert response.status_code == 503
    status = client.get("/v1/accounts/refresh/status", params={"user_id": "user_1"}).json()
    assert status["allowed"] is False


def test_refresh_status_endpoint(client: TestClient, limiter):
    assert client.get("/v1/accounts/refresh/status", params={"user_id": "user_1"}).json() == {
        "user_id": "user_1",
        "allowed": True,
        "remaining_minutes": None,
    }

    limiter.record_refresh("user_1")
    data = client.get("/v1/accounts/refresh/status", params={"user_id": "user_1"}).json()

    assert data["allowed"] is False
    assert data["remaining_minutes"] == 60


def test_clear_limit_endpoint(client: TestClient, limiter):
    limiter.record_refresh("user_1")

    response = client.delete("/v1/accounts/refresh/limits/user_1")

    assert response.status_code == 204
    assert limiter.can_refresh("user_1").allowed is True


def test_refresh_stats_endpoint(client: TestClient, limiter, clock):
    limiter.record_refresh("user_old")
    clock.advance(hours=3)
    limiter.record_refresh("user_a")
    limiter.record_refresh("user_b")

    response = client.get("/v1/accounts/refresh/stats")

    assert response.status_code == 200
    assert response.json() == {"total_tracked_users": 3, "refreshes_in_last_hour": 2}
