"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient


NOW = "2025-01-01T00:00:00"


@pytest.fixture
def low_cash_snapshot():
    """Balance of 2000 against 1000/day of spending, two budgets blown"""
    return {
        "accounts": [{"id": "acc_1", "balance": 2000, "type": "Bank"}],
        "transactions": [
            {"id": f"tx_{i}", "type": "expense", "amount": 1000, "date": NOW, "category": "Food"}
            for i in range(30)
        ],
        "budget_categories": [
            {"id": "1", "name": "Food", "allocated": 1000, "spent": 1100},
            {"id": "2", "name": "Transport", "allocated": 500, "spent": 600},
        ],
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "guidance_evaluations_total" in response.text


def test_guidance_endpoint(client: TestClient, low_cash_snapshot):
    """Test POST /v1/guidance returns sorted notifications"""
    response = client.post("/v1/guidance", json={"snapshot": low_cash_snapshot, "now": NOW})

    assert response.status_code == 200
    notifications = response.json()["notifications"]
    assert [n["type"] for n in notifications] == ["cash-risk", "budget-burn"]
    assert all(n["priority"] == "high" for n in notifications)
    assert notifications[0]["id"] == "cash-runway-high-2025-01-01"
    assert "X-Request-ID" in response.headers


def test_guidance_endpoint_skips_seen_ids(client: TestClient, low_cash_snapshot):
    response = client.post(
        "/v1/guidance",
        json={"snapshot": low_cash_snapshot, "now": NOW, "seen_ids": ["cash-runway-high-2025-01-01"]},
    )

    assert response.status_code == 200
    assert [n["type"] for n in response.json()["notifications"]] == ["budget-burn"]


def test_guidance_endpoint_empty_snapshot(client: TestClient):
    response = client.post("/v1/guidance", json={"snapshot": {}})

    assert response.status_code == 200
    assert response.json()["notifications"] == []


def test_single_rule_endpoint(client: TestClient, low_cash_snapshot):
    response = client.post("/v1/guidance/rules/budget-burn", json={"snapshot": low_cash_snapshot, "now": NOW})

    assert response.status_code == 200
    notifications = response.json()["notifications"]
    assert len(notifications) == 1
    assert notifications[0]["title"] == "Multiple Budgets Exceeded"


def test_unknown_rule_returns_404(client: TestClient):
    response = client.post("/v1/guidance/rules/astrology", json={"snapshot": {}})
    assert response.status_code == 404


def test_invalid_payment_day_rejected(client: TestClient):
    """Iddir payment day outside 1-31 fails validation"""
    snapshot = {
        "iddirs": [{"id": "1", "name": "Iddir", "monthly_contribution": 500, "payment_date": 0}],
    }
    response = client.post("/v1/guidance", json={"snapshot": snapshot, "now": NOW})
    assert response.status_code == 422


def test_simulate_endpoint(client: TestClient, low_cash_snapshot):
    """Test POST /v1/simulate with a budgeted expense"""
    low_cash_snapshot["accounts"][0]["balance"] = 10000

    response = client.post(
        "/v1/simulate",
        json={
            "snapshot": low_cash_snapshot,
            "transaction": {"type": "expense", "amount": 5000, "category": "Food"},
            "now": NOW,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["before_balance"]) == Decimal("10000")
    assert Decimal(data["after_balance"]) == Decimal("5000")
    assert data["before_runway"] == 10
    assert data["after_runway"] == 5
    assert [r["id"] for r in data["risks"]] == ["budget-burn-multiple-2025-01", "cash-runway-medium-2025-01-01"]
    assert data["new_risk_ids"] == ["cash-runway-medium-2025-01-01"]
    assert Decimal(data["budget_impact"]["after_spent"]) == Decimal("6100")


def test_simulate_rejects_negative_amount(client: TestClient):
    response = client.post(
        "/v1/simulate",
        json={"snapshot": {}, "transaction": {"type": "expense", "amount": -5}},
    )
    assert response.status_code == 422


def test_request_metrics_use_route_template(client: TestClient):
    client.post("/v1/guidance/rules/astrology", json={"snapshot": {}})
    client.get("/no-such-page")

    text = client.get("/metrics").text
    assert 'endpoint="/v1/guidance/rules/{rule}"' in text
    assert 'endpoint="unmatched"' in text
    assert "astrology" not in text
    assert "no-such-page" not in text
