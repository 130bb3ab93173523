"""Integration tests for API endpoints"""

import uuid
from datetime import timedelta
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from saarathi_engine.infrastructure.database.models import Customer, LedgerTransaction, ReceivableRow


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, owner):
    """Test Prometheus metrics endpoint"""
    client.get(f"/v1/owners/{owner.id}/projection")

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "saarathi_projection_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health")
    assert "X-Request-ID" in response.headers


def test_projection_flags_salary_day(client: TestClient, owner):
    """
    30 days at 4500 in / 1200 out, 8000 net salary on the 18th.
    Walk starts Thursday Oct 15; weekend income is boosted.
    """
    response = client.get(f"/v1/owners/{owner.id}/projection")

    assert response.status_code == 200
    data = response.json()
    assert data["daily_income_avg"] == 4500
    assert data["daily_expense_avg"] == 1200
    assert [p["projected_cash"] for p in data["points"]] == [31800, 35100, 39750, 36400, 39700, 43000, 46300]
    assert data["first_problem_day"]["date"] == "2026-10-18"
    assert data["first_problem_day"]["flags"] == ["salary_due"]
    assert data["first_problem_day"]["salaries_due"] == 8000
    assert [p["confidence"] for p in data["points"]] == ["high"] * 3 + ["medium"] * 4


def test_projection_custom_horizon(client: TestClient, owner):
    response = client.get(f"/v1/owners/{owner.id}/projection", params={"horizon_days": 3})

    assert response.status_code == 200
    assert len(response.json()["points"]) == 3
    assert response.json()["first_problem_day"] is None


def test_projection_invalid_horizon(client: TestClient, owner):
    assert client.get(f"/v1/owners/{owner.id}/projection", params={"horizon_days": 0}).status_code == 422
    assert client.get(f"/v1/owners/{owner.id}/projection", params={"horizon_days": 31}).status_code == 422


def test_projection_unknown_owner(client: TestClient, db):
    assert client.get(f"/v1/owners/{uuid.uuid4()}/projection").status_code == 404
    assert client.get("/v1/owners/not-a-uuid/projection").status_code == 404


def test_health_score(client: TestClient, owner):
    """
    October so far: 63000 in, 16800 out over 15 days; September tail: 72000 in, 19200 out.
    """
    response = client.get(f"/v1/owners/{owner.id}/health-score")

    assert response.status_code == 200
    data = response.json()
    components = data["components"]
    assert components["cash_runway"] == {"score": 83, "value": 25}
    assert components["profit_margin"] == {"score": 100, "value": 73}
    assert components["collection_speed"] == {"score": 50, "value": 15}
    assert components["expense_control"]["score"] == 100
    assert components["growth_trend"]["score"] == 25
    assert data["score"] == 73
    assert data["status"] == "good"


def test_health_score_rejects_invalid_stored_transaction(client: TestClient, db: Session, owner, now):
    db.add(LedgerTransaction(owner_id=owner.id, kind="refund", amount=100, created_at=now - timedelta(days=1)))
    db.commit()

    response = client.get(f"/v1/owners/{owner.id}/health-score")

    assert response.status_code == 422
    assert "refund" in response.json()["detail"]


def test_health_score_unknown_owner(client: TestClient, db):
    assert client.get(f"/v1/owners/{uuid.uuid4()}/health-score").status_code == 404


def test_ledger(client: TestClient, owner):
    response = client.get(f"/v1/owners/{owner.id}/ledger")

    assert response.status_code == 200
    data = response.json()
    assert data["window_days"] == 30
    assert data["total_income"] == 135000
    assert data["total_expense"] == 36000
    assert data["expense_by_category"] == {"supplies": 36000}
    assert data["this_month"]["income"] == 63000
    assert data["this_month"]["profit"] == 46200
    assert data["this_month"]["margin_percent"] == 73
    assert data["this_month"]["expense_by_category"] == [{"category": "supplies", "amount": 16800}]


def test_ledger_invalid_window(client: TestClient, owner):
    response = client.get(f"/v1/owners/{owner.id}/ledger", params={"window_days": 0})
    assert response.status_code == 422


def test_report(client: TestClient, owner, make_receivable):
    old = make_receivable(5000, age_days=20, name="Kumar")
    recent = make_receivable(12000, age_days=2, name="Lakshmi")

    response = client.get(f"/v1/owners/{owner.id}/report")

    assert response.status_code == 200
    data = response.json()
    assert data["projection"]["current_cash"] == 28500
    assert data["projection"]["first_problem_day"]["date"] == "2026-10-18"
    assert data["salary_alert"]["days_until"] == 3
    assert data["salary_alert"]["total_due"] == 8000
    assert data["salary_alert"]["covered"] is True
    assert [(r["name"], r["payment_day"], r["amount_due"]) for r in data["salary_reminders"]] == [("Suresh", 18, 8000)]
    assert sorted(s["amount_pending"] for s in data["salary_status"]) == [400, 8000]
    assert [r["receivable_id"] for r in data["collections"]] == [str(recent.id), str(old.id)]
    assert [r["receivable_id"] for r in data["overdue"]] == [str(old.id)]
    assert data["outstanding_total"] == 17000


def test_payment_overpayment_closes_and_scores_customer(client: TestClient, db: Session, make_receivable):
    row = make_receivable(8000, amount_paid=3000, status="partial", age_days=10)

    response = client.post(f"/v1/receivables/{row.id}/payments", json={"amount": 6000})

    assert response.status_code == 200
    data = response.json()
    assert data["applied"] is True
    assert data["receivable"]["status"] == "paid"
    assert data["receivable"]["amount_paid"] == 8000
    assert data["receivable"]["remaining"] == 0
    assert data["days_to_pay"] == 10
    assert data["reliability_score"] == 60

    db.expire_all()
    stored = db.get(ReceivableRow, row.id)
    assert stored.amount_paid == 8000
    assert stored.status == "paid"
    customer = db.get(Customer, row.customer_id)
    assert customer.reliability_score == 60
    assert customer.avg_days_to_pay == 10


def test_payment_on_paid_receivable_is_noop(client: TestClient, make_receivable):
    row = make_receivable(5000, age_days=1)
    client.post(f"/v1/receivables/{row.id}/payments", json={"amount": 5000})

    response = client.post(f"/v1/receivables/{row.id}/payments", json={"amount": 1000})

    assert response.status_code == 200
    assert response.json()["applied"] is False
    assert response.json()["receivable"]["amount_paid"] == 5000


def test_partial_payment(client: TestClient, make_receivable):
    row = make_receivable(5000, age_days=1)

    response = client.post(f"/v1/receivables/{row.id}/payments", json={"amount": 2000})

    assert response.status_code == 200
    assert response.json()["receivable"]["status"] == "partial"
    assert response.json()["reliability_score"] is None


def test_payment_validation(client: TestClient, make_receivable):
    row = make_receivable(5000)

    assert client.post(f"/v1/receivables/{row.id}/payments", json={"amount": 0}).status_code == 422
    assert client.post(f"/v1/receivables/{uuid.uuid4()}/payments", json={"amount": 100}).status_code == 404


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "brief-42"})
    assert response.headers["X-Request-ID"] == "brief-42"
