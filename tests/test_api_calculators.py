"""API tests for the calculator endpoints."""

import math

import pytest
from fastapi.testclient import TestClient

from ffi_backend.models_db import USER_KEY, USER_PLANS_KEY
from ffi_backend.services.settings_service import set_state


@pytest.fixture
def paid_user(db_session):
    set_state(db_session, USER_KEY, {"token": "t", "user_display_name": "Jo"})
    set_state(db_session, USER_PLANS_KEY, [{"id": 1, "name": "Gold Membership"}])


def test_root(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert data["service"] == "FFI Calculator"
    assert "api" in data


def test_health(client: TestClient):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert "database" in r.json()["checks"]


def test_failure_probability(client: TestClient):
    r = client.post(
        "/api/calculators/failure-probability",
        json={"failure_rate": 0.1, "inspection_interval": 100, "inspection_cost": 500, "failure_cost": 10000},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["probability"] == pytest.approx(0.9999546, abs=1e-7)
    assert data["formatted"] == "100%"
    assert data["inspection_cost"] == "€500.00"
    assert len(data["curve"]) == 21


def test_failure_probability_validation(client: TestClient):
    r = client.post("/api/calculators/failure-probability", json={"failure_rate": 0, "inspection_interval": 100})
    assert r.status_code == 422


def test_reliability_from_mtbf(client: TestClient):
    r = client.post(
        "/api/calculators/reliability",
        json={"input_type": "mtbf", "mtbf": 1000, "inspection_interval": 100, "target_reliability": 0.9},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["failure_rate"] == pytest.approx(0.001)
    assert data["reliability"] == pytest.approx(math.exp(-0.1))
    assert data["meeting_target"] is True


def test_reliability_requires_selected_rate(client: TestClient):
    r = client.post("/api/calculators/reliability", json={"input_type": "mtbf", "inspection_interval": 100})
    assert r.status_code == 422


def test_optimal_interval_two_steps(client: TestClient):
    r1 = client.post("/api/calculators/optimal-interval/failure-rate", json={"mtbf": 1000, "mtbf_unit": "hours"})
    assert r1.status_code == 200
    rate = r1.json()["failure_rate"]
    assert rate == pytest.approx(0.001)

    r2 = client.post(
        "/api/calculators/optimal-interval",
        json={"failure_rate": rate, "inspection_cost": 500, "failure_cost": 10000},
    )
    assert r2.status_code == 200
    data = r2.json()
    assert data["interval_hours"] == pytest.approx(316.23, abs=0.01)
    assert data["unit"] == "weeks"
    assert data["formatted"] == "1.88 weeks"
    assert len(data["curve"]) == 201


def test_optimal_interval_unknown_unit(client: TestClient):
    r = client.post("/api/calculators/optimal-interval/failure-rate", json={"mtbf": 1, "mtbf_unit": "fortnights"})
    assert r.status_code == 422


def test_voiding_time_domain_error(client: TestClient):
    r = client.post(
        "/api/calculators/voiding-time",
        json={"tank_volume": 1, "pipe_length": 5, "pipe_diameter": 100, "system_type": "pressurized"},
    )
    assert r.status_code == 400
    assert "Pressure difference" in r.json()["detail"]


def test_voiding_time_gravity(client: TestClient):
    r = client.post(
        "/api/calculators/voiding-time",
        json={"tank_volume": 1, "pipe_length": 5, "pipe_diameter": 100, "system_type": "gravity"},
    )
    assert r.status_code == 200
    assert r.json()["seconds"] > 0


def test_availability_based(client: TestClient):
    r = client.post(
        "/api/calculators/availability-based-ffi",
        json={"target_availability": 95, "mtbf": 10, "parallel_devices": 1},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["interval_years"] == pytest.approx(1.0)
    assert data["formatted"] == "1 year"
    assert data["warnings"] == []


def test_availability_based_blocked(client: TestClient):
    r = client.post("/api/calculators/availability-based-ffi", json={"target_availability": 80, "mtbf": 10})
    assert r.status_code == 200
    data = r.json()
    assert data["interval_years"] is None
    assert len(data["warnings"]) == 1


def test_availability_based_warn_policy(client: TestClient):
    r = client.post(
        "/api/calculators/availability-based-ffi",
        json={"target_availability": 80, "mtbf": 10, "policy": "warn"},
    )
    assert r.status_code == 200
    assert r.json()["interval_years"] == pytest.approx(4.0)


def test_parallel_devices_must_be_integer(client: TestClient):
    r = client.post("/api/calculators/availability-based-ffi", json={"parallel_devices": 1.5})
    assert r.status_code == 422


@pytest.mark.parametrize("name", ["economic-optimum-ffi", "risk-based-ffi", "risk-based-voting-ffi"])
def test_paid_calculators_require_plan(client: TestClient, name):
    r = client.post(f"/api/calculators/{name}", json={})
    assert r.status_code == 403
    assert r.json()["detail"] == "Upgrade Plan to Unlock"


def test_free_plan_is_not_enough(client: TestClient, db_session):
    set_state(db_session, USER_KEY, {"token": "t"})
    set_state(db_session, USER_PLANS_KEY, [{"name": "Free"}])
    r = client.post("/api/calculators/risk-based-ffi", json={})
    assert r.status_code == 403


def test_economic_optimum_with_paid_plan(client: TestClient, paid_user):
    r = client.post("/api/calculators/economic-optimum-ffi", json={})
    assert r.status_code == 200
    assert r.json()["interval_years"] == pytest.approx(math.sqrt(0.2))


def test_risk_based_with_paid_plan(client: TestClient, paid_user):
    r = client.post("/api/calculators/risk-based-ffi", json={})
    assert r.status_code == 200
    assert r.json()["formatted"] == "7 days"


def test_risk_based_voting_with_paid_plan(client: TestClient, paid_user):
    r = client.post(
        "/api/calculators/risk-based-voting-ffi",
        json={"parallel_devices": 3, "devices_to_activate": 2},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["details"]["r"] == 2
    assert data["formatted"] == "2 years and 86 days"


def test_risk_based_voting_m_above_n(client: TestClient, paid_user):
    r = client.post(
        "/api/calculators/risk-based-voting-ffi",
        json={"parallel_devices": 2, "devices_to_activate": 3},
    )
    assert r.status_code == 422


def test_voting_systems(client: TestClient):
    r = client.post("/api/calculators/voting-systems-ffi", json={})
    assert r.status_code == 200
    data = r.json()
    assert data["formatted"] == "0.13 hours"
    assert data["details"]["interval_days"] == pytest.approx(math.sqrt(2 / 120) / 24)
    assert len(data["curve"]) == 21


def test_decimal_separator_setting_applies(client: TestClient):
    client.put("/api/settings", json={"decimalSeparator": ","})
    r = client.post("/api/calculators/voting-systems-ffi", json={})
    assert r.json()["formatted"] == "0,13 hours"


def test_optimal_interval_underflowing_rate(client: TestClient):
    r = client.post(
        "/api/calculators/optimal-interval",
        json={"failure_rate": 1e-200, "inspection_cost": 500, "failure_cost": 10000},
    )
    assert r.status_code == 400
    assert "Optimal interval" in r.json()["detail"]


def test_voting_systems_underflowing_inputs(client: TestClient):
    r = client.post(
        "/api/calculators/voting-systems-ffi",
        json={"total_voters": 1e-30, "voting_period": 1e-10, "failure_rate": 1e-300, "detection_time": 1},
    )
    assert r.status_code == 400


def test_risk_based_voting_many_devices(client: TestClient, paid_user):
    r = client.post(
        "/api/calculators/risk-based-voting-ffi",
        json={"parallel_devices": 200, "devices_to_activate": 200},
    )
    assert r.status_code == 200
    assert r.json()["details"]["r"] == 1

    r = client.post(
        "/api/calculators/risk-based-voting-ffi",
        json={"parallel_devices": 2000, "devices_to_activate": 1000},
    )
    assert r.status_code == 400
