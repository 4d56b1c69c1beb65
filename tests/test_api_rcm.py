"""API tests for the RCM Decision Tool."""

from datetime import date
from urllib.parse import quote

from fastapi.testclient import TestClient


def _new_session(client: TestClient) -> str:
    r = client.post("/api/rcm/sessions")
    assert r.status_code == 201
    return r.json()["session_id"]


def test_graph_and_assets(client: TestClient):
    r = client.get("/api/rcm/graph")
    assert r.status_code == 200
    graph = r.json()
    assert graph["start_id"] == "Start"
    assert graph["nodes"]["Start"]["kind"] == "question"
    assert graph["nodes"]["A_FailureFinding"]["kind"] == "answer"

    r = client.get("/api/rcm/assets")
    assert r.status_code == 200
    assert any(a["name"] == "Pressure Safety Valve" for a in r.json())


def test_create_session(client: TestClient):
    r = client.post("/api/rcm/sessions")
    assert r.status_code == 201
    data = r.json()
    assert data["state"]["current_step"] == "Start"
    assert data["node"]["id"] == "Start"
    assert data["complete"] is False


def test_unknown_session(client: TestClient):
    assert client.get("/api/rcm/sessions/nope").status_code == 404
    assert client.post("/api/rcm/sessions/nope/answer", json={"answer": "yes"}).status_code == 404


def test_full_walk_and_export(client: TestClient):
    sid = _new_session(client)
    r = client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": "Pressure Safety Valve", "failure_mode": "Fails to open on demand"})
    assert r.status_code == 200
    assert r.json()["state"]["asset"] == "Pressure Safety Valve"

    for answer in ("no", "yes", "no", "no", "no", "yes"):
        r = client.post(f"/api/rcm/sessions/{sid}/answer", json={"answer": answer})
        assert r.status_code == 200
    data = r.json()
    assert data["state"]["current_step"] == "A_FailureFinding"
    assert data["state"]["progress"] == 100
    assert data["state"]["failure_type"] == "Hidden"
    assert data["state"]["failure_leg"] == "Safety"
    assert data["complete"] is True

    r = client.get(f"/api/rcm/sessions/{sid}/export")
    assert r.status_code == 200
    expected_name = f"rcm_decision_pressure_safety_valve_{date.today().isoformat()}.json"
    assert expected_name in r.headers["content-disposition"]
    record = r.json()
    assert record["recommendedAction"]["id"] == "A_FailureFinding"
    assert [e["answer"] for e in record["decisionPath"]] == ["No", "Yes", "No", "No", "No", "Yes", "Final"]


def test_answer_on_terminal_step_conflicts_and_keeps_state(client: TestClient):
    sid = _new_session(client)
    for answer in ("yes", "yes", "yes"):
        client.post(f"/api/rcm/sessions/{sid}/answer", json={"answer": answer})
    r = client.post(f"/api/rcm/sessions/{sid}/answer", json={"answer": "no"})
    assert r.status_code == 409
    assert "Question not found" in r.json()["detail"]
    state = client.get(f"/api/rcm/sessions/{sid}").json()["state"]
    assert state["current_step"] == "A_OnCondition"
    assert len(state["history"]) == 3


def test_invalid_answer_value(client: TestClient):
    sid = _new_session(client)
    r = client.post(f"/api/rcm/sessions/{sid}/answer", json={"answer": "maybe"})
    assert r.status_code == 422


def test_back_keeps_failure_type(client: TestClient):
    sid = _new_session(client)
    client.post(f"/api/rcm/sessions/{sid}/answer", json={"answer": "yes"})
    r = client.post(f"/api/rcm/sessions/{sid}/back")
    assert r.status_code == 200
    state = r.json()["state"]
    assert state["current_step"] == "Start"
    assert state["history"] == []
    assert state["failure_type"] == "Evident"


def test_reset(client: TestClient):
    sid = _new_session(client)
    client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": "Air Compressor", "failure_mode": "Overheating"})
    client.post(f"/api/rcm/sessions/{sid}/answer", json={"answer": "no"})
    r = client.post(f"/api/rcm/sessions/{sid}/reset")
    state = r.json()["state"]
    assert state["current_step"] == "Start"
    assert state["asset"] == ""
    assert state["failure_type"] is None
    assert state["progress"] == 0


def test_delete_session(client: TestClient):
    sid = _new_session(client)
    assert client.delete(f"/api/rcm/sessions/{sid}").status_code == 204
    assert client.get(f"/api/rcm/sessions/{sid}").status_code == 404
    assert client.delete(f"/api/rcm/sessions/{sid}").status_code == 404


def test_begin_requires_labels(client: TestClient):
    sid = _new_session(client)
    r = client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": "", "failure_mode": "x"})
    assert r.status_code == 422


def test_begin_without_failure_mode(client: TestClient):
    sid = _new_session(client)
    r = client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": "Pump", "failure_mode": ""})
    assert r.status_code == 200
    assert r.json()["state"]["failure_mode"] == ""

    r = client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": "Pump"})
    assert r.status_code == 200


def test_export_non_ascii_asset_name(client: TestClient):
    sid = _new_session(client)
    client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": "泵站 A"})
    r = client.get(f"/api/rcm/sessions/{sid}/export")
    assert r.status_code == 200
    today = date.today().isoformat()
    disposition = r.headers["content-disposition"]
    assert f'filename="rcm_decision___a_{today}.json"' in disposition
    assert f"filename*=UTF-8''{quote(f'rcm_decision_泵站_a_{today}.json', safe='')}" in disposition
    assert r.json()["asset"] == "泵站 A"


def test_export_asset_name_with_quotes(client: TestClient):
    sid = _new_session(client)
    client.post(f"/api/rcm/sessions/{sid}/begin", json={"asset": 'Pump "B"'})
    r = client.get(f"/api/rcm/sessions/{sid}/export")
    assert r.status_code == 200
    assert f'filename="rcm_decision_pump__b__{date.today().isoformat()}.json"' in r.headers["content-disposition"]
