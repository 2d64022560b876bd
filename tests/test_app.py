from __future__ import annotations

import pytest

from src.absence_reconciler.absence_reconciler.core.exceptions import TransientStoreError
from src.absence_reconciler.absence_reconciler.main import create_app


@pytest.fixture
def app(monkeypatch, store, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(store=store, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()


def test_health_reports_a_stopped_runner(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "runner": "stopped"}


def test_run_endpoint_returns_the_pass_summary(client, store, session_id):
    resp = client.post("/absences/run")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["report"]["sessions_created"] == 1
    assert body["report"]["outcomes"]["absence_recorded"] == 2
    assert session_id in store.dump("sessions")


def test_run_endpoint_maps_store_outages_to_503(app, client, monkeypatch):
    container = app.extensions["absence_reconciler"]

    async def list_by_role(role):
        raise TransientStoreError("store unreachable")

    monkeypatch.setattr(container.students_repo, "list_by_role", list_by_role)

    resp = client.post("/absences/run")

    assert resp.status_code == 503
    assert resp.get_json()["success"] is False


def test_session_lookup(client, session_id):
    assert client.get(f"/absences/sessions/{session_id}").status_code == 404

    client.post("/absences/run")
    resp = client.get(f"/absences/sessions/{session_id}")

    assert resp.status_code == 200
    assert resp.get_json()["session"]["subject_id"] == "M1"


def test_presence_endpoint(client, store):
    payload = {"matricule": "MAT-A", "subject_id": "M1", "subject_label": "Algorithms", "start": "09:00", "end": "11:00"}

    resp = client.post("/attendance/presence", json=payload)

    assert resp.status_code == 201
    assert resp.get_json() == {"success": True, "counted": True}
    assert store.dump("users")["u-a"]["presences"] == 1


def test_presence_endpoint_errors(client):
    assert client.post("/attendance/presence", json=["not", "an", "object"]).status_code == 400
    assert client.post("/attendance/presence", json={"matricule": "MAT-A", "subject_id": "M1", "start": "9", "end": "11:00"}).status_code == 400
    missing = {"matricule": "MAT-Z", "subject_id": "M1", "start": "09:00", "end": "11:00"}
    assert client.post("/attendance/presence", json=missing).status_code == 404


def test_justification_endpoints(client, session_id):
    client.post("/absences/run")
    ref = {"session_id": session_id, "matricule": "MAT-B", "subject_id": "M1", "date": "2026-10-19", "start": "09:00", "end": "11:00"}

    submitted = client.post("/attendance/justifications", json={**ref, "content": "Sick", "documents": ["note.pdf"]})
    bad_decision = client.post("/attendance/justifications/review", json={**ref, "decision": "maybe"})
    reviewed = client.post("/attendance/justifications/review", json={**ref, "decision": "reject"})

    assert submitted.status_code == 200
    assert submitted.get_json()["status"] == "En cours"
    assert bad_decision.status_code == 400
    assert reviewed.get_json()["status"] == "Rejetée"


def test_justification_endpoint_validates_the_date(client, session_id):
    resp = client.post(
        "/attendance/justifications",
        json={"session_id": session_id, "matricule": "MAT-B", "subject_id": "M1", "date": "19/10/2026", "start": "09:00", "end": "11:00", "content": "x"},
    )

    assert resp.status_code == 400
