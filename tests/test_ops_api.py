"""
Event-ops run: checklist, incidents, sign-off and audit trail
"""


def test_default_run_and_checklist_template(client, volunteer_headers):
    response = client.get("/api/ops/run/shift-1/vol-1", params={"category": "Health Fair"},
                          headers=volunteer_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["ops_run"] == {
        "id": "shift-1_vol-1",
        "shift_id": "shift-1",
        "volunteer_id": "vol-1",
        "completed_items": [],
        "signoff_signature": None,
        "signoff_timestamp": None,
        "updated_at": None,
    }
    assert data["checklist"]["id"] == "health-fair-ops"
    assert [s["key"] for s in data["checklist"]["stages"]] == ["packet", "setup", "live_ops", "breakdown"]
    assert data["progress"]["completed"] == 0
    assert data["incidents"] == []
    assert data["audit_logs"] == []


def test_template_selection_by_category(client, volunteer_headers):
    def template(category):
        return client.get("/api/ops/run/shift-1/vol-1", params={"category": category},
                          headers=volunteer_headers).json()["checklist"]["id"]

    assert template("Survey Collection") == "survey-station-ops"
    assert template("Street Medicine") == "health-fair-ops"
    assert template("Tabling") == "workshop-event-ops"


def test_cannot_view_another_volunteers_run(client, volunteer_headers, coordinator_headers):
    assert client.get("/api/ops/run/shift-1/vol-2", headers=volunteer_headers).status_code == 403
    assert client.get("/api/ops/run/shift-1/vol-2", headers=coordinator_headers).status_code == 200


def test_checklist_progress_and_signoff(client, volunteer_headers, admin_headers):
    saved = client.post("/api/ops/checklist", json={
        "run_id": "shift-1_vol-1", "completed_items": ["hf-p-1", "hf-s-1", "hf-p-1"],
    }, headers=volunteer_headers)
    assert saved.status_code == 200
    assert saved.json()["completed_items"] == ["hf-p-1", "hf-s-1"]
    assert saved.json()["shift_id"] == "shift-1"

    run = client.get("/api/ops/run/shift-1/vol-1", params={"category": "Health Fair"},
                     headers=volunteer_headers).json()
    assert run["progress"]["completed"] == 2
    assert run["progress"]["total"] == 19

    assert client.post("/api/ops/signoff", json={"run_id": "shift-1_vol-1", "signature": "   "},
                       headers=volunteer_headers).status_code == 400

    signed = client.post("/api/ops/signoff", json={
        "run_id": "shift-1_vol-1", "shift_id": "shift-1", "signature": "data:image/png;base64,AAAA",
    }, headers=volunteer_headers)
    assert signed.status_code == 200
    assert signed.json()["signoff_timestamp"]

    again = client.post("/api/ops/signoff", json={
        "run_id": "shift-1_vol-1", "shift_id": "shift-1", "signature": "Val",
    }, headers=volunteer_headers)
    assert again.status_code == 409

    locked = client.post("/api/ops/checklist", json={"run_id": "shift-1_vol-1", "completed_items": []},
                         headers=volunteer_headers)
    assert locked.status_code == 400

    logs = client.get("/api/ops/audit/shift-1", headers=admin_headers).json()
    assert [log["action_type"] for log in logs] == ["SHIFT_SIGNOFF"]


def test_incident_report_and_resolve(client, volunteer_headers, coordinator_headers):
    response = client.post("/api/ops/incidents", json={
        "shift_id": "shift-1",
        "type": "EMS activation",
        "description": "Participant fainted near the screening tent",
        "actions_taken": "Called 911",
    }, headers=volunteer_headers)
    assert response.status_code == 200
    incident = response.json()
    assert incident["status"] == "reported"
    assert incident["volunteer_id"] == "vol-1"

    resolved = client.put(f"/api/ops/incidents/{incident['id']}/resolve", headers=coordinator_headers).json()
    assert resolved["status"] == "resolved"
    assert resolved["resolved_by"] == "coord-1"

    run = client.get("/api/ops/run/shift-1/vol-1", headers=volunteer_headers).json()
    assert [i["id"] for i in run["incidents"]] == [incident["id"]]
    assert run["audit_logs"][0]["action_type"] == "RESOLVE_INCIDENT"
    assert run["audit_logs"][1]["summary"] == "Field Incident: EMS activation"

    assert client.put("/api/ops/incidents/missing/resolve", headers=coordinator_headers).status_code == 404


def test_incident_validation(client, volunteer_headers):
    assert client.post("/api/ops/incidents", json={
        "shift_id": "shift-1", "type": "Fire", "description": "x",
    }, headers=volunteer_headers).status_code == 422
    assert client.post("/api/ops/incidents", json={
        "shift_id": "shift-1", "type": "Other", "description": "   ",
    }, headers=volunteer_headers).status_code == 400


def test_client_audit_entries_are_admin_only_to_read(client, volunteer_headers, admin_headers):
    response = client.post("/api/ops/audit", json={
        "action_type": "DISTRIBUTE_KIT", "summary": "Naloxone kit handed out", "shift_id": "shift-2",
    }, headers=volunteer_headers)
    assert response.status_code == 200
    assert response.json()["actor_role"] == "Core Volunteer"

    assert client.get("/api/ops/audit/shift-2", headers=volunteer_headers).status_code == 403
    logs = client.get("/api/ops/audit/shift-2", headers=admin_headers).json()
    assert logs[0]["summary"] == "Naloxone kit handed out"


def test_cannot_modify_another_volunteers_run(client, volunteer_headers, coordinator_headers, admin_headers):
    other = {"X-User-ID": "vol-2", "X-User-Role": "Core Volunteer", "X-User-Name": "Otto"}

    forged = client.post("/api/ops/signoff", json={"run_id": "shift-1_vol-1", "signature": "Forged"},
                         headers=other)
    assert forged.status_code == 403
    assert client.post("/api/ops/checklist", json={"run_id": "shift-1_vol-1", "completed_items": ["hf-p-1"]},
                       headers=other).status_code == 403

    client.post("/api/ops/checklist", json={"run_id": "shift-1_vol-1", "completed_items": ["hf-p-1"]},
                headers=volunteer_headers)
    assert client.post("/api/ops/signoff", json={"run_id": "shift-1_vol-1", "signature": "Forged"},
                       headers=other).status_code == 403

    # Leads may update a volunteer's run; the run stays theirs
    saved = client.post("/api/ops/checklist", json={
        "run_id": "shift-2_vol-1", "shift_id": "shift-2", "completed_items": ["hf-s-1"],
    }, headers=coordinator_headers).json()
    assert saved["volunteer_id"] == "vol-1"
    assert saved["shift_id"] == "shift-2"

    assert client.get("/api/ops/audit/shift-1", headers=admin_headers).json() == []
