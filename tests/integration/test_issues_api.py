"""Integration tests for the detected issue endpoints."""


def _report(client, **overrides):
    body = {
        "type": "form_input",
        "severity": "high",
        "title": "Birth time field read-only",
        "description": "readOnly on <TimeInput>",
        "file_path": "client/src/components/BirthForm.tsx",
        "line_number": 58,
    }
    body.update(overrides)
    return client.post("/api/issues", json=body)


def test_report_and_list_issues(test_client):
    response = _report(test_client)

    assert response.status_code == 200
    issue = response.json()
    assert issue["severity"] == "high"
    assert issue["is_resolved"] is False
    assert issue["audit_run_id"] is None

    listed = test_client.get("/api/issues").json()
    assert [i["id"] for i in listed] == [issue["id"]]


def test_list_issues_for_run_sorted_by_severity(test_client, wait_for_run):
    run_id = test_client.post("/api/audit/start").json()["audit_run_id"]
    wait_for_run(run_id)
    _report(test_client, audit_run_id=run_id, severity="low", title="low")
    _report(test_client, audit_run_id=run_id, severity="critical", title="critical")
    _report(test_client, title="unrelated")

    listed = test_client.get("/api/issues", params={"audit_run_id": run_id}).json()

    assert [i["title"] for i in listed] == ["critical", "low"]


def test_invalid_issue_is_rejected(test_client):
    response = _report(test_client, severity="catastrophic")

    assert response.status_code == 422


def test_resolve_issue(test_client):
    issue_id = _report(test_client).json()["id"]

    response = test_client.put(f"/api/issues/{issue_id}", json={"is_resolved": True})

    assert response.status_code == 200
    updated = response.json()
    assert updated["is_resolved"] is True
    assert updated["title"] == "Birth time field read-only"


def test_update_unknown_issue_is_404(test_client):
    response = test_client.put("/api/issues/missing", json={"is_resolved": True})

    assert response.status_code == 404


def test_update_rejects_unknown_fields(test_client):
    issue_id = _report(test_client).json()["id"]

    response = test_client.put(f"/api/issues/{issue_id}", json={"title": "renamed"})

    assert response.status_code == 422


def test_recommendation_can_be_cleared(test_client):
    issue_id = _report(test_client, recommendation="Drop readOnly").json()["id"]

    response = test_client.put(f"/api/issues/{issue_id}", json={"recommendation": None})

    assert response.status_code == 200
    updated = response.json()
    assert updated["recommendation"] is None
    assert updated["is_resolved"] is False
    assert updated["severity"] == "high"


def test_null_resolution_flag_is_rejected(test_client):
    issue_id = _report(test_client).json()["id"]

    response = test_client.put(f"/api/issues/{issue_id}", json={"is_resolved": None})

    assert response.status_code == 422
