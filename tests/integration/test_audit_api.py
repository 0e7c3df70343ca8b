"""Integration tests for the audit run and dashboard endpoints."""


def test_health(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_lists_steps(test_client):
    response = test_client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"]["steps"] == ["Install Dependencies", "Lint", "Console/Network Check"]


def test_start_audit_returns_run_id(test_client, wait_for_run):
    response = test_client.post("/api/audit/start")

    assert response.status_code == 200
    run_id = response.json()["audit_run_id"]

    details = wait_for_run(run_id)

    assert details["run"]["id"] == run_id
    assert details["run"]["status"] == "completed"
    assert [s["step_name"] for s in details["steps"]] == ["Install Dependencies", "Lint", "Console/Network Check"]
    assert [s["status"] for s in details["steps"]] == ["success", "failed", "success"]
    assert details["steps"][1]["error_message"] == "error TS2304: Cannot find name 'zodiac'"
    assert details["issues"] == []


def test_progress_of_finished_run(test_client, wait_for_run):
    run_id = test_client.post("/api/audit/start").json()["audit_run_id"]
    wait_for_run(run_id)

    response = test_client.get(f"/api/audit/runs/{run_id}/progress")

    assert response.status_code == 200
    progress = response.json()
    assert progress["progress"] == 100
    assert progress["is_complete"] is True
    assert len(progress["steps"]) == 3


def test_list_runs_newest_first(test_client, wait_for_run):
    first = test_client.post("/api/audit/start").json()["audit_run_id"]
    second = test_client.post("/api/audit/start").json()["audit_run_id"]
    wait_for_run(second)

    response = test_client.get("/api/audit/runs")

    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [second, first]


def test_unknown_run_is_404(test_client):
    assert test_client.get("/api/audit/runs/nope").status_code == 404
    assert test_client.get("/api/audit/runs/nope/progress").status_code == 404


def test_dashboard_summary_without_runs(test_client):
    response = test_client.get("/api/dashboard/summary")

    assert response.status_code == 200
    summary = response.json()
    assert summary["last_audit_run"] is None
    assert summary["build_status"] == "Pending"
    assert summary["dependencies"] == {"status": "unknown", "installed": False}
    assert summary["total_issues"] == 0
    assert summary["api_connections"] == {"connected": 0, "total": 0, "percentage": 0}
    assert summary["environment"]["total_vars"] == 0
    assert summary["environment"]["services"] == {"prokerala": False, "razorpay": False, "goaffpro": False}


def test_dashboard_summary_after_run(test_client, wait_for_run):
    run_id = test_client.post("/api/audit/start").json()["audit_run_id"]
    wait_for_run(run_id)

    summary = test_client.get("/api/dashboard/summary").json()

    assert summary["last_audit_run"]["id"] == run_id
    assert summary["build_status"] == "Ready"
    assert summary["dependencies"]["installed"] is True
    assert summary["step_counts"] == {"success": 2, "failed": 1}
    assert summary["poll_interval_seconds"] == 2.0
