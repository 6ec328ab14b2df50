from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app import services
from app.schemas import ReportPayload


def _task(task_id: str, **overrides) -> dict:
    task = {
        "id": task_id,
        "date": "2024-03-04",
        "day": "Monday",
        "projectName": "Billing",
        "projectType": "Development",
        "assignedBy": "Self",
        "employeeName": "Asha Rao",
        "employeeId": "E-1042",
        "teamName": "Platform",
        "startTime": "09:00",
        "endTime": "17:30",
        "workingHours": "8.50",
        "remarks": "",
        "isRunning": False,
    }
    task.update(overrides)
    return task


def _create(client: TestClient, user_id: str, date: str = "2024-03-04", **extra) -> dict:
    response = client.post("/api/reports", json={"id": "", "userId": user_id, "date": date, **extra})
    assert response.status_code == 200, response.text
    return response.json()


def test_create_report_assigns_id_day_and_defaults(client: TestClient, registered_user: dict):
    report = _create(client, registered_user["id"])
    assert report["id"]
    assert report["day"] == "Monday"
    assert report["themeColor"] == "#70ad47"
    assert report["isPlainTheme"] is False
    assert report["tasks"] == []
    assert report["planningTasks"] == []
    assert isinstance(report["createdAt"], int)


def test_update_preserves_created_at_and_replaces_content(client: TestClient, registered_user: dict):
    report = _create(client, registered_user["id"], createdAt=1_700_000_000_000)
    assert report["createdAt"] == 1_700_000_000_000

    payload = {
        **report,
        "createdAt": 42,
        "tasks": [_task("t-1")],
        "planningTasks": [{"id": "p-1", "label": "Next Working Day Task", "description": "Deploy"}],
        "preText": "Hi Team,",
        "isPlainTheme": True,
    }
    response = client.post("/api/reports", json=payload)
    assert response.status_code == 200
    updated = response.json()
    assert updated["id"] == report["id"]
    assert updated["createdAt"] == 1_700_000_000_000
    assert updated["tasks"][0]["workingHours"] == "8.50"
    assert updated["planningTasks"][0]["description"] == "Deploy"
    assert updated["isPlainTheme"] is True


def test_list_reports_newest_first(client: TestClient, registered_user: dict):
    user_id = registered_user["id"]
    _create(client, user_id, "2024-03-01", createdAt=1000)
    _create(client, user_id, "2024-03-03", createdAt=3000)
    _create(client, user_id, "2024-03-02", createdAt=2000)

    response = client.get(f"/api/reports/{user_id}")
    assert response.status_code == 200
    assert [r["createdAt"] for r in response.json()] == [3000, 2000, 1000]


def test_duplicate_dates_are_allowed(client: TestClient, registered_user: dict):
    first = _create(client, registered_user["id"], "2024-03-04")
    second = _create(client, registered_user["id"], "2024-03-04")
    assert first["id"] != second["id"]


def test_creation_refused_at_cap_but_updates_still_allowed(client: TestClient, registered_user: dict, monkeypatch):
    monkeypatch.setattr(services.settings, "max_reports_per_user", 3)
    user_id = registered_user["id"]
    reports = [_create(client, user_id, f"2024-03-0{day}") for day in range(1, 4)]

    refused = client.post("/api/reports", json={"userId": user_id, "date": "2024-03-09"})
    assert refused.status_code == 409
    assert refused.json()["detail"]["code"] == "limit_reached"
    assert len(client.get(f"/api/reports/{user_id}").json()) == 3

    response = client.post("/api/reports", json={**reports[0], "postText": "Best Regards"})
    assert response.status_code == 200
    assert response.json()["postText"] == "Best Regards"


def test_thirtieth_report_succeeds_and_thirty_first_is_refused(session: Session, client: TestClient, registered_user: dict):
    user_id = registered_user["id"]
    for index in range(29):
        services.upsert_report(session, ReportPayload(user_id=user_id, date="2024-03-04", created_at=index + 1))

    thirtieth = client.post("/api/reports", json={"userId": user_id, "date": "2024-03-05"})
    assert thirtieth.status_code == 200
    assert services.count_reports(session, user_id) == 30

    refused = client.post("/api/reports", json={"userId": user_id, "date": "2024-03-06"})
    assert refused.status_code == 409


def test_update_with_stale_id_is_not_found(client: TestClient, registered_user: dict):
    response = client.post(
        "/api/reports", json={"id": "missing", "userId": registered_user["id"], "date": "2024-03-04"}
    )
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"


def test_report_for_unknown_user_is_invalid(client: TestClient):
    response = client.post("/api/reports", json={"userId": "ghost", "date": "2024-03-04"})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_input"


def test_invalid_date_is_rejected(client: TestClient, registered_user: dict):
    response = client.post("/api/reports", json={"userId": registered_user["id"], "date": "04/03/2024"})
    assert response.status_code == 422


def test_delete_report(client: TestClient, registered_user: dict):
    report = _create(client, registered_user["id"])
    response = client.delete(f"/api/reports/{report['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/api/reports/{registered_user['id']}").json() == []

    again = client.delete(f"/api/reports/{report['id']}")
    assert again.status_code == 404
