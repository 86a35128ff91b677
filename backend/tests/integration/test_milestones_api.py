"""
Integration tests for the milestone and progress HTTP API.

Requests go through the real FastAPI app with repositories bound to an
in-memory SQLite database.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from main import create_app
from petroleum_ops.api.deps import (
    get_event_publisher,
    get_milestone_repository,
    get_operation_progress_repository,
)

MILESTONE_BODY = {
    "name": "First oil",
    "description": "Production start on the north platform",
    "plannedDate": "2024-12-01",
}

TASK_BODY = {
    "name": "Commission separators",
    "startDate": "2024-10-01",
    "endDate": "2024-11-15",
}


class ExplodingRepository:
    """Milestone repository whose store is broken in an unexpected way."""

    async def find_by_project(self, project_id):
        raise RuntimeError("disk on fire")


@pytest.fixture
def app(milestone_repo, progress_repo, publisher):
    app = create_app()
    app.dependency_overrides[get_milestone_repository] = lambda: milestone_repo
    app.dependency_overrides[get_operation_progress_repository] = lambda: progress_repo
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create_milestone(client, project_id, **overrides):
    response = await client.post(
        f"/api/projects/{project_id}/milestones",
        json={**MILESTONE_BODY, **overrides},
        headers={"X-User-Id": "engineer-7"},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_create_milestone_returns_camel_case_envelope(client, project_id):
    data = await _create_milestone(client, project_id)

    assert data["projectId"] == project_id
    assert data["plannedDate"] == "2024-12-01"
    assert data["status"] == "planned"
    assert data["tasks"] == []
    assert data["createdBy"] == "engineer-7"
    assert "planned_date" not in data


@pytest.mark.asyncio
async def test_list_milestones_envelope(client, project_id):
    await _create_milestone(client, project_id)
    await _create_milestone(client, project_id, name="Gas export", plannedDate="2024-08-01")

    response = await client.get(f"/api/projects/{project_id}/milestones")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [m["name"] for m in body["data"]] == ["Gas export", "First oil"]


@pytest.mark.asyncio
async def test_missing_field_is_400(client, project_id):
    response = await client.post(
        f"/api/projects/{project_id}/milestones",
        json={"name": "First oil", "description": "No date"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "plannedDate" in body["message"]


@pytest.mark.asyncio
async def test_timestamp_date_is_400(client, project_id):
    response = await client.post(
        f"/api/projects/{project_id}/milestones",
        json={**MILESTONE_BODY, "plannedDate": 1704067200},
    )

    assert response.status_code == 400
    assert "plannedDate" in response.json()["message"]


@pytest.mark.asyncio
async def test_unknown_milestone_is_404(client):
    response = await client.get("/api/projects/milestones/missing-milestone")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Milestone missing-milestone not found"}


@pytest.mark.asyncio
async def test_task_lifecycle(client, publisher, project_id):
    milestone = await _create_milestone(client, project_id)
    base = f"/api/projects/{project_id}/milestones/{milestone['id']}/tasks"

    created = await client.post(base, json=TASK_BODY)
    assert created.status_code == 201
    task = created.json()["data"]
    assert task["completionPercentage"] == 0
    assert task["dependsOn"] == []

    updated = await client.put(
        f"{base}/{task['id']}",
        json={"status": "in-progress", "completionPercentage": 30},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["status"] == "in-progress"

    deleted = await client.delete(f"{base}/{task['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True, "data": {}}

    fetched = await client.get(f"/api/projects/milestones/{milestone['id']}")
    assert fetched.json()["data"]["tasks"] == []
    assert publisher.actions() == [
        ("milestone", "created"),
        ("task", "created"),
        ("task", "updated"),
        ("task", "deleted"),
    ]


@pytest.mark.asyncio
async def test_empty_task_name_is_400(client, project_id):
    milestone = await _create_milestone(client, project_id)

    response = await client.post(
        f"/api/projects/{project_id}/milestones/{milestone['id']}/tasks",
        json={**TASK_BODY, "name": ""},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_update_task_of_unknown_milestone_is_404(client, project_id):
    response = await client.put(
        f"/api/projects/{project_id}/milestones/missing-milestone/tasks/t1",
        json={"status": "completed"},
    )

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_complete_milestone_sets_actual_date(client, project_id):
    milestone = await _create_milestone(client, project_id)

    response = await client.put(
        f"/api/projects/milestones/{milestone['id']}",
        json={"status": "completed", "actualDate": "2024-11-30"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "completed"
    assert data["actualDate"] == "2024-11-30"


@pytest.mark.asyncio
async def test_summary_endpoint(client, project_id):
    milestone = await _create_milestone(client, project_id)
    base = f"/api/projects/{project_id}/milestones/{milestone['id']}/tasks"
    for status in ("completed", "in-progress", "planned", "delayed"):
        await client.post(base, json={**TASK_BODY, "status": status})

    response = await client.get(f"/api/projects/{project_id}/milestones/summary")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["overall"] == 38
    assert data["completed"] == 1
    assert data["inProgress"] == 1
    assert data["planned"] == 1
    assert data["delayed"] == 1
    assert data["milestones"][0]["suggestedStatus"] == "delayed"


@pytest.mark.asyncio
async def test_progress_entries(client, project_id):
    created = await client.post(
        f"/api/projects/{project_id}/progress",
        json={
            "date": "2024-05-01",
            "milestone": "First oil",
            "plannedProgress": 60,
            "actualProgress": 45,
            "challenges": "Late valve delivery",
        },
    )
    assert created.status_code == 201
    entry = created.json()["data"]
    assert entry["variance"] == -15
    assert entry["status"] == "atRisk"

    filtered = await client.get(
        f"/api/projects/{project_id}/progress", params={"status": "atRisk", "date": "2024-05-01"}
    )
    assert filtered.json()["count"] == 1

    updated = await client.put(f"/api/projects/progress/{entry['id']}", json={"actualProgress": 70})
    assert updated.json()["data"]["status"] == "ahead"

    deleted = await client.delete(f"/api/projects/progress/{entry['id']}")
    assert deleted.status_code == 200

    remaining = await client.get(f"/api/projects/{project_id}/progress")
    assert remaining.json() == {"success": True, "count": 0, "data": []}


@pytest.mark.asyncio
async def test_invalid_progress_status_filter_is_400(client, project_id):
    response = await client.get(f"/api/projects/{project_id}/progress", params={"status": "sideways"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unexpected_failure_is_500_with_generic_message(app, project_id):
    app.dependency_overrides[get_milestone_repository] = lambda: ExplodingRepository()
    transport = ASGITransport(app=app, raise_app_exceptions=False)

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(f"/api/projects/{project_id}/milestones")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
