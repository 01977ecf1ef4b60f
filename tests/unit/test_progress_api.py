"""
Tests for the progress and statistics endpoints.
"""


def add_task(client, user_id, **fields):
    payload = {"user_id": user_id, "title": "task"}
    payload.update(fields)
    assert client.post("/api/tasks", json=payload).status_code == 201


class TestProgress:

    def test_no_tasks_is_zero_percent(self, alice):
        client, _ = alice

        data = client.get("/api/progress").json()["data"]

        assert data["overall"] == {
            "total_tasks": 0,
            "completed_tasks": 0,
            "in_progress_tasks": 0,
            "pending_tasks": 0,
            "completion_percentage": 0.0,
        }
        assert data["by_category"] == []

    def test_overall_and_category_breakdown(self, alice):
        client, user = alice
        add_task(client, user["id"], category_id=1, status_id=3)
        add_task(client, user["id"], category_id=1, status_id=2)
        add_task(client, user["id"], category_id=2, status_id=1)

        data = client.get("/api/progress").json()["data"]

        assert data["overall"]["total_tasks"] == 3
        assert data["overall"]["completed_tasks"] == 1
        assert data["overall"]["in_progress_tasks"] == 1
        assert data["overall"]["pending_tasks"] == 1
        assert data["overall"]["completion_percentage"] == 33.33

        categories = {c["name"]: c for c in data["by_category"]}
        assert set(categories) == {"Technical Work", "Documentation"}
        assert categories["Technical Work"]["total"] == 2
        assert categories["Technical Work"]["percentage"] == 50.0
        assert categories["Documentation"]["percentage"] == 0.0

    def test_progress_ignores_other_users(self, alice, bob):
        alice_client, alice_user = alice
        bob_client, _ = bob
        add_task(alice_client, alice_user["id"], status_id=3)

        assert bob_client.get("/api/progress").json()["data"]["overall"]["total_tasks"] == 0

    def test_progress_requires_login(self, client):
        assert client.get("/api/progress").status_code == 401


class TestStats:

    def test_stats_summary(self, alice):
        client, user = alice
        add_task(client, user["id"], status_id=3, priority_id=1, hours_rendered=8)
        add_task(client, user["id"], status_id=1, priority_id=3, hours_rendered=4, due_date="2000-01-01")

        data = client.get("/api/stats").json()["data"]

        assert data["total"] == 2
        assert data["completed"] == 1
        assert data["completion_rate"] == 50.0
        assert data["by_priority"] == {"high": 1, "medium": 0, "low": 1}
        assert len(data["overdue"]) == 1
        assert data["hours"]["rendered"] == 12.0
        assert data["hours"]["required"] == 480.0
        achieved = [m["percentage"] for m in data["milestones"] if m["achieved"]]
        assert achieved == [25, 50]
        assert data["next_milestone"]["milestone"]["percentage"] == 75
        assert data["next_milestone"]["tasks_to_complete"] == 1

    def test_stats_with_no_tasks(self, alice):
        client, _ = alice

        data = client.get("/api/stats").json()["data"]

        assert data["total"] == 0
        assert data["completion_rate"] == 0.0
        assert data["next_milestone"]["milestone"]["percentage"] == 25
        assert data["next_milestone"]["tasks_to_complete"] == 0
