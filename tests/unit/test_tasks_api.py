"""
Tests for the task CRUD endpoints.
"""

from app.db.models.activity import ActivityLog
from app.db.models.task import Task


def create_task(client, user_id, **overrides):
    payload = {"user_id": user_id, "title": "Log Week 1", "category_id": 1, "priority_id": 2}
    payload.update(overrides)
    response = client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


class TestCreateTask:

    def test_create_returns_id_and_logs(self, alice, db_session):
        client, user = alice

        response = client.post("/api/tasks", json={"user_id": user["id"], "title": "  Log Week 1  "})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        task_id = body["data"]["id"]

        task = db_session.query(Task).filter(Task.id == task_id).first()
        assert task.title == "Log Week 1"
        assert task.status_id == 1
        logs = db_session.query(ActivityLog).filter(ActivityLog.task_id == task_id).all()
        assert [log.action_type for log in logs] == ["task_created"]

    def test_create_with_ojt_fields(self, alice, sample_task_data):
        client, user = alice
        sample_task_data["user_id"] = user["id"]

        task_id = client.post("/api/tasks", json=sample_task_data).json()["data"]["id"]
        task = client.get(f"/api/tasks?action=get&id={task_id}").json()["data"]

        assert task["date_performed"] == "2026-06-10"
        assert task["hours_rendered"] == 7.5
        assert task["department"] == "IT Services"
        assert task["category_name"] == "Technical Work"
        assert task["priority_name"] == "Medium"
        assert task["status_name"] == "Pending"

    def test_create_requires_title(self, alice):
        client, user = alice

        response = client.post("/api/tasks", json={"user_id": user["id"], "title": "   "})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_create_requires_login(self, client):
        response = client.post("/api/tasks", json={"user_id": 1, "title": "x"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authenticated", "errors": None}

    def test_cannot_create_for_someone_else(self, alice, bob):
        client, _ = alice
        _, other = bob

        response = client.post("/api/tasks", json={"user_id": other["id"], "title": "Sneaky"})

        assert response.status_code == 403

    def test_admin_create_for_missing_user_is_404(self, admin):
        client, _ = admin

        response = client.post("/api/tasks", json={"user_id": 9999, "title": "Orphan"})

        assert response.status_code == 404


class TestListTasks:

    def test_list_orders_by_due_date_then_priority(self, alice):
        client, user = alice
        late = create_task(client, user["id"], title="late", due_date="2026-07-01")
        undated = create_task(client, user["id"], title="undated")
        early_low = create_task(client, user["id"], title="early low", due_date="2026-06-01", priority_id=3)
        early_high = create_task(client, user["id"], title="early high", due_date="2026-06-01", priority_id=1)

        data = client.get("/api/tasks").json()["data"]

        assert [t["id"] for t in data] == [early_high, early_low, late, undated]

    def test_list_filters_by_status_and_category(self, alice):
        client, user = alice
        create_task(client, user["id"], title="a", category_id=1)
        done = create_task(client, user["id"], title="b", category_id=2, status_id=3)
        create_task(client, user["id"], title="c", category_id=2)

        by_status = client.get("/api/tasks?status=Completed").json()["data"]
        by_category = client.get("/api/tasks?category=2").json()["data"]

        assert [t["id"] for t in by_status] == [done]
        assert len(by_category) == 2

    def test_list_only_shows_own_tasks(self, alice, bob):
        alice_client, alice_user = alice
        bob_client, bob_user = bob
        create_task(alice_client, alice_user["id"])

        assert bob_client.get("/api/tasks").json()["data"] == []
        assert bob_client.get(f"/api/tasks?user_id={alice_user['id']}").status_code == 403

    def test_admin_can_list_another_users_tasks(self, alice, admin):
        alice_client, alice_user = alice
        create_task(alice_client, alice_user["id"])
        admin_client, _ = admin

        data = admin_client.get(f"/api/tasks?user_id={alice_user['id']}").json()["data"]

        assert len(data) == 1

    def test_get_without_id_is_400(self, alice):
        client, _ = alice

        response = client.get("/api/tasks?action=get")

        assert response.status_code == 400
        assert response.json()["message"] == "Task ID required"

    def test_get_missing_task_is_404(self, alice):
        client, _ = alice

        assert client.get("/api/tasks?action=get&id=12345").status_code == 404

    def test_unknown_action_is_400(self, alice):
        client, _ = alice

        assert client.get("/api/tasks?action=explode").status_code == 400


class TestUpdateTask:

    def test_status_change_is_logged(self, alice, db_session):
        client, user = alice
        task_id = create_task(client, user["id"])

        response = client.put(f"/api/tasks?id={task_id}", json={"status_id": 3})

        assert response.status_code == 200
        task = client.get(f"/api/tasks?action=get&id={task_id}").json()["data"]
        assert task["status_name"] == "Completed"
        actions = [
            log.action_type
            for log in db_session.query(ActivityLog).filter(ActivityLog.task_id == task_id)
        ]
        assert actions == ["task_created", "task_updated"]

    def test_partial_update_leaves_other_fields(self, alice):
        client, user = alice
        task_id = create_task(client, user["id"], description="keep me")

        client.put(f"/api/tasks?id={task_id}", json={"hours_rendered": 4})
        task = client.get(f"/api/tasks?action=get&id={task_id}").json()["data"]

        assert task["hours_rendered"] == 4
        assert task["description"] == "keep me"
        assert task["title"] == "Log Week 1"

    def test_empty_patch_is_rejected_without_touching_row(self, alice, db_session):
        client, user = alice
        task_id = create_task(client, user["id"])
        before = client.get(f"/api/tasks?action=get&id={task_id}").json()["data"]["updated_at"]

        empty = client.put(f"/api/tasks?id={task_id}", json={})
        unknown = client.put(f"/api/tasks?id={task_id}", json={"colour": "red"})

        assert empty.status_code == 400
        assert empty.json()["message"] == "No fields to update"
        assert unknown.status_code == 400
        after = client.get(f"/api/tasks?action=get&id={task_id}").json()["data"]["updated_at"]
        assert after == before
        assert db_session.query(ActivityLog).filter(ActivityLog.action_type == "task_updated").count() == 0

    def test_null_title_is_rejected(self, alice):
        client, user = alice
        task_id = create_task(client, user["id"])

        response = client.put(f"/api/tasks?id={task_id}", json={"title": None})

        assert response.status_code == 400

    def test_update_missing_task_is_404(self, alice):
        client, _ = alice

        assert client.put("/api/tasks?id=999", json={"title": "x"}).status_code == 404

    def test_update_requires_id(self, alice):
        client, _ = alice

        assert client.put("/api/tasks", json={"title": "x"}).status_code == 400

    def test_cannot_update_someone_elses_task(self, alice, bob):
        alice_client, alice_user = alice
        bob_client, _ = bob
        task_id = create_task(alice_client, alice_user["id"])

        assert bob_client.put(f"/api/tasks?id={task_id}", json={"title": "mine"}).status_code == 403


class TestDeleteTask:

    def test_delete_removes_row_and_logs(self, alice, db_session):
        client, user = alice
        task_id = create_task(client, user["id"])

        response = client.delete(f"/api/tasks?id={task_id}")

        assert response.status_code == 200
        assert db_session.query(Task).filter(Task.id == task_id).first() is None
        log = db_session.query(ActivityLog).filter(ActivityLog.action_type == "task_deleted").one()
        assert log.task_id == task_id
        assert log.user_id == user["id"]

    def test_delete_missing_task_is_404_and_not_logged(self, alice, db_session):
        client, _ = alice

        response = client.delete("/api/tasks?id=4242")

        assert response.status_code == 404
        assert db_session.query(ActivityLog).filter(ActivityLog.action_type == "task_deleted").count() == 0

    def test_delete_requires_id(self, alice):
        client, _ = alice

        assert client.delete("/api/tasks").status_code == 400
