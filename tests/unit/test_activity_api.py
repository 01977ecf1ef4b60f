"""
Tests for the activity feed.
"""


class TestActivityFeed:

    def test_feed_is_newest_first_with_task_titles(self, alice):
        client, user = alice
        task_id = client.post("/api/tasks", json={"user_id": user["id"], "title": "Site visit"}).json()["data"]["id"]
        client.put(f"/api/tasks?id={task_id}", json={"status_id": 2})

        data = client.get("/api/activity").json()["data"]

        assert [a["action_type"] for a in data] == ["task_updated", "task_created", "signup"]
        assert data[0]["task_title"] == "Site visit"
        assert data[0]["username"] == "alice"

    def test_limit_caps_rows(self, alice):
        client, user = alice
        for i in range(3):
            client.post("/api/tasks", json={"user_id": user["id"], "title": f"t{i}"})

        assert len(client.get("/api/activity?limit=2").json()["data"]) == 2

    def test_deleted_task_keeps_its_log(self, alice):
        client, user = alice
        task_id = client.post("/api/tasks", json={"user_id": user["id"], "title": "gone"}).json()["data"]["id"]
        client.delete(f"/api/tasks?id={task_id}")

        data = client.get("/api/activity").json()["data"]

        assert data[0]["action_type"] == "task_deleted"
        assert data[0]["task_id"] == task_id
        assert data[0]["task_title"] is None

    def test_create_activity(self, alice):
        client, user = alice

        response = client.post("/api/activity", json={
            "user_id": user["id"], "action_type": "note", "description": "Met supervisor",
        })

        assert response.status_code == 201
        assert client.get("/api/activity").json()["data"][0]["description"] == "Met supervisor"

    def test_create_activity_requires_fields(self, alice):
        client, _ = alice

        response = client.post("/api/activity", json={"description": "nothing"})

        assert response.status_code == 400
        assert response.json()["message"] == "User ID and Action Type are required"

    def test_other_users_feed_is_forbidden(self, alice, bob):
        client, _ = alice
        _, other = bob

        assert client.get(f"/api/activity?user_id={other['id']}").status_code == 403
