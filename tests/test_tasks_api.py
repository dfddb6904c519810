"""Task endpoints against the project fixture (owner admin, pm1 manager, m1/m2 members)."""
from taskboard.models import Task

BASE = "/api/v1/tasks"


def _tasks_url(project):
    return f"{BASE}/projects/{project.id}/tasks"


class TestCreateTask:

    def test_manager_creates(self, client, users, as_user, project):
        resp = client.post(_tasks_url(project), json={"title": "Design", "assignee": users["m1"].id},
                           headers=as_user(users["pm1"]))
        assert resp.status_code == 201
        body = resp.json()
        assert body["title"] == "Design"
        assert body["status"] == "todo"
        assert body["priority"] == "medium"
        assert body["assignee"]["id"] == users["m1"].id

    def test_owner_may_assign_self(self, client, users, as_user, project):
        resp = client.post(_tasks_url(project), json={"title": "Budget", "assignee": users["admin"].id},
                           headers=as_user(users["admin"]))
        assert resp.status_code == 201

    def test_assignee_must_be_member(self, client, users, as_user, project, db):
        resp = client.post(_tasks_url(project), json={"title": "Design", "assignee": users["m3"].id},
                           headers=as_user(users["admin"]))
        assert resp.status_code == 400
        assert resp.json() == {"message": "Assignee must be project member"}
        assert db.query(Task).count() == 0

    def test_unknown_assignee(self, client, users, as_user, project):
        resp = client.post(_tasks_url(project), json={"title": "Design", "assignee": 5555},
                           headers=as_user(users["pm1"]))
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid assignee"}

    def test_member_cannot_create(self, client, users, as_user, project):
        resp = client.post(_tasks_url(project), json={"title": "Design"}, headers=as_user(users["m1"]))
        assert resp.status_code == 403

    def test_outside_manager_cannot_create(self, client, users, as_user, project):
        resp = client.post(_tasks_url(project), json={"title": "Design"}, headers=as_user(users["pm2"]))
        assert resp.status_code == 403

    def test_invalid_status(self, client, users, as_user, project):
        resp = client.post(_tasks_url(project), json={"title": "Design", "status": "blocked"},
                           headers=as_user(users["pm1"]))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Validation error"

    def test_missing_project(self, client, users, as_user):
        resp = client.post(f"{BASE}/projects/999/tasks", json={"title": "x"}, headers=as_user(users["admin"]))
        assert resp.status_code == 404


class TestListTasks:

    def test_manager_sees_all_and_filters(self, client, users, as_user, project, make_task):
        make_task(project, "a", assignee=users["m1"])
        make_task(project, "b", assignee=users["m2"])
        make_task(project, "c")
        resp = client.get(_tasks_url(project), headers=as_user(users["pm1"]))
        assert resp.json()["total"] == 3
        resp = client.get(_tasks_url(project), params={"assignee": users["m2"].id},
                          headers=as_user(users["pm1"]))
        assert [t["title"] for t in resp.json()["data"]] == ["b"]

    def test_member_sees_only_own(self, client, users, as_user, project, make_task):
        make_task(project, "a", assignee=users["m1"])
        make_task(project, "b", assignee=users["m2"])
        resp = client.get(_tasks_url(project), params={"assignee": users["m2"].id},
                          headers=as_user(users["m1"]))
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 1
        assert [t["title"] for t in body["data"]] == ["a"]

    def test_outsider_denied(self, client, users, as_user, project):
        assert client.get(_tasks_url(project), headers=as_user(users["m3"])).status_code == 403

    def test_pagination(self, client, users, as_user, project, make_task):
        for i in range(5):
            make_task(project, f"t{i}")
        body = client.get(_tasks_url(project), params={"page": 2, "limit": 2},
                          headers=as_user(users["admin"])).json()
        assert body["total"] == 5
        assert [t["title"] for t in body["data"]] == ["t2", "t3"]


class TestViewTask:

    def test_assignee_views(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.get(f"{BASE}/{task.id}", headers=as_user(users["m1"]))
        assert resp.status_code == 200
        assert resp.json()["project"] == project.id

    def test_other_member_denied(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.get(f"{BASE}/{task.id}", headers=as_user(users["m2"]))
        assert resp.status_code == 403
        assert resp.json() == {"message": "Forbidden: Insufficient permissions to view or edit this task."}

    def test_missing_task(self, client, users, as_user):
        resp = client.get(f"{BASE}/404", headers=as_user(users["admin"]))
        assert resp.status_code == 404
        assert resp.json() == {"message": "Task not found"}


class TestUpdateTask:

    def test_member_reassigns_to_other_forbidden(self, client, users, as_user, project, make_task, db):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": users["m2"].id}, headers=as_user(users["m1"]))
        assert resp.status_code == 403
        assert resp.json() == {"message": "Members can only reassign tasks to themselves"}
        db.expire_all()
        assert db.get(Task, task.id).assignee_id == users["m1"].id

    def test_member_reassigns_to_self(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": users["m1"].id, "status": "in-progress"},
                          headers=as_user(users["m1"]))
        assert resp.status_code == 200
        assert resp.json()["assignee"]["id"] == users["m1"].id
        assert resp.json()["status"] == "in-progress"

    def test_member_cannot_clear_assignee(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": None}, headers=as_user(users["m1"]))
        assert resp.status_code == 403

    def test_manager_reassigns(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": users["m2"].id}, headers=as_user(users["pm1"]))
        assert resp.status_code == 200
        assert resp.json()["assignee"]["id"] == users["m2"].id

    def test_manager_clears_assignee(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": None}, headers=as_user(users["pm1"]))
        assert resp.status_code == 200
        assert resp.json()["assignee"] is None

    def test_reassign_to_non_member_rejected(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": users["m3"].id},
                          headers=as_user(users["admin"]))
        assert resp.status_code == 400
        assert resp.json() == {"message": "Assignee must be project member"}

    def test_reassign_to_owner_allowed(self, client, users, as_user, project, make_task):
        task = make_task(project)
        resp = client.put(f"{BASE}/{task.id}", json={"assignee": users["admin"].id},
                          headers=as_user(users["pm1"]))
        assert resp.status_code == 200

    def test_assignee_edits_fields(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}",
                          json={"title": "Renamed", "priority": "high", "dueDate": "2030-01-02T00:00:00"},
                          headers=as_user(users["m1"]))
        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Renamed"
        assert body["priority"] == "high"
        assert body["due_date"].startswith("2030-01-02")

    def test_null_for_required_field_rejected(self, client, users, as_user, project, make_task, db):
        task = make_task(project, title="Keep me", assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"title": None}, headers=as_user(users["pm1"]))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Validation error"
        assert "title cannot be null" in resp.json()["errors"][0]
        db.expire_all()
        assert db.get(Task, task.id).title == "Keep me"

    def test_null_due_date_clears_it(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        headers = as_user(users["pm1"])
        client.put(f"{BASE}/{task.id}", json={"dueDate": "2030-01-02T00:00:00"}, headers=headers)
        resp = client.put(f"{BASE}/{task.id}", json={"dueDate": None}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["due_date"] is None

    def test_unassigned_member_cannot_edit(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.put(f"{BASE}/{task.id}", json={"title": "x"}, headers=as_user(users["m2"]))
        assert resp.status_code == 403

    def test_dangling_assignee_keeps_access(self, client, users, as_user, project, make_task, db):
        task = make_task(project, assignee=users["m2"])
        for m in list(project.members):
            if m.user_id == users["m2"].id:
                project.members.remove(m)
        db.commit()
        resp = client.put(f"{BASE}/{task.id}", json={"status": "done"}, headers=as_user(users["m2"]))
        assert resp.status_code == 200


class TestDeleteTask:

    def test_manager_deletes(self, client, users, as_user, project, make_task, db):
        task_id = make_task(project).id
        resp = client.delete(f"{BASE}/{task_id}", headers=as_user(users["pm1"]))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Task deleted"}
        assert db.query(Task).filter(Task.id == task_id).count() == 0

    def test_assignee_cannot_delete(self, client, users, as_user, project, make_task):
        task = make_task(project, assignee=users["m1"])
        resp = client.delete(f"{BASE}/{task.id}", headers=as_user(users["m1"]))
        assert resp.status_code == 403
        assert resp.json() == {"message": "Forbidden: Only Admins, Project Managers, or Owners can delete tasks."}

    def test_admin_outside_project_deletes(self, client, users, as_user, project, make_task):
        task = make_task(project)
        assert client.delete(f"{BASE}/{task.id}", headers=as_user(users["admin2"])).status_code == 200
