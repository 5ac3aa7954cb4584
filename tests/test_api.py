# GoGoTime - HTTP API tests

import uuid

from gogotime.models import TimesheetStatus


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "healthy"


def test_missing_token_is_401_with_challenge(client, company):
    response = client.get("/timesheets")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {"error": "unauthenticated", "message": "Not authenticated", "details": {}}


def test_garbage_token_is_401(client, company):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"


def test_login_with_bad_password(client, employee):
    response = client.post("/auth/login", json={"email": employee.email, "password": "nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_me_lists_role_permissions(client, manager, login):
    response = client.get("/auth/me", headers=login(manager.email))

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "manager@acme.com"
    assert body["role"] == "Manager"
    assert "approve_timesheet" in body["permissions"]
    assert "anonymize_user" not in body["permissions"]


def test_logout_revokes_token(client, employee, login):
    headers = login(employee.email)

    assert client.post("/auth/logout", headers=headers).status_code == 204
    assert client.get("/auth/me", headers=headers).status_code == 401


def test_request_validation_error_shape(client, employee, login):
    response = client.post(
        "/timesheets",
        json={"period_start": "2025-03-09", "period_end": "2025-03-03"},
        headers=login(employee.email),
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "validation_error"
    assert body["details"]["violations"][0]["type"] == "value_error"


def test_bad_path_parameter_is_422(client, employee, login):
    response = client.get("/timesheets/not-a-uuid", headers=login(employee.email))
    assert response.status_code == 422
    assert response.json()["details"]["violations"][0]["field"] == "path.timesheet_id"


def test_timesheet_workflow_over_http(client, manager, employee, action_code, login):
    employee_headers = login(employee.email)
    manager_headers = login(manager.email)

    created = client.post(
        "/timesheets",
        json={"period_start": "2025-03-03", "period_end": "2025-03-09"},
        headers=employee_headers,
    )
    assert created.status_code == 201
    sheet_id = created.json()["id"]

    entry = client.post(
        "/timesheet-entries",
        json={
            "timesheet_id": sheet_id,
            "action_code_id": str(action_code.id),
            "country": "FR",
            "started_at": "2025-03-04T09:00:00",
            "ended_at": "2025-03-04T11:00:00",
        },
        headers=employee_headers,
    )
    assert entry.status_code == 201
    assert entry.json()["duration_min"] == 120

    assert client.post(f"/timesheets/{sheet_id}/submit", headers=employee_headers).status_code == 200

    forbidden = client.post(f"/timesheets/{sheet_id}/approve", headers=employee_headers)
    assert forbidden.status_code == 403
    assert forbidden.json()["details"] == {"permission": "approve_timesheet"}

    approved = client.post(f"/timesheets/{sheet_id}/approve", headers=manager_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == TimesheetStatus.APPROVED.value
    assert approved.json()["total_minutes"] == 120

    again = client.post(f"/timesheets/{sheet_id}/approve", headers=manager_headers)
    assert again.status_code == 409
    assert again.json()["error"] == "invalid_state_transition"

    history = client.get(f"/timesheet-history/Timesheet/{sheet_id}", headers=employee_headers)
    assert history.status_code == 200
    assert [row["action"] for row in history.json()] == ["created", "submitted", "approved"]


def test_entry_times_with_offsets_over_http(client, employee, action_code, login):
    headers = login(employee.email)

    created = client.post(
        "/timesheet-entries",
        json={
            "action_code_id": str(action_code.id),
            "country": "FR",
            "started_at": "2025-03-04T09:00:00",
            "ended_at": "2025-03-04T12:30:00+00:00",
        },
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["duration_min"] == 210

    updated = client.patch(
        f"/timesheet-entries/{created.json()['id']}",
        json={"started_at": "2025-03-04T08:00:00Z"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["started_at"] == "2025-03-04T08:00:00"
    assert updated.json()["duration_min"] == 270


def test_reject_without_reason_is_422(client, manager, employee, make_timesheet, login):
    sheet = make_timesheet(employee, status=TimesheetStatus.SUBMITTED)
    response = client.post(f"/timesheets/{sheet.id}/reject", json={"reason": ""}, headers=login(manager.email))
    assert response.status_code == 422


def test_cross_tenant_reads_are_404(client, employee, outsider, make_timesheet, login):
    sheet = make_timesheet(employee)
    headers = login(outsider.email)

    response = client.get(f"/timesheets/{sheet.id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"

    assert client.get(f"/users/{employee.id}", headers=headers).status_code == 404


def test_unknown_record_is_404(client, employee, login):
    response = client.get(f"/leave-requests/{uuid.uuid4()}", headers=login(employee.email))
    assert response.status_code == 404
    assert response.json()["details"]["resource"] == "LeaveRequest"


def test_leave_request_approval_over_http(client, manager, employee, login):
    created = client.post(
        "/leave-requests",
        json={"start_date": "2025-04-01", "end_date": "2025-04-03", "leave_type": "PTO"},
        headers=login(employee.email),
    )
    assert created.status_code == 201
    assert created.json()["days"] == 3
    leave_id = created.json()["id"]

    approved = client.patch(
        f"/leave-requests/{leave_id}",
        json={"status": "APPROVED", "version": 1},
        headers=login(manager.email),
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    stale = client.patch(
        f"/leave-requests/{leave_id}",
        json={"reason": "late edit", "version": 1},
        headers=login(manager.email),
    )
    assert stale.status_code == 409
    assert stale.json()["error"] == "conflict"


def test_duplicate_permission_is_409(client, owner, login):
    response = client.post("/permissions", json={"name": "approve_timesheet"}, headers=login(owner.email))
    assert response.status_code == 409


def test_permission_crud_over_http(client, owner, login):
    headers = login(owner.email)

    created = client.post("/permissions", json={"name": "export_payroll"}, headers=headers)
    assert created.status_code == 201
    perm_id = created.json()["id"]

    assert client.get("/permissions/by-name/export_payroll", headers=headers).json()["id"] == perm_id
    assert client.delete(f"/permissions/{perm_id}", headers=headers).status_code == 204
    assert client.get(f"/permissions/{perm_id}", headers=headers).status_code == 404


def test_role_permissions_over_http(client, company, owner, employee, login):
    headers = login(owner.email)
    perms = {p["name"]: p["id"] for p in client.get("/permissions", headers=headers).json()}

    granted = client.post(
        "/role-permissions",
        json={"role_id": str(employee.role_id), "permission_id": perms["view_other_timesheet"]},
        headers=headers,
    )
    assert granted.status_code == 201
    assert granted.json()["permission_name"] == "view_other_timesheet"

    role = client.get(f"/roles/{employee.role_id}", headers=headers).json()
    assert role["permissions"] == ["view_other_timesheet"]

    assert client.delete(f"/role-permissions/{granted.json()['id']}", headers=headers).status_code == 204
    assert client.get(f"/roles/{employee.role_id}/permissions", headers=headers).json() == []


def test_anonymization_over_http(client, owner, employee, login):
    employee_headers = login(employee.email)

    response = client.delete(f"/anonymization/{employee.id}", headers=login(owner.email))
    assert response.status_code == 204

    # The employee's sessions are gone with their identity
    assert client.get("/auth/me", headers=employee_headers).status_code == 401


def test_active_sessions_over_http(client, employee, login):
    headers = login(employee.email)
    login(employee.email)

    sessions = client.get("/active-sessions", headers=headers).json()
    assert len(sessions) == 2

    other = next(s for s in sessions if s["id"] != sessions[0]["id"])
    revoked = client.delete(f"/active-sessions/{other['id']}", headers=headers)
    assert revoked.status_code == 200
    assert revoked.json()["revoked_at"] is not None


def test_action_code_search_over_http(client, employee, login):
    response = client.get("/action-codes", params={"q": "dev"}, headers=login(employee.email))
    assert response.status_code == 200
    assert [code["code"] for code in response.json()] == ["DEV"]


def test_user_lifecycle_over_http(client, owner, employee, login):
    owner_headers = login(owner.email)

    renamed = client.patch(
        f"/users/{employee.id}",
        json={"last_name": "Renamed", "version": 1},
        headers=login(employee.email),
    )
    assert renamed.status_code == 200
    assert renamed.json()["last_name"] == "Renamed"

    assert client.delete(f"/users/{employee.id}", headers=owner_headers).status_code == 204
    assert client.get(f"/users/{employee.id}", headers=owner_headers).status_code == 404

    restored = client.post(f"/users/{employee.id}/restore", headers=owner_headers)
    assert restored.status_code == 200
    assert client.get(f"/users/{employee.id}", headers=owner_headers).status_code == 200


def test_change_password_over_http(client, employee, login):
    headers = login(employee.email)

    wrong = client.post(
        "/auth/change-password",
        json={"current_password": "not-it", "new_password": "a-fresh-password"},
        headers=headers,
    )
    assert wrong.status_code == 401

    changed = client.post(
        "/auth/change-password",
        json={"current_password": "correct-horse-battery", "new_password": "a-fresh-password"},
        headers=headers,
    )
    assert changed.status_code == 204
    assert client.get("/auth/me", headers=headers).status_code == 401
    assert client.get("/auth/me", headers=login(employee.email, "a-fresh-password")).status_code == 200
