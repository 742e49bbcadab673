"""
API tests for tenant user management, the role catalogue and permission checks.
"""

import uuid


def _user_payload(**overrides):
    payload = dict(email="new.hire@acme.com", name="New Hire", role="user")
    payload.update(overrides)
    return payload


class TestListUsers:
    def test_admin_sees_everyone_with_org_name(self, api):
        body = api.get("/users").json()
        assert body["total"] == 4
        assert {user["organization_name"] for user in body["users"]} == {"Acme Corp"}
        assert all("password_hash" not in user for user in body["users"])

    def test_filters(self, api, make_user, org):
        make_user(org, "viewer", email="dormant@acme.com", is_active=False)

        def emails(**params):
            return sorted(u["email"] for u in api.get("/users", params=params).json()["users"])

        assert emails(role="viewer") == ["dormant@acme.com", "viewer@acme.com"]
        assert emails(is_active="false") == ["dormant@acme.com"]
        assert emails(search="DORMANT") == ["dormant@acme.com"]
        assert emails(search="Manager Person") == ["manager@acme.com"]

    def test_manager_can_read(self, api):
        assert api.get("/users", role="manager").status_code == 200

    def test_user_and_viewer_cannot_read(self, api):
        assert api.get("/users", role="user").status_code == 403
        assert api.get("/users", role="viewer").status_code == 403

    def test_get_single_user(self, api, users):
        body = api.get(f"/users/{users['viewer'].id}").json()
        assert body["email"] == "viewer@acme.com"
        assert body["role"] == "viewer"

    def test_unknown_user_not_found(self, api):
        assert api.get(f"/users/{uuid.uuid4()}").status_code == 404


class TestCreateUser:
    def test_admin_creates_user(self, api):
        response = api.post("/users", json=_user_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new.hire@acme.com"
        assert body["is_active"] is True
        assert body["last_login_at"] is None

    def test_email_unique_within_org(self, api):
        api.post("/users", json=_user_payload())
        response = api.post("/users", json=_user_payload(name="Someone Else"))
        assert response.status_code == 409

    def test_invalid_role_rejected(self, api):
        assert api.post("/users", json=_user_payload(role="superuser")).status_code == 400

    def test_invalid_email_rejected(self, api):
        assert api.post("/users", json=_user_payload(email="not-an-email")).status_code == 400

    def test_manager_cannot_create(self, api):
        assert api.post("/users", role="manager", json=_user_payload()).status_code == 403

    def test_creation_is_logged(self, api):
        created = api.post("/users", json=_user_payload()).json()
        logs = api.get("/change-logs", params={"entity_type": "user"}).json()["logs"]
        assert logs[0]["entity_id"] == created["id"]
        assert logs[0]["change_type"] == "create"


class TestUpdateUser:
    def test_update_name_role_and_status(self, api, users):
        target = users["user"]
        response = api.put(f"/users/{target.id}", json={"name": "Promoted", "role": "manager", "is_active": False})
        assert response.status_code == 200
        body = response.json()
        assert (body["name"], body["role"], body["is_active"]) == ("Promoted", "manager", False)

    def test_status_unchanged_when_omitted(self, api, users):
        target = users["user"]
        body = api.put(f"/users/{target.id}", json={"name": "Renamed", "role": "user"}).json()
        assert body["is_active"] is True

    def test_name_and_role_required(self, api, users):
        assert api.put(f"/users/{users['user'].id}", json={"name": "Only name"}).status_code == 400

    def test_changes_logged_per_field(self, api, users):
        api.put(f"/users/{users['user'].id}", json={"name": "Renamed", "role": "viewer"})
        logs = api.get("/change-logs", params={"entity_type": "user", "change_type": "update"}).json()["logs"]
        assert sorted((log["field_name"], log["old_value"], log["new_value"]) for log in logs) == [
            ("name", "User Person", "Renamed"),
            ("role", "user", "viewer"),
        ]

    def test_unknown_user_not_found(self, api):
        response = api.put(f"/users/{uuid.uuid4()}", json={"name": "Ghost", "role": "user"})
        assert response.status_code == 404


class TestDeleteUser:
    def test_delete_then_missing(self, api, users):
        target_id = users["viewer"].id
        assert api.delete(f"/users/{target_id}").status_code == 200
        assert api.get(f"/users/{target_id}").status_code == 404
        assert api.delete(f"/users/{target_id}").status_code == 404

    def test_manager_cannot_delete(self, api, users):
        assert api.delete(f"/users/{users['viewer'].id}", role="manager").status_code == 403

    def test_history_survives_deleted_author(self, api, users):
        author_id = users["manager"].id
        sku = api.post("/skus", role="manager", json={"sku_code": "H-1", "product_name": "Kept"}).json()
        api.post("/transactions", role="manager", json={
            "sku_id": sku["id"], "transaction_type": "in", "quantity": 1, "unit_cost": 1.0})

        assert api.delete(f"/users/{author_id}").status_code == 200

        rows = api.get("/transactions").json()["transactions"]
        assert rows[0]["created_by"] is None
        logs = api.get("/change-logs", params={"user_id": str(author_id)}).json()["logs"]
        assert logs and all(log["user_name"] is None for log in logs)


class TestRolesAndPermissions:
    def test_role_catalogue_open_to_every_member(self, api):
        roles = api.get("/users/roles", role="viewer").json()
        assert [role["name"] for role in roles] == ["admin", "manager", "user", "viewer"]
        assert roles[3]["description"] == "Read-only access"

    def test_user_reads_own_permissions(self, api, users):
        body = api.get(f"/users/{users['viewer'].id}/permissions", role="viewer").json()
        assert body["role"] == "viewer"
        assert {"resource": "skus", "actions": ["read"]} in body["permissions"]
        users_fields = next(fp for fp in body["field_permissions"] if fp["resource"] == "users")
        assert users_fields["fields"] == {"*": "hidden"}

    def test_cannot_read_someone_elses_permissions_without_grant(self, api, users):
        response = api.get(f"/users/{users['admin'].id}/permissions", role="viewer")
        assert response.status_code == 403

    def test_manager_reads_others_permissions(self, api, users):
        assert api.get(f"/users/{users['viewer'].id}/permissions", role="manager").status_code == 200

    def test_check_permission(self, api, users):
        response = api.post(f"/users/{users['viewer'].id}/check-permission",
                            json={"resource": "users", "action": "read"})
        assert response.json() == {
            "user_id": str(users["viewer"].id),
            "resource": "users",
            "action": "read",
            "allowed": False,
        }

    def test_check_own_permission(self, api, users):
        response = api.post(f"/users/{users['user'].id}/check-permission", role="user",
                            json={"resource": "transactions", "action": "create"})
        assert response.json()["allowed"] is True
