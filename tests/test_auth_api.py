"""
API tests for login and the current-user endpoint.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from shared.core.auth import create_access_token, verify_token
from shared.core.config import settings


class TestLogin:
    def test_login_returns_token_with_claims(self, auth_client, org, make_user):
        user = make_user(org, "manager", email="sam@acme.com", password="s3cret-pass")
        response = auth_client.post("/api/auth/login", json={"email": "sam@acme.com", "password": "s3cret-pass"})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["organization"]["name"] == "Acme Corp"
        assert body["user"]["last_login_at"] is not None

        claims = verify_token(body["access_token"])
        assert claims.user_id == user.id
        assert claims.org_id == org.id
        assert claims.role == "manager"
        assert claims.email == "sam@acme.com"

    def test_wrong_password(self, auth_client, org, make_user):
        make_user(org, "user", email="sam@acme.com", password="s3cret-pass")
        response = auth_client.post("/api/auth/login", json={"email": "sam@acme.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["status_code"] == "304"

    def test_unknown_email(self, auth_client):
        response = auth_client.post("/api/auth/login", json={"email": "ghost@acme.com", "password": "whatever"})
        assert response.status_code == 401

    def test_account_without_password_cannot_login(self, auth_client, org, make_user):
        make_user(org, "user", email="nopass@acme.com")
        response = auth_client.post("/api/auth/login", json={"email": "nopass@acme.com", "password": "anything"})
        assert response.status_code == 401

    def test_inactive_user_rejected(self, auth_client, org, make_user):
        make_user(org, "user", email="gone@acme.com", password="s3cret-pass", is_active=False)
        response = auth_client.post("/api/auth/login", json={"email": "gone@acme.com", "password": "s3cret-pass"})
        assert response.status_code == 401
        assert response.json()["status_code"] == "303"

    def test_org_disambiguates_shared_email(self, auth_client, org, make_org, make_user):
        make_user(org, "user", email="shared@x.com", password="first-pass")
        other_org = make_org()
        other = make_user(other_org, "admin", email="shared@x.com", password="second-pass")
        response = auth_client.post("/api/auth/login", json={
            "email": "shared@x.com", "password": "second-pass", "org_id": str(other_org.id)})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(other.id)


class TestMe:
    def test_me_returns_user_and_org(self, auth_client, users, headers):
        response = auth_client.get("/api/auth/me", headers=headers(users["viewer"]))
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "viewer@acme.com"
        assert body["organization"]["name"] == "Acme Corp"

    def test_expired_token(self, auth_client, users):
        token = jwt.encode({
            "user_id": str(users["admin"].id),
            "org_id": str(users["admin"].org_id),
            "email": users["admin"].email,
            "role": "admin",
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        }, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        response = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["status_code"] == "301"

    def test_deactivated_user_token_rejected(self, auth_client, users, headers, db):
        token_headers = headers(users["user"])
        users["user"].is_active = False
        db.commit()
        response = auth_client.get("/api/auth/me", headers=token_headers)
        assert response.status_code == 401

    def test_token_missing_claims(self, auth_client):
        token = create_access_token({"user_id": "not-a-uuid"})
        response = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_role_change_applies_without_new_token(self, client, users, headers, db, org):
        token_headers = headers(users["viewer"])
        users["viewer"].role = "admin"
        db.commit()
        response = client.post(f"/api/v1/orgs/{org.id}/skus", headers=token_headers,
                               json={"sku_code": "R-1", "product_name": "Promoted"})
        assert response.status_code == 201


class TestHealth:
    def test_inventory_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "service": "inventory"}

    def test_auth_health(self, auth_client):
        assert auth_client.get("/api/auth/health").json() == {"status": "healthy"}
