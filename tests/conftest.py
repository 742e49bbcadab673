import os

# must be set before the settings module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STRICT_INVENTORY_WRITES"] = "true"

import pytest
from fastapi.testclient import TestClient

from shared.core.auth import create_user_token
from shared.core.database import Base, SessionLocal, engine
from shared.models.organizations import Organization
from shared.models.users import User

from auth_service.app.main import app as auth_app
from inventory_service.app.main import app as inventory_app

ROLES = ("admin", "manager", "user", "viewer")


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _make_org(db, name="Acme Corp") -> Organization:
    org = Organization(name=name)
    db.add(org)
    db.commit()
    db.refresh(org)
    return org


def _make_user(db, org, role="user", email=None, password=None, is_active=True) -> User:
    user = User(
        org_id=org.id,
        email=email or f"{role}@{org.name.split()[0].lower()}.com",
        name=f"{role.title()} Person",
        role=role,
        is_active=is_active,
    )
    if password:
        user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_org(db):
    return lambda name="Other Org": _make_org(db, name)


@pytest.fixture
def make_user(db):
    return lambda org, role="user", **kwargs: _make_user(db, org, role, **kwargs)


@pytest.fixture
def org(db):
    return _make_org(db)


@pytest.fixture
def users(db, org):
    return {role: _make_user(db, org, role) for role in ROLES}


@pytest.fixture
def headers():
    def build(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return build


@pytest.fixture
def client():
    with TestClient(inventory_app) as test_client:
        yield test_client


@pytest.fixture
def auth_client():
    with TestClient(auth_app) as test_client:
        yield test_client


@pytest.fixture
def api(client, org, users, headers):
    """Issue requests under ``/api/v1/orgs/<org>`` as a given role."""
    class Api:
        base = f"/api/v1/orgs/{org.id}"

        def request(self, method, path, role="admin", **kwargs):
            return client.request(method, f"{self.base}{path}", headers=headers(users[role]), **kwargs)

        def get(self, path, role="admin", **kwargs):
            return self.request("GET", path, role, **kwargs)

        def post(self, path, role="admin", **kwargs):
            return self.request("POST", path, role, **kwargs)

        def patch(self, path, role="admin", **kwargs):
            return self.request("PATCH", path, role, **kwargs)

        def put(self, path, role="admin", **kwargs):
            return self.request("PUT", path, role, **kwargs)

        def delete(self, path, role="admin", **kwargs):
            return self.request("DELETE", path, role, **kwargs)

    return Api()
