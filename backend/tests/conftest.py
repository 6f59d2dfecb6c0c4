from __future__ import annotations

import time

import pytest
from jose import jwt
from starlette.testclient import TestClient

from app.core.dependencies import get_current_user
from app.main import app
from app.models.auth import UserInfo
from app.models.employee import Employee, Role

TEST_SECRET = "test-secret-0000000000000000000000000000"
TEST_ISSUER = "hr-portal"
TEST_AUDIENCE = "hr-portal-api"


@pytest.fixture(autouse=True)
def _auth_settings():
    from app.core.config import settings

    original = (settings.AUTH_SECRET_KEY, settings.AUTH_ISSUER, settings.AUTH_AUDIENCE)
    settings.AUTH_SECRET_KEY = TEST_SECRET
    settings.AUTH_ISSUER = TEST_ISSUER
    settings.AUTH_AUDIENCE = TEST_AUDIENCE
    yield
    settings.AUTH_SECRET_KEY, settings.AUTH_ISSUER, settings.AUTH_AUDIENCE = original


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_token(
    *,
    secret: str = TEST_SECRET,
    sub: str = "user-123",
    name: str = "Test User",
    email: str = "test@portal.example",
    roles: list[str] | None = None,
    expired: bool = False,
    audience: str = TEST_AUDIENCE,
) -> str:
    now = int(time.time())
    claims = {
        "sub": sub,
        "name": name,
        "email": email,
        "roles": roles or [],
        "iss": TEST_ISSUER,
        "aud": audience,
        "exp": now - 3600 if expired else now + 3600,
        "iat": now - 60,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def make_employee(
    employee_id: str,
    first_name: str,
    last_name: str,
    supervisor: str | None = None,
    roles: list[Role] | None = None,
    **fields,
) -> Employee:
    return Employee(
        id=employee_id,
        first_name=first_name,
        last_name=last_name,
        supervisor_name=supervisor,
        roles=roles if roles is not None else [Role.MANAGER],
        **fields,
    )


@pytest.fixture
def mock_user_viewer():
    return UserInfo(id="viewer-1", name="Viewer User", email="viewer@portal.example", roles=["USER"])


@pytest.fixture
def mock_user_admin():
    return UserInfo(id="admin-1", name="Admin User", email="admin@portal.example", roles=["ADMIN"])


@pytest.fixture
def authenticated_client(mock_user_admin):
    app.dependency_overrides[get_current_user] = lambda: mock_user_admin
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def viewer_client(mock_user_viewer):
    app.dependency_overrides[get_current_user] = lambda: mock_user_viewer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
