"""Session resolution: every protected endpoint rejects guests uniformly."""
import uuid
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from app.core import auth as auth_module
from app.core.auth import context_from_claims
from tests.conftest import auth_headers, make_token

PROTECTED = [
    ("get", "/api/user/issues"),
    ("get", "/api/user/profile"),
    ("put", "/api/user/profile"),
    ("delete", "/api/user/profile"),
]

UNAUTHORIZED = {"success": False, "error": "Unauthorized"}


@pytest.mark.parametrize("method,url", PROTECTED)
def test_missing_token_is_401_without_db_access(client, session_calls, method, url):
    response = client.request(method, url, json={"city": "Panaji"} if method == "put" else None)

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    assert session_calls == []


@pytest.mark.parametrize("method,url", PROTECTED)
def test_bad_token_is_401_without_db_access(client, session_calls, method, url):
    response = client.request(method, url, headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    assert session_calls == []


def test_expired_token_is_401(client):
    token = make_token(uuid.uuid4(), expires_in=timedelta(minutes=-5))

    response = client.get("/api/user/issues", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


def test_token_signed_with_other_secret_is_401(client):
    from jose import jwt

    token = jwt.encode({"sub": str(uuid.uuid4()), "email": "x@example.com"}, "wrong", algorithm="HS256")

    response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_auth_cookie_is_accepted(client, make_user):
    me = make_user()
    client.cookies.set("auth-token", make_token(me.id, me.email))

    response = client.get("/api/user/issues")

    assert response.status_code == 200


def test_bearer_header_wins_over_cookie(client, make_user):
    me = make_user()
    client.cookies.set("auth-token", "garbage")

    response = client.get("/api/user/issues", headers=auth_headers(me))

    assert response.status_code == 200


def test_context_from_claims_reads_app_role():
    user_id = uuid.uuid4()

    admin = context_from_claims({"sub": str(user_id), "email": "a@example.com", "app_metadata": {"role": "admin"}})
    plain = context_from_claims({"sub": str(user_id), "email": "a@example.com", "role": "authenticated"})

    assert admin.user_id == user_id
    assert admin.is_admin
    assert plain.role == "user"


@pytest.mark.parametrize(
    "claims",
    [
        {"email": "a@example.com"},
        {"sub": str(uuid.uuid4())},
        {"sub": "not-a-uuid", "email": "a@example.com"},
    ],
)
def test_context_from_claims_rejects_incomplete_claims(claims):
    with pytest.raises(HTTPException) as excinfo:
        context_from_claims(claims)

    assert excinfo.value.status_code == 401
    assert excinfo.value.detail == "Unauthorized"


def test_remote_verification_without_jwt_secret(monkeypatch):
    user_id = uuid.uuid4()
    supabase_user = MagicMock(id=str(user_id), email="remote@example.com", app_metadata={"role": "admin"})
    client = MagicMock()
    client.auth.get_user.return_value = MagicMock(user=supabase_user)

    monkeypatch.setattr(auth_module.settings, "SUPABASE_JWT_SECRET", None)
    monkeypatch.setattr(auth_module, "supabase_public", lambda: client)

    claims = auth_module.decode_access_token("opaque")

    client.auth.get_user.assert_called_once_with("opaque")
    assert context_from_claims(claims).role == "admin"


def test_remote_verification_failure_is_401(monkeypatch):
    client = MagicMock()
    client.auth.get_user.side_effect = RuntimeError("invalid JWT")

    monkeypatch.setattr(auth_module.settings, "SUPABASE_JWT_SECRET", None)
    monkeypatch.setattr(auth_module, "supabase_public", lambda: client)

    with pytest.raises(HTTPException) as excinfo:
        auth_module.decode_access_token("opaque")

    assert excinfo.value.status_code == 401


def _admin_app():
    from fastapi import Depends, FastAPI

    app = FastAPI()

    @app.get("/admin-only")
    def admin_only(auth=Depends(auth_module.require_admin)):
        return {"user_id": str(auth.user_id)}

    return app


def test_require_admin_forbids_plain_user():
    from fastapi.testclient import TestClient

    token = make_token(uuid.uuid4(), "citizen@example.com", role="user")

    response = TestClient(_admin_app()).get("/admin-only", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json() == {"detail": "Admin access required"}


def test_require_admin_allows_admin():
    from fastapi.testclient import TestClient

    user_id = uuid.uuid4()
    token = make_token(user_id, "admin@example.com", role="admin")

    response = TestClient(_admin_app()).get("/admin-only", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"user_id": str(user_id)}


def test_require_admin_rejects_guest_with_401():
    from fastapi.testclient import TestClient

    response = TestClient(_admin_app()).get("/admin-only")

    assert response.status_code == 401
