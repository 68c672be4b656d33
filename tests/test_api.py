from datetime import datetime, timedelta, timezone

import jwt

from rbac_admin.core.config import settings
from rbac_admin.main import app
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, bearer, login

API = "/api/v1"


def _signup(client, email="a@b.com", password="secret123", full_name="Alice Example"):
    return client.post(
        f"{API}/auth/signup",
        json={"full_name": full_name, "email": email, "password": password},
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_signup_hides_password_hash(client, seeded):
    response = _signup(client)

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "a@b.com"
    assert body["role_name"] == "USER"
    assert "password" not in body
    assert "password_hash" not in body


def test_duplicate_signup_conflicts(client, seeded):
    _signup(client)
    response = _signup(client, full_name="Someone Else")

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_signup_before_seeding_is_a_server_error(client):
    response = _signup(client)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Default user role not found. Database may not be properly initialized",
    }


def test_login_failures_are_indistinguishable(client, seeded):
    _signup(client)

    wrong_password = client.post(
        f"{API}/auth/login", json={"email": "a@b.com", "password": "nope-nope"}
    )
    unknown_email = client.post(
        f"{API}/auth/login", json={"email": "ghost@b.com", "password": "secret123"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_returns_tokens(client, seeded):
    body = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    assert set(body) == {"token", "refresh_token", "expires_in"}
    assert body["expires_in"] == settings.JWT_EXPIRATION_MS
    claims = jwt.decode(body["token"], settings.JWT_SECRET, algorithms=["HS256"])
    assert claims["roles"] == ["ADMIN"]


def test_signin_returns_profile(client, seeded):
    response = client.post(
        f"{API}/auth/signin", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )

    body = response.json()
    assert body["type"] == "Bearer"
    assert body["email"] == ADMIN_EMAIL
    assert body["full_name"] == "Admin User"
    assert body["role"] == "ADMIN"
    assert body["token"] and body["refresh_token"]


def test_refresh_endpoint(client, seeded):
    tokens = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    response = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"access_token", "expires_in"}
    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["email"] == ADMIN_EMAIL


def test_refresh_with_garbage(client, seeded):
    response = client.post(f"{API}/auth/refresh", json={"refresh_token": "garbage"})

    assert response.status_code == 401
    assert response.json()["success"] is False
    assert "access_token" not in response.json()


def test_signout(client):
    assert client.post(f"{API}/auth/signout").json() == {
        "success": True,
        "message": "Logged out successfully",
    }


def test_protected_endpoint_requires_token(client, seeded):
    response = client.get(f"{API}/roles")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authenticated"}


def test_expired_token_is_rejected(client, seeded):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {"sub": ADMIN_EMAIL, "roles": ["ADMIN"], "typ": "access", "iat": past, "exp": past + timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm="HS256",
    )

    response = client.get(f"{API}/roles", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Token expired"}


def test_user_role_cannot_manage_roles(client, seeded):
    _signup(client)
    headers = bearer(client, "a@b.com", "secret123")

    response = client.get(f"{API}/roles", headers=headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Missing permission: ROLE:LIST"}


def test_admin_lists_roles_with_permissions(client, seeded):
    headers = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    roles = {r["name"]: r for r in client.get(f"{API}/roles", headers=headers).json()}

    assert set(roles) == {"ADMIN", "MODERATOR", "USER"}
    assert len(roles["ADMIN"]["permissions"]) == 25
    assert roles["ADMIN"]["total_users"] == 1
    assert {p["name"] for p in roles["USER"]["permissions"]} == {"USER:READ", "USER:LIST"}


def test_permission_grant_flow(client, seeded):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    client.post(f"{API}/users", headers=admin, json={
        "full_name": "Mod Erator", "email": "mod@example.com",
        "password": "secret123", "role": "MODERATOR",
    })
    moderator = client.get(f"{API}/users", headers=admin).json()
    moderator_id = next(u["id"] for u in moderator if u["email"] == "mod@example.com")

    client.post(f"{API}/resources", headers=admin, json={"name": "REPORT"})
    client.post(f"{API}/actions", headers=admin, json={"name": "EXPORT"})
    created = client.post(f"{API}/permissions", headers=admin, json={
        "resource_name": "REPORT", "action_name": "EXPORT", "description": "Export reports",
    })
    assert created.status_code == 201
    assert created.json()["name"] == "REPORT:EXPORT"

    duplicate = client.post(f"{API}/permissions", headers=admin, json={
        "resource_name": "REPORT", "action_name": "EXPORT",
    })
    assert duplicate.status_code == 409

    roles = {r["name"]: r for r in client.get(f"{API}/roles", headers=admin).json()}
    role_id = roles["MODERATOR"]["id"]
    permission_id = created.json()["id"]
    for _ in range(2):
        assigned = client.post(f"{API}/roles/{role_id}/permissions/{permission_id}", headers=admin)
        assert assigned.status_code == 200
    assert sum(p["name"] == "REPORT:EXPORT" for p in assigned.json()["permissions"]) == 1

    params = {"user_id": moderator_id, "resource_name": "REPORT", "action_name": "EXPORT"}
    check = client.get(f"{API}/users/check-permission", headers=admin, params=params)
    assert check.json() == {
        "success": True,
        "message": "User has permission to perform EXPORT on REPORT",
    }

    client.delete(f"{API}/roles/{role_id}/permissions/{permission_id}", headers=admin)
    check = client.get(f"{API}/users/check-permission", headers=admin, params=params)
    assert check.json() == {
        "success": False,
        "message": "User does not have permission to perform EXPORT on REPORT",
    }


def test_user_can_update_self_but_not_own_role(client, seeded):
    user_id = _signup(client).json()["id"]
    headers = bearer(client, "a@b.com", "secret123")

    renamed = client.put(f"{API}/users/{user_id}", headers=headers, json={"full_name": "Alice B"})
    assert renamed.status_code == 200
    assert renamed.json()["full_name"] == "Alice B"

    promoted = client.put(f"{API}/users/{user_id}", headers=headers, json={"role": "ADMIN"})
    assert promoted.status_code == 403


def test_delete_role_in_use(client, seeded):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    roles = {r["name"]: r for r in client.get(f"{API}/roles", headers=admin).json()}

    response = client.delete(f"{API}/roles/{roles['ADMIN']['id']}", headers=admin)

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "Cannot delete role: 1 user(s) still assigned to it",
    }


def test_unknown_permission_is_not_found(client, seeded):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    response = client.get(
        f"{API}/permissions/00000000-0000-0000-0000-000000000000", headers=admin
    )

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_token_kinds_are_not_interchangeable_with_shared_key(
    client, seeded, shared_key_tokens, monkeypatch
):
    monkeypatch.setattr(app.state, "token_service", shared_key_tokens)
    tokens = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    as_bearer = client.get(
        f"{API}/roles", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
    )
    as_refresh = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["token"]})

    assert as_bearer.status_code == 401
    assert as_bearer.json()["success"] is False
    assert as_refresh.status_code == 401
    assert "access_token" not in as_refresh.json()

    refreshed = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
