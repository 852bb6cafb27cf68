from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from jose import jwt
from sqlalchemy.exc import SQLAlchemyError

from conftest import ADMIN_PASSWORD, bearer
from wildtrack import auth, credentials, models
from wildtrack.auth import TokenCodec, TokenExpired, TokenInvalid

ISSUED_AT = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


# Token codec

def test_default_token_lifetime_is_seven_days():
    assert auth.token_codec.expires_delta == timedelta(days=7)


def test_token_valid_until_expiry_then_expired():
    codec = TokenCodec("secret", expires_delta=timedelta(days=7))
    token = codec.issue(42, "admin", "ranger", now=ISSUED_AT)
    expires_at = ISSUED_AT + timedelta(days=7)

    claims = codec.verify(token, now=expires_at - timedelta(seconds=1))
    assert claims == {"id": "42", "username": "ranger", "role": "admin"}

    with pytest.raises(TokenExpired):
        codec.verify(token, now=expires_at + timedelta(seconds=1))


def test_token_signed_with_other_secret_is_invalid():
    token = TokenCodec("other-secret").issue(1, "admin", "ranger")
    with pytest.raises(TokenInvalid):
        TokenCodec("secret").verify(token)


def test_tampered_token_is_invalid():
    codec = TokenCodec("secret")
    header, payload, signature = codec.issue(1, "manager", "ranger").split(".")
    forged = jwt.encode({"sub": "1", "role": "admin", "exp": 9999999999}, "guess", algorithm="HS256")
    with pytest.raises(TokenInvalid):
        codec.verify(".".join([header, forged.split(".")[1], signature]))


def test_token_without_role_is_invalid():
    token = jwt.encode({"sub": "1", "exp": 9999999999}, "secret", algorithm="HS256")
    with pytest.raises(TokenInvalid):
        TokenCodec("secret").verify(token)


def test_blank_secret_rejected():
    with pytest.raises(ValueError):
        TokenCodec("")


# Auth gate

def test_verify_without_header(client):
    response = client.get("/api/auth/verify")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Access denied. No token provided."}
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize("header", ["Token abc", "bearer abc", "Bearer", "Bearer    "])
def test_malformed_header_is_treated_as_missing(client, header):
    response = client.get("/api/auth/verify", headers={"Authorization": header})
    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. No token provided."


def test_expired_token_asks_for_login(client):
    issued = datetime.now(timezone.utc) - timedelta(days=8)
    token = auth.token_codec.issue(1, "admin", "ranger", now=issued)
    response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired. Please login again."


def test_invalid_token(client):
    response = client.get("/api/auth/verify", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token."


def test_verify_returns_claims(client, manager_headers):
    response = client.get("/api/auth/verify", headers=manager_headers)
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "user": {"id": "1", "username": "lodge-manager", "role": "manager"},
    }


def test_authorize_rejects_role_outside_allow_list():
    with pytest.raises(HTTPException) as excinfo:
        auth.authorize({"role": "guest"}, auth.STAFF_ROLES)
    assert excinfo.value.status_code == 403
    assert auth.authorize({"role": "manager"}, auth.STAFF_ROLES)["role"] == "manager"


class _FakeRequest:
    def __init__(self, headers):
        self.headers = headers

        class _State:
            pass

        self.state = _State()


def test_optional_user_never_fails():
    assert auth.get_optional_user(_FakeRequest({})) is None
    assert auth.get_optional_user(_FakeRequest({"Authorization": "Bearer junk"})) is None

    token = auth.token_codec.issue(7, "admin", "ranger")
    request = _FakeRequest({"Authorization": f"Bearer {token}"})
    claims = auth.get_optional_user(request)
    assert claims["id"] == "7"
    assert request.state.user is claims


def test_logout_requires_token(client, admin_headers):
    assert client.post("/api/auth/logout").status_code == 401
    response = client.post("/api/auth/logout", headers=admin_headers)
    assert response.json() == {"success": True, "message": "Logged out successfully"}


# Login

def test_login_success_issues_token_and_records_last_login(client, db, admin_user):
    response = client.post("/api/auth/login", json={"username": "ranger", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"] == {
        "id": str(admin_user.id),
        "username": "ranger",
        "name": "Head Ranger",
        "email": "ranger@umzuluwildtrack.co.za",
        "role": "admin",
    }
    assert "password" not in body["user"]

    claims = auth.token_codec.verify(body["token"])
    assert claims == {"id": str(admin_user.id), "username": "ranger", "role": "admin"}

    db.expire_all()
    assert db.get(models.Admin, admin_user.id).last_login is not None


def test_wrong_password_and_unknown_user_look_the_same(client, admin_user):
    wrong_password = client.post("/api/auth/login", json={"username": "ranger", "password": "nope"})
    unknown_user = client.post("/api/auth/login", json={"username": "poacher", "password": ADMIN_PASSWORD})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"success": False, "message": "Invalid credentials"}


def test_inactive_admin_cannot_login(client, db, admin_user):
    admin_user.is_active = False
    db.commit()
    response = client.post("/api/auth/login", json={"username": "ranger", "password": ADMIN_PASSWORD})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_requires_both_fields(client):
    response = client.post("/api/auth/login", json={"username": ""})
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"username", "password"}


def test_unknown_username_still_checks_a_password_hash(db, admin_user, monkeypatch):
    checked = []
    real_verify = auth.verify_password

    def recording_verify(plain, hashed):
        checked.append(hashed)
        return real_verify(plain, hashed)

    monkeypatch.setattr(auth, "verify_password", recording_verify)
    resolver = credentials.StoreAdminResolver()

    assert resolver.resolve(db, "poacher", ADMIN_PASSWORD) is None
    assert resolver.resolve(db, "ranger", "wrong") is None
    assert len(checked) == 2
    assert checked[0].startswith("$2b$")
    assert checked[0] != admin_user.password


def test_environment_admin_resolver(db):
    resolver = credentials.EnvAdminResolver("owner", auth.get_password_hash("lodge-keys"), role="manager")
    identity = resolver.resolve(db, "owner", "lodge-keys")
    assert identity["id"] == "env:owner"
    assert identity["role"] == "manager"
    assert resolver.resolve(db, "owner", "wrong") is None
    assert resolver.resolve(db, "someone", "lodge-keys") is None


def test_environment_admin_resolver_disabled_without_hash(db):
    resolver = credentials.EnvAdminResolver("owner", None)
    assert not resolver.enabled
    assert resolver.resolve(db, "owner", "") is None


def test_resolvers_tried_in_order_first_match_wins(db):
    seen = []

    class Recording(credentials.CredentialResolver):
        def __init__(self, name, identity):
            self.name = name
            self.identity = identity

        def resolve(self, db, username, password):
            seen.append(self.name)
            return self.identity

    resolvers = [
        Recording("first", None),
        Recording("second", {"id": "2", "username": "b", "role": "admin"}),
        Recording("third", {"id": "3", "username": "c", "role": "admin"}),
    ]
    identity = credentials.authenticate_admin(db, "b", "pw", resolvers=resolvers)
    assert identity["id"] == "2"
    assert seen == ["first", "second"]


def test_last_login_failure_does_not_fail_login():
    class BrokenSession:
        rolled_back = False

        def commit(self):
            raise SQLAlchemyError("disk full")

        def rollback(self):
            self.rolled_back = True

    session = BrokenSession()
    admin = models.Admin(username="ranger")
    credentials.StoreAdminResolver.touch_last_login(session, admin)
    assert session.rolled_back


# Admin creation

def test_create_admin(client, manager_headers):
    response = client.post(
        "/api/auth/create-admin",
        headers=manager_headers,
        json={"username": "tracker", "password": "spoor-123", "name": "Sipho", "email": "sipho@umzuluwildtrack.co.za", "role": "manager"},
    )
    assert response.status_code == 201
    admin = response.json()["admin"]
    assert admin["username"] == "tracker"
    assert admin["role"] == "manager"
    assert "password" not in admin

    login = client.post("/api/auth/login", json={"username": "tracker", "password": "spoor-123"})
    assert login.status_code == 200


def test_create_admin_duplicate_username(client, admin_headers, admin_user):
    response = client.post(
        "/api/auth/create-admin",
        headers=admin_headers,
        json={"username": "ranger", "password": "another-1", "name": "Copy", "email": "copy@umzuluwildtrack.co.za"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Admin with this username already exists"


def test_create_admin_rejects_unknown_role(client, admin_headers):
    response = client.post(
        "/api/auth/create-admin",
        headers=admin_headers,
        json={"username": "tracker", "password": "spoor-123", "name": "Sipho", "email": "sipho@umzuluwildtrack.co.za", "role": "owner"},
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "role"


def test_create_admin_gate(client, guest_headers, tracked_store):
    body = {"username": "tracker", "password": "spoor-123", "name": "Sipho", "email": "sipho@umzuluwildtrack.co.za"}
    assert client.post("/api/auth/create-admin", json=body).status_code == 401
    assert client.post("/api/auth/create-admin", json=body, headers=guest_headers).status_code == 403
    assert tracked_store == []


def test_bearer_helper_uses_codec():
    header = bearer("manager")["Authorization"]
    assert auth.token_codec.verify(header.split(" ", 1)[1])["role"] == "manager"
