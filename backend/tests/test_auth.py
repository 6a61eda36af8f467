from __future__ import annotations

import base64
import json
import time
import uuid

import pytest

from agora.core.errors import Unauthorized
from agora.models import UserCompany, UserRole
from agora.security.auth import create_session_token, decode_and_verify_jwt
from conftest import TEST_PASSWORD, TEST_SECRET, auth_header, make_jwt


def _signup_body(**overrides):
    body = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": "s3cret-pass",
        "role": "INVESTMENT_ANALYST",
    }
    body.update(overrides)
    return body


def test_signup_returns_user_and_working_token(client):
    r = client.post("/api/auth/signup", json=_signup_body())
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["username"] == "ada"
    assert body["user"]["role"] == "INVESTMENT_ANALYST"
    assert "passwordHash" not in body["user"]

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "ada@example.com"


@pytest.mark.parametrize("field", ["firstName", "lastName", "username", "email", "password", "role"])
def test_signup_requires_every_field(client, field):
    body = _signup_body()
    del body[field]
    r = client.post("/api/auth/signup", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "All required fields must be provided"}


def test_signup_rejects_unknown_role(client):
    r = client.post("/api/auth/signup", json=_signup_body(role="SUPERUSER"))
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid role"}


@pytest.mark.parametrize("dup", [{"email": "other@example.com"}, {"username": "other"}])
def test_signup_duplicate_username_or_email(client, dup):
    assert client.post("/api/auth/signup", json=_signup_body()).status_code == 201
    r = client.post("/api/auth/signup", json=_signup_body(**dup))
    assert r.status_code == 409
    assert r.json() == {"error": "User with this username or email already exists"}


def test_login_with_username_or_email(client, make_user):
    user = make_user(username="grace")
    for identifier in ("grace", "grace@example.com", "GRACE@example.com"):
        r = client.post("/api/auth/login", json={"username": identifier, "password": TEST_PASSWORD})
        assert r.status_code == 200, identifier
        body = r.json()
        assert body["message"] == "Login successful"
        assert body["user"]["userID"] == str(user.user_id)
        claims = decode_and_verify_jwt(body["token"], TEST_SECRET)
        assert claims["sub"] == str(user.user_id)
        assert claims["role"] == "INVESTMENT_ANALYST"


@pytest.mark.parametrize(
    "username,password", [("grace", "wrong-password"), ("nobody", TEST_PASSWORD)]
)
def test_login_bad_credentials(client, make_user, username, password):
    make_user(username="grace")
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials"}


def test_login_requires_both_fields(client):
    r = client.post("/api/auth/login", json={"username": "grace"})
    assert r.status_code == 400
    assert r.json() == {"error": "Username and password are required"}


def test_me_includes_company_and_manager(client, db_session, make_user):
    company = UserCompany(company_name="Fund LP", location="Boston")
    db_session.add(company)
    db_session.commit()
    boss = make_user(UserRole.ANALYST_MANAGER, username="boss")
    user = make_user(company=company, manager=boss)

    r = client.get("/api/auth/me", headers=auth_header(user))
    assert r.status_code == 200
    profile = r.json()["user"]
    assert profile["company"] == {"companyName": "Fund LP", "location": "Boston"}
    assert profile["manager"]["userID"] == str(boss.user_id)
    assert profile["managerID"] == str(boss.user_id)


def test_me_for_deleted_user(client):
    token = make_jwt(sub=str(uuid.uuid4()), role="IR_ADMIN", exp=int(time.time()) + 60)
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404


@pytest.mark.parametrize(
    "header",
    [
        None,
        "Bearer ",
        "Token abc",
        "Bearer not.a.jwt",
        f"Bearer {make_jwt(sub=str(uuid.uuid4()), role='IR_ADMIN', secret='other-secret', exp=int(time.time()) + 60)}",
        f"Bearer {make_jwt(sub=str(uuid.uuid4()), role='IR_ADMIN', exp=int(time.time()) - 1)}",
        f"Bearer {make_jwt(sub=str(uuid.uuid4()), role='IR_ADMIN')}",
        f"Bearer {make_jwt(sub=str(uuid.uuid4()), role='ROOT', exp=int(time.time()) + 60)}",
        f"Bearer {make_jwt(sub='not-a-uuid', role='IR_ADMIN', exp=int(time.time()) + 60)}",
        b"Bearer aaa.bbb.\xe9\xe9",
        b"Bearer \xe9\xe9.bbb.ccc",
    ],
)
def test_bad_tokens_are_unauthorized(client, header):
    headers = {"Authorization": header} if header is not None else {}
    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 401
    assert "error" in r.json()


def test_session_token_lifetime():
    now = 1_700_000_000
    user_id = uuid.uuid4()
    token = create_session_token(user_id=user_id, role=UserRole.IR_ADMIN, secret=TEST_SECRET, ttl_hours=24, now=now)
    _, payload_b64, _ = token.split(".")
    payload = json.loads(base64.urlsafe_b64decode(payload_b64 + "=" * (-len(payload_b64) % 4)))
    assert payload == {"sub": str(user_id), "role": "IR_ADMIN", "iat": now, "exp": now + 24 * 3600}

    with pytest.raises(Unauthorized):
        decode_and_verify_jwt(token, TEST_SECRET)  # long expired


def test_non_ascii_signature_is_rejected():
    with pytest.raises(Unauthorized):
        decode_and_verify_jwt("aaa.bbb.éé", TEST_SECRET)


@pytest.mark.parametrize(
    "field,message",
    [("companyID", "Referenced company does not exist"), ("managerID", "Referenced manager does not exist")],
)
def test_signup_with_unknown_reference(client, field, message):
    r = client.post("/api/auth/signup", json=_signup_body(**{field: str(uuid.uuid4())}))
    assert r.status_code == 400
    assert r.json() == {"error": message}


def test_signup_with_existing_company_and_manager(client, db_session, make_user):
    company = UserCompany(company_name="Fund LP", location="Boston")
    db_session.add(company)
    db_session.commit()
    boss = make_user(UserRole.ANALYST_MANAGER, username="boss")

    r = client.post(
        "/api/auth/signup",
        json=_signup_body(companyID=str(company.company_id), managerID=str(boss.user_id)),
    )
    assert r.status_code == 201
    assert r.json()["user"]["managerID"] == str(boss.user_id)
