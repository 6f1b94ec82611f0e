"""Token issuance, verification and password checks."""

import time
from dataclasses import replace

import pytest
from jose import jwt

from contacts_server.api.auth.password import check_credentials, hash_password, verify_password
from contacts_server.api.auth.token import issue_token, verify_token
from contacts_server.api.auth.user import create_user, resolve_identity
from contacts_server.api.db.store import PERSONS
from contacts_server.api.errors import InvalidCredentials, InvalidToken


def test_issue_then_verify_round_trips(settings, store):
    account = create_user(store, "ada")
    token = issue_token(settings, store, "ada", "secret")
    assert verify_token(settings, token) == {"username": "ada", "id": str(account["_id"])}


def test_token_has_no_exp_by_default(settings, store):
    create_user(store, "ada")
    claims = jwt.get_unverified_claims(issue_token(settings, store, "ada", "secret"))
    assert "iat" in claims
    assert "exp" not in claims


def test_token_exp_when_configured(settings, store):
    create_user(store, "ada")
    settings = replace(settings, token_expire_minutes=5)
    claims = jwt.get_unverified_claims(issue_token(settings, store, "ada", "secret"))
    assert claims["exp"] - claims["iat"] == 300


@pytest.mark.parametrize("username,password", [("ada", "wrong"), ("nobody", "secret")])
def test_issue_rejects_bad_credentials(settings, store, username, password):
    create_user(store, "ada")
    with pytest.raises(InvalidCredentials) as exc:
        issue_token(settings, store, username, password)
    assert exc.value.extensions["code"] == "INVALID_CREDENTIALS"


def test_account_with_password_ignores_shared_secret(settings, store):
    create_user(store, "linus", "hunter22")
    assert issue_token(settings, store, "linus", "hunter22")
    with pytest.raises(InvalidCredentials):
        issue_token(settings, store, "linus", "secret")


def test_verify_absent_token_is_not_an_error(settings):
    assert verify_token(settings, None) is None
    assert verify_token(settings, "") is None


def test_verify_rejects_garbage(settings):
    with pytest.raises(InvalidToken):
        verify_token(settings, "not.a.jwt")


def test_verify_rejects_other_key(settings):
    token = jwt.encode({"username": "ada", "id": "x"}, "another-key", algorithm="HS256")
    with pytest.raises(InvalidToken):
        verify_token(settings, token)


def test_verify_rejects_expired(settings):
    token = jwt.encode(
        {"username": "ada", "id": "x", "exp": int(time.time()) - 10},
        settings.secret_key,
        algorithm=settings.algorithm,
    )
    with pytest.raises(InvalidToken):
        verify_token(settings, token)


def test_verify_rejects_incomplete_payload(settings):
    token = jwt.encode({"username": "ada"}, settings.secret_key, algorithm=settings.algorithm)
    with pytest.raises(InvalidToken):
        verify_token(settings, token)


def test_resolve_identity_populates_friends(store):
    grace = store.insert(PERSONS, {"name": "Grace", "street": "Main St", "city": "Metropolis"})
    account = store.insert("users", {"username": "ada", "friends": [grace["_id"]]})
    resolved = resolve_identity(store, {"username": "ada", "id": str(account["_id"])})
    assert resolved["friends"][0]["name"] == "Grace"


def test_resolve_identity_for_missing_account(store):
    assert resolve_identity(store, {"username": "ada", "id": "0123456789abcdef01234567"}) is None


def test_password_hashing(settings):
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)
    assert not verify_password("", hashed)
    assert check_credentials(settings, {"username": "ada"}, "secret")
    assert not check_credentials(settings, {"username": "ada"}, None)
