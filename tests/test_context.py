"""Request context: bearer extraction and the tagged identity result."""

from types import SimpleNamespace

import pytest

from contacts_server.api.auth.token import issue_token
from contacts_server.api.auth.user import create_user
from contacts_server.api.context import (
    ANONYMOUS,
    INVALID,
    RESOLVED,
    build_context,
    extract_bearer_token,
    resolve_request_identity,
)


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc.def", "abc.def"),
        ("bearer abc.def", "abc.def"),
        ("BEARER   abc.def  ", "abc.def"),
        ("Bearer ", None),
        ("Basic dXNlcjpwYXNz", None),
        ("abc.def", None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_no_token_is_anonymous(settings, store):
    identity = resolve_request_identity(settings, store, None)
    assert identity.status == ANONYMOUS
    assert identity.user is None


def test_malformed_token_is_invalid_not_a_crash(settings, store):
    identity = resolve_request_identity(settings, store, "garbage")
    assert identity.status == INVALID
    assert not identity.is_resolved


def test_valid_token_resolves_account(settings, store):
    create_user(store, "ada")
    token = issue_token(settings, store, "ada", "secret")
    identity = resolve_request_identity(settings, store, token)
    assert identity.status == RESOLVED
    assert identity.user["username"] == "ada"
    assert identity.user["friends"] == []


def test_token_for_deleted_account_is_anonymous(settings, store):
    create_user(store, "ada")
    token = issue_token(settings, store, "ada", "secret")
    store.remove_matching("users", {"username": "ada"})
    assert resolve_request_identity(settings, store, token).status == ANONYMOUS


def test_build_context(settings, store):
    request = SimpleNamespace(headers={"Authorization": "Bearer garbage"})
    context = build_context(request, settings, store)
    assert context["identity"].status == INVALID
    assert context["store"] is store
    assert context["settings"] is settings
    assert "token" not in context
