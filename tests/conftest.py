"""Shared fixtures: an in-memory MongoDB (mongomock) behind the real Flask app."""

import mongomock
import pytest

from contacts_server.api import create_app
from contacts_server.api.db.store import DirectoryStore
from contacts_server.api.settings import Settings


@pytest.fixture
def settings():
    return Settings(secret_key="test-signing-key", login_secret="secret")


@pytest.fixture
def store():
    store = DirectoryStore(mongomock.MongoClient()["contacts_test"])
    store.ensure_indexes()
    return store


@pytest.fixture
def app(settings, store):
    app = create_app(settings=settings, store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def gql(client):
    """POST a GraphQL document; returns the decoded JSON body."""

    def run(document, variables=None, token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        r = client.post("/graphql", json={"query": document, "variables": variables or {}}, headers=headers)
        assert r.status_code == 200, r.get_data(as_text=True)
        return r.get_json()

    return run


@pytest.fixture
def login(gql):
    """Create an account and return a bearer token for it."""

    def run(username="ada", password="secret"):
        gql("mutation($u: String!) { createUser(username: $u) { id } }", {"u": username})
        body = gql(
            "mutation($u: String!, $p: String!) { login(username: $u, password: $p) { value } }",
            {"u": username, "p": password},
        )
        return body["data"]["login"]["value"]

    return run
