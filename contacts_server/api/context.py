# contacts_server/api/context.py
"""
Per-request context: bearer token extraction and identity resolution.

resolve_request_identity never raises; resolvers branch on RequestIdentity.status.
"""
from dataclasses import dataclass
from typing import Optional

from contacts_server.api.auth.token import verify_token
from contacts_server.api.auth.user import resolve_identity
from contacts_server.api.errors import InvalidToken
from contacts_server.api.utils.logger import write_log, token_snippet

ANONYMOUS = "anonymous"
RESOLVED = "resolved"
INVALID = "invalid"


@dataclass(frozen=True)
class RequestIdentity:
    status: str
    user: Optional[dict] = None

    @property
    def is_resolved(self) -> bool:
        return self.status == RESOLVED


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    if not auth_header:
        return None
    scheme, _, token = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def resolve_request_identity(settings, store, token: Optional[str]) -> RequestIdentity:
    try:
        payload = verify_token(settings, token)
    except InvalidToken:
        write_log({"event": "request_token_invalid", "token_snippet": token_snippet(token)}, stream="security")
        return RequestIdentity(INVALID)

    if payload is None:
        return RequestIdentity(ANONYMOUS)

    user = resolve_identity(store, payload)
    if user is None:
        write_log({"event": "token_user_missing", "user_id": payload["id"], "username": payload["username"]}, stream="security")
        return RequestIdentity(ANONYMOUS)
    return RequestIdentity(RESOLVED, user)


def build_context(request, settings, store) -> dict:
    token = extract_bearer_token(request.headers.get("Authorization"))
    return {
        "request": request,
        "settings": settings,
        "store": store,
        "identity": resolve_request_identity(settings, store, token),
    }
