# contacts_server/api/auth/token.py
"""
Token utilities:
- issue_token: check credentials and sign {username, id}
- verify_token: verify signature (and exp when present) and decode the payload
Tokens carry iat always and exp only when TOKEN_EXPIRE_MINUTES > 0.
"""
from __future__ import annotations
import time
from typing import Any, Dict, Optional

from jose import jwt, JWTError, ExpiredSignatureError

from contacts_server.api.auth.password import check_credentials
from contacts_server.api.auth.user import get_user
from contacts_server.api.errors import InvalidCredentials, InvalidToken
from contacts_server.api.utils.logger import write_log, token_snippet


def _now() -> int:
    return int(time.time())


def sign_jwt(settings, claims: Dict[str, Any]) -> str:
    payload = dict(claims)
    now = _now()
    payload.setdefault("iat", now)
    if settings.token_expire_minutes > 0:
        payload["exp"] = now + settings.token_expire_minutes * 60
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)
    write_log({"event": "token_issued", "username": payload.get("username"), "exp": payload.get("exp")})
    return token


def issue_token(settings, store, username: str, password: str) -> str:
    user = get_user(store, username)
    if not user or not check_credentials(settings, user, password):
        write_log({"event": "login_denied", "username": username, "reason": "unknown user" if not user else "invalid password"}, stream="security")
        raise InvalidCredentials()
    return sign_jwt(settings, {"username": user["username"], "id": str(user["_id"])})


def verify_token(settings, token: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Return {"username", "id"} for a valid token, None when no token was given.
    Raise InvalidToken for anything that does not verify.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        write_log({"event": "token_expired", "token_snippet": token_snippet(token)}, stream="security")
        raise InvalidToken("token expired")
    except JWTError as e:
        write_log({"event": "token_decode_failed", "error": str(e), "token_snippet": token_snippet(token)}, stream="security")
        raise InvalidToken()

    if not payload.get("username") or not payload.get("id"):
        write_log({"event": "token_missing_claims", "token_snippet": token_snippet(token)}, stream="security")
        raise InvalidToken("token payload incomplete")
    return {"username": payload["username"], "id": payload["id"]}
