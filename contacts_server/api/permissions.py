# contacts_server/api/permissions.py
from datetime import datetime, timezone

from contacts_server.api.context import INVALID, RequestIdentity
from contacts_server.api.errors import InvalidToken, Unauthenticated
from contacts_server.api.utils.logger import write_log


def current_identity(info) -> RequestIdentity:
    return info.context["identity"]


def require_identity(info, operation: str) -> dict:
    """Return the caller's account or raise before the operation runs."""
    identity = current_identity(info)
    if identity.is_resolved:
        return identity.user

    write_log({
        "event": "access_denied",
        "operation": operation,
        "reason": f"identity {identity.status}",
    }, stream="security")
    if identity.status == INVALID:
        raise InvalidToken()
    raise Unauthenticated()


def log_mutation(user, mutation_name: str, status: str, reason: str = None, **details):
    entry = {
        "event": "mutation_audit",
        "mutation": mutation_name,
        "user_id": user.get("_id") if isinstance(user, dict) else None,
        "username": user.get("username") if isinstance(user, dict) else None,
        "status": status,
        "reason": reason,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    entry.update(details)
    write_log(entry, stream="audit")
