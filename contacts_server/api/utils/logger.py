# contacts_server/api/utils/logger.py
import json
from datetime import datetime, timezone


def _default(value):
    # ObjectId, exceptions and anything else without a JSON form
    return str(value)


# Basic structured logging function
def write_log(entry: dict, stream: str = "default"):
    entry = dict(entry)
    entry.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    entry.setdefault("stream", stream)
    print(json.dumps(entry, ensure_ascii=False, default=_default))


def token_snippet(token: str) -> str:
    return (token or "")[:48]
