# contacts_server/api/auth/user.py
from typing import Optional

from contacts_server.api.auth.password import hash_password
from contacts_server.api.db.store import USERS, DirectoryStore
from contacts_server.api.utils.logger import write_log


def get_user(store: DirectoryStore, username: str) -> Optional[dict]:
    user = store.find_one(USERS, {"username": username})
    write_log({"event": "user_lookup", "username": username, "found": bool(user)})
    return user


def create_user(store: DirectoryStore, username: str, password: Optional[str] = None) -> dict:
    account = {"username": username, "friends": []}
    if password:
        account["password_hash"] = hash_password(password)
    return store.insert(USERS, account)


def resolve_identity(store: DirectoryStore, payload: dict) -> Optional[dict]:
    """Load the account named by a decoded token, friends populated; None if it is gone."""
    account = store.find_by_id(USERS, payload.get("id"))
    if account is None:
        return None
    return store.populate_friends(account)
