# contacts_server/api/auth/password.py
import hmac

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    if not password or not hashed_password:
        return False
    return check_password_hash(hashed_password, password)


def check_credentials(settings, account: dict, password: str) -> bool:
    """
    Accounts with a stored hash are checked against it; accounts created
    without a password fall back to the shared LOGIN_SECRET.
    """
    hashed = account.get("password_hash")
    if hashed:
        return verify_password(password, hashed)
    return hmac.compare_digest((password or "").encode(), settings.login_secret.encode())
