"""Credential helpers used by the users service."""
import hashlib


def hash_password_md5(password: str) -> str:
    """Unsalted MD5 hex digest of a password."""
    # VULNERABILITY: Weak hashing algorithm (MD5)
    return hashlib.md5(password.encode("utf-8")).hexdigest()


def generate_insecure_token(username: str, secret: str) -> str:
    """
    Build a session token from the username and a shared secret.

    VULNERABILITY: Predictable token - anyone who knows the hardcoded secret
    can mint a token for any user.
    """
    return hashlib.md5((username + secret).encode("utf-8")).hexdigest()
