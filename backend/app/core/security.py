"""
Password hashing and credential policy helpers.
"""

import re
from typing import Optional

from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*"


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a plain text password with bcrypt."""
    return _pwd_context.using(bcrypt__rounds=rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plain text password with a stored bcrypt hash."""
    try:
        return _pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def password_strength_error(password: str) -> Optional[str]:
    """
    Check password strength.

    Returns:
        None when the password is acceptable, otherwise the reason it is not.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"must be at least {PASSWORD_MIN_LENGTH} characters"
    if not re.search(r"[A-Z]", password):
        return "must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "must contain at least one number"
    if not any(ch in PASSWORD_SPECIAL_CHARACTERS for ch in password):
        return f"must contain at least one special character ({PASSWORD_SPECIAL_CHARACTERS})"
    return None
