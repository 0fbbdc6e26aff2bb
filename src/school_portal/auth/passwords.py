"""
school_portal.auth.passwords

Password hashing and password policy.

Responsibilities:
- Hash and verify admin passwords (passlib, PBKDF2-SHA256).
- Enforce the password policy on new passwords.
"""

from __future__ import annotations

import re

from passlib.context import CryptContext

from school_portal.errors import PayloadValidationError

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20
SPECIAL_CHARACTERS = "@$!%*?&#"

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_PASSWORD_PATTERN = re.compile(
    r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[" + re.escape(SPECIAL_CHARACTERS) + r"])"
)


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # Unknown or malformed hash format.
        return False


def password_policy_errors(password: str, field_name: str = "Password") -> list[str]:
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"{field_name} must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password) > PASSWORD_MAX_LENGTH:
        errors.append(f"{field_name} must be at most {PASSWORD_MAX_LENGTH} characters")
    if not _PASSWORD_PATTERN.match(password):
        errors.append(
            f"{field_name} must contain an uppercase letter, lowercase letter, number, "
            "and special character"
        )
    return errors


def check_password_policy(password: str, *, path: str = "password") -> None:
    errors = password_policy_errors(password)
    if errors:
        raise PayloadValidationError([{"path": path, "message": m} for m in errors])
