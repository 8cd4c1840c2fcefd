"""
Credential validation for registration submissions.

Pure functions; no I/O. validate_registration returns every violation found,
in a stable order, so clients can show them all at once.
"""

import re

REQUIRED_FIELDS_MESSAGE = "Name, email, phone, and password are required"
INVALID_EMAIL_MESSAGE = "Invalid email format"
INVALID_PHONE_MESSAGE = "Invalid phone format. Use (XX) 9XXXX-XXXX"
PASSWORD_TOO_SHORT_MESSAGE = "Password must be at least 8 characters long"
PASSWORD_COMPLEXITY_MESSAGE = (
    "Password must contain at least one uppercase letter, one lowercase letter, and one number"
)

PASSWORD_MIN_LEN = 8
# Bounds match the users table columns (String(255)) and bcrypt input.
NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MAX_LEN = 128

NAME_TOO_LONG_MESSAGE = f"Name must be at most {NAME_MAX_LEN} characters"
EMAIL_TOO_LONG_MESSAGE = f"Email must be at most {EMAIL_MAX_LEN} characters"
PASSWORD_TOO_LONG_MESSAGE = f"Password must be at most {PASSWORD_MAX_LEN} characters"

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# Brazilian mobile: (DD) 9DDDD-DDDD
_PHONE_RE = re.compile(r"\(\d{2}\)\s9\d{4}-\d{4}", re.ASCII)
_UPPER_RE = re.compile(r"[A-Z]")
_LOWER_RE = re.compile(r"[a-z]")
_DIGIT_RE = re.compile(r"\d", re.ASCII)


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup."""
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return _EMAIL_RE.fullmatch(email) is not None


def is_valid_phone(phone: str) -> bool:
    return _PHONE_RE.fullmatch(phone) is not None


def password_problems(password: str) -> list[str]:
    """Return length and complexity violations for password (empty if acceptable)."""
    problems: list[str] = []
    if len(password) < PASSWORD_MIN_LEN:
        problems.append(PASSWORD_TOO_SHORT_MESSAGE)
    elif len(password) > PASSWORD_MAX_LEN:
        problems.append(PASSWORD_TOO_LONG_MESSAGE)
    if not (_UPPER_RE.search(password) and _LOWER_RE.search(password) and _DIGIT_RE.search(password)):
        problems.append(PASSWORD_COMPLEXITY_MESSAGE)
    return problems


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_registration(
    name: str | None,
    email: str | None,
    phone: str | None,
    password: str | None,
) -> list[str]:
    """
    Validate a registration submission. Returns [] when valid.

    Missing required fields short-circuit with a single message; otherwise the
    length, email, phone and password checks all run and their messages accumulate.
    """
    if any(_is_blank(v) for v in (name, email, phone, password)):
        return [REQUIRED_FIELDS_MESSAGE]

    errors: list[str] = []
    if len(name.strip()) > NAME_MAX_LEN:
        errors.append(NAME_TOO_LONG_MESSAGE)
    if not is_valid_email(email.strip()):
        errors.append(INVALID_EMAIL_MESSAGE)
    elif len(normalize_email(email)) > EMAIL_MAX_LEN:
        errors.append(EMAIL_TOO_LONG_MESSAGE)
    if not is_valid_phone(phone.strip()):
        errors.append(INVALID_PHONE_MESSAGE)
    errors.extend(password_problems(password))
    return errors
