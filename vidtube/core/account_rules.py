"""Account Rules — pure normalization, required-field and length checks for account input.

Invariants:
    - Usernames and emails are stripped; usernames are lower-cased
    - Blank (empty or whitespace-only) required fields raise InputValidationError
      naming every blank field at once
    - Values longer than their column raise InputValidationError before any write
    - Passwords are never stripped (whitespace is significant) and fit bcrypt's 72 bytes
    - Registration emails pass the same syntax check as EmailStr in account updates
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from vidtube.core.errors import InputValidationError
from vidtube.core.passwords import BCRYPT_MAX_BYTES

USERNAME_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 255
FULL_NAME_MAX_LENGTH = 100
VIDEO_TITLE_MAX_LENGTH = 200


@dataclass(frozen=True)
class Registration:
    username: str
    email: str
    full_name: str
    password: str


def normalize_username(username: str) -> str:
    return username.strip().lower()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def require_fields(**values: str | None) -> None:
    """Raise one InputValidationError listing every blank field."""
    blank = [
        name for name, value in values.items()
        if value is None or not str(value).strip()
    ]
    if blank:
        raise InputValidationError(
            f"Required fields are missing: {', '.join(blank)}", fields=blank,
        )


def require_max_lengths(**fields: tuple[str | None, int]) -> None:
    """Raise one InputValidationError listing every field over its limit.

    Each keyword maps a field name to (value, limit); None values are skipped.
    """
    too_long = [
        name for name, (value, limit) in fields.items()
        if value is not None and len(value) > limit
    ]
    if too_long:
        raise InputValidationError(
            f"Fields exceed maximum length: {', '.join(too_long)}", fields=too_long,
        )


def require_valid_email(email: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise InputValidationError(f"Invalid email: {e}", fields=["email"]) from e


def normalize_registration(
    username: str | None, email: str | None,
    full_name: str | None, password: str | None,
) -> Registration:
    require_fields(
        username=username, email=email, fullName=full_name, password=password,
    )
    form = Registration(
        username=normalize_username(username),
        email=normalize_email(email),
        full_name=full_name.strip(),
        password=password,
    )
    require_max_lengths(
        username=(form.username, USERNAME_MAX_LENGTH),
        email=(form.email, EMAIL_MAX_LENGTH),
        fullName=(form.full_name, FULL_NAME_MAX_LENGTH),
    )
    if len(form.password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InputValidationError(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes", fields=["password"],
        )
    require_valid_email(form.email)
    return form


def normalize_login_identifier(
    username: str | None, email: str | None,
) -> str:
    """Pick the identifier used for lookup; username wins when both are sent."""
    if username and username.strip():
        return normalize_username(username)
    if email and email.strip():
        return normalize_email(email)
    raise InputValidationError(
        "Username or email is required", fields=["username", "email"],
    )
