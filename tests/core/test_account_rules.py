"""Account Rules — normalization and required-field checks."""

import pytest

from vidtube.core.account_rules import (
    normalize_login_identifier, normalize_registration, require_fields,
    require_max_lengths,
)
from vidtube.core.errors import InputValidationError


def test_registration_normalizes_username_and_email():
    form = normalize_registration("  Alice ", " Alice@VidTube.io ", " Alice A ", " pw ")
    assert form.username == "alice"
    assert form.email == "alice@vidtube.io"
    assert form.full_name == "Alice A"
    assert form.password == " pw "


def test_registration_lists_every_blank_field():
    with pytest.raises(InputValidationError) as exc:
        normalize_registration("alice", "   ", None, "")
    assert exc.value.fields == ["email", "fullName", "password"]
    assert exc.value.http_status == 400


def test_require_fields_passes_when_all_present():
    require_fields(title="t", description="d")


def test_login_identifier_prefers_username():
    assert normalize_login_identifier(" Bob ", "bob@vidtube.io") == "bob"


def test_login_identifier_falls_back_to_email():
    assert normalize_login_identifier(None, " Bob@VidTube.io") == "bob@vidtube.io"


def test_login_identifier_requires_one():
    with pytest.raises(InputValidationError):
        normalize_login_identifier("  ", None)


def test_registration_length_limits_apply_after_stripping():
    form = normalize_registration("  " + "a" * 30 + "  ", "a@vidtube.io", "Alice", "pw")
    assert form.username == "a" * 30


def test_registration_lists_every_overlong_field():
    with pytest.raises(InputValidationError) as exc:
        normalize_registration("a" * 31, "a@vidtube.io", "F" * 101, "pw")
    assert exc.value.fields == ["username", "fullName"]


def test_registration_password_limit_counts_bytes():
    with pytest.raises(InputValidationError) as exc:
        normalize_registration("alice", "a@vidtube.io", "Alice", "é" * 37)
    assert exc.value.fields == ["password"]


@pytest.mark.parametrize("email", ["alice", "alice@", "@vidtube.io", "a b@vidtube.io"])
def test_registration_rejects_malformed_email(email):
    with pytest.raises(InputValidationError) as exc:
        normalize_registration("alice", email, "Alice", "pw")
    assert exc.value.fields == ["email"]


def test_require_max_lengths_skips_missing_values():
    require_max_lengths(title=(None, 5), name=("abcde", 5))
