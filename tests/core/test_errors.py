"""Error Hierarchy — HTTP status mapping and the response envelope."""

import pytest

from vidtube.core.errors import (
    BlobStorageError, ConflictError, DatabaseError, ErrorCategory, InputValidationError,
    NotFoundOrForbiddenError, ResourceNotFoundError, UnauthorizedError, VidTubeError,
)


@pytest.mark.parametrize("error,status", [
    (InputValidationError("bad"), 400),
    (ConflictError("taken", "email"), 409),
    (UnauthorizedError(), 401),
    (NotFoundOrForbiddenError("Video", "v1"), 404),
    (ResourceNotFoundError("User", "u1"), 404),
    (BlobStorageError("avatar"), 502),
    (DatabaseError("boom", "query"), 500),
])
def test_http_status_mapping(error, status):
    assert isinstance(error, VidTubeError)
    assert error.http_status == status


def test_envelope_shape():
    body = ConflictError("User with this email already exists", "email").to_response()
    assert body["success"] is False
    assert body["message"] == "User with this email already exists"
    assert body["errors"][0]["code"] == "CONFLICT"
    assert body["errors"][0]["category"] == ErrorCategory.CONFLICT.value


def test_validation_error_lists_fields():
    body = InputValidationError("missing", fields=["title"]).to_response()
    assert body["errors"][0]["fields"] == ["title"]


def test_unauthorized_reason_stays_out_of_response():
    err = UnauthorizedError("Invalid or expired refresh token", reason="stale_or_reused_token")
    assert err.context.debug_info == {"reason": "stale_or_reused_token"}
    assert "stale_or_reused_token" not in str(err.to_response())


def test_gate_miss_message_does_not_say_which_case():
    err = NotFoundOrForbiddenError("Comment", "c1")
    assert err.message == "Comment not found or not authorized"
    assert err.context.resource_type == "Comment"
