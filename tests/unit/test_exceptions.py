"""
Tests for mapping identity errors onto HTTP exceptions.
"""

import pytest

from identity_api.errors import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from identity_api.exceptions import (
    APIException,
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    DatabaseException,
    NotFoundException,
    ValidationException,
    error_to_exception,
    unwrap_or_raise,
)
from identity_api.result import Err, Ok


class TestErrorToException:
    """Test each error kind maps to the right status and payload."""

    @pytest.mark.parametrize(
        "error, exception_type, status_code",
        [
            (ValidationError("email", "Invalid email format"), ValidationException, 400),
            (UnauthorizedError(), AuthenticationException, 401),
            (ForbiddenError("delete", "Role", "System roles cannot be deleted"), AuthorizationException, 403),
            (NotFoundError("User", "x"), NotFoundException, 404),
            (ConflictError("User", "email", "a@b.co"), ConflictException, 409),
            (DatabaseError("Failed to save user"), DatabaseException, 500),
        ],
    )
    def test_mapping(self, error, exception_type, status_code):
        exception = error_to_exception(error)
        assert isinstance(exception, exception_type)
        assert exception.status_code == status_code
        assert exception.message == error.message

    def test_validation_detail_carries_field(self):
        exception = error_to_exception(ValidationError("firstName", "First name cannot be empty"))
        detail = exception.details[0]
        assert detail.field == "firstName"
        assert detail.message == "First name cannot be empty"

    def test_not_found_lists_missing_ids(self):
        exception = error_to_exception(NotFoundError("Permission", "a,b", missing_ids=["a", "b"]))
        assert [d.message for d in exception.details] == ["Permission 'a' not found", "Permission 'b' not found"]

    def test_unauthorized_sets_bearer_challenge(self):
        exception = error_to_exception(UnauthorizedError(metadata={"reason": "user_inactive"}))
        assert exception.headers == {"WWW-Authenticate": "Bearer"}
        assert "user_inactive" not in str(exception.detail)

    def test_database_cause_is_not_exposed(self):
        exception = error_to_exception(DatabaseError("Failed to find user", cause=RuntimeError("disk on fire")))
        assert "disk on fire" not in str(exception.detail)


class TestUnwrapOrRaise:
    def test_ok_returns_value(self):
        assert unwrap_or_raise(Ok(5)) == 5

    def test_err_raises(self):
        with pytest.raises(APIException) as exc_info:
            unwrap_or_raise(Err(NotFoundError("Role", "abc")))
        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == "NOT_FOUND"
