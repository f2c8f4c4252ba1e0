"""
Tests for Email, Password and identifier value objects.
"""

import uuid

import pytest

from identity_api.domain.value_objects import Email, Password, PermissionId, RoleId, UserId


class TestEmail:
    """Test email validation and normalization."""

    def test_normalizes_case_and_whitespace(self):
        email = Email.create("  John.Doe@Example.COM ").unwrap()
        assert email.value == "john.doe@example.com"
        assert email.local_part == "john.doe"
        assert email.domain == "example.com"

    def test_normalization_is_idempotent(self):
        once = Email.create("Mixed@Case.Org").unwrap()
        twice = Email.create(once.value).unwrap()
        assert once == twice

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty(self, raw):
        error = Email.create(raw).unwrap_err()
        assert error.field == "email"
        assert error.reason == "Email cannot be empty"

    @pytest.mark.parametrize("raw", ["plainaddress", "no-at.example.com", "a@b", "a b@example.com"])
    def test_invalid_format(self, raw):
        assert Email.create(raw).unwrap_err().reason == "Invalid email format"

    def test_too_long(self):
        raw = "a" * 250 + "@example.com"
        assert Email.create(raw).unwrap_err().reason == "Email cannot exceed 255 characters"

    def test_local_part_too_long(self):
        raw = "a" * 65 + "@example.com"
        assert "local part" in Email.create(raw).unwrap_err().reason


class TestPassword:
    """Test the password policy."""

    def test_strong_password(self):
        assert Password.create("Str0ng!Pass").is_ok()

    @pytest.mark.parametrize(
        "raw, reason",
        [
            ("", "Password cannot be empty"),
            ("Weak1!", "Password must be at least 8 characters long"),
            ("A1!" + "a" * 70, "Password cannot exceed 72 characters"),
            ("lower1!case", "Password must contain at least one uppercase letter"),
            ("UPPER1!CASE", "Password must contain at least one lowercase letter"),
            ("NoDigits!!", "Password must contain at least one number"),
            ("NoSpecial1", "Password must contain at least one special character"),
        ],
    )
    def test_policy_violations(self, raw, reason):
        error = Password.create(raw).unwrap_err()
        assert error.field == "password"
        assert error.reason == reason

    def test_from_string_skips_validation(self):
        hashed = Password.from_string("$2b$04$abc")
        assert hashed.value == "$2b$04$abc"

    def test_repr_masks_value(self):
        password = Password.create("Str0ng!Pass").unwrap()
        assert "Str0ng" not in repr(password)
        assert "Str0ng" not in str(password)


class TestIdentifiers:
    """Test UUID v4 identifiers."""

    def test_create_generates_uuid4(self):
        user_id = UserId.create()
        assert uuid.UUID(user_id.value).version == 4

    def test_from_string_lowercases(self):
        raw = str(uuid.uuid4()).upper()
        assert RoleId.from_string(raw).unwrap().value == raw.lower()

    def test_empty(self):
        error = UserId.from_string("").unwrap_err()
        assert error.field == "userId"
        assert error.reason == "User ID cannot be empty"

    def test_rejects_non_v4(self):
        error = PermissionId.from_string(str(uuid.uuid1())).unwrap_err()
        assert error.field == "permissionId"
        assert error.reason == "Invalid permission ID format"

    def test_rejects_garbage(self):
        assert RoleId.from_string("role-1").unwrap_err().reason == "Invalid role ID format"

    def test_equality_by_value(self):
        raw = str(uuid.uuid4())
        assert UserId.from_string(raw).unwrap() == UserId.from_string(raw).unwrap()
