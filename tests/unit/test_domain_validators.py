"""Unit tests for email and password validators."""

import pytest

from gatehouse.domain.validators import (
    normalize_email,
    validate_email,
    validate_strong_password,
)


@pytest.mark.unit
class TestEmailValidation:
    def test_normalize_trims_and_lowercases(self):
        assert normalize_email("  USER@EX.com ") == "user@ex.com"

    def test_validate_returns_normalized_email(self):
        assert validate_email("USER@EX.com") == "user@ex.com"

    @pytest.mark.parametrize(
        "email", ["", "user", "user@", "@ex.com", "user@ex", "us er@ex.com", "a@b@c.com"]
    )
    def test_rejects_malformed_email(self, email):
        with pytest.raises(ValueError, match="Invalid email format"):
            validate_email(email)


@pytest.mark.unit
class TestPasswordStrength:
    def test_accepts_mixed_case_with_digit(self):
        assert validate_strong_password("Abc12345") == "Abc12345"

    @pytest.mark.parametrize(
        ("password", "missing"),
        [
            ("abc12345", "uppercase"),
            ("UPPERCASE123", "lowercase"),
            ("NoDigitsHere", "digit"),
        ],
    )
    def test_rejects_weak_password(self, password, missing):
        with pytest.raises(ValueError, match=missing) as exc_info:
            validate_strong_password(password)
        assert password not in str(exc_info.value)
