import pytest

from soundboard.domain.credentials import CredentialValidator


@pytest.mark.parametrize(
    "submitted, expected",
    [
        ("s3cret", True),
        ("s3cret ", False),
        ("S3CRET", False),
        ("s3cre", False),
        ("", False),
        (None, False),
    ],
)
def test_validate_requires_exact_match(submitted, expected) -> None:
    assert CredentialValidator("s3cret").validate(submitted) is expected


@pytest.mark.parametrize("configured", [None, ""])
def test_validate_fails_closed_without_configured_secret(configured) -> None:
    validator = CredentialValidator(configured)

    assert validator.configured is False
    assert validator.validate("") is False
    assert validator.validate("anything") is False


def test_validate_rejects_non_string_input() -> None:
    assert CredentialValidator("123").validate(123) is False  # type: ignore[arg-type]


def test_validate_handles_unicode_secret() -> None:
    validator = CredentialValidator("pässwörd")
    assert validator.validate("pässwörd") is True
    assert validator.validate("passwort") is False
