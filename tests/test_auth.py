from soundboard.domain.auth import (
    LEGACY_HEADER,
    SESSION_COOKIE,
    CookieToken,
    HeaderSecret,
    RequestAuthenticator,
)
from soundboard.domain.credentials import CredentialValidator
from soundboard.domain.session import SessionIssuer

SECRET = "auth-test-signing-secret-0123456789abcdef"


def _authenticator(password: str | None = "hunter2") -> tuple[RequestAuthenticator, SessionIssuer]:
    issuer = SessionIssuer(SECRET)
    return RequestAuthenticator.default(issuer, CredentialValidator(password)), issuer


def test_valid_cookie_authenticates() -> None:
    auth, issuer = _authenticator()
    token = issuer.issue()

    session = auth.authenticate({SESSION_COOKIE: token}, {})

    assert session is not None
    assert session.exp is not None


def test_legacy_header_synthesizes_session() -> None:
    auth, _ = _authenticator()

    session = auth.authenticate({}, {LEGACY_HEADER: "hunter2"})

    assert session is not None
    assert session.is_authenticated
    assert session.exp is None


def test_invalid_cookie_falls_through_to_header() -> None:
    auth, _ = _authenticator()

    session = auth.authenticate({SESSION_COOKIE: "forged"}, {LEGACY_HEADER: "hunter2"})

    assert session is not None


def test_invalid_cookie_and_wrong_header_is_unauthenticated() -> None:
    auth, _ = _authenticator()

    assert auth.authenticate({SESSION_COOKIE: "forged"}, {LEGACY_HEADER: "nope"}) is None


def test_no_credentials_is_unauthenticated() -> None:
    auth, _ = _authenticator()

    assert auth.authenticate({}, {}) is None


def test_header_path_fails_closed_without_admin_password() -> None:
    auth, _ = _authenticator(password=None)

    assert auth.authenticate({}, {LEGACY_HEADER: ""}) is None
    assert auth.authenticate({}, {LEGACY_HEADER: "anything"}) is None


def test_cookie_only_authenticator_ignores_header() -> None:
    issuer = SessionIssuer(SECRET)
    auth = RequestAuthenticator([CookieToken(issuer)])

    assert auth.authenticate({}, {LEGACY_HEADER: "hunter2"}) is None


def test_header_extractor_reads_configured_name() -> None:
    issuer = SessionIssuer(SECRET)
    cred = HeaderSecret(CredentialValidator("hunter2"), issuer, header_name="x-legacy")
    auth = RequestAuthenticator([cred])

    assert auth.authenticate({}, {"x-legacy": "hunter2"}) is not None
    assert auth.authenticate({}, {LEGACY_HEADER: "hunter2"}) is None
