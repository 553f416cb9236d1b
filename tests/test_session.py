import time

import jwt
import pytest

from soundboard.domain.session import SESSION_LIFETIME_S, SessionIssuer

SECRET = "unit-test-signing-secret-0123456789abcdef"


def test_issued_token_verifies_immediately() -> None:
    issuer = SessionIssuer(SECRET)

    session = issuer.verify(issuer.issue())

    assert session is not None
    assert session.is_authenticated is True
    assert session.exp is not None


def test_token_carries_wire_claim_names() -> None:
    token = SessionIssuer(SECRET).issue()
    claims = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert claims["isAuthenticated"] is True
    assert isinstance(claims["timestamp"], int)
    assert claims["exp"] - claims["iat"] == SESSION_LIFETIME_S


def test_token_expires_after_lifetime() -> None:
    issued_25h_ago = SessionIssuer(SECRET, clock=lambda: time.time() - 25 * 3600)
    token = issued_25h_ago.issue()

    assert SessionIssuer(SECRET).verify(token) is None


def test_token_still_valid_just_before_expiry() -> None:
    issued_23h_ago = SessionIssuer(SECRET, clock=lambda: time.time() - 23 * 3600)

    assert SessionIssuer(SECRET).verify(issued_23h_ago.issue()) is not None


def test_expiry_follows_injected_clock() -> None:
    now = [1_700_000_000.0]
    issuer = SessionIssuer(SECRET, clock=lambda: now[0])
    token = issuer.issue()

    now[0] += SESSION_LIFETIME_S - 1
    assert issuer.verify(token) is not None

    now[0] += 25 * 3600 - SESSION_LIFETIME_S + 1
    assert issuer.verify(token) is None


def test_non_integer_expiry_is_rejected() -> None:
    token = jwt.encode(
        {"isAuthenticated": True, "timestamp": 0, "exp": "tomorrow"}, SECRET, algorithm="HS256"
    )

    assert SessionIssuer(SECRET).verify(token) is None


def test_tampered_signature_fails() -> None:
    issuer = SessionIssuer(SECRET)
    header, payload, sig = issuer.issue().split(".")
    flipped = ("A" if sig[0] != "A" else "B") + sig[1:]

    assert issuer.verify(f"{header}.{payload}.{flipped}") is None


def test_token_signed_with_other_key_fails() -> None:
    foreign = SessionIssuer("another-signing-secret-0123456789abcdef").issue()

    assert SessionIssuer(SECRET).verify(foreign) is None


@pytest.mark.parametrize("garbage", ["", None, "not-a-jwt", "a.b.c"])
def test_malformed_tokens_return_none(garbage) -> None:
    assert SessionIssuer(SECRET).verify(garbage) is None


def test_unauthenticated_claim_is_rejected() -> None:
    now = int(time.time())
    token = jwt.encode(
        {"isAuthenticated": False, "timestamp": now * 1000, "iat": now, "exp": now + 60},
        SECRET,
        algorithm="HS256",
    )

    assert SessionIssuer(SECRET).verify(token) is None


def test_token_without_expiry_is_rejected() -> None:
    token = jwt.encode({"isAuthenticated": True, "timestamp": 0}, SECRET, algorithm="HS256")

    assert SessionIssuer(SECRET).verify(token) is None


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        SessionIssuer("")
