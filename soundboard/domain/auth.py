"""Resolve an inbound request's credentials to an admin session.

Two credential shapes are accepted, tried in a fixed order:

- `CookieToken`: the signed session cookie issued at login.
- `HeaderSecret`: the legacy `x-admin-password` header carrying the admin
  secret in plaintext. Kept for old clients; it performs no cryptographic
  work, so anyone who can read the header has full admin access.

The module only consumes plain mappings of cookies and headers, so it stays
independent of the web framework.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from ..logging_conf import get_logger
from .credentials import CredentialValidator
from .session import SessionData, SessionIssuer

__all__ = [
    "SESSION_COOKIE",
    "LEGACY_HEADER",
    "Credential",
    "CookieToken",
    "HeaderSecret",
    "RequestAuthenticator",
]

SESSION_COOKIE = "admin-session"
LEGACY_HEADER = "x-admin-password"

logger = get_logger("domain.auth")


class Credential(Protocol):
    """A credential shape: pull a value from the request, then resolve it."""

    kind: str

    def extract(self, cookies: Mapping[str, str], headers: Mapping[str, str]) -> str | None: ...

    def resolve(self, value: str) -> SessionData | None: ...


@dataclass(frozen=True)
class CookieToken:
    issuer: SessionIssuer
    cookie_name: str = SESSION_COOKIE
    kind: str = "cookie"

    def extract(self, cookies: Mapping[str, str], headers: Mapping[str, str]) -> str | None:
        return cookies.get(self.cookie_name) or None

    def resolve(self, value: str) -> SessionData | None:
        return self.issuer.verify(value)


@dataclass(frozen=True)
class HeaderSecret:
    validator: CredentialValidator
    issuer: SessionIssuer
    header_name: str = LEGACY_HEADER
    kind: str = "header"

    def extract(self, cookies: Mapping[str, str], headers: Mapping[str, str]) -> str | None:
        return headers.get(self.header_name) or None

    def resolve(self, value: str) -> SessionData | None:
        # Re-validated on every call; nothing is persisted.
        if not self.validator.validate(value):
            return None
        return self.issuer.synthesize()


class RequestAuthenticator:
    def __init__(self, credentials: Sequence[Credential]) -> None:
        self._credentials = tuple(credentials)

    @classmethod
    def default(cls, issuer: SessionIssuer, validator: CredentialValidator) -> RequestAuthenticator:
        """Cookie first, then the legacy header."""
        return cls([CookieToken(issuer), HeaderSecret(validator, issuer)])

    def authenticate(
        self, cookies: Mapping[str, str], headers: Mapping[str, str]
    ) -> SessionData | None:
        """Return the first credential that resolves, or None.

        A present-but-invalid cookie does not stop the header from being tried.
        """
        for credential in self._credentials:
            value = credential.extract(cookies, headers)
            if value is None:
                continue
            session = credential.resolve(value)
            if session is not None:
                if credential.kind == "header":
                    logger.info(
                        "auth.legacy_header",
                        extra={"event": "auth_legacy_header"},
                    )
                return session
        return None
