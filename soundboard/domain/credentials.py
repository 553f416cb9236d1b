from __future__ import annotations

import hmac

from ..logging_conf import get_logger

__all__ = ["CredentialValidator"]

logger = get_logger("domain.credentials")


class CredentialValidator:
    """Checks a submitted secret against the single administrator secret.

    Fails closed: without a configured secret every attempt is rejected.
    """

    def __init__(self, admin_secret: str | None) -> None:
        self._expected = admin_secret or None
        if self._expected is None:
            logger.warning(
                "credentials.unconfigured",
                extra={"event": "credentials_unconfigured"},
            )

    @property
    def configured(self) -> bool:
        return self._expected is not None

    def validate(self, secret: str | None) -> bool:
        if self._expected is None or not isinstance(secret, str) or not secret:
            return False
        return hmac.compare_digest(secret.encode("utf-8"), self._expected.encode("utf-8"))
