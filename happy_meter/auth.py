"""Credential checks for the admin dashboard and the report trigger."""

from __future__ import annotations

import hmac
from typing import Callable, Optional

CredentialVerifier = Callable[[str], bool]


class SharedSecretVerifier:
    """Constant-time comparison against a configured secret.

    An unset secret rejects every candidate.
    """

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret or ""

    def __call__(self, candidate: str) -> bool:
        if not self._secret or not candidate:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._secret.encode("utf-8"))


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""

    if not authorization:
        return ""
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


__all__ = ["CredentialVerifier", "SharedSecretVerifier", "bearer_token"]
