"""Signed session tokens: issue and verify.

Wire format is three ``.``-joined base64url segments (no padding)::

    base64url(header-json) . base64url(payload-json) . base64url(signature)

The header is ``{"alg":"HS256","typ":"JWT"}``; the payload carries ``subject``,
``username``, ``role``, ``issued_at`` and ``expires_at`` (unix seconds). The
signature is HMAC-SHA256 over the first two segments exactly as transmitted.
JSON is serialized compactly so the bytes are reproducible by other clients.
"""

from __future__ import annotations

import binascii
import hmac
import json
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, ValidationError

from bugtracker.core.config import get_settings
from bugtracker.core.errors import InvalidSignature, MalformedToken, TokenExpired

TOKEN_ALGORITHM = "HS256"
TOKEN_HEADER: dict[str, str] = {"alg": TOKEN_ALGORITHM, "typ": "JWT"}
DEFAULT_TOKEN_LIFETIME_SECONDS = 86400


class TokenClaims(BaseModel):
    """Claims embedded in a session token."""

    model_config = {"extra": "ignore", "frozen": True}

    subject: int
    username: str
    role: str
    issued_at: int
    expires_at: int


def _compact_json(data: dict[str, Any]) -> bytes:
    return json.dumps(data, separators=(",", ":")).encode("utf-8")


@dataclass(frozen=True)
class SessionToken:
    """A token split into its three base64url segments (ASCII bytes)."""

    header: bytes
    payload: bytes
    signature: bytes

    @property
    def signing_input(self) -> bytes:
        return self.header + b"." + self.payload

    def encode(self) -> str:
        return (self.signing_input + b"." + self.signature).decode("ascii")

    @classmethod
    def decode(cls, token: str) -> SessionToken:
        """Split a transport string into segments. Raises MalformedToken unless there are exactly three."""
        if not isinstance(token, str) or not token:
            raise MalformedToken("Token must be a non-empty string")
        try:
            raw = token.encode("ascii")
        except UnicodeEncodeError as e:
            raise MalformedToken("Token contains non-ASCII characters") from e
        parts = raw.split(b".")
        if len(parts) != 3 or not all(parts):
            raise MalformedToken("Token must have exactly three segments")
        return cls(header=parts[0], payload=parts[1], signature=parts[2])


class TokenCodec:
    """Issues and verifies session tokens with a shared secret."""

    def __init__(
        self,
        secret: str | bytes,
        lifetime_seconds: int = DEFAULT_TOKEN_LIFETIME_SECONDS,
    ) -> None:
        self._algorithm = HMACAlgorithm(HMACAlgorithm.SHA256)
        self._key = self._algorithm.prepare_key(secret)
        self.lifetime_seconds = lifetime_seconds

    def _sign(self, signing_input: bytes) -> bytes:
        return base64url_encode(self._algorithm.sign(signing_input, self._key))

    def issue(
        self,
        subject: int,
        username: str,
        role: str,
        *,
        now: int | None = None,
        lifetime_seconds: int | None = None,
    ) -> str:
        """Return a signed token for the given claims, valid from ``now`` for the configured lifetime."""
        issued_at = int(time.time()) if now is None else int(now)
        lifetime = self.lifetime_seconds if lifetime_seconds is None else lifetime_seconds
        payload = {
            "subject": subject,
            "username": username,
            "role": role,
            "issued_at": issued_at,
            "expires_at": issued_at + lifetime,
        }
        header_seg = base64url_encode(_compact_json(TOKEN_HEADER))
        payload_seg = base64url_encode(_compact_json(payload))
        signature_seg = self._sign(header_seg + b"." + payload_seg)
        return SessionToken(header_seg, payload_seg, signature_seg).encode()

    def verify(self, token: str, *, now: int | None = None) -> TokenClaims:
        """
        Verify signature and expiry; return the embedded claims.

        Raises MalformedToken, InvalidSignature or TokenExpired.
        """
        parsed = SessionToken.decode(token)
        expected = self._sign(parsed.signing_input)
        # Compare encoded forms so non-canonical base64 in the signature is rejected too.
        if not hmac.compare_digest(expected, parsed.signature):
            raise InvalidSignature()

        try:
            header = json.loads(base64url_decode(parsed.header))
            payload = json.loads(base64url_decode(parsed.payload))
        except (binascii.Error, ValueError) as e:
            raise MalformedToken("Token segments are not valid base64url JSON") from e
        if not isinstance(header, dict) or header.get("alg") != TOKEN_ALGORITHM:
            raise MalformedToken("Unsupported token header")
        if not isinstance(payload, dict):
            raise MalformedToken("Token payload must be an object")
        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise MalformedToken("Token payload is missing required claims") from e

        current = int(time.time()) if now is None else int(now)
        if claims.expires_at < current:
            raise TokenExpired()
        return claims


@lru_cache
def get_token_codec() -> TokenCodec:
    """Return the process-wide codec built from settings."""
    settings = get_settings()
    return TokenCodec(
        settings.TOKEN_SECRET.get_secret_value(),
        lifetime_seconds=settings.TOKEN_LIFETIME_SECONDS,
    )
