"""
License token signing and verification.

A license token is a self-contained, tamper-evident encoding of license
attributes::

    base64( {"data": <payload>, "sig": <hex HMAC-SHA256 of payload>} )

The MAC is computed over the canonical JSON encoding of the payload
(sorted keys, compact separators, UTF-8), so verification does not
depend on how the envelope itself was serialized.
"""

import base64
import binascii
import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from core.domain.exceptions import (
    InvalidSignatureError,
    InvalidTokenFormatError,
    LicenseExpiredError,
)

UNIQUE_ID_BYTES = 8


@dataclass(frozen=True)
class SigningConfig:
    """Process-wide signing configuration."""

    secret: str

    def __post_init__(self):
        """Validate signing configuration."""
        if not self.secret:
            raise ValueError("License signing secret cannot be empty")


@dataclass(frozen=True)
class IssuedToken:
    """A freshly issued token together with the payload it encodes."""

    token: str
    payload: Dict[str, Any]


def canonical_json(payload: Mapping[str, Any]) -> bytes:
    """
    Serialize a payload to its canonical byte form.

    Args:
        payload: JSON-serializable mapping

    Returns:
        UTF-8 bytes with sorted keys and no insignificant whitespace
    """
    return json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def format_instant(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC instant."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO-8601 instant; naive values are taken as UTC.

    Raises:
        ValueError: If the value is not a valid ISO-8601 string
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class LicenseSigner:
    """Issues and verifies signed license tokens under one shared secret."""

    def __init__(self, config: SigningConfig):
        self._key = config.secret.encode("utf-8")

    def _signature(self, payload: Mapping[str, Any]) -> str:
        return hmac.new(self._key, canonical_json(payload), hashlib.sha256).hexdigest()

    def sign_payload(self, payload: Mapping[str, Any]) -> str:
        """
        Encode a complete payload as a signed token.

        Deterministic for a given payload, so a stored payload can be
        re-encoded for re-delivery.

        Raises:
            TypeError: If the payload is not JSON-serializable
        """
        envelope = {"data": dict(payload), "sig": self._signature(payload)}
        return base64.b64encode(canonical_json(envelope)).decode("ascii")

    def issue(
        self, attributes: Mapping[str, Any], issued_at: Optional[datetime] = None
    ) -> IssuedToken:
        """
        Issue a new token for a set of license attributes.

        A random ``uniqueId`` and a ``createdAt`` timestamp are added to
        the attributes before signing. ``None`` values are dropped, so an
        absent ``expiresAt`` means a lifetime license.

        Args:
            attributes: License attributes (email, name, productId,
                expiresAt, metadata, ...)
            issued_at: Issue time (defaults to now, UTC)

        Returns:
            IssuedToken with the encoded token and its payload
        """
        payload = {key: value for key, value in attributes.items() if value is not None}
        payload["uniqueId"] = secrets.token_hex(UNIQUE_ID_BYTES)
        payload["createdAt"] = format_instant(issued_at or datetime.now(timezone.utc))
        return IssuedToken(token=self.sign_payload(payload), payload=payload)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Decode a token and check its signature, without checking expiry.

        Args:
            token: Encoded license token

        Returns:
            The signed payload

        Raises:
            InvalidTokenFormatError: If the token cannot be decoded
            InvalidSignatureError: If the signature does not match
        """
        if not isinstance(token, str) or not token.strip():
            raise InvalidTokenFormatError()
        text = token.strip()
        try:
            raw = base64.b64decode(text, validate=True)
            # Reject non-canonical base64 (e.g. altered padding bits).
            if base64.b64encode(raw).decode("ascii") != text:
                raise InvalidTokenFormatError()
            envelope = json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise InvalidTokenFormatError() from exc

        if not isinstance(envelope, dict):
            raise InvalidTokenFormatError()
        payload = envelope.get("data")
        signature = envelope.get("sig")
        if not isinstance(payload, dict) or not isinstance(signature, str):
            raise InvalidTokenFormatError()

        if not hmac.compare_digest(self._signature(payload), signature):
            raise InvalidSignatureError()
        return payload

    def verify(self, token: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Verify a token: format, signature, then expiry.

        Args:
            token: Encoded license token
            now: Check time (defaults to now, UTC)

        Returns:
            The signed payload

        Raises:
            InvalidTokenFormatError: If the token cannot be decoded
            InvalidSignatureError: If the signature does not match
            LicenseExpiredError: If ``expiresAt`` has passed
        """
        payload = self.decode(token)
        if token_expired(payload, now):
            raise LicenseExpiredError()
        return payload


def token_expired(payload: Mapping[str, Any], now: Optional[datetime] = None) -> bool:
    """
    Check the ``expiresAt`` claim of a decoded payload.

    Raises:
        InvalidTokenFormatError: If ``expiresAt`` is present but unparsable
    """
    expires_at = payload.get("expiresAt")
    if expires_at is None:
        return False
    try:
        expiry = parse_instant(expires_at)
    except ValueError as exc:
        raise InvalidTokenFormatError("Invalid expiresAt in license") from exc
    return (now or datetime.now(timezone.utc)) > expiry
