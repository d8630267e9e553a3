"""
Unit tests for license token signing and verification.
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import (
    InvalidSignatureError,
    InvalidTokenFormatError,
    LicenseExpiredError,
)
from licenses.domain.license_token import (
    LicenseSigner,
    SigningConfig,
    canonical_json,
    format_instant,
    parse_instant,
    token_expired,
)


def _envelope(token):
    return json.loads(base64.b64decode(token))


def _encode(envelope):
    return base64.b64encode(json.dumps(envelope).encode("utf-8")).decode("ascii")


_FLIP_SIGNER = LicenseSigner(SigningConfig(secret="unit-test-secret"))
_FLIP_TOKEN = _FLIP_SIGNER.sign_payload(
    {
        "email": "a@example.com",
        "uniqueId": "0f8e2c1d",
        "createdAt": "2024-01-01T00:00:00Z",
        "maxActivations": 3,
    }
)
_FLIP_RAW = base64.b64decode(_FLIP_TOKEN)


class TestSigningConfig:
    """Tests for SigningConfig."""

    def test_empty_secret_rejected(self):
        """Test an empty secret cannot be configured."""
        with pytest.raises(ValueError, match="cannot be empty"):
            SigningConfig(secret="")


class TestLicenseSigner:
    """Tests for LicenseSigner."""

    def test_issue_then_verify_round_trip(self, signer):
        """Test a freshly issued token verifies to its payload."""
        issued = signer.issue({"email": "a@example.com", "productId": "p1"})

        payload = signer.verify(issued.token)

        assert payload == issued.payload
        assert payload["email"] == "a@example.com"
        assert payload["productId"] == "p1"

    def test_issue_adds_unique_id_and_created_at(self, signer):
        """Test issue adds a 64-bit uniqueId and createdAt."""
        issued_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

        issued = signer.issue({"email": "a@example.com"}, issued_at=issued_at)

        assert len(issued.payload["uniqueId"]) == 16
        assert issued.payload["createdAt"] == "2024-01-01T12:00:00Z"

    def test_issue_twice_gives_distinct_tokens(self, signer):
        """Test two tokens for identical attributes differ."""
        first = signer.issue({"email": "a@example.com"})
        second = signer.issue({"email": "a@example.com"})

        assert first.token != second.token

    def test_issue_drops_none_values(self, signer):
        """Test absent attributes are not signed."""
        issued = signer.issue({"email": "a@example.com", "expiresAt": None, "name": None})

        assert "expiresAt" not in issued.payload
        assert "name" not in issued.payload

    def test_issue_does_not_mutate_attributes(self, signer):
        """Test the caller's attribute map is left untouched."""
        attributes = {"email": "a@example.com"}

        signer.issue(attributes)

        assert attributes == {"email": "a@example.com"}

    def test_sign_payload_is_deterministic(self, signer):
        """Test re-signing a stored payload reproduces the token."""
        issued = signer.issue({"email": "a@example.com"})

        assert signer.sign_payload(issued.payload) == issued.token

    def test_signature_is_over_canonical_payload(self, signer):
        """Test the MAC does not depend on envelope key order or spacing."""
        issued = signer.issue({"email": "a@example.com", "metadata": {"b": "2", "a": "1"}})
        envelope = _envelope(issued.token)
        reordered = {
            "sig": envelope["sig"],
            "data": dict(reversed(list(envelope["data"].items()))),
        }
        token = base64.b64encode(json.dumps(reordered, indent=2).encode()).decode()

        assert signer.verify(token) == issued.payload

    def test_tampered_payload_rejected(self, signer):
        """Test changing any payload field invalidates the signature."""
        issued = signer.issue({"email": "a@example.com"})
        envelope = _envelope(issued.token)
        envelope["data"]["email"] = "mallory@example.com"

        with pytest.raises(InvalidSignatureError):
            signer.verify(_encode(envelope))

    def test_tampered_signature_rejected(self, signer):
        """Test a modified signature is rejected."""
        issued = signer.issue({"email": "a@example.com"})
        envelope = _envelope(issued.token)
        envelope["sig"] = "0" * 64

        with pytest.raises(InvalidSignatureError):
            signer.verify(_encode(envelope))

    @pytest.mark.parametrize("position", range(len(_FLIP_RAW)))
    def test_any_flipped_byte_rejected(self, position):
        """Test flipping one byte anywhere in a token never verifies."""
        raw = bytearray(_FLIP_RAW)
        raw[position] ^= 0x01
        token = base64.b64encode(bytes(raw)).decode("ascii")

        with pytest.raises((InvalidSignatureError, InvalidTokenFormatError)):
            _FLIP_SIGNER.decode(token)

    @pytest.mark.parametrize("position", range(len(_FLIP_TOKEN)))
    def test_any_replaced_character_rejected(self, position):
        """Test replacing one base64 character anywhere in a token never verifies."""
        original = _FLIP_TOKEN[position]
        replacement = "B" if original == "A" else "A"
        token = _FLIP_TOKEN[:position] + replacement + _FLIP_TOKEN[position + 1 :]

        with pytest.raises((InvalidSignatureError, InvalidTokenFormatError)):
            _FLIP_SIGNER.decode(token)

    def test_other_secret_rejected(self, signer):
        """Test tokens from another secret are rejected."""
        other = LicenseSigner(SigningConfig(secret="another-secret"))
        issued = other.issue({"email": "a@example.com"})

        with pytest.raises(InvalidSignatureError):
            signer.verify(issued.token)

    @pytest.mark.parametrize(
        "token",
        [
            "",
            "not base64!!",
            base64.b64encode(b"not json").decode(),
            base64.b64encode(b"[1, 2]").decode(),
            base64.b64encode(b'{"data": {"email": "a@example.com"}}').decode(),
            base64.b64encode(b'{"data": "x", "sig": "00"}').decode(),
        ],
    )
    def test_malformed_tokens_rejected(self, signer, token):
        """Test undecodable tokens raise InvalidTokenFormatError."""
        with pytest.raises(InvalidTokenFormatError):
            signer.verify(token)

    def test_expiry_boundary(self, signer):
        """Test now-1s is expired and now+1s is still valid."""
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        past = signer.issue(
            {"email": "a@example.com", "expiresAt": format_instant(now - timedelta(seconds=1))}
        )
        future = signer.issue(
            {"email": "a@example.com", "expiresAt": format_instant(now + timedelta(seconds=1))}
        )

        with pytest.raises(LicenseExpiredError):
            signer.verify(past.token, now=now)
        assert signer.verify(future.token, now=now)["email"] == "a@example.com"

    def test_decode_ignores_expiry(self, signer):
        """Test decode checks only format and signature."""
        issued = signer.issue({"email": "a@example.com", "expiresAt": "2000-01-01T00:00:00Z"})

        assert signer.decode(issued.token)["expiresAt"] == "2000-01-01T00:00:00Z"

    def test_lifetime_token_never_expires(self, signer):
        """Test a token without expiresAt verifies far in the future."""
        issued = signer.issue({"email": "a@example.com"})

        assert signer.verify(issued.token, now=datetime(2999, 1, 1, tzinfo=timezone.utc))


class TestInstantHelpers:
    """Tests for timestamp helpers."""

    def test_format_instant_naive_as_utc(self):
        """Test naive datetimes are formatted as UTC."""
        assert format_instant(datetime(2024, 1, 1)) == "2024-01-01T00:00:00Z"

    def test_parse_instant_z_suffix(self):
        """Test Z suffix parses to UTC."""
        assert parse_instant("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_token_expired_unparsable(self):
        """Test an unparsable expiresAt is a format error."""
        with pytest.raises(InvalidTokenFormatError):
            token_expired({"expiresAt": "soon"})

    def test_canonical_json_sorted_compact(self):
        """Test canonical encoding sorts keys without whitespace."""
        assert canonical_json({"b": 1, "a": "é"}) == '{"a":"é","b":1}'.encode("utf-8")
