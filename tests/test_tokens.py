"""Unit tests for bugtracker.core.tokens: issue, verify, tamper and expiry."""

import json
import unittest

from jwt.utils import base64url_decode, base64url_encode

from bugtracker.core.errors import InvalidSignature, MalformedToken, TokenExpired
from bugtracker.core.tokens import SessionToken, TokenClaims, TokenCodec

from factories import TEST_SECRET

NOW = 1_700_000_000


class TestRoundTrip(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = TokenCodec(TEST_SECRET, lifetime_seconds=3600)

    def test_claims_survive_round_trip(self) -> None:
        token = self.codec.issue(7, "alice", "admin", now=NOW)
        claims = self.codec.verify(token, now=NOW + 10)
        self.assertEqual(
            claims,
            TokenClaims(subject=7, username="alice", role="admin", issued_at=NOW, expires_at=NOW + 3600),
        )

    def test_wire_format(self) -> None:
        token = self.codec.issue(7, "alice", "user", now=NOW)
        parts = token.split(".")
        self.assertEqual(len(parts), 3)
        self.assertNotIn("=", token)
        header = json.loads(base64url_decode(parts[0]))
        self.assertEqual(header, {"alg": "HS256", "typ": "JWT"})
        payload = json.loads(base64url_decode(parts[1]))
        self.assertEqual(payload["subject"], 7)
        self.assertEqual(payload["expires_at"] - payload["issued_at"], 3600)

    def test_issue_is_deterministic_for_same_inputs(self) -> None:
        a = self.codec.issue(1, "bob", "user", now=NOW)
        b = self.codec.issue(1, "bob", "user", now=NOW)
        self.assertEqual(a, b)

    def test_lifetime_override(self) -> None:
        token = self.codec.issue(1, "bob", "user", now=NOW, lifetime_seconds=60)
        self.assertEqual(self.codec.verify(token, now=NOW).expires_at, NOW + 60)


class TestTampering(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = TokenCodec(TEST_SECRET)
        self.token = self.codec.issue(7, "alice", "user", now=NOW)

    def test_other_secret_rejected(self) -> None:
        other = TokenCodec("a-different-secret-also-32-bytes-long!!")
        with self.assertRaises(InvalidSignature):
            other.verify(self.token, now=NOW)

    def test_payload_swap_rejected(self) -> None:
        header, _payload, signature = self.token.split(".")
        forged_payload = base64url_encode(
            json.dumps(
                {"subject": 7, "username": "alice", "role": "admin", "issued_at": NOW, "expires_at": NOW + 86400},
                separators=(",", ":"),
            ).encode()
        ).decode()
        with self.assertRaises(InvalidSignature):
            self.codec.verify(f"{header}.{forged_payload}.{signature}", now=NOW)

    def test_every_single_character_change_is_detected(self) -> None:
        for i, ch in enumerate(self.token):
            if ch == ".":
                continue
            replacement = "A" if ch != "A" else "B"
            tampered = self.token[:i] + replacement + self.token[i + 1:]
            with self.subTest(position=i):
                with self.assertRaises((InvalidSignature, MalformedToken)):
                    self.codec.verify(tampered, now=NOW)


class TestMalformed(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = TokenCodec(TEST_SECRET)

    def test_wrong_segment_counts(self) -> None:
        for token in ("", "abc", "a.b", "a.b.c.d", "a..c", ".b.c"):
            with self.subTest(token=token):
                with self.assertRaises(MalformedToken):
                    self.codec.verify(token, now=NOW)

    def test_non_ascii(self) -> None:
        with self.assertRaises(MalformedToken):
            SessionToken.decode("é.b.c")

    def test_signed_garbage_payload_is_malformed(self) -> None:
        header = base64url_encode(b'{"alg":"HS256","typ":"JWT"}')
        payload = base64url_encode(b'{"subject":"not-an-int"}')
        signing_input = header + b"." + payload
        signature = self.codec._sign(signing_input)
        token = (signing_input + b"." + signature).decode()
        with self.assertRaises(MalformedToken):
            self.codec.verify(token, now=NOW)

    def test_signed_wrong_algorithm_header_is_malformed(self) -> None:
        header = base64url_encode(b'{"alg":"none","typ":"JWT"}')
        payload = base64url_encode(
            b'{"subject":1,"username":"a","role":"user","issued_at":1,"expires_at":99999999999}'
        )
        signing_input = header + b"." + payload
        token = (signing_input + b"." + self.codec._sign(signing_input)).decode()
        with self.assertRaises(MalformedToken):
            self.codec.verify(token, now=NOW)


class TestExpiry(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = TokenCodec(TEST_SECRET, lifetime_seconds=100)
        self.token = self.codec.issue(1, "bob", "user", now=NOW)

    def test_valid_at_exact_expiry(self) -> None:
        self.assertEqual(self.codec.verify(self.token, now=NOW + 100).subject, 1)

    def test_expired_after_lifetime(self) -> None:
        with self.assertRaises(TokenExpired):
            self.codec.verify(self.token, now=NOW + 101)

    def test_signature_checked_before_expiry(self) -> None:
        other = TokenCodec("a-different-secret-also-32-bytes-long!!")
        with self.assertRaises(InvalidSignature):
            other.verify(self.token, now=NOW + 10_000)
