"""Unit tests for bugtracker.core.security: salted password digests."""

import unittest

from bugtracker.core.security import DIGEST_BYTES, SALT_BYTES, hash_password, verify_password

ROUNDS = 2


class TestHashPassword(unittest.TestCase):
    def test_format_is_hex_salt_and_digest(self) -> None:
        stored = hash_password("s3cret-pass", rounds=ROUNDS)
        salt_hex, sep, digest_hex = stored.partition(":")
        self.assertEqual(sep, ":")
        self.assertEqual(len(bytes.fromhex(salt_hex)), SALT_BYTES)
        self.assertEqual(len(bytes.fromhex(digest_hex)), DIGEST_BYTES)

    def test_same_password_gets_fresh_salt(self) -> None:
        a = hash_password("s3cret-pass", rounds=ROUNDS)
        b = hash_password("s3cret-pass", rounds=ROUNDS)
        self.assertNotEqual(a, b)
        self.assertTrue(verify_password("s3cret-pass", a, rounds=ROUNDS))
        self.assertTrue(verify_password("s3cret-pass", b, rounds=ROUNDS))

    def test_empty_password_rejected(self) -> None:
        with self.assertRaises(ValueError):
            hash_password("", rounds=ROUNDS)

    def test_default_rounds_round_trip(self) -> None:
        stored = hash_password("päss wörd ✓")
        self.assertTrue(verify_password("päss wörd ✓", stored))


class TestVerifyPassword(unittest.TestCase):
    def setUp(self) -> None:
        self.stored = hash_password("s3cret-pass", rounds=ROUNDS)

    def test_wrong_password(self) -> None:
        self.assertFalse(verify_password("s3cret-pasS", self.stored, rounds=ROUNDS))

    def test_rounds_are_part_of_the_digest(self) -> None:
        self.assertFalse(verify_password("s3cret-pass", self.stored, rounds=ROUNDS + 1))

    def test_malformed_stored_values_return_false(self) -> None:
        for stored in ("", "no-separator", ":abcd", "abcd:", "zz:zz", "00ff:not-hex"):
            with self.subTest(stored=stored):
                self.assertFalse(verify_password("s3cret-pass", stored, rounds=ROUNDS))

    def test_empty_plain_password_returns_false(self) -> None:
        self.assertFalse(verify_password("", self.stored, rounds=ROUNDS))

    def test_truncated_digest_fails(self) -> None:
        self.assertFalse(verify_password("s3cret-pass", self.stored[:-2], rounds=ROUNDS))
