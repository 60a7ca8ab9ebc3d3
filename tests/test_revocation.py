"""Unit tests for bugtracker.core.revocation.RevocationRegistry."""

import threading
import unittest

from bugtracker.core.revocation import RevocationRegistry


class TestRevocationRegistry(unittest.TestCase):
    def test_revoke_and_lookup(self) -> None:
        registry = RevocationRegistry()
        self.assertFalse(registry.is_revoked("a.b.c"))
        registry.revoke("a.b.c")
        self.assertTrue(registry.is_revoked("a.b.c"))
        self.assertFalse(registry.is_revoked("a.b.d"))

    def test_revoke_is_idempotent(self) -> None:
        registry = RevocationRegistry()
        registry.revoke("t")
        registry.revoke("t")
        self.assertEqual(len(registry), 1)

    def test_clear(self) -> None:
        registry = RevocationRegistry()
        registry.revoke("t")
        registry.clear()
        self.assertFalse(registry.is_revoked("t"))
        self.assertEqual(len(registry), 0)

    def test_concurrent_revocations_are_all_recorded(self) -> None:
        registry = RevocationRegistry()

        def worker(n: int) -> None:
            for i in range(200):
                registry.revoke(f"token-{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(registry), 8 * 200)
        self.assertTrue(registry.is_revoked("token-7-199"))
