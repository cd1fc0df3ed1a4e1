from __future__ import annotations

import unittest

from elbsim.state import StateStore


class StateStoreTest(unittest.TestCase):
    def setUp(self) -> None:
        self.store = StateStore()

    def test_synthesized_instance_ids_are_never_reused(self) -> None:
        first = self.store.add_instance()
        second = self.store.add_instance()
        self.store.remove_instance(second)
        third = self.store.add_instance()

        self.assertEqual([first, second, third], ["i-1", "i-2", "i-3"])
        self.assertEqual(self.store.instances, ["i-1", "i-3"])

    def test_explicit_instance_id_does_not_advance_counter(self) -> None:
        self.assertEqual(self.store.add_instance("i-custom"), "i-custom")
        self.assertEqual(self.store.add_instance(), "i-1")
        self.assertTrue(self.store.instance_exists("i-custom"))

    def test_remove_missing_entries_is_a_no_op(self) -> None:
        self.store.add_load_balancer("lb1")
        self.store.remove_load_balancer("missing")
        self.store.remove_instance("i-404")
        self.assertEqual(self.store.load_balancers, ["lb1"])
        self.assertEqual(self.store.instances, [])

    def test_duplicate_load_balancer_names_are_kept(self) -> None:
        self.store.add_load_balancer("lb1")
        self.store.add_load_balancer("lb1")
        self.store.remove_load_balancer("lb1")
        self.assertTrue(self.store.load_balancer_exists("lb1"))
        self.store.remove_load_balancer("lb1")
        self.assertFalse(self.store.load_balancer_exists("lb1"))

    def test_load_balancer_names_are_case_sensitive(self) -> None:
        self.store.add_load_balancer("Web")
        self.assertTrue(self.store.load_balancer_exists("Web"))
        self.assertFalse(self.store.load_balancer_exists("web"))

    def test_request_ids_are_upper_hex(self) -> None:
        ids = [self.store.next_request_id() for _ in range(12)]
        self.assertEqual(ids[0], "req0")
        self.assertEqual(ids[9], "req9")
        self.assertEqual(ids[10], "reqA")
        self.assertEqual(ids[11], "reqB")

    def test_snapshots_are_copies(self) -> None:
        self.store.add_load_balancer("lb1")
        snapshot = self.store.load_balancers
        snapshot.append("lb2")
        self.assertEqual(self.store.load_balancers, ["lb1"])


if __name__ == "__main__":
    unittest.main()
