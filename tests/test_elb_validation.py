from __future__ import annotations

import unittest

from elbsim.errors import InvalidInstance, LoadBalancerNotFound, ValidationError
from elbsim.state import StateStore
from elbsim.validation import (
    iter_members,
    require_composition,
    require_fields,
    require_instance_exists,
    require_load_balancer_exists,
)


class RequireFieldsTest(unittest.TestCase):
    def test_first_missing_field_is_reported(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            require_fields({"B": "x"}, ["A", "B", "C"])
        self.assertEqual(ctx.exception.message, "A is required.")
        self.assertEqual(ctx.exception.status_code, 400)

        with self.assertRaises(ValidationError) as ctx:
            require_fields({"A": "x"}, ["A", "B", "C"])
        self.assertEqual(ctx.exception.message, "B is required.")

    def test_empty_value_counts_as_missing(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            require_fields({"LoadBalancerName": ""}, ["LoadBalancerName"])
        self.assertEqual(ctx.exception.message, "LoadBalancerName is required.")

    def test_all_present(self) -> None:
        require_fields({"A": "1", "B": "2"}, ["A", "B"])


class RequireCompositionTest(unittest.TestCase):
    pair = {"AvailabilityZones.member.1": "Subnets.member.1"}

    def test_exactly_one_present(self) -> None:
        require_composition({"AvailabilityZones.member.1": "us-east-1a"}, self.pair)
        require_composition({"Subnets.member.1": "subnet-1"}, self.pair)

    def test_both_present(self) -> None:
        params = {"AvailabilityZones.member.1": "us-east-1a", "Subnets.member.1": "subnet-1"}
        with self.assertRaises(ValidationError) as ctx:
            require_composition(params, self.pair)
        self.assertEqual(
            ctx.exception.message,
            "Only one of AvailabilityZones.member.1 or Subnets.member.1 may be specified",
        )

    def test_neither_present(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            require_composition({"AvailabilityZones.member.1": ""}, self.pair)
        self.assertEqual(
            ctx.exception.message,
            "Either AvailabilityZones.member.1 or Subnets.member.1 must be specified",
        )

    def test_each_pair_checked_independently(self) -> None:
        pairs = {"A": "B", "C": "D"}
        require_composition({"A": "1", "D": "1"}, pairs)
        with self.assertRaises(ValidationError) as ctx:
            require_composition({"A": "1"}, pairs)
        self.assertIn("Either C or D", ctx.exception.message)
        with self.assertRaises(ValidationError) as ctx:
            require_composition({"B": "1", "C": "1", "D": "1"}, pairs)
        self.assertIn("Only one of C or D", ctx.exception.message)


class ExistenceChecksTest(unittest.TestCase):
    def setUp(self) -> None:
        self.store = StateStore()
        self.store.add_load_balancer("lb1")
        self.store.add_instance()

    def test_load_balancer_exists(self) -> None:
        require_load_balancer_exists(self.store, "lb1")
        with self.assertRaises(LoadBalancerNotFound) as ctx:
            require_load_balancer_exists(self.store, "lb2")
        self.assertEqual(ctx.exception.code, "LoadBalancerNotFound")
        self.assertEqual(ctx.exception.message, "There is no ACTIVE Load Balancer named 'lb2'")

    def test_instance_exists(self) -> None:
        require_instance_exists(self.store, "i-1")
        with self.assertRaises(InvalidInstance) as ctx:
            require_instance_exists(self.store, "i-999")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, 'InvalidInstance found in [i-999]. Invalid id: "i-999"')


class IterMembersTest(unittest.TestCase):
    def test_stops_at_first_gap(self) -> None:
        params = {
            "Instances.member.1.InstanceId": "i-1",
            "Instances.member.2.InstanceId": "i-2",
            "Instances.member.4.InstanceId": "i-4",
        }
        self.assertEqual(list(iter_members(params, "Instances.member.{}.InstanceId")), ["i-1", "i-2"])

    def test_empty(self) -> None:
        self.assertEqual(list(iter_members({}, "Instances.member.{}.InstanceId")), [])


if __name__ == "__main__":
    unittest.main()
