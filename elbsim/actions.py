from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from elbsim.state import StateStore
from elbsim.validation import (
    form_value,
    iter_members,
    require_composition,
    require_fields,
    require_instance_exists,
    require_load_balancer_exists,
)

INSTANCE_MEMBER = "Instances.member.{}.InstanceId"
DNS_NAME_SUFFIX = "-some-aws-stuff.us-east-1.elb.amazonaws.com"


@dataclass(frozen=True)
class CreateLoadBalancerResult:
    dns_name: str


@dataclass(frozen=True)
class RegisterInstancesResult:
    instance_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SimpleResult:
    request_id: str


ActionHandler = Callable[[StateStore, Mapping[str, str], str], Any]


def create_load_balancer(store: StateStore, params: Mapping[str, str], request_id: str) -> CreateLoadBalancerResult:
    require_composition(params, {"AvailabilityZones.member.1": "Subnets.member.1"})
    require_fields(
        params,
        [
            "Listeners.member.1.InstancePort",
            "Listeners.member.1.InstanceProtocol",
            "Listeners.member.1.Protocol",
            "Listeners.member.1.LoadBalancerPort",
            "LoadBalancerName",
        ],
    )
    name = form_value(params, "LoadBalancerName")
    store.add_load_balancer(name)
    return CreateLoadBalancerResult(dns_name=f"{name}{DNS_NAME_SUFFIX}")


def delete_load_balancer(store: StateStore, params: Mapping[str, str], request_id: str) -> SimpleResult:
    require_fields(params, ["LoadBalancerName"])
    store.remove_load_balancer(form_value(params, "LoadBalancerName"))
    return SimpleResult(request_id=request_id)


def _validated_instance_ids(store: StateStore, params: Mapping[str, str]) -> list[str]:
    require_fields(params, ["LoadBalancerName", INSTANCE_MEMBER.format(1)])
    require_load_balancer_exists(store, form_value(params, "LoadBalancerName"))
    instance_ids: list[str] = []
    for instance_id in iter_members(params, INSTANCE_MEMBER):
        require_instance_exists(store, instance_id)
        instance_ids.append(instance_id)
    return instance_ids


def register_instances_with_load_balancer(
    store: StateStore, params: Mapping[str, str], request_id: str
) -> RegisterInstancesResult:
    return RegisterInstancesResult(instance_ids=_validated_instance_ids(store, params))


def deregister_instances_from_load_balancer(
    store: StateStore, params: Mapping[str, str], request_id: str
) -> SimpleResult:
    _validated_instance_ids(store, params)
    return SimpleResult(request_id=request_id)


ACTIONS: dict[str, ActionHandler] = {
    "CreateLoadBalancer": create_load_balancer,
    "DeleteLoadBalancer": delete_load_balancer,
    "RegisterInstancesWithLoadBalancer": register_instances_with_load_balancer,
    "DeregisterInstancesFromLoadBalancer": deregister_instances_from_load_balancer,
}
