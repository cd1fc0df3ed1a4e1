from __future__ import annotations

from typing import Iterator, Mapping

from elbsim.errors import InvalidInstance, LoadBalancerNotFound, ValidationError
from elbsim.state import StateStore


def form_value(params: Mapping[str, str], name: str) -> str:
    return params.get(name) or ""


def require_fields(params: Mapping[str, str], required: list[str]) -> None:
    for field in required:
        if not form_value(params, field):
            raise ValidationError(f"{field} is required.")


def require_composition(params: Mapping[str, str], composition: Mapping[str, str]) -> None:
    """Check pairs of fields that are mutually exclusive.

    Each key/value pair names two fields, e.g. ``AvailabilityZones.member.1``
    and ``Subnets.member.1``: exactly one of them has to be present.
    """
    for first, second in composition.items():
        has_first = bool(form_value(params, first))
        has_second = bool(form_value(params, second))
        if has_first and has_second:
            raise ValidationError(f"Only one of {first} or {second} may be specified")
        if not has_first and not has_second:
            raise ValidationError(f"Either {first} or {second} must be specified")


def require_load_balancer_exists(store: StateStore, name: str) -> None:
    if not store.load_balancer_exists(name):
        raise LoadBalancerNotFound(f"There is no ACTIVE Load Balancer named '{name}'")


def require_instance_exists(store: StateStore, instance_id: str) -> None:
    if not store.instance_exists(instance_id):
        raise InvalidInstance(f'InvalidInstance found in [{instance_id}]. Invalid id: "{instance_id}"')


def iter_members(params: Mapping[str, str], template: str) -> Iterator[str]:
    """Yield ``template.format(i)`` values for i = 1, 2, ... until one is empty."""
    index = 1
    value = form_value(params, template.format(index))
    while value:
        yield value
        index += 1
        value = form_value(params, template.format(index))
