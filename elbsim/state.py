from __future__ import annotations


class StateStore:
    """Load balancer names, instance ids and the counters behind synthesized ids.

    Not thread-safe on its own; callers hold the dispatcher lock.
    """

    def __init__(self) -> None:
        self._load_balancers: list[str] = []
        self._instances: list[str] = []
        self._request_count = 0
        self._instance_count = 0

    def add_load_balancer(self, name: str) -> None:
        self._load_balancers.append(name)

    def remove_load_balancer(self, name: str) -> None:
        if name in self._load_balancers:
            self._load_balancers.remove(name)

    def load_balancer_exists(self, name: str) -> bool:
        return name in self._load_balancers

    def add_instance(self, instance_id: str | None = None) -> str:
        if not instance_id:
            self._instance_count += 1
            instance_id = f"i-{self._instance_count}"
        self._instances.append(instance_id)
        return instance_id

    def remove_instance(self, instance_id: str) -> None:
        if instance_id in self._instances:
            self._instances.remove(instance_id)

    def instance_exists(self, instance_id: str) -> bool:
        return instance_id in self._instances

    def next_request_id(self) -> str:
        request_id = f"req{self._request_count:X}"
        self._request_count += 1
        return request_id

    @property
    def load_balancers(self) -> list[str]:
        return list(self._load_balancers)

    @property
    def instances(self) -> list[str]:
        return list(self._instances)
