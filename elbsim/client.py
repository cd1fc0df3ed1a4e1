from __future__ import annotations

from dataclasses import dataclass
from http.client import HTTPConnection
from typing import Any, Iterable, Mapping
from urllib.parse import urlencode, urlparse

from elbsim.actions import CreateLoadBalancerResult, RegisterInstancesResult, SimpleResult
from elbsim.xml_codec import decode_error, decode_result


@dataclass(frozen=True)
class Listener:
    instance_port: int
    load_balancer_port: int
    protocol: str = "HTTP"
    instance_protocol: str = "HTTP"


def _members(prefix: str, values: Iterable[str], suffix: str = "") -> dict[str, str]:
    params: dict[str, str] = {}
    for index, value in enumerate(values, start=1):
        params[f"{prefix}.member.{index}{suffix}"] = str(value)
    return params


def _listener_params(listeners: Iterable[Listener]) -> dict[str, str]:
    params: dict[str, str] = {}
    for index, listener in enumerate(listeners, start=1):
        prefix = f"Listeners.member.{index}"
        params[f"{prefix}.InstancePort"] = str(listener.instance_port)
        params[f"{prefix}.InstanceProtocol"] = listener.instance_protocol
        params[f"{prefix}.LoadBalancerPort"] = str(listener.load_balancer_port)
        params[f"{prefix}.Protocol"] = listener.protocol
    return params


class ElbClient:
    """Form-encoded query API client for the simulator.

    Protocol errors are raised as the matching ``ElbError`` subclass.
    """

    def __init__(self, url: str, *, timeout_sec: float = 5.0):
        parsed = urlparse(url)
        if parsed.scheme not in ("http", ""):
            raise ValueError(f"unsupported scheme: {parsed.scheme}")
        self.host = parsed.hostname or "127.0.0.1"
        self.port = int(parsed.port or 80)
        self.timeout_sec = timeout_sec

    def call(self, action: str, params: Mapping[str, str] | None = None) -> tuple[int, bytes]:
        form = {"Action": action, **(params or {})}
        data = urlencode(form).encode("utf-8")
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Content-Length": str(len(data)),
            "Connection": "close",
        }
        conn = HTTPConnection(self.host, self.port, timeout=self.timeout_sec)
        try:
            conn.request("POST", "/", body=data, headers=headers)
            resp = conn.getresponse()
            return int(resp.status), resp.read()
        finally:
            try:
                conn.close()
            except Exception:
                pass

    def _request(self, action: str, params: Mapping[str, str]) -> Any:
        status, body = self.call(action, params)
        if status != 200:
            try:
                error = decode_error(body) if body else None
            except ValueError:
                error = None
            if error is None:
                raise RuntimeError(f"{action} -> {status}: {body[:200]!r}")
            raise error
        return decode_result(body)

    def create_load_balancer(
        self,
        name: str,
        *,
        listeners: Iterable[Listener],
        availability_zones: Iterable[str] = (),
        subnets: Iterable[str] = (),
    ) -> str:
        params = {"LoadBalancerName": name}
        params.update(_listener_params(listeners))
        params.update(_members("AvailabilityZones", availability_zones))
        params.update(_members("Subnets", subnets))
        result: CreateLoadBalancerResult = self._request("CreateLoadBalancer", params)
        return result.dns_name

    def delete_load_balancer(self, name: str) -> str:
        result: SimpleResult = self._request("DeleteLoadBalancer", {"LoadBalancerName": name})
        return result.request_id

    def register_instances(self, name: str, instance_ids: Iterable[str]) -> list[str]:
        params = {"LoadBalancerName": name}
        params.update(_members("Instances", instance_ids, ".InstanceId"))
        result: RegisterInstancesResult = self._request("RegisterInstancesWithLoadBalancer", params)
        return list(result.instance_ids)

    def deregister_instances(self, name: str, instance_ids: Iterable[str]) -> str:
        params = {"LoadBalancerName": name}
        params.update(_members("Instances", instance_ids, ".InstanceId"))
        result: SimpleResult = self._request("DeregisterInstancesFromLoadBalancer", params)
        return result.request_id
