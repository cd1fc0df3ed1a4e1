from __future__ import annotations

from typing import Any
from xml.etree import ElementTree as ET

from elbsim.actions import CreateLoadBalancerResult, RegisterInstancesResult, SimpleResult
from elbsim.errors import ElbError, error_from_code

NAMESPACE = "http://elasticloadbalancing.amazonaws.com/doc/2012-06-01/"


def _to_bytes(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def encode_result(action: str, result: Any) -> bytes:
    root = ET.Element(f"{action}Response")
    root.set("xmlns", NAMESPACE)
    if isinstance(result, CreateLoadBalancerResult):
        node = ET.SubElement(root, "CreateLoadBalancerResult")
        ET.SubElement(node, "DNSName").text = result.dns_name
    elif isinstance(result, RegisterInstancesResult):
        node = ET.SubElement(root, f"{action}Result")
        instances = ET.SubElement(node, "Instances")
        for instance_id in result.instance_ids:
            member = ET.SubElement(instances, "member")
            ET.SubElement(member, "InstanceId").text = instance_id
    elif isinstance(result, SimpleResult):
        metadata = ET.SubElement(root, "ResponseMetadata")
        ET.SubElement(metadata, "RequestId").text = result.request_id
    else:
        raise TypeError(f"cannot encode {type(result).__name__} for {action}")
    return _to_bytes(root)


def encode_error(error: ElbError) -> bytes:
    root = ET.Element("ErrorResponse")
    root.set("xmlns", NAMESPACE)
    node = ET.SubElement(root, "Error")
    ET.SubElement(node, "Type").text = "Sender"
    ET.SubElement(node, "Code").text = error.code
    ET.SubElement(node, "Message").text = error.message
    if error.request_id:
        ET.SubElement(root, "RequestId").text = error.request_id
    return _to_bytes(root)


def _parse(body: bytes) -> ET.Element:
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid XML: {exc}") from exc
    for element in root.iter():
        element.tag = _local(element.tag)
    return root


def _error_from(root: ET.Element) -> ElbError:
    return error_from_code(
        root.findtext("Error/Code") or "",
        root.findtext("Error/Message") or "",
        request_id=root.findtext("RequestId"),
    )


def decode_error(body: bytes) -> ElbError | None:
    root = _parse(body)
    if root.tag != "ErrorResponse":
        return None
    return _error_from(root)


def decode_result(body: bytes) -> Any:
    """Decode a success document; an ``ErrorResponse`` is raised as its ``ElbError``."""
    root = _parse(body)
    if root.tag == "ErrorResponse":
        raise _error_from(root)
    if not root.tag.endswith("Response"):
        raise ValueError(f"unexpected root element: {root.tag}")
    action = root.tag[: -len("Response")]

    dns_name = root.findtext("CreateLoadBalancerResult/DNSName")
    if dns_name is not None:
        return CreateLoadBalancerResult(dns_name=dns_name)
    result = root.find(f"{action}Result")
    if result is not None:
        return RegisterInstancesResult(
            instance_ids=[member.findtext("InstanceId") or "" for member in result.iterfind("Instances/member")]
        )
    request_id = root.findtext("ResponseMetadata/RequestId")
    if request_id is not None:
        return SimpleResult(request_id=request_id)
    raise ValueError(f"unrecognized {root.tag} document")
