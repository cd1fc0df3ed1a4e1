#!/usr/bin/env python3
from __future__ import annotations

import argparse
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from elbsim.dispatcher import Dispatcher, Outcome
from elbsim.xml_codec import encode_error, encode_result

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _first_values(raw: str) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(raw, keep_blank_values=True).items()}


def _read_form(handler: BaseHTTPRequestHandler) -> dict[str, str]:
    params = _first_values(urlparse(handler.path).query)
    content_length = handler.headers.get("content-length")
    if not content_length:
        return params
    raw = handler.rfile.read(int(content_length))
    content_type = (handler.headers.get("content-type") or FORM_CONTENT_TYPE).split(";", 1)[0].strip().lower()
    if raw and content_type == FORM_CONTENT_TYPE:
        params.update(_first_values(raw.decode("utf-8", errors="replace")))
    return params


def _write_xml(handler: BaseHTTPRequestHandler, status: int, body: bytes) -> None:
    handler.send_response(status)
    handler.send_header("Content-Type", "text/xml; charset=utf-8")
    handler.send_header("Content-Length", str(len(body)))
    handler.send_header("Connection", "close")
    handler.end_headers()
    handler.wfile.write(body)


class _MockElbHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, fmt: str, *args: Any) -> None:  # noqa: D401
        if getattr(self.server, "quiet", False):
            return
        super().log_message(f"[elb] {fmt}", *args)

    def do_GET(self) -> None:  # noqa: N802
        path = urlparse(self.path).path
        if path == "/health":
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Length", "0")
            self.send_header("Connection", "close")
            self.end_headers()
            return
        self._handle_action()

    def do_POST(self) -> None:  # noqa: N802
        self._handle_action()

    def _handle_action(self) -> None:
        params = _read_form(self)
        dispatcher: Dispatcher = getattr(self.server, "dispatcher")
        outcome = dispatcher.dispatch(params.get("Action", ""), params)
        self._write_outcome(outcome)

    def _write_outcome(self, outcome: Outcome) -> None:
        if outcome.error is not None:
            _write_xml(self, outcome.status, encode_error(outcome.error))
            return
        _write_xml(self, outcome.status, encode_result(outcome.action, outcome.result))


def make_server(
    *,
    host: str,
    port: int,
    dispatcher: Dispatcher | None = None,
    quiet: bool = False,
) -> ThreadingHTTPServer:
    server = ThreadingHTTPServer((host, port), _MockElbHandler)
    server.dispatcher = dispatcher if dispatcher is not None else Dispatcher()  # type: ignore[attr-defined]
    server.quiet = quiet  # type: ignore[attr-defined]
    return server


def start_server_in_thread(server: ThreadingHTTPServer) -> threading.Thread:
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return thread


class MockElbServer:
    """A simulated ELB endpoint plus the hooks tests use to seed its state.

    Load balancers and instances created through the helper methods are
    visible to the query API immediately; every helper takes the same lock
    the dispatcher holds while an action runs.
    """

    def __init__(self, *, host: str = "127.0.0.1", port: int = 0, quiet: bool = True):
        self._host = host
        self._port = int(port)
        self._quiet = quiet
        self.dispatcher = Dispatcher()
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        if self._server is None:
            raise RuntimeError("server is not running")
        host, port = self._server.server_address[:2]
        return f"http://{host}:{int(port)}"

    def start(self) -> MockElbServer:
        if self._server is not None:
            raise RuntimeError("server already running")
        self._server = make_server(host=self._host, port=self._port, dispatcher=self.dispatcher, quiet=self._quiet)
        self._thread = start_server_in_thread(self._server)
        return self

    def quit(self) -> None:
        server = self._server
        self._server = None
        if server is None:
            return
        server.shutdown()
        server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=2)
            self._thread = None

    def __enter__(self) -> MockElbServer:
        return self.start()

    def __exit__(self, *exc_info: Any) -> None:
        self.quit()

    def new_load_balancer(self, name: str) -> None:
        with self.dispatcher.lock:
            self.dispatcher.store.add_load_balancer(name)

    def remove_load_balancer(self, name: str) -> None:
        with self.dispatcher.lock:
            self.dispatcher.store.remove_load_balancer(name)

    def new_instance(self, instance_id: str | None = None) -> str:
        with self.dispatcher.lock:
            return self.dispatcher.store.add_instance(instance_id)

    def remove_instance(self, instance_id: str) -> None:
        with self.dispatcher.lock:
            self.dispatcher.store.remove_instance(instance_id)

    def load_balancers(self) -> list[str]:
        with self.dispatcher.lock:
            return self.dispatcher.store.load_balancers

    def instances(self) -> list[str]:
        with self.dispatcher.lock:
            return self.dispatcher.store.instances


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, required=True)
    parser.add_argument(
        "--load-balancers",
        type=str,
        default="",
        help="Comma-separated load balancer names to create on startup.",
    )
    parser.add_argument("--instances", type=int, default=0, help="Number of instances to create on startup.")
    parser.add_argument("--quiet", action="store_true")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    dispatcher = Dispatcher()
    for name in [n.strip() for n in str(args.load_balancers).split(",") if n.strip()]:
        dispatcher.store.add_load_balancer(name)
    instance_ids = [dispatcher.store.add_instance() for _ in range(max(int(args.instances), 0))]

    server = make_server(host=args.host, port=args.port, dispatcher=dispatcher, quiet=args.quiet)
    host, port = server.server_address[:2]
    print(
        f"READY mock_elb_server url=http://{host}:{int(port)} "
        f"load_balancers={dispatcher.store.load_balancers} instances={instance_ids}",
        flush=True,
    )
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
        server.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
