from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Mapping

from elbsim.actions import ACTIONS, ActionHandler
from elbsim.errors import PROTOCOL_ERRORS, ElbError, InvalidParameterValue
from elbsim.state import StateStore


@dataclass(frozen=True)
class Outcome:
    action: str
    request_id: str | None = None
    result: Any = None
    error: ElbError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> int:
        return 200 if self.error is None else self.error.status_code


class Dispatcher:
    """Runs one action at a time against a single ``StateStore``.

    Only the protocol error classes become error outcomes. Anything else raised by a
    handler is a bug and propagates to the caller.
    """

    def __init__(self, store: StateStore | None = None, *, actions: Mapping[str, ActionHandler] | None = None):
        self.store = store if store is not None else StateStore()
        self.lock = threading.Lock()
        self._actions = dict(ACTIONS if actions is None else actions)

    def dispatch(self, action: str, params: Mapping[str, str]) -> Outcome:
        handler = self._actions.get(action)
        if handler is None:
            return Outcome(action=action, error=InvalidParameterValue("Unrecognized Action"))

        with self.lock:
            request_id = self.store.next_request_id()
            try:
                result = handler(self.store, params, request_id)
            except PROTOCOL_ERRORS as exc:
                exc.request_id = request_id
                return Outcome(action=action, request_id=request_id, error=exc)
        return Outcome(action=action, request_id=request_id, result=result)
