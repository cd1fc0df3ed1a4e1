from __future__ import annotations

from http import HTTPStatus


class ElbError(Exception):
    """A protocol error rendered to the caller as an ``ErrorResponse`` document."""

    code = "InternalFailure"
    status_code = int(HTTPStatus.BAD_REQUEST)

    def __init__(self, message: str, *, request_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.request_id = request_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidParameterValue(ElbError):
    code = "InvalidParameterValue"


class ValidationError(ElbError):
    code = "ValidationError"


class LoadBalancerNotFound(ElbError):
    code = "LoadBalancerNotFound"


class InvalidInstance(ElbError):
    code = "InvalidInstance"


class UnknownElbError(ElbError):
    """An error document whose code is outside the simulated taxonomy."""

    def __init__(self, code: str, message: str, *, request_id: str | None = None):
        super().__init__(message, request_id=request_id)
        self.code = code


PROTOCOL_ERRORS: tuple[type[ElbError], ...] = (
    InvalidParameterValue,
    ValidationError,
    LoadBalancerNotFound,
    InvalidInstance,
)

ERRORS_BY_CODE: dict[str, type[ElbError]] = {cls.code: cls for cls in PROTOCOL_ERRORS}


def error_from_code(code: str, message: str, *, request_id: str | None = None) -> ElbError:
    cls = ERRORS_BY_CODE.get(code)
    if cls is None:
        return UnknownElbError(code, message, request_id=request_id)
    return cls(message, request_id=request_id)
