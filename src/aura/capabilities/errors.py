"""Failure types raised by capability clients."""


class CapabilityError(Exception):
    """Base class for capability failures."""


class ServiceError(CapabilityError):
    """The remote service rejected the request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        msg = f"Service error: {message}"
        if status_code is not None:
            msg += f" (status: {status_code})"
        super().__init__(msg)
        self.status_code = status_code


class MalformedResponseError(CapabilityError):
    """The service answered without a field the capability needs."""

    def __init__(self, message: str):
        super().__init__(f"Malformed response: {message}")


class OperationTimeoutError(CapabilityError):
    """A long-running operation did not finish within its configured timeout."""

    def __init__(self, timeout: float, operation_name: str | None = None):
        msg = f"Operation did not complete within {timeout:g}s"
        if operation_name:
            msg += f" (operation: {operation_name})"
        super().__init__(msg)
        self.timeout = timeout
        self.operation_name = operation_name
