"""
Log Store Errors Module - Failure taxonomy and classification

Handles:
- Exception types raised by the log store client, fetcher and coordinator
- Mapping raw failures (requests, AWS-shaped errors) onto a small taxonomy
- Human-readable messages for the error banner
- HTTP status selection for the server surface
"""
from enum import Enum
from typing import Optional

import requests


class ErrorKind(str, Enum):
    """Classified failure categories"""
    AUTH_FAILED = "AuthFailed"
    PERMISSION_DENIED = "PermissionDenied"
    NOT_FOUND = "NotFound"
    VALIDATION_FAILED = "ValidationFailed"
    TRANSIENT_FAILURE = "TransientFailure"


class LogStoreError(Exception):
    """Base class for every classified log store failure"""

    kind: ErrorKind = ErrorKind.TRANSIENT_FAILURE

    def __init__(self, message: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class AuthFailed(LogStoreError):
    kind = ErrorKind.AUTH_FAILED


class PermissionDenied(LogStoreError):
    kind = ErrorKind.PERMISSION_DENIED


class NotFound(LogStoreError):
    kind = ErrorKind.NOT_FOUND


class ValidationFailed(LogStoreError):
    kind = ErrorKind.VALIDATION_FAILED


class TransientFailure(LogStoreError):
    kind = ErrorKind.TRANSIENT_FAILURE


class FetchFailed(LogStoreError):
    """Raised by the paginated fetcher when any page fails"""

    def __init__(self, cause: BaseException):
        super().__init__(f"Paginated fetch failed: {cause}", cause=cause)

    @property
    def kind(self) -> ErrorKind:
        return classify(self.cause)


# Error classes keyed by kind, used to rebuild errors received over the wire
ERROR_TYPES = {
    ErrorKind.AUTH_FAILED: AuthFailed,
    ErrorKind.PERMISSION_DENIED: PermissionDenied,
    ErrorKind.NOT_FOUND: NotFound,
    ErrorKind.VALIDATION_FAILED: ValidationFailed,
    ErrorKind.TRANSIENT_FAILURE: TransientFailure,
}

AUTH_CODES = {"UnrecognizedClientException", "InvalidSignatureException"}
PERMISSION_CODES = {"AccessDeniedException"}
NOT_FOUND_CODES = {"ResourceNotFoundException"}

STATUS_KINDS = {
    401: ErrorKind.AUTH_FAILED,
    403: ErrorKind.PERMISSION_DENIED,
    404: ErrorKind.NOT_FOUND,
}


def _error_code(error: BaseException) -> Optional[str]:
    """Extract an AWS-style error code from an exception, if it carries one"""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code = response.get("Error", {}).get("Code")
        if code:
            return code
    for attr in ("name", "code", "__type"):
        value = getattr(error, attr, None)
        if isinstance(value, str):
            return value
    return None


def classify(error: Optional[BaseException]) -> ErrorKind:
    """
    Map a raw failure onto the error taxonomy

    Args:
        error: Any exception raised by the backend, transport or this package

    Returns:
        The ErrorKind for the failure; unknown failures are transient
    """
    if error is None:
        return ErrorKind.TRANSIENT_FAILURE

    if isinstance(error, FetchFailed):
        return classify(error.cause)

    if isinstance(error, LogStoreError):
        return error.kind

    if isinstance(error, requests.HTTPError):
        status = error.response.status_code if error.response is not None else None
        return STATUS_KINDS.get(status, ErrorKind.TRANSIENT_FAILURE)

    if isinstance(error, requests.RequestException):
        return ErrorKind.TRANSIENT_FAILURE

    code = _error_code(error)
    if code in AUTH_CODES:
        return ErrorKind.AUTH_FAILED
    if code in PERMISSION_CODES:
        return ErrorKind.PERMISSION_DENIED
    if code in NOT_FOUND_CODES:
        return ErrorKind.NOT_FOUND

    return ErrorKind.TRANSIENT_FAILURE


FRIENDLY_MESSAGES = {
    ErrorKind.AUTH_FAILED: "Log store credentials are invalid. Please check your configuration.",
    ErrorKind.PERMISSION_DENIED: "Access denied. Please check your log store permissions.",
    ErrorKind.NOT_FOUND: "The requested log group or stream does not exist.",
}


def describe(error: BaseException, operation: str = "complete the request") -> str:
    """
    Build the message shown to the operator for a failure

    Args:
        error: The failure to describe
        operation: What was being attempted, e.g. "fetch log groups"

    Returns:
        Human-readable message
    """
    kind = classify(error)
    if kind == ErrorKind.VALIDATION_FAILED:
        return str(error) or "Invalid input"
    if kind in FRIENDLY_MESSAGES:
        return FRIENDLY_MESSAGES[kind]
    return f"Failed to {operation}"


def http_status_for(kind: ErrorKind) -> int:
    """HTTP status used by the server for a classified failure"""
    if kind in (ErrorKind.AUTH_FAILED, ErrorKind.PERMISSION_DENIED):
        return 401
    return 500


def error_for_kind(kind: ErrorKind, message: str) -> LogStoreError:
    """Instantiate the exception class matching a kind"""
    return ERROR_TYPES.get(kind, TransientFailure)(message)
