"""
Duo Client Errors

Typed exceptions for error handling.
"""

from typing import Any, Dict, Optional


class DuoError(Exception):
    """Base exception for all Duo client errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "UNKNOWN_ERROR"
        self.details = details or {}


class ConfigurationError(DuoError):
    """Client configuration is invalid (e.g. API domain without a host)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class EncodingError(DuoError):
    """A request parameter cannot be URL-encoded."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(
            f"Parameter {name!r} cannot be URL-encoded: {reason}",
            code="ENCODING_ERROR",
            details={"name": name},
        )
        self.name = name


class TransportError(DuoError):
    """HTTP call failed before a response was received (connection, TLS, timeout)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="TRANSPORT_ERROR", details=details)


class UpstreamError(DuoError):
    """
    Duo answered with a failure.

    Raised for any non-200 HTTP status, and for a 200 whose envelope has
    stat != "OK". ``error_code`` and ``error_message`` are taken from the
    envelope when it could be decoded.
    """

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        error_code: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Upstream error ({status_code}): {error_message or 'no message'}",
            code="UPSTREAM_ERROR",
            details={
                "statusCode": status_code,
                "errorCode": error_code,
                "errorMessage": error_message,
            },
        )
        self.status_code = status_code
        self.body = body
        self.error_code = error_code
        self.error_message = error_message


class DecodeError(DuoError):
    """Response body is not JSON or does not match the expected shape."""

    def __init__(self, message: str, status_code: int, body: str) -> None:
        super().__init__(
            message,
            code="DECODE_ERROR",
            details={"statusCode": status_code, "body": body[:200]},
        )
        self.status_code = status_code
        self.body = body[:200]


class UnexpectedResultError(DuoError):
    """auth_status returned a result outside waiting/allow/deny."""

    def __init__(self, result: str) -> None:
        super().__init__(
            f"Unexpected auth status result: {result!r}",
            code="UNEXPECTED_RESULT",
            details={"result": result},
        )
        self.result = result


class AuthTimeoutError(DuoError):
    """Bounded poll policy exhausted while the transaction was still waiting."""

    def __init__(self, txid: str, attempts: int) -> None:
        super().__init__(
            f"Authentication {txid} still pending after {attempts} status polls",
            code="AUTH_TIMEOUT",
            details={"txid": txid, "attempts": attempts},
        )
        self.txid = txid
        self.attempts = attempts
