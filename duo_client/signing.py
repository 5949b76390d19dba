"""
Duo request signing (Auth API v2 signature scheme)

Builds the canonical request string and the HMAC signature Duo verifies
on every call.

Guarantees:
- Byte-identical canonical string for identical inputs
- Parameters sorted by encoded key, independent of insertion order
- Percent-encoding leaves only unreserved characters (A-Z a-z 0-9 - . _ ~) literal
- Host lowercased, method uppercased

Canonical string (newline separated, fixed order):
    date
    METHOD
    host
    path
    sorted_params
"""

import base64
import hashlib
import hmac
from email.utils import formatdate
from typing import Any, Callable, Optional, Tuple
from urllib.parse import quote

from .errors import EncodingError
from .parameters import Parameters

DEFAULT_DIGESTMOD: Callable[..., Any] = hashlib.sha512


def request_date(timestamp: Optional[float] = None) -> str:
    """
    Returns an RFC 2822 date for the Date header.

    Args:
        timestamp: Optional POSIX timestamp (default: now)

    Returns:
        Date string such as "Tue, 21 Aug 2012 17:29:18 -0000"
    """
    return formatdate(timestamp)


def encode_parameters(parameters: Parameters) -> str:
    """
    Encodes parameters as a sorted, URL-encoded query string.

    Used both for signing and as the wire encoding, so the signed
    string and the sent string can never diverge.

    Args:
        parameters: Parameters to encode

    Returns:
        "k1=v1&k2=v2" with pairs sorted by encoded key

    Raises:
        EncodingError: name or value is not an encodable string
    """
    pairs = [_encode_pair(name, value) for name, value in parameters.items()]
    pairs.sort()
    return "&".join(f"{key}={value}" for key, value in pairs)


def canonicalize(
    date: str,
    method: str,
    host: str,
    path: str,
    parameters: Parameters,
) -> str:
    """
    Builds the canonical string that gets signed.

    Args:
        date: Value of the Date header
        method: HTTP method
        host: API hostname (optionally with :port)
        path: Request path, e.g. /auth/v2/check
        parameters: Request parameters

    Returns:
        Newline-joined canonical string
    """
    return "\n".join(
        [
            date,
            method.upper(),
            host.lower(),
            path,
            encode_parameters(parameters),
        ]
    )


def sign(
    skey: str,
    date: str,
    method: str,
    host: str,
    path: str,
    parameters: Parameters,
    digestmod: Callable[..., Any] = DEFAULT_DIGESTMOD,
) -> str:
    """
    Computes the hex HMAC signature of a request.

    Args:
        skey: Secret key
        date, method, host, path, parameters: see canonicalize()
        digestmod: hashlib constructor (default: sha512; Duo also accepts sha1)

    Returns:
        Lowercase hex digest
    """
    canonical = canonicalize(date, method, host, path, parameters)
    return hmac.new(skey.encode("utf-8"), canonical.encode("utf-8"), digestmod).hexdigest()


def basic_authorization(ikey: str, signature: str) -> str:
    """Returns the Authorization header value for ikey:signature."""
    credential = base64.b64encode(f"{ikey}:{signature}".encode("utf-8")).decode("ascii")
    return f"Basic {credential}"


def _encode_pair(name: Any, value: Any) -> Tuple[str, str]:
    return _encode(name, name), _encode(name, value)


def _encode(name: Any, text: Any) -> str:
    if not isinstance(text, str):
        raise EncodingError(str(name), f"expected str, got {type(text).__name__}")
    try:
        return quote(text.encode("utf-8"), safe="~")
    except UnicodeEncodeError as e:
        raise EncodingError(str(name), str(e)) from e
