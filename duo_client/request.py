"""
Signed request builder.

Turns (base URL, method, path, parameters) plus credentials into a
ready-to-send httpx.Request. Performs no I/O.
"""

import logging
from typing import Any, Callable, Optional

import httpx

from .errors import ConfigurationError
from .parameters import Parameters
from .signing import (
    DEFAULT_DIGESTMOD,
    basic_authorization,
    encode_parameters,
    request_date,
    sign,
)

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_base_url(api_domain: str) -> httpx.URL:
    """
    Parse and validate the API base URL.

    Raises:
        ConfigurationError: URL is malformed or has no host
    """
    try:
        url = httpx.URL(api_domain)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(
            f"Invalid API domain: {e}", details={"apiDomain": str(api_domain)}
        ) from e

    if not url.host:
        raise ConfigurationError(
            f"API domain must include a host, got: {api_domain!r}",
            details={"apiDomain": api_domain},
        )
    return url


def host_of(url: httpx.URL) -> str:
    """
    Host as it appears in the canonical string and the Host header.

    Lowercase and IDNA-encoded, IPv6 literals in brackets. httpx drops a
    port that is the scheme default, so ``https://api-x.duosecurity.com:443``
    signs as ``api-x.duosecurity.com``; any other explicit port is kept.
    """
    host = url.raw_host.decode("ascii").lower().strip("[]")
    if ":" in host:
        host = f"[{host}]"
    if url.port is None:
        return host
    return f"{host}:{url.port}"


class DuoRequest:
    """
    One signed API call.

    GET parameters go into the query string, POST parameters into a
    form-encoded body. Both use the same sorted encoding that was signed.

    Example:
        ```python
        request = DuoRequest(base_url, "POST", "/auth/v2/preauth", params).build(
            ikey, skey
        )
        response = await http_client.send(request)
        ```
    """

    def __init__(
        self,
        base_url: httpx.URL,
        method: str,
        path: str,
        parameters: Optional[Parameters] = None,
    ) -> None:
        self.base_url = base_url
        self.method = method.upper()
        self.path = path
        self.parameters = parameters or Parameters()

    def build(
        self,
        ikey: str,
        skey: str,
        date: Optional[str] = None,
        digestmod: Callable[..., Any] = DEFAULT_DIGESTMOD,
    ) -> httpx.Request:
        """
        Sign and assemble the request.

        Args:
            ikey: Integration key
            skey: Secret key
            date: Date header value (default: now, RFC 2822)
            digestmod: HMAC digest constructor

        Returns:
            httpx.Request ready for AsyncClient.send()

        Raises:
            EncodingError: a parameter is not an encodable string
        """
        date = date or request_date()
        host = host_of(self.base_url)
        encoded = encode_parameters(self.parameters)
        signature = sign(skey, date, self.method, host, self.path, self.parameters, digestmod)

        headers = {
            "Date": date,
            "Authorization": basic_authorization(ikey, signature),
        }

        url = f"{self.base_url.scheme}://{host}{self.path}"
        content = None
        if self.method in ("POST", "PUT"):
            headers["Content-Type"] = FORM_CONTENT_TYPE
            content = encoded.encode("ascii")
        elif encoded:
            url = f"{url}?{encoded}"

        logger.debug(f"Built signed request: {self.method} {self.path} params={list(self.parameters)}")

        return httpx.Request(self.method, url, headers=headers, content=content)
