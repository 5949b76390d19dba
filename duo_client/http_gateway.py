"""
HTTP Duo Gateway implementation.

Uses httpx for async HTTP communication with the Duo Auth API.
"""

import logging
from typing import Any, Callable, Optional, Type, Union

import httpx
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from .contracts import DuoResponse
from .errors import DecodeError, TransportError, UpstreamError
from .gateway import BaseDuoGateway, PayloadT
from .parameters import Parameters
from .request import DuoRequest, parse_base_url
from .signing import DEFAULT_DIGESTMOD

logger = logging.getLogger(__name__)


class HttpDuoGateway(BaseDuoGateway):
    """
    HTTP implementation of DuoGateway.

    Features:
    - Per-request HMAC signing
    - Envelope decoding into typed payloads
    - Structured error mapping
    - Connection pooling via httpx
    """

    def __init__(
        self,
        api_domain: str,
        ikey: str,
        skey: Union[str, SecretStr],
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        digestmod: Callable[..., Any] = DEFAULT_DIGESTMOD,
    ) -> None:
        """
        Initialize HTTP gateway.

        Args:
            api_domain: Duo API base URL (e.g., https://api-xxxxxxxx.duosecurity.com)
            ikey: Integration key
            skey: Secret key
            timeout: Request timeout in seconds (default: 30.0)
            http_client: Optional custom httpx.AsyncClient (not closed by the gateway)
            digestmod: HMAC digest constructor (default: hashlib.sha512)

        Raises:
            ConfigurationError: api_domain is malformed or has no host
        """
        self.base_url = parse_base_url(api_domain)
        self.ikey = ikey
        self._skey = skey if isinstance(skey, SecretStr) else SecretStr(skey)
        self.digestmod = digestmod
        self.timeout = timeout

        if http_client:
            self._http_client = http_client
            self._own_client = False
        else:
            self._http_client = httpx.AsyncClient(timeout=timeout)
            self._own_client = True

    async def call(
        self,
        method: str,
        path: str,
        parameters: Optional[Parameters],
        payload_model: Type[PayloadT],
    ) -> PayloadT:
        """Sign, send and decode one API call."""
        request = DuoRequest(self.base_url, method, path, parameters).build(
            self.ikey,
            self._skey.get_secret_value(),
            digestmod=self.digestmod,
        )

        try:
            response = await self._http_client.send(request)

        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timeout: {e}")
            raise TransportError(f"Request timeout: {e}", details={"url": path}) from e

        except httpx.ConnectError as e:
            logger.warning(f"{method} {path} connection error: {e}")
            raise TransportError(f"Connection error: {e}", details={"url": path}) from e

        except httpx.HTTPError as e:
            logger.error(f"{method} {path} HTTP error: {e}")
            raise TransportError(f"HTTP error: {e}", details={"url": path}) from e

        return self._handle_response(response, payload_model)

    def _handle_response(self, response: httpx.Response, payload_model: Type[PayloadT]) -> PayloadT:
        """
        Handle HTTP response and map to typed payloads or errors.

        Args:
            response: HTTP response
            payload_model: Expected payload model type

        Returns:
            Parsed payload

        Raises:
            UpstreamError: Non-200 status, or envelope stat != OK
            DecodeError: Body is not JSON or does not match the envelope/payload
        """
        # Non-200 is a failure whatever the body says
        if response.status_code != 200:
            body = self._best_effort_body(response)
            error_code = None
            error_message = None
            if isinstance(body, dict):
                error_code = body.get("code")
                error_message = body.get("message")
            logger.warning(
                f"Duo returned {response.status_code} for {response.request.url.path}: "
                f"code={error_code}, message={error_message}"
            )
            raise UpstreamError(
                status_code=response.status_code,
                body=body,
                error_code=error_code,
                error_message=error_message,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Failed to parse response: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        try:
            envelope = DuoResponse[payload_model].model_validate(data)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Invalid response format: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not envelope.is_ok:
            raise UpstreamError(
                status_code=response.status_code,
                body=data,
                error_code=envelope.code,
                error_message=envelope.message,
            )

        if envelope.response is None:
            raise DecodeError(
                "Response envelope has no payload",
                status_code=response.status_code,
                body=response.text,
            )

        return envelope.response

    @staticmethod
    def _best_effort_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._own_client:
            await self._http_client.aclose()
