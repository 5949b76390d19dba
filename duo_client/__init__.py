"""
Duo Auth API client

Async client for the Duo Auth API v2.

Features:
- HMAC request signing (canonical date/method/host/path/params)
- Typed response envelopes
- Structured error handling
- Push authentication with status polling

Example:
    ```python
    from duo_client import DuoClient

    async with DuoClient(
        api_domain="https://api-xxxxxxxx.duosecurity.com",
        ikey="DIXXXXXXXXXXXXXXXXXX",
        skey="your-secret-key",
    ) as client:
        await client.check()

        if await client.auth("alice", share_n=1):
            print("approved")
    ```
"""

from .client import DuoClient
from .config import DuoConfig
from .contracts import (
    AuthOutcome,
    AuthResponse,
    AuthStatusResponse,
    CheckResponse,
    Device,
    DuoResponse,
    PreauthResponse,
    PreauthResult,
)
from .errors import (
    AuthTimeoutError,
    ConfigurationError,
    DecodeError,
    DuoError,
    EncodingError,
    TransportError,
    UnexpectedResultError,
    UpstreamError,
)
from .gateway import BaseDuoGateway, DuoGateway
from .http_gateway import HttpDuoGateway
from .parameters import Parameters
from .polling import PollPolicy
from .request import DuoRequest
from .signing import (
    basic_authorization,
    canonicalize,
    encode_parameters,
    sign,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "DuoClient",
    "DuoConfig",
    # Contracts
    "DuoResponse",
    "CheckResponse",
    "PreauthResponse",
    "PreauthResult",
    "Device",
    "AuthResponse",
    "AuthStatusResponse",
    "AuthOutcome",
    # Errors
    "DuoError",
    "ConfigurationError",
    "EncodingError",
    "TransportError",
    "UpstreamError",
    "DecodeError",
    "UnexpectedResultError",
    "AuthTimeoutError",
    # Gateway
    "DuoGateway",
    "BaseDuoGateway",
    "HttpDuoGateway",
    # Requests
    "Parameters",
    "DuoRequest",
    # Polling
    "PollPolicy",
    # Signing
    "canonicalize",
    "encode_parameters",
    "sign",
    "basic_authorization",
]
