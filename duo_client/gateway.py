"""
Duo Gateway abstraction.

Protocol for communication with the Duo Auth API.
"""

from abc import ABC, abstractmethod
from typing import Optional, Protocol, Type, TypeVar

from pydantic import BaseModel

from .parameters import Parameters

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class DuoGateway(Protocol):
    """
    Protocol for Duo API communication.

    Implementations handle signing, HTTP, envelope decoding and error mapping.
    """

    async def call(
        self,
        method: str,
        path: str,
        parameters: Optional[Parameters],
        payload_model: Type[PayloadT],
    ) -> PayloadT:
        """
        Perform one signed API call.

        Args:
            method: HTTP method (GET or POST)
            path: Endpoint path, e.g. /auth/v2/preauth
            parameters: Request parameters (None for none)
            payload_model: Model the envelope's response field decodes into

        Returns:
            Decoded payload

        Raises:
            TransportError: Connection/TLS/timeout issues
            UpstreamError: Non-200 status or stat != OK
            DecodeError: Body is not a well-formed envelope of payload_model
            EncodingError: A parameter cannot be encoded
        """
        ...


class BaseDuoGateway(ABC):
    """
    Abstract base class for gateway implementations.
    """

    @abstractmethod
    async def call(
        self,
        method: str,
        path: str,
        parameters: Optional[Parameters],
        payload_model: Type[PayloadT],
    ) -> PayloadT:
        """Perform one signed API call."""
        pass

    async def close(self) -> None:
        """
        Close any resources (HTTP connections, etc.).

        Optional - override if needed.
        """
        pass

    async def __aenter__(self) -> "BaseDuoGateway":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Async context manager exit."""
        await self.close()
