"""
Duo Client

Main entry point for interacting with the Duo Auth API.
"""

import logging
from typing import Any, Callable, Optional

import httpx
from tenacity import AsyncRetrying, RetryError

from .config import DEFAULT_ENV_PREFIX, DuoConfig
from .contracts import (
    AuthOutcome,
    AuthResponse,
    AuthStatusResponse,
    CheckResponse,
    PreauthResponse,
)
from .errors import AuthTimeoutError, ConfigurationError, UnexpectedResultError
from .gateway import DuoGateway
from .http_gateway import HttpDuoGateway
from .parameters import Parameters
from .polling import PollPolicy
from .signing import DEFAULT_DIGESTMOD

logger = logging.getLogger(__name__)

CHECK_PATH = "/auth/v2/check"
PREAUTH_PATH = "/auth/v2/preauth"
AUTH_PATH = "/auth/v2/auth"
AUTH_STATUS_PATH = "/auth/v2/auth_status"

AUTH_TYPE = "Authorize share"

STATUS_RESULTS = {
    "waiting": AuthOutcome.PENDING,
    "allow": AuthOutcome.ALLOWED,
    "deny": AuthOutcome.DENIED,
}


class DuoClient:
    """
    Duo Auth API client.

    Signed requests for health check, preauth and asynchronous push
    authentication. Configuration is fixed at construction and the
    underlying HTTP connection pool is shared by concurrent calls.

    Example:
        ```python
        from duo_client import DuoClient

        async with DuoClient(
            api_domain="https://api-xxxxxxxx.duosecurity.com",
            ikey="DIXXXXXXXXXXXXXXXXXX",
            skey="your-secret-key",
        ) as client:
            server_time = await client.check()

            preauth = await client.preauth("alice")
            if preauth.result == "auth":
                approved = await client.auth("alice", share_n=1)
        ```
    """

    def __init__(
        self,
        api_domain: Optional[str] = None,
        ikey: Optional[str] = None,
        skey: Optional[Any] = None,
        poll_policy: Optional[PollPolicy] = None,
        timeout: float = 30.0,
        gateway: Optional[DuoGateway] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        digestmod: Callable[..., Any] = DEFAULT_DIGESTMOD,
    ) -> None:
        """
        Initialize Duo client.

        Args:
            api_domain: Duo API base URL, scheme and host required
            ikey: Integration key
            skey: Secret key (str or pydantic SecretStr)
            poll_policy: Auth status poll policy (default: PollPolicy.default())
            timeout: Request timeout in seconds (default: 30.0)
            gateway: Optional custom gateway implementation
            http_client: Optional httpx.AsyncClient for the default gateway
            digestmod: HMAC digest constructor (default: hashlib.sha512)

        Raises:
            ConfigurationError: Missing credentials or api_domain without a host
        """
        self.poll_policy = poll_policy or PollPolicy.default()

        # Use provided gateway or create HTTP gateway
        if gateway:
            self.gateway = gateway
        else:
            missing = [
                name
                for name, value in (("api_domain", api_domain), ("ikey", ikey), ("skey", skey))
                if value is None or value == ""
            ]
            if missing:
                raise ConfigurationError(
                    f"Missing client configuration: {', '.join(missing)}",
                    details={"missing": missing},
                )
            self.gateway = HttpDuoGateway(
                api_domain=api_domain,  # type: ignore[arg-type]
                ikey=ikey,  # type: ignore[arg-type]
                skey=skey,  # type: ignore[arg-type]
                timeout=timeout,
                http_client=http_client,
                digestmod=digestmod,
            )

    @classmethod
    def from_config(cls, config: DuoConfig, **kwargs: Any) -> "DuoClient":
        """Create a client from a DuoConfig."""
        return cls(
            api_domain=config.api_domain,
            ikey=config.ikey,
            skey=config.skey,
            timeout=config.timeout,
            **kwargs,
        )

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX, **kwargs: Any) -> "DuoClient":
        """Create a client from DUO_* environment variables."""
        return cls.from_config(DuoConfig.from_env(prefix=prefix), **kwargs)

    async def check(self) -> int:
        """
        Verify that Duo is reachable and the credentials are accepted.

        Returns:
            Duo server time (seconds since epoch)

        Raises:
            TransportError: Connection/timeout issues
            UpstreamError: Non-200 status or failed envelope
            DecodeError: Malformed response
        """
        response = await self.gateway.call("GET", CHECK_PATH, None, CheckResponse)
        logger.debug(f"Check response: time={response.time}")
        return response.time

    async def preauth(self, user_id: str) -> PreauthResponse:
        """
        Ask Duo which factors and devices are available for a user.

        Args:
            user_id: Duo user id

        Returns:
            PreauthResponse as returned by Duo

        Raises:
            TransportError, UpstreamError, DecodeError
        """
        parameters = Parameters()
        parameters.set("user_id", user_id)

        logger.info(f"Preauth request: user_id={user_id}")

        response = await self.gateway.call("POST", PREAUTH_PATH, parameters, PreauthResponse)

        logger.info(f"Preauth response: user_id={user_id}, result={response.result}")

        return response

    async def auth(self, user_id: str, share_n: int) -> bool:
        """
        Push an authentication request and wait for the user to answer.

        Starts exactly one transaction, then polls its status at the
        poll policy's interval until Duo reports allow or deny. Errors from
        either step are raised immediately; the start is never repeated.

        Args:
            user_id: Duo user id
            share_n: Share number shown to the user as "Share {n}"

        Returns:
            True if the user approved, False if denied

        Raises:
            TransportError, UpstreamError, DecodeError: from start or poll
            UnexpectedResultError: Unknown auth_status result
            AuthTimeoutError: Bounded poll policy exhausted while pending

        Example:
            ```python
            if await client.auth("alice", share_n=2):
                release_share(2)
            ```
        """
        txid = await self._request_auth(user_id, share_n)

        outcome = AuthOutcome.PENDING
        attempts = 0
        try:
            async for attempt in AsyncRetrying(**self.poll_policy.to_tenacity_kwargs()):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    outcome = await self._request_auth_status(txid)
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(outcome)
        except RetryError as e:
            logger.warning(f"Auth still pending: txid={txid}, polls={attempts}")
            raise AuthTimeoutError(txid=txid, attempts=attempts) from e

        if outcome is AuthOutcome.PENDING:
            raise AuthTimeoutError(txid=txid, attempts=attempts)

        logger.info(f"Auth resolved: user_id={user_id}, txid={txid}, outcome={outcome.value}")

        return outcome is AuthOutcome.ALLOWED

    async def _request_auth(self, user_id: str, share_n: int) -> str:
        """Start an asynchronous push authentication and return its txid."""
        parameters = Parameters()
        parameters.set("user_id", user_id)
        parameters.set("factor", "auto")
        parameters.set("async", "1")
        parameters.set("type", AUTH_TYPE)
        parameters.set("device", "auto")
        parameters.set("display_username", f"Share {share_n}")

        logger.info(f"Auth request: user_id={user_id}, share={share_n}")

        response = await self.gateway.call("POST", AUTH_PATH, parameters, AuthResponse)

        logger.info(f"Auth started: user_id={user_id}, txid={response.txid}")

        return response.txid

    async def _request_auth_status(self, txid: str) -> AuthOutcome:
        """Fetch the current state of a transaction."""
        parameters = Parameters()
        parameters.set("txid", txid)

        response = await self.gateway.call("GET", AUTH_STATUS_PATH, parameters, AuthStatusResponse)

        outcome = STATUS_RESULTS.get(response.result)
        if outcome is None:
            raise UnexpectedResultError(response.result)

        logger.debug(f"Auth status: txid={txid}, result={response.result}")

        return outcome

    async def close(self) -> None:
        """Close gateway resources."""
        if hasattr(self.gateway, "close"):
            await self.gateway.close()

    async def __aenter__(self) -> "DuoClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Async context manager exit."""
        await self.close()
