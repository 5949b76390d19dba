"""
Poll policy for asynchronous authentication.

Fixed-interval polling of auth_status while the result is pending.
"""

from typing import Any, Awaitable, Callable, Optional

from tenacity import (
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    stop_any,
    stop_never,
    wait_fixed,
)

from .contracts import AuthOutcome

DEFAULT_POLL_INTERVAL = 2.0


def is_pending(outcome: Any) -> bool:
    """Only a pending outcome causes another poll; errors are never retried."""
    return outcome is AuthOutcome.PENDING


class PollPolicy:
    """
    Poll policy configuration.

    Defaults:
    - Interval: 2s between status polls
    - No client-side bound; Duo decides when the transaction expires

    A bound is opt-in via max_attempts (number of status polls) and/or
    max_delay (seconds since the first poll). A custom async sleep can be
    supplied for event loops other than asyncio.
    """

    def __init__(
        self,
        interval_seconds: float = DEFAULT_POLL_INTERVAL,
        max_attempts: Optional[int] = None,
        max_delay_seconds: Optional[float] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if max_delay_seconds is not None and max_delay_seconds < 0:
            raise ValueError("max_delay_seconds must be >= 0")
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self.max_delay_seconds = max_delay_seconds
        self.sleep = sleep

    @classmethod
    def default(cls) -> "PollPolicy":
        """Unbounded polling every 2 seconds."""
        return cls()

    @classmethod
    def bounded(cls, max_attempts: int, interval_seconds: float = DEFAULT_POLL_INTERVAL) -> "PollPolicy":
        """Give up after max_attempts status polls."""
        return cls(interval_seconds=interval_seconds, max_attempts=max_attempts)

    def to_tenacity_kwargs(self) -> dict:
        """Convert to tenacity AsyncRetrying kwargs."""
        stops = []
        if self.max_attempts is not None:
            stops.append(stop_after_attempt(self.max_attempts))
        if self.max_delay_seconds is not None:
            stops.append(stop_after_delay(self.max_delay_seconds))

        if not stops:
            stop = stop_never
        elif len(stops) == 1:
            stop = stops[0]
        else:
            stop = stop_any(*stops)

        kwargs = {
            "stop": stop,
            "wait": wait_fixed(self.interval_seconds),
            "retry": retry_if_result(is_pending),
            "reraise": True,
        }
        if self.sleep is not None:
            kwargs["sleep"] = self.sleep
        return kwargs
