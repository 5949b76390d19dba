"""
Duo Auth API v2 Contracts

Pydantic v2 models for the response envelope and the per-endpoint payloads.
Every response is wrapped in the same envelope; the payload type is the
generic parameter.
"""

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

PayloadT = TypeVar("PayloadT")

STAT_OK = "OK"
STAT_FAIL = "FAIL"


class AuthOutcome(str, Enum):
    """Resolution state of an asynchronous authentication."""

    PENDING = "pending"
    ALLOWED = "allowed"
    DENIED = "denied"


class PreauthResult(str, Enum):
    """What Duo expects to happen next for the user."""

    AUTH = "auth"
    ALLOW = "allow"
    DENY = "deny"
    ENROLL = "enroll"


class DuoResponse(BaseModel, Generic[PayloadT]):
    """Response envelope shared by all endpoints."""

    stat: str
    response: Optional[PayloadT] = None
    code: Optional[int] = None
    message: Optional[str] = None
    message_detail: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.stat == STAT_OK


class CheckResponse(BaseModel):
    """Payload of /auth/v2/check."""

    time: int


class Device(BaseModel):
    """Device available to the user for authentication."""

    device: str
    type: str
    capabilities: List[str] = Field(default_factory=list)
    display_name: Optional[str] = None
    name: Optional[str] = None
    number: Optional[str] = None
    sms_nextcode: Optional[str] = None

    model_config = {
        "extra": "allow",
    }


class PreauthResponse(BaseModel):
    """
    Payload of /auth/v2/preauth. Passed to the caller as-is.

    ``result`` keeps whatever string Duo sent; ``result_kind`` maps it to
    PreauthResult and is None for values this client does not know.
    """

    result: str
    status_msg: Optional[str] = None
    devices: List[Device] = Field(default_factory=list)
    enroll_portal_url: Optional[str] = None

    model_config = {
        "extra": "allow",
    }

    @property
    def result_kind(self) -> Optional[PreauthResult]:
        try:
            return PreauthResult(self.result)
        except ValueError:
            return None


class AuthResponse(BaseModel):
    """Payload of /auth/v2/auth with async=1."""

    txid: str


class AuthStatusResponse(BaseModel):
    """Payload of /auth/v2/auth_status."""

    result: str
    status: Optional[str] = None
    status_msg: Optional[str] = None
