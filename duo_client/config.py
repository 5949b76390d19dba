"""
Duo client configuration.

Construction-time inputs: API domain, integration key, secret key.
Loaded from explicit values or from environment variables.
"""

import os
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from .errors import ConfigurationError
from .request import parse_base_url

DEFAULT_ENV_PREFIX = "DUO_"
DEFAULT_TIMEOUT = 30.0


class DuoConfig(BaseModel):
    """
    Immutable client configuration.

    The secret key is held as a SecretStr and is masked in repr() and
    model_dump(); call ``skey.get_secret_value()`` only to sign.

    Example:
        ```python
        config = DuoConfig(
            api_domain="https://api-xxxxxxxx.duosecurity.com",
            ikey="DIXXXXXXXXXXXXXXXXXX",
            skey="secret",
        )
        # or: DUO_API_DOMAIN / DUO_IKEY / DUO_SKEY
        config = DuoConfig.from_env()
        ```
    """

    api_domain: str = Field(..., min_length=1)
    ikey: str = Field(..., min_length=1)
    skey: SecretStr
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)

    @field_validator("api_domain")
    @classmethod
    def validate_api_domain(cls, v: str) -> str:
        # ConfigurationError is not a ValueError, so pydantic lets it through
        parse_base_url(v)
        return v

    model_config = {
        "frozen": True,
    }

    def __init__(self, **data: Any) -> None:
        """
        Validate configuration.

        Raises:
            ConfigurationError: a value is missing or invalid; details carry
                field locations and messages only, never input values
        """
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid Duo client configuration",
                details={"errors": _safe_errors(e)},
            ) from None

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_ENV_PREFIX,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "DuoConfig":
        """
        Load configuration from environment variables.

        Reads ``{prefix}API_DOMAIN``, ``{prefix}IKEY``, ``{prefix}SKEY`` and
        optionally ``{prefix}TIMEOUT``.

        Raises:
            ConfigurationError: a variable is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        values = {}
        for field_name in ("api_domain", "ikey", "skey"):
            var = f"{prefix}{field_name.upper()}"
            value = env.get(var)
            if not value:
                raise ConfigurationError(
                    f"Missing environment variable: {var}", details={"variable": var}
                )
            values[field_name] = value

        timeout = env.get(f"{prefix}TIMEOUT")
        if timeout:
            values["timeout"] = timeout

        return cls(**values)


def _safe_errors(error: ValidationError) -> List[Dict[str, Any]]:
    # Input values may hold the secret
    return [{"loc": list(err["loc"]), "msg": err["msg"]} for err in error.errors()]
