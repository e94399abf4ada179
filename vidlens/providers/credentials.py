"""
Credential handling for the Hunyuan provider.

Credentials are immutable values. A client holds exactly one set for its
lifetime; switching keys means building a new client.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from loguru import logger

from ..config.settings import HunyuanConfig
from ..exceptions import ConfigurationException

DEFAULT_REGION = "ap-beijing"
DEFAULT_ENDPOINT = "hunyuan.tencentcloudapi.com"

SECRET_ID_VISIBLE_CHARS = 4
SECRET_KEY_PLACEHOLDER = "***hidden***"


def mask_secret_id(secret_id: Optional[str]) -> str:
    """Return ``***`` followed by the last four characters of the id; short ids are hidden entirely."""
    if not secret_id or len(secret_id) <= SECRET_ID_VISIBLE_CHARS:
        return "***"
    return f"***{secret_id[-SECRET_ID_VISIBLE_CHARS:]}"


def mask_secret_key(secret_key: Optional[str]) -> str:
    return SECRET_KEY_PLACEHOLDER


def sanitize_arguments(arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Copy of tool/call arguments with credentials masked."""
    sanitized = dict(arguments or {})
    for key in ("secret_id", "secretId"):
        if sanitized.get(key):
            sanitized[key] = mask_secret_id(str(sanitized[key]))
    for key in ("secret_key", "secretKey"):
        if sanitized.get(key):
            sanitized[key] = mask_secret_key(sanitized[key])
    return sanitized


@dataclass(frozen=True)
class HunyuanCredentials:
    """Secret pair plus the region/endpoint the requests are scoped to."""

    secret_id: str
    secret_key: str = field(repr=False)
    region: str = DEFAULT_REGION
    endpoint: str = DEFAULT_ENDPOINT

    def __post_init__(self):
        if not self.secret_id or not self.secret_key:
            raise ConfigurationException(
                "Tencent Cloud API credentials are not set. Provide both SecretId and SecretKey.",
                error_code="MISSING_CREDENTIALS",
            )

    def __repr__(self) -> str:
        return (
            f"HunyuanCredentials(secret_id='{mask_secret_id(self.secret_id)}', "
            f"region='{self.region}', endpoint='{self.endpoint}')"
        )

    @property
    def masked_secret_id(self) -> str:
        return mask_secret_id(self.secret_id)

    @classmethod
    def from_config(cls, config: HunyuanConfig) -> "HunyuanCredentials":
        secret_key = config.secret_key.get_secret_value() if config.secret_key else None
        return cls(
            secret_id=config.secret_id,
            secret_key=secret_key,
            region=config.region,
            endpoint=config.endpoint,
        )


@dataclass(frozen=True)
class StartupCredentials:
    """Values passed on the server command line, used as the last fallback."""

    secret_id: Optional[str] = None
    secret_key: Optional[str] = field(default=None, repr=False)
    region: Optional[str] = None


def resolve_credentials(
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
    startup: Optional[StartupCredentials] = None,
    config: Optional[HunyuanConfig] = None,
) -> HunyuanCredentials:
    """
    Pick the credentials for a call.

    Precedence: environment/.env configuration, then call parameters,
    then startup arguments. The secret pair is always taken from a single
    source; the region follows the same order and defaults to ap-beijing.

    Raises:
        ConfigurationException: If no source provides a complete pair.
    """
    config = config or HunyuanConfig()
    startup = startup or StartupCredentials()
    endpoint = config.endpoint or DEFAULT_ENDPOINT

    if config.has_credentials:
        pair = (config.secret_id, config.secret_key.get_secret_value())
        source = "environment"
    elif secret_id and secret_key:
        pair = (secret_id, secret_key)
        source = "call parameters"
    elif startup.secret_id and startup.secret_key:
        pair = (startup.secret_id, startup.secret_key)
        source = "startup arguments"
    else:
        raise ConfigurationException(
            "Tencent Cloud API credentials are missing: set HUNYUAN_SECRET_ID/HUNYUAN_SECRET_KEY, "
            "pass secret_id/secret_key, or start the server with --secret-id/--secret-key.",
            error_code="MISSING_CREDENTIALS",
        )

    # Region set explicitly in the environment wins, like the secret pair
    if "region" in config.model_fields_set:
        resolved_region = config.region
    else:
        resolved_region = region or startup.region or config.region or DEFAULT_REGION

    credentials = HunyuanCredentials(
        secret_id=pair[0],
        secret_key=pair[1],
        region=resolved_region,
        endpoint=endpoint,
    )
    logger.debug(f"Using credentials from {source}: {credentials!r}")
    return credentials

