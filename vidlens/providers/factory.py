from typing import Optional

from loguru import logger

from ..config.settings import HunyuanConfig
from .credentials import StartupCredentials, resolve_credentials
from .hunyuan_providers import HunyuanClient


class ProviderFactory:
    """Factory class for creating provider instances."""

    @classmethod
    def create_hunyuan_client(
        cls,
        secret_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        region: Optional[str] = None,
        startup: Optional[StartupCredentials] = None,
        config: Optional[HunyuanConfig] = None,
        **kwargs,
    ) -> HunyuanClient:
        """
        Create a Hunyuan client bound to the credentials resolved for this call.

        Args:
            secret_id: SecretId passed with the call (optional)
            secret_key: SecretKey passed with the call (optional)
            region: Region passed with the call (optional)
            startup: Credentials given on the server command line (optional)
            config: Hunyuan configuration, read from the environment if omitted
            **kwargs: Forwarded to HunyuanClient (session, clock, sleep)

        Returns:
            HunyuanClient instance

        Raises:
            ConfigurationException: If no complete credential pair is available
        """
        config = config or HunyuanConfig()
        credentials = resolve_credentials(
            secret_id=secret_id,
            secret_key=secret_key,
            region=region,
            startup=startup,
            config=config,
        )
        logger.info(f"Creating Hunyuan client for region: {credentials.region}")
        return HunyuanClient.from_config(credentials, config, **kwargs)


provider_factory = ProviderFactory()
