"""Provider system for vidlens."""

from .base import LLMProvider, VisionProvider
from .credentials import (
    HunyuanCredentials,
    StartupCredentials,
    mask_secret_id,
    mask_secret_key,
    resolve_credentials,
    sanitize_arguments,
)
from .factory import ProviderFactory, provider_factory
from .hunyuan_providers import BatchPolicy, HunyuanClient

__all__ = [
    # Base classes
    'LLMProvider',
    'VisionProvider',
    # Credentials
    'HunyuanCredentials',
    'StartupCredentials',
    'mask_secret_id',
    'mask_secret_key',
    'resolve_credentials',
    'sanitize_arguments',
    # Factory
    'ProviderFactory',
    'provider_factory',
    # Hunyuan
    'BatchPolicy',
    'HunyuanClient',
]
