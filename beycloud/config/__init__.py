from .providers import (
    AwsConfig,
    AwsCredentials,
    AzureConfig,
    DigitalOceanConfig,
    GCSConfig,
    LocalConfig,
    ProviderConfig,
    classify,
    parse_provider_config,
)
from .settings import Settings
from .storage import StorageSettings

__all__ = [
    "AwsConfig",
    "AwsCredentials",
    "AzureConfig",
    "DigitalOceanConfig",
    "GCSConfig",
    "LocalConfig",
    "ProviderConfig",
    "classify",
    "parse_provider_config",
    "Settings",
    "StorageSettings",
]
