"""
Provider configuration models and structural shape detection.

The provider declared by the caller decides which model a payload is
parsed with. classify() only inspects field presence and is used to
describe what the caller actually passed when the payload does not fit.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from beycloud.models.domain import ConfigShape, Provider
from beycloud.exceptions import ConfigurationError


class _ProviderConfig(BaseModel):
    """Accepts snake_case fields or the camelCase aliases (basePath, projectId, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class AwsCredentials(_ProviderConfig):
    access_key_id: str
    secret_access_key: str


class AwsConfig(_ProviderConfig):
    """Amazon S3 bucket with static credentials."""
    bucket: str
    region: str
    credentials: AwsCredentials


class DigitalOceanConfig(AwsConfig):
    """S3-compatible endpoint (DigitalOcean Spaces, MinIO)."""
    endpoint: str
    force_path_style: bool = False


class AzureConfig(_ProviderConfig):
    """Azure Blob Storage container reached through a connection string."""
    connection_string: str
    container: str


class GCSConfig(_ProviderConfig):
    """
    Google Cloud Storage bucket.

    Credential material is either a service account key file path or the
    parsed service account JSON itself.
    """
    bucket: str
    project_id: str
    key_file_path: Optional[str] = None
    credentials: Optional[Dict[str, Any]] = None


class LocalConfig(_ProviderConfig):
    """Directory on the local filesystem."""
    base_path: str


ProviderConfig = Union[AwsConfig, DigitalOceanConfig, AzureConfig, GCSConfig, LocalConfig]


CONFIG_MODELS: Dict[Provider, Type[_ProviderConfig]] = {
    Provider.AWS: AwsConfig,
    Provider.DIGITALOCEAN: DigitalOceanConfig,
    Provider.AZURE: AzureConfig,
    Provider.GCLOUD: GCSConfig,
    Provider.LOCAL: LocalConfig,
}

PROVIDER_LABELS: Dict[Provider, str] = {
    Provider.AWS: "AWS",
    Provider.DIGITALOCEAN: "Digital Ocean",
    Provider.AZURE: "Azure",
    Provider.GCLOUD: "Google Cloud",
    Provider.LOCAL: "Local",
}

EXPECTED_SHAPES: Dict[Provider, ConfigShape] = {
    Provider.AWS: ConfigShape.REMOTE,
    Provider.DIGITALOCEAN: ConfigShape.PATH_STYLE_REMOTE,
    Provider.AZURE: ConfigShape.CONNECTION_STRING,
    Provider.GCLOUD: ConfigShape.PROJECT_CREDENTIAL,
    Provider.LOCAL: ConfigShape.LOCAL,
}


def _has(config: Mapping, field: str) -> bool:
    return field in config or to_camel(field) in config


def _get(config: Mapping, field: str) -> Any:
    if field in config:
        return config[field]
    return config.get(to_camel(field))


def _has_access_keys(credentials: Any) -> bool:
    if isinstance(credentials, AwsCredentials):
        return True
    if not isinstance(credentials, Mapping):
        return False
    return _has(credentials, "access_key_id") and _has(credentials, "secret_access_key")


def classify(config: Any) -> ConfigShape:
    """
    Detect the structural shape of a configuration payload.

    Checks run in a fixed order: the path-style remote shape is a superset
    of the plain remote shape, so it is tested first.

    Args:
        config: Config model instance or mapping (snake_case or camelCase keys)

    Returns:
        The first matching ConfigShape, or ConfigShape.UNRECOGNIZED
    """
    if isinstance(config, DigitalOceanConfig):
        return ConfigShape.PATH_STYLE_REMOTE
    if isinstance(config, AwsConfig):
        return ConfigShape.REMOTE
    if isinstance(config, AzureConfig):
        return ConfigShape.CONNECTION_STRING
    if isinstance(config, GCSConfig):
        return ConfigShape.PROJECT_CREDENTIAL
    if isinstance(config, LocalConfig):
        return ConfigShape.LOCAL

    if not isinstance(config, Mapping) or not config:
        return ConfigShape.UNRECOGNIZED

    remote = (
        _has(config, "bucket")
        and _has(config, "region")
        and _has_access_keys(_get(config, "credentials"))
    )
    if remote and _has(config, "endpoint") and _has(config, "force_path_style"):
        return ConfigShape.PATH_STYLE_REMOTE
    if remote:
        return ConfigShape.REMOTE
    if _has(config, "connection_string") and _has(config, "container"):
        return ConfigShape.CONNECTION_STRING
    if (
        _has(config, "bucket")
        and _has(config, "project_id")
        and (_has(config, "key_file_path") or isinstance(_get(config, "credentials"), Mapping))
    ):
        return ConfigShape.PROJECT_CREDENTIAL
    if _has(config, "base_path"):
        return ConfigShape.LOCAL
    return ConfigShape.UNRECOGNIZED


def resolve_provider(provider: Union[str, Provider]) -> Provider:
    """Convert a provider id to Provider, raising ConfigurationError if unknown."""
    try:
        return Provider(provider.lower() if isinstance(provider, str) else provider)
    except ValueError:
        raise ConfigurationError(f"Unsupported provider: {provider}") from None


def parse_provider_config(provider: Union[str, Provider], config: Any) -> ProviderConfig:
    """
    Validate a configuration payload against the declared provider.

    Args:
        provider: Provider id ("aws", "digitalocean", "azure", "gcloud", "local")
        config: Config model for that provider, or a mapping of its fields

    Returns:
        The typed config model for the provider

    Raises:
        ConfigurationError: If the provider is unknown or the payload does not
            have the provider's shape
    """
    provider = resolve_provider(provider)
    model_cls = CONFIG_MODELS[provider]

    if type(config) is model_cls:
        return config

    if isinstance(config, Mapping):
        try:
            return model_cls.model_validate(dict(config))
        except ValidationError as e:
            raise _shape_mismatch(provider, config) from e

    raise _shape_mismatch(provider, config)


def _shape_mismatch(provider: Provider, config: Any) -> ConfigurationError:
    detected = classify(config)
    return ConfigurationError(
        f"{PROVIDER_LABELS[provider]} credentials are required. "
        f"Configuration is incorrect or must be provided "
        f"(expected: {EXPECTED_SHAPES[provider].value}, detected: {detected.value})"
    )
