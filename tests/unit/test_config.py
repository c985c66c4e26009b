import pytest

from beycloud.config import (
    AwsConfig,
    AzureConfig,
    DigitalOceanConfig,
    GCSConfig,
    LocalConfig,
    StorageSettings,
    classify,
    parse_provider_config,
)
from beycloud.exceptions import ConfigurationError
from beycloud.models.domain import ConfigShape


AWS_PAYLOAD = {
    "bucket": "photos",
    "region": "eu-west-1",
    "credentials": {"accessKeyId": "AKIA", "secretAccessKey": "secret"},
}

DIGITALOCEAN_PAYLOAD = {
    **AWS_PAYLOAD,
    "region": "nyc3",
    "endpoint": "https://nyc3.digitaloceanspaces.com",
    "forcePathStyle": False,
}

AZURE_PAYLOAD = {
    "connectionString": "DefaultEndpointsProtocol=https;AccountName=test;AccountKey=a2V5",
    "container": "photos",
}

GCS_PAYLOAD = {
    "bucket": "photos",
    "projectId": "test-project",
    "keyFilePath": "/secrets/account.json",
}

LOCAL_PAYLOAD = {"basePath": "/tmp/store"}


class TestClassify:
    """Structural shape detection over mappings and models."""

    @pytest.mark.parametrize("payload,expected", [
        (AWS_PAYLOAD, ConfigShape.REMOTE),
        (DIGITALOCEAN_PAYLOAD, ConfigShape.PATH_STYLE_REMOTE),
        (AZURE_PAYLOAD, ConfigShape.CONNECTION_STRING),
        (GCS_PAYLOAD, ConfigShape.PROJECT_CREDENTIAL),
        (LOCAL_PAYLOAD, ConfigShape.LOCAL),
        ({}, ConfigShape.UNRECOGNIZED),
        ({"bucket": "photos"}, ConfigShape.UNRECOGNIZED),
        (None, ConfigShape.UNRECOGNIZED),
    ])
    def test_mapping_shapes(self, payload, expected):
        assert classify(payload) == expected

    def test_snake_case_keys(self):
        assert classify({"base_path": "/tmp"}) == ConfigShape.LOCAL
        assert classify({
            "bucket": "b",
            "project_id": "p",
            "credentials": {"type": "service_account"},
        }) == ConfigShape.PROJECT_CREDENTIAL

    def test_path_style_checked_before_remote(self):
        model = DigitalOceanConfig.model_validate(DIGITALOCEAN_PAYLOAD)
        assert classify(model) == ConfigShape.PATH_STYLE_REMOTE
        assert classify(AwsConfig.model_validate(AWS_PAYLOAD)) == ConfigShape.REMOTE

    def test_remote_requires_access_keys(self):
        payload = {**AWS_PAYLOAD, "credentials": {"accessKeyId": "AKIA"}}
        assert classify(payload) == ConfigShape.UNRECOGNIZED


class TestParseProviderConfig:
    """The declared provider decides which model a payload is parsed with."""

    @pytest.mark.parametrize("provider,payload,model_cls", [
        ("aws", AWS_PAYLOAD, AwsConfig),
        ("digitalocean", DIGITALOCEAN_PAYLOAD, DigitalOceanConfig),
        ("azure", AZURE_PAYLOAD, AzureConfig),
        ("gcloud", GCS_PAYLOAD, GCSConfig),
        ("local", LOCAL_PAYLOAD, LocalConfig),
    ])
    def test_valid_payloads(self, provider, payload, model_cls):
        assert type(parse_provider_config(provider, payload)) is model_cls

    def test_camel_case_aliases(self):
        config = parse_provider_config("aws", AWS_PAYLOAD)

        assert config.credentials.access_key_id == "AKIA"
        assert config.credentials.secret_access_key == "secret"

    def test_model_instance_passes_through(self):
        config = LocalConfig(base_path="/tmp/store")
        assert parse_provider_config("local", config) is config

    def test_wrong_shape_for_provider(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_provider_config("local", GCS_PAYLOAD)

        message = str(exc_info.value)
        assert message.startswith(
            "Local credentials are required. Configuration is incorrect or must be provided"
        )
        assert "detected: project_credential" in message

    def test_path_style_payload_rejected_for_aws(self):
        with pytest.raises(ConfigurationError, match="AWS credentials are required"):
            parse_provider_config("aws", DIGITALOCEAN_PAYLOAD)

    def test_aws_model_rejected_for_digitalocean(self):
        with pytest.raises(ConfigurationError, match="Digital Ocean credentials are required"):
            parse_provider_config("digitalocean", AwsConfig.model_validate(AWS_PAYLOAD))

    def test_digitalocean_model_rejected_for_aws(self):
        with pytest.raises(ConfigurationError, match="detected: path_style_remote"):
            parse_provider_config("aws", DigitalOceanConfig.model_validate(DIGITALOCEAN_PAYLOAD))

    def test_empty_config(self):
        with pytest.raises(ConfigurationError, match="detected: unrecognized"):
            parse_provider_config("azure", {})

    def test_unsupported_provider(self):
        with pytest.raises(ConfigurationError, match="Unsupported provider: dropbox"):
            parse_provider_config("dropbox", LOCAL_PAYLOAD)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_provider_config("gcloud", AZURE_PAYLOAD)


class TestStorageSettings:

    def test_defaults_to_local(self, monkeypatch):
        monkeypatch.delenv("STORAGE_PROVIDER", raising=False)
        settings = StorageSettings(_env_file=None)

        config = settings.to_provider_config()

        assert settings.STORAGE_PROVIDER == "local"
        assert isinstance(config, LocalConfig)

    def test_digitalocean_from_environment(self, monkeypatch):
        monkeypatch.setenv("STORAGE_PROVIDER", "digitalocean")
        monkeypatch.setenv("STORAGE_BUCKET", "spaces")
        monkeypatch.setenv("STORAGE_REGION", "nyc3")
        monkeypatch.setenv("STORAGE_ACCESS_KEY_ID", "key")
        monkeypatch.setenv("STORAGE_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("STORAGE_ENDPOINT", "https://nyc3.digitaloceanspaces.com")
        monkeypatch.setenv("STORAGE_FORCE_PATH_STYLE", "true")

        config = StorageSettings(_env_file=None).to_provider_config()

        assert isinstance(config, DigitalOceanConfig)
        assert config.endpoint == "https://nyc3.digitaloceanspaces.com"
        assert config.force_path_style is True
        assert config.credentials.access_key_id == "key"

    def test_gcloud_config(self):
        settings = StorageSettings(
            _env_file=None,
            STORAGE_PROVIDER="gcloud",
            STORAGE_BUCKET="photos",
            STORAGE_GCS_PROJECT_ID="project",
            STORAGE_GCS_KEY_FILE_PATH="/secrets/account.json",
        )

        config = settings.to_provider_config()

        assert isinstance(config, GCSConfig)
        assert config.key_file_path == "/secrets/account.json"
