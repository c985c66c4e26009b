from pydantic_settings import BaseSettings
from typing import Literal, Optional

from beycloud.config.providers import (
    AwsConfig,
    AzureConfig,
    DigitalOceanConfig,
    GCSConfig,
    LocalConfig,
    ProviderConfig,
)


class StorageSettings(BaseSettings):
    """Storage provider selection and per-provider configuration from the environment."""

    # Backend selection
    STORAGE_PROVIDER: Literal["local", "aws", "digitalocean", "azure", "gcloud"] = "local"

    # Local backend
    STORAGE_LOCAL_BASE_PATH: str = "/tmp/beycloud"

    # S3 / DigitalOcean Spaces
    STORAGE_BUCKET: str = ""
    STORAGE_REGION: str = "us-east-1"
    STORAGE_ACCESS_KEY_ID: str = ""
    STORAGE_SECRET_ACCESS_KEY: str = ""
    STORAGE_ENDPOINT: Optional[str] = None  # Set for DigitalOcean/MinIO
    STORAGE_FORCE_PATH_STYLE: bool = False

    # Azure Blob Storage
    STORAGE_AZURE_CONNECTION_STRING: str = ""
    STORAGE_AZURE_CONTAINER: str = ""

    # Google Cloud Storage (bucket shared with STORAGE_BUCKET)
    STORAGE_GCS_PROJECT_ID: str = ""
    STORAGE_GCS_KEY_FILE_PATH: str = ""

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"
    }

    def to_provider_config(self) -> ProviderConfig:
        """Build the typed config model for STORAGE_PROVIDER."""
        if self.STORAGE_PROVIDER == "local":
            return LocalConfig(base_path=self.STORAGE_LOCAL_BASE_PATH)

        if self.STORAGE_PROVIDER == "azure":
            return AzureConfig(
                connection_string=self.STORAGE_AZURE_CONNECTION_STRING,
                container=self.STORAGE_AZURE_CONTAINER,
            )

        if self.STORAGE_PROVIDER == "gcloud":
            return GCSConfig(
                bucket=self.STORAGE_BUCKET,
                project_id=self.STORAGE_GCS_PROJECT_ID,
                key_file_path=self.STORAGE_GCS_KEY_FILE_PATH or None,
            )

        credentials = {
            "access_key_id": self.STORAGE_ACCESS_KEY_ID,
            "secret_access_key": self.STORAGE_SECRET_ACCESS_KEY,
        }
        if self.STORAGE_PROVIDER == "digitalocean":
            return DigitalOceanConfig(
                bucket=self.STORAGE_BUCKET,
                region=self.STORAGE_REGION,
                credentials=credentials,
                endpoint=self.STORAGE_ENDPOINT or "",
                force_path_style=self.STORAGE_FORCE_PATH_STYLE,
            )

        return AwsConfig(
            bucket=self.STORAGE_BUCKET,
            region=self.STORAGE_REGION,
            credentials=credentials,
        )
