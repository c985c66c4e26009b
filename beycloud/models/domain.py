from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


FOLDER_TYPE = "folder"


class Provider(str, Enum):
    """Supported storage providers."""
    LOCAL = "local"
    AWS = "aws"
    DIGITALOCEAN = "digitalocean"
    AZURE = "azure"
    GCLOUD = "gcloud"


class ConfigShape(str, Enum):
    """Structural shape of a backend configuration payload."""
    PATH_STYLE_REMOTE = "path_style_remote"
    REMOTE = "remote"
    CONNECTION_STRING = "connection_string"
    PROJECT_CREDENTIAL = "project_credential"
    LOCAL = "local"
    UNRECOGNIZED = "unrecognized"


@dataclass
class FileMetadata:
    """
    Metadata of a stored object.

    url is a signed, time-limited URL on remote backends and a file://
    URL on the local backend. It does not prove the object still exists.
    """
    url: str
    key: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    type: Optional[str] = None  # content type, "folder", or extension

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER_TYPE
