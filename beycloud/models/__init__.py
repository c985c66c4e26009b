from .domain import FileMetadata, ConfigShape, Provider, FOLDER_TYPE

__all__ = ["FileMetadata", "ConfigShape", "Provider", "FOLDER_TYPE"]
