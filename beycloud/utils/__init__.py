from .extension import (
    extensions_for,
    extract_extension,
    is_folder,
    normalize_key,
)
