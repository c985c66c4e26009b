"""
Content-type to file-extension lookup and key normalization helpers.

Used by every storage backend to append an inferred extension to keys
uploaded without one (e.g. "skyline" + "image/jpeg" -> "skyline.jpg").
"""

import re
from typing import Dict, List, Optional


# First entry is the preferred extension for the content type.
CONTENT_TYPE_EXTENSIONS: Dict[str, List[str]] = {
    # Text
    "text/plain": ["txt", "text", "log"],
    "text/html": ["html", "htm"],
    "text/css": ["css"],
    "text/javascript": ["js", "mjs"],
    "text/csv": ["csv"],
    "text/markdown": ["md", "markdown"],
    "text/xml": ["xml"],

    # Application
    "application/json": ["json"],
    "application/xml": ["xml"],
    "application/javascript": ["js", "mjs"],
    "application/pdf": ["pdf"],
    "application/zip": ["zip"],
    "application/gzip": ["gz", "gzip"],
    "application/x-www-form-urlencoded": [],
    "application/msword": ["doc", "dot"],
    "application/vnd.ms-excel": ["xls", "xlt"],
    "application/vnd.ms-powerpoint": ["ppt", "pps", "pot"],
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ["docx"],
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ["xlsx"],
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ["pptx"],
    "application/ogg": ["ogx"],
    "application/rtf": ["rtf"],
    "application/octet-stream": ["bin"],

    # Image
    "image/jpeg": ["jpg", "jpeg", "jpe"],
    "image/png": ["png"],
    "image/gif": ["gif"],
    "image/bmp": ["bmp"],
    "image/webp": ["webp"],
    "image/svg+xml": ["svg", "svgz"],
    "image/tiff": ["tiff", "tif"],

    # Audio
    "audio/mpeg": ["mp3", "mpga", "m2a"],
    "audio/ogg": ["oga", "ogg", "opus"],
    "audio/wav": ["wav"],
    "audio/webm": ["weba"],

    # Video
    "video/mp4": ["mp4", "mp4v", "mpg4"],
    "video/mpeg": ["mpeg", "mpg", "mpe"],
    "video/webm": ["webm"],
    "video/ogg": ["ogv"],

    # Multipart bodies have no file representation
    "multipart/form-data": [],
    "multipart/mixed": [],
    "multipart/alternative": [],
}

FOLDER_SEPARATORS = ("/", "\\")

_EXTENSION_RE = re.compile(r"\.([0-9a-z]+)$", re.IGNORECASE)


def extensions_for(content_type: Optional[str]) -> List[str]:
    """
    Get candidate file extensions for a content type.

    Parameters such as "; charset=utf-8" and letter case are ignored.

    Args:
        content_type: MIME type, e.g. "image/jpeg"

    Returns:
        Extensions without a leading dot, preferred first. Empty if the
        content type is missing or unknown.
    """
    if not content_type:
        return []

    token = content_type.split(";", 1)[0].strip().lower()
    return list(CONTENT_TYPE_EXTENSIONS.get(token, []))


def extract_extension(name: Optional[str]) -> Optional[str]:
    """
    Extract the extension of the final path segment.

    extract_extension("document.pdf") -> "pdf"
    extract_extension("image.PNG") -> "PNG"
    extract_extension("readme") -> None
    """
    if not name:
        return None

    match = _EXTENSION_RE.search(name)
    return match.group(1) if match else None


def is_folder(key: Optional[str]) -> bool:
    """Check whether a key denotes a folder-like prefix (trailing separator)."""
    if not key:
        return False

    return key.endswith(FOLDER_SEPARATORS)


def normalize_key(key: str, content_type: Optional[str] = None) -> str:
    """
    Append the preferred extension for content_type to an extensionless key.

    Args:
        key: Storage key
        content_type: Optional MIME type supplied with the upload

    Returns:
        key unchanged if it already has an extension, or if the content
        type is absent or maps to no extension; otherwise key + "." + ext.
    """
    if extract_extension(key) is not None:
        return key

    extensions = extensions_for(content_type)
    if not extensions:
        return key

    return f"{key}.{extensions[0]}"
