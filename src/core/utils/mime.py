from collections.abc import Mapping

from core.utils.constants import ALLOWED_MIME_TYPES, MIME_TYPE_EXTENSION_MAP

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    # RIFF is shared by WAV/AVI; only the WEBP form type is an image
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def is_supported_image(file_data: bytes) -> bool:
    try:
        return detect_mime_type(file_data) in ALLOWED_MIME_TYPES
    except ValueError:
        return False


def extension_for(mime_type: str) -> str:
    """Return the preferred file extension for a MIME type."""
    extensions = MIME_TYPE_EXTENSION_MAP.get(mime_type)
    return extensions[0] if extensions else "bin"
