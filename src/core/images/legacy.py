"""Repair of legacy image values stored on project documents.

Older project documents hold images in several shapes: a bare URL string,
a string that was accidentally spread into an object (``{"0": "h", ...}``),
an object missing its id (or still using ``public_id``), or a well-formed
record. Each raw value is classified once into a tagged union and then
resolved into an :class:`ImageRecord`.
"""

import re
import threading
import time
from typing import Any, Literal
from urllib.parse import urlsplit

from aws_lambda_powertools import Logger
from pydantic import BaseModel

from core.models.image import ImageRecord
from core.utils.constants import (
    FALLBACK_ID_MARKER,
    PLACEHOLDER_IMAGE_URL,
    PLACEHOLDER_THUMBNAIL_URL,
)

logger = Logger(UTC=True)

_UPLOAD_SEGMENT = re.compile(r"/upload/(?:v\d+/)?(.+?)(?:\.[a-zA-Z0-9]+)?$")
_TRAILING_EXTENSION = re.compile(r"\.[^/.]+$")

_stamp_lock = threading.Lock()
_last_stamp = 0


class PlainUrl(BaseModel):
    kind: Literal["plain"] = "plain"
    url: str


class MalformedImage(BaseModel):
    kind: Literal["malformed"] = "malformed"
    url: str | None = None
    id: str | None = None


class WellFormedImage(BaseModel):
    kind: Literal["well_formed"] = "well_formed"
    record: ImageRecord


LegacyImageValue = PlainUrl | MalformedImage | WellFormedImage


def is_fallback_id(image_id: str) -> bool:
    """Return True for ids that were invented locally and name no store object."""
    return image_id.startswith(f"{FALLBACK_ID_MARKER}_")


def derive_image_id(
    url: str | None,
    *,
    owner_id: str,
    index: int | str,
    label: str = "image",
    stable: bool = False,
) -> str:
    """Derive a stable store identifier from an image URL.

    ``.../upload/v123/portfolio/abc.jpg`` gives ``portfolio/abc``;
    ``.../images/photo.png`` gives ``photo``. When nothing can be derived a
    fallback id is returned, which must never be used for deletion. A
    ``stable`` fallback depends only on label, owner and index, so every
    read of the same document yields the same id; otherwise a unique
    timestamp is appended.
    """
    if url and isinstance(url, str):
        path = urlsplit(url.strip()).path

        upload_match = _UPLOAD_SEGMENT.search(path)
        if upload_match:
            derived = _TRAILING_EXTENSION.sub("", upload_match.group(1))
            if derived:
                return derived

        last_slash = path.rfind("/")
        if last_slash != -1 and last_slash < len(path) - 1:
            filename = path[last_slash + 1 :]
            derived = filename.rsplit(".", 1)[0] if "." in filename else filename
            if derived:
                return derived

    fallback = f"{FALLBACK_ID_MARKER}_{label}_{owner_id}_{index}"
    if stable:
        return fallback
    return f"{fallback}_{_unique_stamp()}"


def _unique_stamp() -> int:
    """Strictly increasing nanosecond timestamp."""
    global _last_stamp
    with _stamp_lock:
        _last_stamp = max(time.time_ns(), _last_stamp + 1)
        return _last_stamp


def _string_field(raw: dict[str, Any], *names: str) -> str | None:
    for name in names:
        value = raw.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def classify_image_value(raw: Any) -> LegacyImageValue | None:
    """Classify a raw stored image value; None means no value at all."""
    if raw is None:
        return None

    if isinstance(raw, str):
        return PlainUrl(url=raw)

    if isinstance(raw, dict):
        if raw and all(str(key).isdigit() for key in raw):
            chars = [str(raw[key]) for key in sorted(raw, key=lambda k: int(k))]
            return MalformedImage(url="".join(chars))

        url = _string_field(raw, "url")
        image_id = _string_field(raw, "id", "public_id")

        if url and image_id:
            return WellFormedImage(record=ImageRecord(url=url, id=image_id))

        return MalformedImage(url=url, id=image_id)

    return MalformedImage()


def resolve_image_value(
    value: LegacyImageValue,
    *,
    owner_id: str,
    index: int | str,
    label: str,
    placeholder_url: str,
    stable: bool = False,
) -> ImageRecord:
    """Turn a classified value into a complete record."""
    if isinstance(value, WellFormedImage):
        return value.record

    url = value.url or placeholder_url
    if not value.url:
        logger.warning(
            "Legacy image has no usable URL, using placeholder",
            extra={"owner_id": owner_id, "index": index},
        )

    image_id = value.id if isinstance(value, MalformedImage) and value.id else None
    if image_id is None:
        # A placeholder URL names no stored object
        image_id = derive_image_id(
            value.url, owner_id=owner_id, index=index, label=label, stable=stable
        )
        if is_fallback_id(image_id):
            logger.warning(
                "Could not derive image id, using fallback",
                extra={"owner_id": owner_id, "index": index, "image_id": image_id},
            )

    return ImageRecord(url=url, id=image_id)


def normalize_thumbnail(raw: Any, *, owner_id: str, stable: bool = False) -> ImageRecord:
    value = classify_image_value(raw) or MalformedImage()
    return resolve_image_value(
        value,
        owner_id=owner_id,
        index="thumb",
        label="thumbnail",
        placeholder_url=PLACEHOLDER_THUMBNAIL_URL,
        stable=stable,
    )


def normalize_images(raw: Any, *, owner_id: str, stable: bool = False) -> list[ImageRecord]:
    """Repair a stored images list; ``stable`` is for read paths (see derive_image_id)."""
    if raw is None:
        return []

    items = raw if isinstance(raw, list) else [raw]
    records: list[ImageRecord] = []

    for index, item in enumerate(items):
        value = classify_image_value(item)
        if value is None:
            continue
        records.append(
            resolve_image_value(
                value,
                owner_id=owner_id,
                index=index,
                label="additional_image",
                placeholder_url=PLACEHOLDER_IMAGE_URL,
                stable=stable,
            )
        )

    return records
