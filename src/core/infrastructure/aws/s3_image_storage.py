"""S3-backed implementation of ImageStorageRepository."""

import uuid

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import ImageDeleteFailedError, ImageUploadFailedError
from core.models.image import ImageRecord
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ALLOWED_MIME_TYPES, IMAGE_ID_PREFIX
from core.utils.mime import detect_mime_type, extension_for

logger = Logger(UTC=True)

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3.

    The store identifier of an image is its S3 object key.
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    def upload(self, *, file_data: bytes, folder: str) -> ImageRecord:
        """Upload image bytes to S3 and return the stored record."""
        if not file_data:
            raise ImageUploadFailedError(
                message="No image data provided for upload",
                details={"folder": folder},
            )

        try:
            mime_type = detect_mime_type(file_data)
        except ValueError as exc:
            raise ImageUploadFailedError(
                message="Unsupported image type",
                details={"folder": folder},
            ) from exc

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ImageUploadFailedError(
                message="Unsupported image type",
                details={"folder": folder, "mime_type": mime_type},
            )

        key = f"{folder}/{IMAGE_ID_PREFIX}{uuid.uuid4().hex}.{extension_for(mime_type)}"

        logger.debug(
            "Uploading image",
            extra={"key": key, "size": len(file_data), "mime_type": mime_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=mime_type,
                metadata={"folder": folder},
            )
        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise ImageUploadFailedError(
                message="Unable to upload image at this time",
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise ImageUploadFailedError(
                message="Unable to upload image at this time",
                details={"key": key},
            ) from exc

        logger.info("Image uploaded successfully", extra={"key": key})
        return ImageRecord(url=self._s3.object_url(key=key), id=key)

    def delete(self, *, image_id: str) -> None:
        """Delete an image object from S3."""
        if not image_id:
            logger.warning("Attempted to delete image with empty id")
            return

        logger.debug("Deleting image", extra={"key": image_id})

        try:
            self._s3.delete_object(key=image_id)

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                logger.warning("Image already absent from storage", extra={"key": image_id})
                return

            logger.error("S3 deletion failed", extra={"key": image_id})
            raise ImageDeleteFailedError(
                message="Unable to delete image at this time",
                details={"key": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise ImageDeleteFailedError(
                message="Unable to delete image at this time",
                details={"key": image_id},
            ) from exc

        logger.info("Image deleted successfully", extra={"key": image_id})
