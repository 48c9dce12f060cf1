"""Business logic for standalone image uploads."""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.image import ImageRecord
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import GENERAL_UPLOAD_FOLDER
from core.utils.validators import validate_image_bytes

logger = Logger(UTC=True)


class UploadService:
    """Application service storing one image outside any project."""

    def __init__(self, storage: ImageStorageRepository | None = None) -> None:
        self.storage = storage or S3ImageStorage()

    def upload_image(self, file_data: bytes, *, file_name: str) -> ImageRecord:
        """Validate and store an image in the general uploads folder.

        Raises:
            ValidationError: If the bytes are not an acceptable image
            ImageUploadFailedError: If the upload fails
        """
        validate_image_bytes(file_data, field="image")

        record = self.storage.upload(file_data=file_data, folder=GENERAL_UPLOAD_FOLDER)

        logger.info(
            "Image uploaded",
            extra={"image_id": record.id, "file_name": file_name, "file_size": len(file_data)},
        )
        return record
