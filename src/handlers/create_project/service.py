"""Business logic for project creation.

Images are uploaded before the project document is written. A thumbnail
upload failure aborts the request before anything is persisted; if the
document write fails, the freshly uploaded images are removed again.
"""

from aws_lambda_powertools import Logger

from core.images.reconciler import ImageReconciler
from core.infrastructure.aws.dynamodb_projects import DynamoDBProjects
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.errors import ValidationError
from core.models.image import ReconciliationRequest
from core.models.project import Project
from core.repositories.project_repository import ProjectRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ERROR_CODE_THUMBNAIL_REQUIRED

from .models import CreateProjectRequest

logger = Logger(UTC=True)


class CreateProjectService:
    """Application service responsible for creating projects."""

    def __init__(
        self,
        repository: ProjectRepository | None = None,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.repository = repository or DynamoDBProjects()
        self.reconciler = ImageReconciler(storage or S3ImageStorage())

    def create_project(
        self,
        request: CreateProjectRequest,
        *,
        thumbnail: bytes | None,
        images: list[bytes],
    ) -> Project:
        """Upload the project's images and persist the new document.

        Raises:
            ValidationError: If no thumbnail was supplied or fields are invalid
            ImageUploadFailedError: If the thumbnail cannot be stored
            DynamoDBError: If the document cannot be written
        """
        if thumbnail is None:
            raise ValidationError(
                message="Thumbnail image is required",
                error_code=ERROR_CODE_THUMBNAIL_REQUIRED,
            )

        outcome = self.reconciler.reconcile(
            ReconciliationRequest(new_thumbnail=thumbnail, new_images=images)
        )

        fields = request.model_dump(exclude_none=True)
        fields["thumbnail"] = outcome.thumbnail
        fields["images"] = outcome.images

        try:
            project = self.repository.create(fields)
        except Exception:
            logger.exception("Project write failed, removing uploaded images")
            self.reconciler.rollback(outcome)
            raise

        logger.info(
            "Project created with images",
            extra={
                "project_id": project.project_id,
                "image_count": len(project.images),
                "skipped_images": len(images) - len(project.images),
            },
        )
        return project
