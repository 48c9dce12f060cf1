"""Business logic for project updates.

The update flow keeps stored projects pointing only at existing objects:

1. Upload new images (thumbnail failure aborts the update)
2. Write the new field values and image state
3. Delete images the update made obsolete, best-effort

If step 2 fails the images uploaded in step 1 are removed again.
"""

from typing import Any

from aws_lambda_powertools import Logger

from core.images.reconciler import ImageReconciler
from core.infrastructure.aws.dynamodb_projects import DynamoDBProjects
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.errors import NotFoundError, ValidationError
from core.models.image import ProjectImageState, ReconciliationRequest
from core.models.project import Project
from core.repositories.project_repository import ProjectRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ERROR_CODE_PROJECT_NOT_FOUND, ERROR_CODE_THUMBNAIL_REQUIRED
from core.utils.project_form import ProjectImageInput

from .models import UpdateProjectRequest

logger = Logger(UTC=True)


class UpdateProjectService:
    """Application service responsible for updating projects."""

    def __init__(
        self,
        repository: ProjectRepository | None = None,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.repository = repository or DynamoDBProjects()
        self.reconciler = ImageReconciler(storage or S3ImageStorage())

    @staticmethod
    def check_thumbnail_kept(image_input: ProjectImageInput) -> None:
        """A project must always keep a thumbnail.

        Raises:
            ValidationError: If the thumbnail is cleared without a replacement
        """
        if image_input.clear_thumbnail and image_input.thumbnail is None:
            raise ValidationError(
                message="Thumbnail image is required: upload a new one to replace it",
                error_code=ERROR_CODE_THUMBNAIL_REQUIRED,
            )

    def update_project(
        self,
        project_id: str,
        request: UpdateProjectRequest,
        image_input: ProjectImageInput,
    ) -> Project:
        """Apply field and image changes to an existing project.

        Raises:
            ValidationError: If the change would leave the project invalid
            NotFoundError: If the project does not exist
            ImageUploadFailedError: If a new thumbnail cannot be stored
            DynamoDBError: If the project cannot be read or written
        """
        self.check_thumbnail_kept(image_input)

        current = self.repository.find_by_id(project_id)
        if current is None:
            raise NotFoundError(
                message=f"Project not found: {project_id}",
                error_code=ERROR_CODE_PROJECT_NOT_FOUND,
                details={"project_id": project_id},
            )

        reconciliation = ReconciliationRequest(
            new_thumbnail=image_input.thumbnail,
            clear_thumbnail=image_input.clear_thumbnail,
            new_images=list(image_input.images),
            ids_to_delete=image_input.ids_to_delete,
            clear_all_images=image_input.clear_images,
            current_state=ProjectImageState(
                thumbnail=current.thumbnail,
                images=list(current.images),
            ),
        )
        outcome = self.reconciler.reconcile(reconciliation)

        fields: dict[str, Any] = request.changed_fields()
        if not reconciliation.is_empty():
            fields["thumbnail"] = outcome.thumbnail
            fields["images"] = outcome.images

        try:
            updated = self.repository.update_fields(project_id, fields)
        except Exception:
            logger.exception(
                "Project write failed, removing uploaded images",
                extra={"project_id": project_id},
            )
            self.reconciler.rollback(outcome)
            raise

        if updated is None:
            # Deleted between the read and the write
            self.reconciler.rollback(outcome)
            raise NotFoundError(
                message=f"Project not found: {project_id}",
                error_code=ERROR_CODE_PROJECT_NOT_FOUND,
                details={"project_id": project_id},
            )

        failed = self.reconciler.finalize(outcome)

        logger.info(
            "Project updated",
            extra={
                "project_id": project_id,
                "fields": sorted(fields),
                "uploaded": len(outcome.uploaded),
                "deleted": len(outcome.stale_ids) - len(failed),
                "orphaned": failed,
            },
        )
        return updated
