"""Business logic for project deletion.

The document is removed first so no stored project can reference a
deleted image; the images are then removed best-effort.
"""

from aws_lambda_powertools import Logger

from core.images.cleanup import delete_images_best_effort
from core.infrastructure.aws.dynamodb_projects import DynamoDBProjects
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.errors import NotFoundError
from core.models.project import Project
from core.repositories.project_repository import ProjectRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ERROR_CODE_PROJECT_NOT_FOUND

logger = Logger(UTC=True)


class DeleteProjectService:
    """Application service responsible for deleting projects."""

    def __init__(
        self,
        repository: ProjectRepository | None = None,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.repository = repository or DynamoDBProjects()
        self.storage = storage or S3ImageStorage()

    def delete_project(self, project_id: str) -> Project:
        """Delete a project and then its images.

        Returns:
            The project as it was before deletion

        Raises:
            NotFoundError: If the project does not exist
            DynamoDBError: If the project cannot be read or deleted
        """
        project = self.repository.find_by_id(project_id)
        if project is None:
            raise NotFoundError(
                message=f"Project not found: {project_id}",
                error_code=ERROR_CODE_PROJECT_NOT_FOUND,
                details={"project_id": project_id},
            )

        self.repository.delete_one(project_id)

        image_ids = [project.thumbnail.id] + [image.id for image in project.images]
        failed = delete_images_best_effort(self.storage, image_ids)

        logger.info(
            "Project deleted",
            extra={
                "project_id": project_id,
                "image_count": len(image_ids),
                "orphaned": failed,
            },
        )
        return project
