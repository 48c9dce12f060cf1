"""Business logic for reading a single project."""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_projects import DynamoDBProjects
from core.models.errors import NotFoundError
from core.models.project import Project
from core.repositories.project_repository import ProjectRepository
from core.utils.constants import ERROR_CODE_PROJECT_NOT_FOUND

logger = Logger(UTC=True)


class GetProjectService:
    """Application service responsible for project lookups."""

    def __init__(self, repository: ProjectRepository | None = None) -> None:
        self.repository = repository or DynamoDBProjects()

    def get_project(self, project_id: str) -> Project:
        """Fetch a project by id.

        Raises:
            NotFoundError: If the project does not exist
            DynamoDBError: If the lookup fails
        """
        project = self.repository.find_by_id(project_id)
        if project is None:
            raise NotFoundError(
                message=f"Project not found: {project_id}",
                error_code=ERROR_CODE_PROJECT_NOT_FOUND,
                details={"project_id": project_id},
            )

        logger.debug("Project fetched", extra={"project_id": project_id})
        return project
