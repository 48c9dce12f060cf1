"""Business logic for listing projects."""

from core.infrastructure.aws.dynamodb_projects import DynamoDBProjects
from core.models.project import Project
from core.repositories.project_repository import ProjectRepository


class ListProjectsService:
    """Application service returning every project in display order."""

    def __init__(self, repository: ProjectRepository | None = None) -> None:
        self.repository = repository or DynamoDBProjects()

    def list_projects(self) -> list[Project]:
        return self.repository.find_all()
