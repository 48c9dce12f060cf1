"""Abstract contract for project document persistence."""

from abc import ABC, abstractmethod
from typing import Any

from core.models.project import Project

ProjectFieldMap = dict[str, Any]


class ProjectRepository(ABC):
    """Contract for storing and retrieving project documents.

    Implementations could be DynamoDB, PostgreSQL, MongoDB, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def find_all(self) -> list[Project]:
        """Return every project, ordered by ``order`` asc then ``created_at`` desc.

        Raises:
            DynamoDBError: If the listing fails
        """

    @abstractmethod
    def find_by_id(self, project_id: str) -> Project | None:
        """Fetch one project.

        Returns:
            The project, or None if no document has this id

        Raises:
            DynamoDBError: If the fetch fails
        """

    @abstractmethod
    def create(self, fields: ProjectFieldMap) -> Project:
        """Create a project document.

        Args:
            fields: Writable project fields, including ``thumbnail``

        Raises:
            ValidationError: If required fields are missing or malformed
            DynamoDBError: If creation fails
        """

    @abstractmethod
    def update_fields(self, project_id: str, fields: ProjectFieldMap) -> Project | None:
        """Set the given fields on an existing project.

        A field mapped to None is removed from the document.

        Returns:
            The updated project, or None if no document has this id

        Raises:
            ValidationError: If a field value is malformed
            DynamoDBError: If the update fails
        """

    @abstractmethod
    def delete_one(self, project_id: str) -> None:
        """Remove a project document.

        Raises:
            DynamoDBError: If deletion fails
        """
