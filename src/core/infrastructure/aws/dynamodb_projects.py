"""DynamoDB-backed implementation of ProjectRepository."""

from decimal import Decimal
from typing import Any
import uuid

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.images.legacy import normalize_images, normalize_thumbnail
from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import DynamoDBError, ValidationError
from core.models.project import REQUIRED_PROJECT_FIELDS, Project, ProjectFields, ProjectUpdate
from core.repositories.project_repository import ProjectFieldMap, ProjectRepository
from core.utils.constants import (
    ENV_PROJECTS_TABLE_NAME,
    ERROR_CODE_PROJECT_CREATE_FAILED,
    ERROR_CODE_PROJECT_DELETE_FAILED,
    ERROR_CODE_PROJECT_FETCH_FAILED,
    ERROR_CODE_PROJECT_LIST_FAILED,
    ERROR_CODE_PROJECT_UPDATE_FAILED,
    PROJECT_ID_PREFIX,
)
from core.utils.time import utc_now_iso
from core.utils.validators import sanitize_validation_errors

Item = dict[str, Any]

logger = Logger(UTC=True)


class DynamoDBProjects(ProjectRepository):
    """DynamoDB-backed project storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics. Legacy image values are
    normalized into well-formed records whenever an item is read.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(
            table_env=ENV_PROJECTS_TABLE_NAME
        )

    @staticmethod
    def generate_project_id() -> str:
        return f"{PROJECT_ID_PREFIX}{uuid.uuid4().hex}"

    def find_all(self) -> list[Project]:
        logger.debug("Listing projects")

        items: list[Item] = []
        scan_kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self._db.scan(**scan_kwargs)
                items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

        except ClientError as exc:
            logger.error("DynamoDB scan failed")
            raise DynamoDBError(
                message="Unable to list projects",
                error_code=ERROR_CODE_PROJECT_LIST_FAILED,
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing projects")
            raise DynamoDBError(
                message="Unable to list projects",
                error_code=ERROR_CODE_PROJECT_LIST_FAILED,
            ) from exc

        projects: list[Project] = []
        for item in items:
            try:
                projects.append(self._to_project(item))
            except DynamoDBError:
                logger.warning(
                    "Skipping unreadable project document",
                    extra={"project_id": item.get("project_id")},
                )

        # Newest first within the same display order
        projects.sort(key=lambda project: project.created_at, reverse=True)
        projects.sort(key=lambda project: project.order)

        logger.info("Projects listed", extra={"count": len(projects)})
        return projects

    def find_by_id(self, project_id: str) -> Project | None:
        logger.debug("Fetching project", extra={"project_id": project_id})

        try:
            response = self._db.get_item(key={"project_id": project_id})

        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"project_id": project_id})
            raise DynamoDBError(
                message="Unable to retrieve project",
                error_code=ERROR_CODE_PROJECT_FETCH_FAILED,
                details={"project_id": project_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching project")
            raise DynamoDBError(
                message="Unable to retrieve project",
                error_code=ERROR_CODE_PROJECT_FETCH_FAILED,
                details={"project_id": project_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return self._to_project(item)

    def create(self, fields: ProjectFieldMap) -> Project:
        try:
            validated = ProjectFields.model_validate(fields)
        except PydanticValidationError as exc:
            raise ValidationError(
                message="Invalid project fields",
                details={"errors": sanitize_validation_errors(exc.errors())},
            ) from exc

        timestamp = utc_now_iso()
        project = Project(
            project_id=self.generate_project_id(),
            created_at=timestamp,
            updated_at=timestamp,
            **validated.model_dump(),
        )
        item = project.model_dump(exclude_none=True)

        logger.debug("Creating project", extra={"project_id": project.project_id})

        try:
            self._db.put_item(
                item=item,
                condition_expression="attribute_not_exists(project_id)",
            )

        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra={"project_id": project.project_id})
            raise DynamoDBError(
                message="Unable to save project at this time",
                error_code=ERROR_CODE_PROJECT_CREATE_FAILED,
                details={"project_id": project.project_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating project")
            raise DynamoDBError(
                message="Unable to save project at this time",
                error_code=ERROR_CODE_PROJECT_CREATE_FAILED,
                details={"project_id": project.project_id},
            ) from exc

        logger.info("Project created", extra={"project_id": project.project_id})
        return project

    def update_fields(self, project_id: str, fields: ProjectFieldMap) -> Project | None:
        removed = sorted(name for name, value in fields.items() if value is None)
        cleared_required = REQUIRED_PROJECT_FIELDS.intersection(removed)
        if cleared_required:
            raise ValidationError(
                message="Required project fields cannot be removed",
                details={"fields": sorted(cleared_required)},
            )

        try:
            validated = ProjectUpdate.model_validate(
                {name: value for name, value in fields.items() if value is not None}
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                message="Invalid project fields",
                details={"errors": sanitize_validation_errors(exc.errors())},
            ) from exc

        values = validated.model_dump(exclude_unset=True)
        values["updated_at"] = utc_now_iso()

        names: dict[str, str] = {}
        attribute_values: dict[str, Any] = {}
        set_clauses: list[str] = []
        remove_clauses: list[str] = []

        for position, (name, value) in enumerate(values.items()):
            names[f"#s{position}"] = name
            attribute_values[f":s{position}"] = value
            set_clauses.append(f"#s{position} = :s{position}")

        for position, name in enumerate(removed):
            names[f"#r{position}"] = name
            remove_clauses.append(f"#r{position}")

        update_expression = "SET " + ", ".join(set_clauses)
        if remove_clauses:
            update_expression += " REMOVE " + ", ".join(remove_clauses)

        logger.debug(
            "Updating project",
            extra={"project_id": project_id, "fields": sorted(values), "removed": removed},
        )

        try:
            response = self._db.update_item(
                Key={"project_id": project_id},
                UpdateExpression=update_expression,
                ConditionExpression="attribute_exists(project_id)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=attribute_values,
                ReturnValues="ALL_NEW",
            )

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.info("Project to update does not exist", extra={"project_id": project_id})
                return None

            logger.error("DynamoDB update_item failed", extra={"project_id": project_id})
            raise DynamoDBError(
                message="Unable to update project at this time",
                error_code=ERROR_CODE_PROJECT_UPDATE_FAILED,
                details={"project_id": project_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating project")
            raise DynamoDBError(
                message="Unable to update project at this time",
                error_code=ERROR_CODE_PROJECT_UPDATE_FAILED,
                details={"project_id": project_id},
            ) from exc

        logger.info("Project updated", extra={"project_id": project_id})
        return self._to_project(response.get("Attributes", {}))

    def delete_one(self, project_id: str) -> None:
        logger.debug("Deleting project", extra={"project_id": project_id})

        try:
            self._db.delete_item(key={"project_id": project_id})

        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"project_id": project_id})
            raise DynamoDBError(
                message="Unable to delete project",
                error_code=ERROR_CODE_PROJECT_DELETE_FAILED,
                details={"project_id": project_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting project")
            raise DynamoDBError(
                message="Unable to delete project",
                error_code=ERROR_CODE_PROJECT_DELETE_FAILED,
                details={"project_id": project_id},
            ) from exc

        logger.info("Project deleted", extra={"project_id": project_id})

    @staticmethod
    def _to_project(item: Item) -> Project:
        """Build a Project from a raw item, repairing legacy image values."""
        project_id = str(item.get("project_id", ""))

        data = dict(item)
        data["thumbnail"] = normalize_thumbnail(item.get("thumbnail"), owner_id=project_id, stable=True)
        data["images"] = normalize_images(item.get("images"), owner_id=project_id, stable=True)

        order = item.get("order")
        if isinstance(order, Decimal):
            data["order"] = int(order)

        technologies = item.get("technologies")
        if isinstance(technologies, (set, tuple)):
            data["technologies"] = sorted(technologies)

        try:
            return Project.model_validate(data)
        except PydanticValidationError as exc:
            logger.error(
                "Stored project document is invalid",
                extra={"project_id": project_id, "errors": exc.errors()},
            )
            raise DynamoDBError(
                message="Invalid project document format",
                error_code=ERROR_CODE_PROJECT_FETCH_FAILED,
                details={"project_id": project_id},
            ) from exc
