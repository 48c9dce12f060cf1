"""Rewriting of legacy image values into well-formed records."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.images.legacy import normalize_images, normalize_thumbnail
from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import DynamoDBError
from core.utils.constants import ENV_PROJECTS_TABLE_NAME, ERROR_CODE_PROJECT_UPDATE_FAILED
from core.utils.time import utc_now_iso

Item = dict[str, Any]

logger = Logger(UTC=True)


def plan_image_migration(item: Item) -> dict[str, Any] | None:
    """Return the normalized image attributes of an item, or None if already clean."""
    project_id = str(item.get("project_id", ""))

    thumbnail = normalize_thumbnail(item.get("thumbnail"), owner_id=project_id).model_dump()
    images = [
        record.model_dump()
        for record in normalize_images(item.get("images"), owner_id=project_id)
    ]

    if item.get("thumbnail") == thumbnail and (item.get("images") or []) == images:
        return None

    return {"thumbnail": thumbnail, "images": images}


class ProjectImageMigration:
    """Scans the projects table and rewrites items holding legacy image values."""

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(
            table_env=ENV_PROJECTS_TABLE_NAME
        )

    def run(self, *, dry_run: bool = False) -> dict[str, int]:
        """Migrate every project; returns counts of scanned, migrated and failed items."""
        stats = {"scanned": 0, "migrated": 0, "failed": 0}
        scan_kwargs: dict[str, Any] = {}

        while True:
            response = self._db.scan(**scan_kwargs)

            for item in response.get("Items", []):
                stats["scanned"] += 1
                changes = plan_image_migration(item)
                if changes is None:
                    continue

                project_id = item.get("project_id")
                if dry_run:
                    logger.info(
                        "Would migrate project images",
                        extra={"project_id": project_id, "changes": changes},
                    )
                    stats["migrated"] += 1
                    continue

                try:
                    self._apply(str(project_id), changes)
                    stats["migrated"] += 1
                except DynamoDBError:
                    stats["failed"] += 1

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break
            scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

        logger.info("Image migration finished", extra={"dry_run": dry_run, **stats})
        return stats

    def _apply(self, project_id: str, changes: dict[str, Any]) -> None:
        try:
            self._db.update_item(
                Key={"project_id": project_id},
                UpdateExpression="SET #t = :t, #i = :i, #u = :u",
                ConditionExpression="attribute_exists(project_id)",
                ExpressionAttributeNames={"#t": "thumbnail", "#i": "images", "#u": "updated_at"},
                ExpressionAttributeValues={
                    ":t": changes["thumbnail"],
                    ":i": changes["images"],
                    ":u": utc_now_iso(),
                },
            )

        except ClientError as exc:
            logger.error("Failed to migrate project images", extra={"project_id": project_id})
            raise DynamoDBError(
                message="Unable to migrate project images",
                error_code=ERROR_CODE_PROJECT_UPDATE_FAILED,
                details={"project_id": project_id},
            ) from exc

        logger.info("Migrated project images", extra={"project_id": project_id})
