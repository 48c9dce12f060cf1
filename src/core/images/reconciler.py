"""Reconciliation of a project's images against the object store.

Given the images a project has now and the changes a request asks for,
the reconciler performs the uploads and returns the image state to persist
together with the ids that became obsolete. Obsolete objects are deleted
only after the caller has persisted the new state (``finalize``), so a
stored project never references a deleted object. If persisting fails the
caller should ``rollback`` to remove the freshly uploaded objects.

Failure policy:
- thumbnail upload failure is fatal (``ImageUploadFailedError``)
- a failed additional-image upload is skipped and logged
- every delete is best-effort
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
import time

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field

from core.images.cleanup import delete_images_best_effort, remaining_time
from core.images.legacy import is_fallback_id
from core.models.errors import ImageUploadFailedError
from core.models.image import ImageRecord, ProjectImageState, ReconciliationRequest
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    PROJECT_IMAGE_FOLDER,
    STORE_CALL_TIMEOUT,
    STORE_MAX_WORKERS,
)

logger = Logger(UTC=True)


class ReconciliationOutcome(BaseModel):
    """Result of reconciling one request."""

    thumbnail: ImageRecord | None = None
    images: list[ImageRecord] = Field(default_factory=list)
    uploaded: list[ImageRecord] = Field(default_factory=list)
    stale_ids: list[str] = Field(default_factory=list)

    @property
    def state(self) -> ProjectImageState:
        return ProjectImageState(thumbnail=self.thumbnail, images=list(self.images))

    def queue_delete(self, image_id: str) -> None:
        if image_id and not is_fallback_id(image_id) and image_id not in self.stale_ids:
            self.stale_ids.append(image_id)


class ImageReconciler:
    """Applies a ReconciliationRequest to the object store."""

    def __init__(
        self,
        storage: ImageStorageRepository,
        *,
        folder: str = PROJECT_IMAGE_FOLDER,
        max_workers: int = STORE_MAX_WORKERS,
        call_timeout: float = STORE_CALL_TIMEOUT,
    ) -> None:
        self._storage = storage
        self._folder = folder
        self._max_workers = max_workers
        self._call_timeout = call_timeout

    def reconcile(self, request: ReconciliationRequest) -> ReconciliationOutcome:
        """Upload new images and compute the state to persist.

        Raises:
            ImageUploadFailedError: If a new thumbnail cannot be stored
        """
        current = request.current_state or ProjectImageState()
        outcome = ReconciliationOutcome()

        if request.is_empty():
            outcome.thumbnail = current.thumbnail
            outcome.images = list(current.images)
            return outcome

        # Thumbnail first: if it fails nothing else has been uploaded yet
        outcome.thumbnail = self.reconcile_thumbnail(request, current, outcome)
        outcome.images = self.reconcile_additional_images(request, current, outcome)

        logger.info(
            "Images reconciled",
            extra={
                "uploaded": len(outcome.uploaded),
                "stale": len(outcome.stale_ids),
                "image_count": len(outcome.images),
            },
        )
        return outcome

    def reconcile_thumbnail(
        self,
        request: ReconciliationRequest,
        current: ProjectImageState,
        outcome: ReconciliationOutcome,
    ) -> ImageRecord | None:
        if request.new_thumbnail is not None:
            thumbnail = self._upload_thumbnail(request.new_thumbnail)
            outcome.uploaded.append(thumbnail)
            if current.thumbnail is not None:
                outcome.queue_delete(current.thumbnail.id)
            return thumbnail

        if request.clear_thumbnail and current.thumbnail is not None:
            logger.info("Clearing thumbnail", extra={"image_id": current.thumbnail.id})
            outcome.queue_delete(current.thumbnail.id)
            return None

        return current.thumbnail

    def reconcile_additional_images(
        self,
        request: ReconciliationRequest,
        current: ProjectImageState,
        outcome: ReconciliationOutcome,
    ) -> list[ImageRecord]:
        working = list(current.images)

        if request.clear_all_images:
            for record in working:
                outcome.queue_delete(record.id)
            working = []

        elif request.ids_to_delete:
            kept: list[ImageRecord] = []
            for record in working:
                if record.id in request.ids_to_delete:
                    outcome.queue_delete(record.id)
                else:
                    kept.append(record)
            working = kept

        if request.new_images:
            uploaded = self._upload_additional(request.new_images)
            outcome.uploaded.extend(uploaded)
            working.extend(uploaded)

        return working

    def finalize(self, outcome: ReconciliationOutcome) -> list[str]:
        """Delete objects made obsolete by a persisted outcome."""
        referenced = {record.id for record in outcome.images}
        if outcome.thumbnail is not None:
            referenced.add(outcome.thumbnail.id)

        stale = [image_id for image_id in outcome.stale_ids if image_id not in referenced]
        return delete_images_best_effort(
            self._storage,
            stale,
            max_workers=self._max_workers,
            timeout=self._call_timeout,
        )

    def rollback(self, outcome: ReconciliationOutcome) -> list[str]:
        """Remove objects uploaded for an outcome that was never persisted."""
        if outcome.uploaded:
            logger.warning(
                "Rolling back uploaded images",
                extra={"image_ids": [record.id for record in outcome.uploaded]},
            )
        return delete_images_best_effort(
            self._storage,
            [record.id for record in outcome.uploaded],
            max_workers=self._max_workers,
            timeout=self._call_timeout,
        )

    def _upload_thumbnail(self, file_data: bytes) -> ImageRecord:
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self._storage.upload, file_data=file_data, folder=self._folder)
            return future.result(timeout=self._call_timeout)
        except FutureTimeoutError as exc:
            logger.error("Thumbnail upload timed out", extra={"timeout": self._call_timeout})
            raise ImageUploadFailedError(
                message="Failed to upload thumbnail image",
                details={"reason": "timeout"},
            ) from exc
        except ImageUploadFailedError:
            logger.exception("Thumbnail upload failed")
            raise
        except Exception as exc:
            logger.exception("Unexpected error uploading thumbnail")
            raise ImageUploadFailedError(message="Failed to upload thumbnail image") from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _upload_additional(self, buffers: list[bytes]) -> list[ImageRecord]:
        """Upload buffers concurrently under one shared deadline.

        Results keep input order; failed or unfinished uploads are dropped.
        """
        records: list[ImageRecord] = []
        executor = ThreadPoolExecutor(max_workers=min(self._max_workers, len(buffers)))
        deadline = time.monotonic() + self._call_timeout

        try:
            futures = [
                executor.submit(self._storage.upload, file_data=data, folder=self._folder)
                for data in buffers
            ]

            for position, future in enumerate(futures):
                try:
                    records.append(future.result(timeout=remaining_time(deadline)))
                except FutureTimeoutError:
                    logger.warning(
                        "Additional image upload timed out, skipping",
                        extra={"position": position, "timeout": self._call_timeout},
                    )
                except Exception as exc:
                    logger.warning(
                        "Additional image upload failed, skipping",
                        extra={
                            "position": position,
                            "error": str(exc),
                            "error_type": type(exc).__name__,
                        },
                    )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return records
