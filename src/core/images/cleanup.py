"""Best-effort removal of images from the object store."""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
import time

from aws_lambda_powertools import Logger

from core.images.legacy import is_fallback_id
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import STORE_CALL_TIMEOUT, STORE_MAX_WORKERS

logger = Logger(UTC=True)


def remaining_time(deadline: float) -> float:
    """Seconds left until a time.monotonic() deadline, never negative."""
    return max(0.0, deadline - time.monotonic())


def delete_images_best_effort(
    storage: ImageStorageRepository,
    image_ids: Iterable[str],
    *,
    max_workers: int = STORE_MAX_WORKERS,
    timeout: float = STORE_CALL_TIMEOUT,
) -> list[str]:
    """Delete images concurrently, logging failures instead of raising.

    Each id is deleted at most once. Fallback ids never name a real
    object and are skipped. All deletes share one deadline of ``timeout``
    seconds, counted from the start of the batch.

    Returns:
        Ids whose deletion failed or timed out (possibly orphaned)
    """
    unique_ids = [
        image_id
        for image_id in dict.fromkeys(image_ids)
        if image_id and not is_fallback_id(image_id)
    ]
    if not unique_ids:
        return []

    failed: list[str] = []
    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(unique_ids)))
    deadline = time.monotonic() + timeout

    try:
        futures = {
            image_id: executor.submit(storage.delete, image_id=image_id)
            for image_id in unique_ids
        }

        for image_id, future in futures.items():
            try:
                future.result(timeout=remaining_time(deadline))
            except FutureTimeoutError:
                logger.warning(
                    "Timed out deleting image, object may be orphaned",
                    extra={"image_id": image_id, "timeout": timeout},
                )
                failed.append(image_id)
            except Exception as exc:
                logger.warning(
                    "Failed to delete image, object may be orphaned",
                    extra={
                        "image_id": image_id,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )
                failed.append(image_id)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return failed
