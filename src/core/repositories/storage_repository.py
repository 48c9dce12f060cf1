"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod

from core.models.image import ImageRecord


class ImageStorageRepository(ABC):
    """Contract for storing and removing image files.

    Implementations could be S3, GCS, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def upload(self, *, file_data: bytes, folder: str) -> ImageRecord:
        """Upload image bytes and return the stored record.

        Args:
            file_data: Binary image content
            folder: Folder hint used to group objects in the store

        Returns:
            ImageRecord with public URL and store identifier

        Raises:
            ImageUploadFailedError: If the bytes are empty/unsupported or the upload fails
        """

    @abstractmethod
    def delete(self, *, image_id: str) -> None:
        """Delete an image by its store identifier.

        An object that no longer exists counts as deleted.

        Args:
            image_id: Identifier returned by ``upload``

        Raises:
            ImageDeleteFailedError: If deletion fails
        """
