"""Shared image models."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ImageRecord(BaseModel):
    """One stored image: its public URL and the store identifier used for deletion."""

    model_config = ConfigDict(frozen=True)

    url: StrictStr = Field(..., min_length=1, description="Publicly fetchable image URL")
    id: StrictStr = Field(..., min_length=1, description="Object store identifier")


class ProjectImageState(BaseModel):
    """Image-bearing subset of a project document.

    ``thumbnail`` is only ever None transiently, while an update is being
    reconciled; a persisted project always carries one.
    """

    thumbnail: ImageRecord | None = None
    images: list[ImageRecord] = Field(default_factory=list)


class ReconciliationRequest(BaseModel):
    """Desired image changes for a single create or update call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    new_thumbnail: bytes | None = None
    clear_thumbnail: bool = False
    new_images: list[bytes] = Field(default_factory=list)
    ids_to_delete: frozenset[str] = Field(default_factory=frozenset)
    clear_all_images: bool = False
    current_state: ProjectImageState | None = None

    def is_empty(self) -> bool:
        """Return True when the request asks for no store changes at all."""
        return (
            self.new_thumbnail is None
            and not self.clear_thumbnail
            and not self.new_images
            and not self.ids_to_delete
            and not self.clear_all_images
        )
