"""Readers for the project multipart form shared by create and update."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_VALIDATION_FAILED, MAX_ADDITIONAL_IMAGES
from core.utils.multipart import MultipartForm
from core.utils.validators import parse_bool_flag, split_list_field, validate_image_bytes

# Form field name -> project attribute
PROJECT_FORM_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "githubLink": "github_link",
    "liveLink": "live_link",
    "category": "category",
    "order": "order",
    "technologies": "technologies",
}

THUMBNAIL_FIELD = "thumbnail"
IMAGES_FIELD = "images"


class ProjectImageInput(BaseModel):
    """Image files and image flags sent with a project form."""

    model_config = ConfigDict(frozen=True)

    thumbnail: bytes | None = None
    images: list[bytes] = Field(default_factory=list)
    clear_thumbnail: bool = False
    ids_to_delete: frozenset[str] = Field(default_factory=frozenset)
    clear_images: bool = False


def read_project_fields(form: MultipartForm) -> dict[str, Any]:
    """Collect the project text fields present in the form, keyed by attribute name."""
    data: dict[str, Any] = {}

    for form_name, attribute in PROJECT_FORM_FIELDS.items():
        if not form.has(form_name):
            continue

        if form_name == "technologies":
            data[attribute] = form.get_all(form_name)
        else:
            data[attribute] = form.get(form_name)

    return data


def read_image_input(form: MultipartForm) -> ProjectImageInput:
    """Read and validate the image files and flags of a project form.

    Raises:
        ValidationError: On too many files or a file that is not an acceptable image
    """
    thumbnails = form.get_files(THUMBNAIL_FIELD)
    if len(thumbnails) > 1:
        raise ValidationError(
            message="Only one thumbnail file may be uploaded",
            error_code=ERROR_CODE_VALIDATION_FAILED,
            details={"field": THUMBNAIL_FIELD},
        )

    images = form.get_files(IMAGES_FIELD)
    if len(images) > MAX_ADDITIONAL_IMAGES:
        raise ValidationError(
            message=f"A maximum of {MAX_ADDITIONAL_IMAGES} additional images is allowed",
            details={"field": IMAGES_FIELD, "count": len(images)},
        )

    thumbnail = (
        validate_image_bytes(thumbnails[0].content, field=THUMBNAIL_FIELD)
        if thumbnails
        else None
    )

    return ProjectImageInput(
        thumbnail=thumbnail,
        images=[validate_image_bytes(file.content, field=IMAGES_FIELD) for file in images],
        clear_thumbnail=parse_bool_flag(form.get("clearThumbnail")),
        ids_to_delete=frozenset(split_list_field(form.get_all("imagesToDelete"))),
        clear_images=parse_bool_flag(form.get("clearImages")),
    )
