"""Project document models shared by handlers and the project repository."""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    StringConstraints,
)

from core.models.image import ImageRecord
from core.utils.constants import (
    DESCRIPTION_MIN_LENGTH,
    GITHUB_LINK_PATTERN,
    LIVE_LINK_PATTERN,
    PROJECT_ID_PATTERN,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from core.utils.validators import split_list_field

ProjectCategory = Literal["web", "mobile", "ui-ux", "game", "other"]

Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH),
]
Description = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=DESCRIPTION_MIN_LENGTH),
]
Technologies = Annotated[list[StrictStr], Field(min_length=1)]
GithubLink = Annotated[str, StringConstraints(strip_whitespace=True, pattern=GITHUB_LINK_PATTERN)]
LiveLink = Annotated[str, StringConstraints(strip_whitespace=True, pattern=LIVE_LINK_PATTERN)]
DisplayOrder = Annotated[StrictInt, Field(ge=0)]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Form input arrives as text: csv/repeated technologies, numeric strings, blank links
FormTechnologies = Annotated[
    list[StrictStr], BeforeValidator(split_list_field), Field(min_length=1)
]
FormOrder = Annotated[int, Field(ge=0)]
FormGithubLink = Annotated[GithubLink | None, BeforeValidator(_blank_to_none)]
FormLiveLink = Annotated[LiveLink | None, BeforeValidator(_blank_to_none)]

# Fields a stored project can never lose
REQUIRED_PROJECT_FIELDS = frozenset(
    {"title", "description", "technologies", "category", "order", "thumbnail"}
)


class ProjectFields(BaseModel):
    """Writable project fields, validated before a document is created."""

    model_config = ConfigDict(extra="forbid")

    title: Title
    description: Description
    technologies: Technologies
    github_link: GithubLink | None = None
    live_link: LiveLink | None = None
    category: ProjectCategory
    order: DisplayOrder
    thumbnail: ImageRecord
    images: list[ImageRecord] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    """Partial project fields; only the fields that were set are written."""

    model_config = ConfigDict(extra="forbid")

    title: Title | None = None
    description: Description | None = None
    technologies: Technologies | None = None
    github_link: GithubLink | None = None
    live_link: LiveLink | None = None
    category: ProjectCategory | None = None
    order: DisplayOrder | None = None
    thumbnail: ImageRecord | None = None
    images: list[ImageRecord] | None = None


class Project(BaseModel):
    """Persisted project document."""

    project_id: StrictStr = Field(..., description="Unique project identifier")
    title: str
    description: str
    technologies: list[str]
    github_link: str | None = None
    live_link: str | None = None
    category: ProjectCategory
    order: int
    thumbnail: ImageRecord
    images: list[ImageRecord] = Field(default_factory=list)
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr = Field(..., description="ISO-8601 last update timestamp (UTC)")


class ProjectResponse(BaseModel):
    """Response envelope for project mutations."""

    message: str = Field(..., description="Success message")
    project: Project


class ListProjectsResponse(BaseModel):
    """Response for listing all projects."""

    projects: list[Project] = Field(..., description="Projects sorted for display")
    total_count: StrictInt = Field(..., description="Number of projects returned")


class ProjectPathParams(BaseModel):
    """Path parameters identifying a single project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: StrictStr = Field(
        ...,
        pattern=PROJECT_ID_PATTERN,
        description="Project ID (proj_ followed by 32 hex characters)",
    )
