"""Pydantic models for the update project request."""

from pydantic import BaseModel, ConfigDict

from core.models.project import (
    Description,
    FormGithubLink,
    FormLiveLink,
    FormOrder,
    FormTechnologies,
    ProjectCategory,
    Title,
)


class UpdateProjectRequest(BaseModel):
    """Validation model for a partial project update.

    Only the fields present in the form are changed. Sending an empty
    ``githubLink`` or ``liveLink`` removes that link.
    """

    model_config = ConfigDict(extra="forbid")

    title: Title | None = None
    description: Description | None = None
    technologies: FormTechnologies | None = None
    github_link: FormGithubLink = None
    live_link: FormLiveLink = None
    category: ProjectCategory | None = None
    order: FormOrder | None = None

    def changed_fields(self) -> dict[str, object]:
        """Fields that were sent, with removed links mapped to None."""
        return {name: getattr(self, name) for name in sorted(self.model_fields_set)}
