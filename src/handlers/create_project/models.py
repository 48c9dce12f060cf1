"""Pydantic models for the create project request."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.project import (
    Description,
    FormGithubLink,
    FormLiveLink,
    FormOrder,
    FormTechnologies,
    ProjectCategory,
    Title,
)


class CreateProjectRequest(BaseModel):
    """Validation model for the text fields of a new project."""

    model_config = ConfigDict(extra="forbid")

    title: Title = Field(..., description="Project title")
    description: Description = Field(..., description="Project description")
    technologies: FormTechnologies = Field(..., description="Technologies used (csv or repeated)")
    github_link: FormGithubLink = Field(None, description="GitHub repository URL")
    live_link: FormLiveLink = Field(None, description="Live demo URL")
    category: ProjectCategory = Field(..., description="Project category")
    order: FormOrder = Field(..., description="Display order, lowest first")
