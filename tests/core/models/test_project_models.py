from pydantic import ValidationError
import pytest

from core.models.image import ImageRecord, ProjectImageState, ReconciliationRequest
from core.models.project import ProjectFields, ProjectPathParams, ProjectUpdate

THUMBNAIL = {"url": "https://cdn.example.com/t.png", "id": "t"}


def valid_fields(**overrides):
    fields = {
        "title": "Portfolio",
        "description": "A portfolio website",
        "technologies": ["Python"],
        "category": "web",
        "order": 0,
        "thumbnail": THUMBNAIL,
    }
    fields.update(overrides)
    return fields


def test_project_fields_defaults_images() -> None:
    assert ProjectFields.model_validate(valid_fields()).images == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "ab"},
        {"title": "x" * 101},
        {"description": "short"},
        {"technologies": []},
        {"category": "desktop"},
        {"order": -1},
        {"github_link": "https://gitlab.com/o/r"},
        {"live_link": "not a url"},
        {"thumbnail": {"url": "", "id": "t"}},
        {"unexpected": "field"},
    ],
)
def test_project_fields_rejects(overrides) -> None:
    with pytest.raises(ValidationError):
        ProjectFields.model_validate(valid_fields(**overrides))


def test_project_fields_accepts_links() -> None:
    fields = ProjectFields.model_validate(
        valid_fields(
            github_link="https://www.github.com/owner/repo/tree/main",
            live_link="https://portfolio.example.com",
        )
    )

    assert fields.github_link.endswith("/tree/main")


def test_project_update_tracks_set_fields() -> None:
    update = ProjectUpdate.model_validate({"title": "New title"})

    assert update.model_dump(exclude_unset=True) == {"title": "New title"}


@pytest.mark.parametrize("project_id", ["proj_" + "a" * 32, " proj_" + "0" * 32 + " "])
def test_path_params_accepts_project_ids(project_id) -> None:
    assert ProjectPathParams(project_id=project_id).project_id == project_id.strip()


@pytest.mark.parametrize("project_id", ["", "proj_123", "img_" + "a" * 32, "proj_" + "A" * 32])
def test_path_params_rejects_bad_ids(project_id) -> None:
    with pytest.raises(ValidationError):
        ProjectPathParams(project_id=project_id)


def test_image_record_is_immutable() -> None:
    record = ImageRecord(url="https://x/a.png", id="a")

    with pytest.raises(ValidationError):
        record.id = "b"  # type: ignore[misc]


def test_reconciliation_request_is_empty() -> None:
    state = ProjectImageState(thumbnail=ImageRecord(**THUMBNAIL))

    assert ReconciliationRequest(current_state=state).is_empty()
    assert not ReconciliationRequest(clear_all_images=True).is_empty()
    assert not ReconciliationRequest(ids_to_delete=frozenset({"a"})).is_empty()
    assert not ReconciliationRequest(new_images=[b"x"]).is_empty()
