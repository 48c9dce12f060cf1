import pytest

from core.models.errors import DynamoDBError, ImageUploadFailedError, ValidationError
from handlers.create_project.models import CreateProjectRequest
from handlers.create_project.service import CreateProjectService


@pytest.fixture
def request_model() -> CreateProjectRequest:
    return CreateProjectRequest(
        title="Portfolio Site",
        description="A personal portfolio website",
        technologies="React,Python",
        category="web",
        order="3",
    )


@pytest.fixture
def service(project_repository, fake_storage) -> CreateProjectService:
    return CreateProjectService(repository=project_repository, storage=fake_storage)


def test_create_uploads_then_persists(service, request_model, fake_storage, make_png) -> None:
    project = service.create_project(
        request_model,
        thumbnail=make_png("thumb"),
        images=[make_png("a"), make_png("b")],
    )

    assert project.order == 3
    assert project.technologies == ["React", "Python"]
    assert fake_storage.objects[project.thumbnail.id] == make_png("thumb")
    assert [fake_storage.objects[image.id] for image in project.images] == [
        make_png("a"),
        make_png("b"),
    ]
    assert fake_storage.delete_calls == []


def test_create_skips_failed_additional_upload(service, request_model, fake_storage, make_png) -> None:
    fake_storage.failing_uploads.add(make_png("bad"))

    project = service.create_project(
        request_model,
        thumbnail=make_png("thumb"),
        images=[make_png("a"), make_png("bad"), make_png("c")],
    )

    assert [fake_storage.objects[image.id] for image in project.images] == [
        make_png("a"),
        make_png("c"),
    ]


def test_create_requires_thumbnail(service, request_model, fake_storage) -> None:
    with pytest.raises(ValidationError) as exc:
        service.create_project(request_model, thumbnail=None, images=[])

    assert exc.value.error_code == "THUMBNAIL_REQUIRED"
    assert fake_storage.store_calls == 0


def test_thumbnail_failure_aborts_before_write(
    service, request_model, project_repository, fake_storage, make_png
) -> None:
    fake_storage.failing_uploads.add(make_png("thumb"))

    with pytest.raises(ImageUploadFailedError):
        service.create_project(request_model, thumbnail=make_png("thumb"), images=[make_png("a")])

    assert project_repository.projects == {}
    assert fake_storage.objects == {}


def test_write_failure_rolls_back_uploads(
    service, request_model, project_repository, fake_storage, make_png
) -> None:
    project_repository.fail_writes = True

    with pytest.raises(DynamoDBError):
        service.create_project(request_model, thumbnail=make_png("thumb"), images=[make_png("a")])

    assert fake_storage.objects == {}
    assert len(fake_storage.delete_calls) == 2
