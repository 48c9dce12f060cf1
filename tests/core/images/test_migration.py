"""Tests for the legacy image migration."""

import pytest

from core.images.migration import ProjectImageMigration, plan_image_migration

LEGACY_URL = "https://res.cloudinary.com/demo/image/upload/v1700000000/portfolio/old_thumb.png"
CLEAN_THUMBNAIL = {
    "url": "https://cdn.example.com/portfolio-projects/img_thumb.png",
    "id": "portfolio-projects/img_thumb.png",
}


def project_item(project_id: str, *, thumbnail, images=None) -> dict:
    item = {
        "project_id": project_id,
        "title": "Portfolio Site",
        "description": "A personal portfolio website",
        "technologies": ["React"],
        "category": "web",
        "order": 0,
        "thumbnail": thumbnail,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }
    if images is not None:
        item["images"] = images
    return item


class TestPlanImageMigration:
    def test_clean_item_needs_no_change(self) -> None:
        item = project_item("proj_clean", thumbnail=CLEAN_THUMBNAIL, images=[CLEAN_THUMBNAIL])

        assert plan_image_migration(item) is None

    def test_plain_url_thumbnail_gets_id(self) -> None:
        changes = plan_image_migration(project_item("proj_legacy", thumbnail=LEGACY_URL))

        assert changes is not None
        assert changes["thumbnail"]["url"] == LEGACY_URL
        assert changes["thumbnail"]["id"] == "portfolio/old_thumb"
        assert changes["images"] == []

    def test_public_id_is_renamed(self) -> None:
        item = project_item(
            "proj_legacy",
            thumbnail=CLEAN_THUMBNAIL,
            images=[{"url": "https://cdn.example.com/a.png", "public_id": "a"}],
        )

        changes = plan_image_migration(item)

        assert changes["images"] == [{"url": "https://cdn.example.com/a.png", "id": "a"}]


@pytest.fixture
def seeded_table(projects_table):
    projects_table.put_item(Item=project_item("proj_legacy", thumbnail=LEGACY_URL, images=[LEGACY_URL]))
    projects_table.put_item(Item=project_item("proj_clean", thumbnail=CLEAN_THUMBNAIL, images=[]))
    return projects_table


class TestProjectImageMigration:
    def test_dry_run_writes_nothing(self, seeded_table) -> None:
        stats = ProjectImageMigration().run(dry_run=True)

        assert stats == {"scanned": 2, "migrated": 1, "failed": 0}
        item = seeded_table.get_item(Key={"project_id": "proj_legacy"})["Item"]
        assert item["thumbnail"] == LEGACY_URL

    def test_run_rewrites_legacy_items_once(self, seeded_table) -> None:
        stats = ProjectImageMigration().run()

        assert stats == {"scanned": 2, "migrated": 1, "failed": 0}
        item = seeded_table.get_item(Key={"project_id": "proj_legacy"})["Item"]
        assert item["thumbnail"] == {"url": LEGACY_URL, "id": "portfolio/old_thumb"}
        assert item["images"] == [{"url": LEGACY_URL, "id": "portfolio/old_thumb"}]
        assert item["updated_at"] != "2024-01-01T00:00:00Z"

        clean = seeded_table.get_item(Key={"project_id": "proj_clean"})["Item"]
        assert clean["updated_at"] == "2024-01-01T00:00:00Z"

        # Already migrated items are left alone
        assert ProjectImageMigration().run() == {"scanned": 2, "migrated": 0, "failed": 0}
