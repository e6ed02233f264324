"""Tests for the project store and hosted site publisher."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from siteforge.errors import InvalidInputError
from siteforge.models import BusinessFacts
from siteforge.repositories import HostedSiteRepository, InMemoryKeyValueStore, ProjectRepository


@pytest.fixture
def projects() -> ProjectRepository:
    return ProjectRepository(InMemoryKeyValueStore())


@pytest.fixture
def hosted(tmp_path: Path) -> HostedSiteRepository:
    return HostedSiteRepository(tmp_path / "hosted", "http://sites.test/")


def test_project_round_trip_keeps_extra_data(projects: ProjectRepository) -> None:
    facts = BusinessFacts(name="Acme Plumbing")

    saved = asyncio.run(
        projects.save(
            "Acme redesign",
            facts,
            {"generatedWebsite": {"html": "<html/>"}, "id": "caller-id", "savedAt": "yesterday"},
        )
    )
    loaded = asyncio.run(projects.get(saved.id))

    assert saved.id != "caller-id"
    assert loaded is saved
    assert loaded.business_info.name == "Acme Plumbing"
    dumped = loaded.model_dump(by_alias=True)
    assert dumped["generatedWebsite"] == {"html": "<html/>"}
    assert dumped["savedAt"] == saved.saved_at


def test_project_ids_are_unique(projects: ProjectRepository) -> None:
    facts = BusinessFacts(name="Acme")

    first = asyncio.run(projects.save("Same name", facts))
    second = asyncio.run(projects.save("Same name", facts))

    assert first.id != second.id
    assert first.id.isalnum()


def test_project_list_is_newest_first(projects: ProjectRepository) -> None:
    facts = BusinessFacts(name="Acme")
    saved = [asyncio.run(projects.save(name, facts)) for name in ["old", "newest", "middle"]]
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for project, offset in zip(saved, [0, 2, 1]):
        project.saved_at = base + timedelta(days=offset)

    listed = asyncio.run(projects.list())

    assert [project.name for project in listed] == ["newest", "middle", "old"]


def test_project_delete(projects: ProjectRepository) -> None:
    saved = asyncio.run(projects.save("Gone soon", BusinessFacts(name="Acme")))

    assert asyncio.run(projects.delete(saved.id)) is True
    assert asyncio.run(projects.get(saved.id)) is None
    assert asyncio.run(projects.delete(saved.id)) is False


def test_publish_writes_document_and_zeroed_metadata(hosted: HostedSiteRepository) -> None:
    site = asyncio.run(hosted.publish("<html>hi</html>", "Acme"))

    site_dir = hosted.root / site.site_id
    assert site.url == f"http://sites.test/hosted/{site.site_id}"
    assert (site_dir / "index.html").read_text(encoding="utf-8") == "<html>hi</html>"
    meta = json.loads((site_dir / "meta.json").read_text(encoding="utf-8"))
    assert meta["siteId"] == site.site_id
    assert meta["businessName"] == "Acme"
    assert meta["viewCount"] == 0


def test_view_counts_each_request(hosted: HostedSiteRepository) -> None:
    site = asyncio.run(hosted.publish("<html>hi</html>", "Acme"))

    assert asyncio.run(hosted.view(site.site_id)) == "<html>hi</html>"
    assert asyncio.run(hosted.view(site.site_id)) == "<html>hi</html>"

    meta = asyncio.run(hosted.get_meta(site.site_id))
    assert meta.view_count == 2
    assert meta.last_accessed >= meta.created_at


def test_concurrent_views_are_all_counted(hosted: HostedSiteRepository) -> None:
    site = asyncio.run(hosted.publish("<html>hi</html>", "Acme"))

    async def view_many() -> list[str | None]:
        return await asyncio.gather(*(hosted.view(site.site_id) for _ in range(20)))

    pages = asyncio.run(view_many())

    assert all(page == "<html>hi</html>" for page in pages)
    assert asyncio.run(hosted.get_meta(site.site_id)).view_count == 20


def test_view_rejects_malformed_id(hosted: HostedSiteRepository) -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(hosted.view("../etc"))


def test_view_unknown_site_returns_none(hosted: HostedSiteRepository) -> None:
    assert asyncio.run(hosted.view("doesnotexist")) is None


def test_view_survives_corrupt_metadata(hosted: HostedSiteRepository) -> None:
    site = asyncio.run(hosted.publish("<html>hi</html>", "Acme"))
    (hosted.root / site.site_id / "meta.json").write_text("{not json", encoding="utf-8")

    assert asyncio.run(hosted.view(site.site_id)) == "<html>hi</html>"


def test_list_skips_corrupt_entries(hosted: HostedSiteRepository) -> None:
    good = asyncio.run(hosted.publish("<html>good</html>", "Good"))
    bad = asyncio.run(hosted.publish("<html>bad</html>", "Bad"))
    (hosted.root / bad.site_id / "meta.json").write_text("{not json", encoding="utf-8")

    listed = asyncio.run(hosted.list())

    assert [site.site_id for site in listed] == [good.site_id]


def test_list_without_root_is_empty(tmp_path: Path) -> None:
    repo = HostedSiteRepository(tmp_path / "missing", "http://sites.test")

    assert asyncio.run(repo.list()) == []
