import pytest

from apps.dashboard_sections import title_for_slug
from apps.errors import CatalogError


def test_title_for_known_slug(monkeypatch: pytest.MonkeyPatch, catalog) -> None:
    monkeypatch.setattr("apps.dashboard_sections.load_catalog", lambda: catalog)

    assert title_for_slug("potholes") == "Pothole in Street | Media | Chicago Works For You"


def test_title_for_unknown_slug_uses_default(monkeypatch: pytest.MonkeyPatch, catalog) -> None:
    monkeypatch.setattr("apps.dashboard_sections.load_catalog", lambda: catalog)

    assert title_for_slug("noise") == "Media | Chicago Works For You"
    assert title_for_slug(None) == "Media | Chicago Works For You"


def test_title_when_catalog_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing_catalog() -> list:
        raise CatalogError("service catalog not found: data/services.json")

    monkeypatch.setattr("apps.dashboard_sections.load_catalog", missing_catalog)

    assert title_for_slug("graffiti") == "Media | Chicago Works For You"
