import json
from pathlib import Path

import pytest

from apps.errors import CatalogError
from apps.service_catalog import catalog_from_mapping, load_service_catalog, lookup_slug


def test_catalog_keeps_file_order(tmp_path: Path) -> None:
    path = tmp_path / "services.json"
    path.write_text(
        json.dumps(
            {
                "potholes": {"code": "b", "name": "Pothole in Street"},
                "graffiti": {"code": "a", "name": "Graffiti Removal"},
            }
        ),
        encoding="utf-8",
    )

    catalog = load_service_catalog(path)

    assert [service.slug for service in catalog] == ["potholes", "graffiti"]
    assert catalog[1].code == "a"


def test_lookup_by_slug(catalog) -> None:
    assert lookup_slug(catalog, "potholes").name == "Pothole in Street"
    assert lookup_slug(catalog, "missing") is None
    assert lookup_slug(catalog, None) is None


def test_service_without_code_raises() -> None:
    with pytest.raises(CatalogError, match="missing code"):
        catalog_from_mapping({"graffiti": {"name": "Graffiti Removal"}})


def test_empty_catalog_raises() -> None:
    with pytest.raises(CatalogError, match="empty"):
        catalog_from_mapping({})


def test_missing_catalog_file_raises(tmp_path: Path) -> None:
    with pytest.raises(CatalogError, match="not found"):
        load_service_catalog(tmp_path / "services.json")


def test_bundled_catalog_loads() -> None:
    path = Path(__file__).resolve().parents[1] / "data" / "services.json"

    catalog = load_service_catalog(path)

    assert catalog[0].name == "Graffiti Removal"
