import json
from pathlib import Path

import pytest

from apps.errors import GeometryError
from apps.ward_geometry import load_ward_geometry, parse_ward_id, ward_geometry_from_geojson


def _feature(ward: object, coordinates: list, geometry_type: str = "Polygon") -> dict:
    return {
        "type": "Feature",
        "properties": {"ward": ward},
        "geometry": {"type": geometry_type, "coordinates": coordinates},
    }


def test_polygon_ring_is_closed_and_keyed_by_ward() -> None:
    geojson = {
        "type": "FeatureCollection",
        "features": [_feature("12", [[[-87.7, 41.8], [-87.6, 41.8], [-87.6, 41.9]]])],
    }

    geometry = ward_geometry_from_geojson(geojson)

    assert list(geometry) == [12]
    ring = geometry[12][0]
    assert ring[0] == ring[-1]
    assert len(ring) == 4


def test_multipolygon_keeps_each_exterior_ring() -> None:
    square = [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]
    geojson = {"features": [_feature(3, [square, square], geometry_type="MultiPolygon")]}

    geometry = ward_geometry_from_geojson(geojson)

    assert len(geometry[3]) == 2


def test_missing_ward_property_raises() -> None:
    geojson = {"features": [{"properties": {"area": 1}, "geometry": {"type": "Polygon", "coordinates": []}}]}

    with pytest.raises(GeometryError, match="no ward id property"):
        ward_geometry_from_geojson(geojson)


def test_load_ward_geometry_missing_file(tmp_path: Path) -> None:
    with pytest.raises(GeometryError, match="not found"):
        load_ward_geometry(tmp_path / "wards.geojson")


def test_load_ward_geometry_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "wards.geojson"
    path.write_text(
        json.dumps({"features": [_feature("Ward 7", [[[0, 0], [1, 0], [1, 1], [0, 0]]])]}),
        encoding="utf-8",
    )

    assert list(load_ward_geometry(path)) == [7]


def test_parse_ward_id() -> None:
    assert parse_ward_id("Ward 07") == 7
    assert parse_ward_id(50) == 50
    assert parse_ward_id("none") is None
