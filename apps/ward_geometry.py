from __future__ import annotations

from pathlib import Path
import json
import re

from apps.dashboard_config import WARD_BOUNDARY_PATH
from apps.errors import GeometryError

WARD_PROPERTY_CANDIDATES = ["ward", "WARD", "ward_id", "ward_num", "name"]

Ring = list[tuple[float, float]]
WardGeometry = dict[int, list[Ring]]


def parse_ward_id(value: object) -> int | None:
    match = re.search(r"(\d{1,2})", str(value))
    if match is None:
        return None
    return int(match.group(1))


def detect_ward_property(geojson: dict) -> str | None:
    features = geojson.get("features", [])
    if not features:
        return None

    sample_props = features[0].get("properties", {}) or {}
    for key in WARD_PROPERTY_CANDIDATES:
        if key in sample_props and parse_ward_id(sample_props[key]) is not None:
            return key
    return None


def _exterior_rings(geometry: dict) -> list[Ring]:
    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates", [])
    if geometry_type == "Polygon":
        polygons = [coordinates]
    elif geometry_type == "MultiPolygon":
        polygons = coordinates
    else:
        raise GeometryError(f"unsupported ward geometry type: {geometry_type}")

    rings: list[Ring] = []
    for polygon in polygons:
        if not polygon:
            continue
        exterior = [(float(point[0]), float(point[1])) for point in polygon[0]]
        if exterior and exterior[0] != exterior[-1]:
            exterior.append(exterior[0])
        rings.append(exterior)
    return rings


def ward_geometry_from_geojson(geojson: dict) -> WardGeometry:
    ward_key = detect_ward_property(geojson)
    if ward_key is None:
        raise GeometryError("no ward id property found in boundary features")

    geometry: WardGeometry = {}
    for feature in geojson.get("features", []):
        ward_id = parse_ward_id(feature.get("properties", {}).get(ward_key))
        if ward_id is None:
            continue
        geometry.setdefault(ward_id, []).extend(_exterior_rings(feature.get("geometry") or {}))
    return dict(sorted(geometry.items()))


def load_ward_geometry(path: Path = WARD_BOUNDARY_PATH) -> WardGeometry:
    if not path.exists():
        raise GeometryError(f"ward boundary file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        return ward_geometry_from_geojson(json.load(fh))
