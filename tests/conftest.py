from datetime import date
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from apps.service_catalog import ServiceType

WEEK_END = date(2013, 6, 8)


def square(ward_id: int) -> list[tuple[float, float]]:
    lon = -87.9 + ward_id * 0.01
    return [(lon, 41.8), (lon + 0.01, 41.8), (lon + 0.01, 41.81), (lon, 41.81), (lon, 41.8)]


def ward_payload(counts: list[int], aggregate: int = 999) -> dict[str, int]:
    payload = {"Total": aggregate}
    for ward_id, count in enumerate(counts, start=1):
        payload[str(ward_id)] = count
    return payload


@pytest.fixture
def ward_geometry() -> dict[int, list[list[tuple[float, float]]]]:
    return {ward_id: [square(ward_id)] for ward_id in range(1, 51)}


@pytest.fixture
def catalog() -> list[ServiceType]:
    return [
        ServiceType(slug="graffiti", code="code-graffiti", name="Graffiti Removal"),
        ServiceType(slug="potholes", code="code-potholes", name="Pothole in Street"),
        ServiceType(slug="street-lights", code="code-lights", name="Street Lights - All/Out"),
        ServiceType(slug="tree-debris", code="code-trees", name="Tree Debris"),
    ]
