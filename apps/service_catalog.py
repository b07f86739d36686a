from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json

from apps.dashboard_config import SERVICES_PATH
from apps.errors import CatalogError


@dataclass(frozen=True)
class ServiceType:
    slug: str
    code: str
    name: str


def catalog_from_mapping(raw: dict) -> list[ServiceType]:
    """Build the ordered catalog from ``{slug: {"code": ..., "name": ...}}``."""
    services: list[ServiceType] = []
    for slug, entry in raw.items():
        if not isinstance(entry, dict) or not entry.get("code"):
            raise CatalogError(f"service {slug!r} missing code")
        services.append(ServiceType(slug=slug, code=str(entry["code"]), name=str(entry.get("name", slug))))
    if not services:
        raise CatalogError("service catalog is empty")
    return services


def load_service_catalog(path: Path = SERVICES_PATH) -> list[ServiceType]:
    if not path.exists():
        raise CatalogError(f"service catalog not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        return catalog_from_mapping(json.load(fh))


def lookup_slug(catalog: list[ServiceType], slug: str | None) -> ServiceType | None:
    for service in catalog:
        if service.slug == slug:
            return service
    return None

