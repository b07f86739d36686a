from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging

import pandas as pd

from apps.count_sources import CountSource
from apps.dashboard_config import DEFAULT_TITLE, NUM_DAYS
from apps.errors import CatalogError, ServiceIndexError, WardPulseError
from apps.service_catalog import ServiceType
from apps.ward_counts import RankedExtremes, extremes_from_ranked, rank_wards
from apps.ward_geometry import WardGeometry
from apps.ward_layers import LayerRegistry
from apps.ward_styles import WardStyle, styles_for_wards

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    index: int
    service: ServiceType
    week_end: date
    extremes: RankedExtremes
    ranked: pd.Series
    styles: dict[int, WardStyle]
    built: bool


def page_title(service_name: str | None, default_title: str = DEFAULT_TITLE) -> str:
    return f"{service_name} | {default_title}" if service_name else default_title


class ViewSynchronizer:
    """One map session: service paging, week window and the ward layers.

    Each ``select_service`` call takes a generation number before awaiting the
    count source. A result whose generation has been superseded by a later
    call is dropped, so the last selection issued is the one displayed.
    """

    def __init__(
        self,
        catalog: list[ServiceType],
        count_source: CountSource,
        geometry: WardGeometry,
        week_end: date,
        num_days: int = NUM_DAYS,
        registry: LayerRegistry | None = None,
    ) -> None:
        if not catalog:
            raise CatalogError("service catalog is empty")
        self.catalog = catalog
        self.count_source = count_source
        self.geometry = geometry
        self.week_end = week_end
        self.num_days = num_days
        self.registry = registry if registry is not None else LayerRegistry()
        self.current_index = 0
        self.last_result: SelectionResult | None = None
        self._generation = 0

    @property
    def current_service(self) -> ServiceType:
        return self.catalog[self.current_index]

    @property
    def displayed_service(self) -> ServiceType | None:
        return self.last_result.service if self.last_result is not None else None

    @property
    def has_previous(self) -> bool:
        return self.current_index > 0

    @property
    def has_next(self) -> bool:
        return self.current_index < len(self.catalog) - 1

    async def select_service(self, index: int) -> SelectionResult | None:
        if not 0 <= index < len(self.catalog):
            raise ServiceIndexError(f"service index {index} outside catalog of {len(self.catalog)}")

        self.current_index = index
        self._generation += 1
        generation = self._generation
        service = self.catalog[index]
        week_end = self.week_end

        try:
            series = await self.count_source.fetch_counts(service.code, week_end, self.num_days)
        except WardPulseError:
            if self._is_stale(generation, service):
                return None
            raise
        if self._is_stale(generation, service):
            return None

        ranked = rank_wards(series)
        extremes = extremes_from_ranked(ranked)
        styles = styles_for_wards(self.geometry.keys(), extremes)
        built = self._apply_styles(styles)

        result = SelectionResult(
            index=index,
            service=service,
            week_end=week_end,
            extremes=extremes,
            ranked=ranked,
            styles=styles,
            built=built,
        )
        self.last_result = result
        logger.info(
            "step=selection_applied service=%s week_end=%s lowest=%s highest=%s built=%s",
            service.slug,
            week_end,
            extremes.lowest.ward_id,
            extremes.highest.ward_id,
            built,
        )
        return result

    def _is_stale(self, generation: int, service: ServiceType) -> bool:
        if generation == self._generation:
            return False
        logger.info(
            "step=discard_stale service=%s generation=%s latest=%s", service.slug, generation, self._generation
        )
        return True

    def _apply_styles(self, styles: dict[int, WardStyle]) -> bool:
        unbuilt = {ward_id: style for ward_id, style in styles.items() if not self.registry.is_built(ward_id)}
        built = {ward_id: style for ward_id, style in styles.items() if ward_id not in unbuilt}
        self.registry.restyle_all(built)
        for ward_id, style in unbuilt.items():
            self.registry.ensure_layer(ward_id, self.geometry[ward_id], style)
        return bool(unbuilt)

    async def next(self) -> SelectionResult | None:
        return await self.select_service(self.current_index + 1)

    async def previous(self) -> SelectionResult | None:
        return await self.select_service(self.current_index - 1)

    async def select_week(self, week_end: date) -> SelectionResult | None:
        self.week_end = week_end
        return await self.select_service(self.current_index)

    async def refresh(self) -> SelectionResult | None:
        return await self.select_service(self.current_index)
